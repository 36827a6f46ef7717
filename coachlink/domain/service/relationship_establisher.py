"""Relationship establishment on invitation acceptance.

Accepting runs a fixed sequence:

1. resolve the coach profile behind the invitation's coach account
2. create the relationship
3. mark the invitation accepted (only if still pending)
4. link the athlete profile to the coach
5. commit
6. notify the coach in the background

Steps 2 and 3 share one transaction. Step 4 failing is reported on the
result, not rolled back. The coach hears about nothing that is not
committed, and step 6 never affects the outcome.
"""

import asyncio
from uuid import uuid4

import logfire

from coachlink.domain.error import (
    DomainError,
    DuplicateRelationshipError,
    EstablishmentFailedError,
    InvalidStateTransitionError,
    PreconditionFailedError,
)
from coachlink.domain.model.account import Account
from coachlink.domain.model.common import DomainModel
from coachlink.domain.model.invitation import Invitation
from coachlink.domain.model.profile import AthleteProfile, CoachProfile
from coachlink.domain.model.relationship import Relationship
from coachlink.domain.repository import (
    AccountRepository,
    AthleteProfileRepository,
    CoachProfileRepository,
    InvitationRepository,
    RelationshipRepository,
    TransactionManager,
)
from coachlink.domain.value import (
    AcceptanceContext,
    AccountId,
    AthleteProfileId,
    ContactInfo,
    InvitationStatus,
    RelationshipId,
    RelationshipStatus,
)
from coachlink.util.clock import Clock

from .authorization import AuthorizationGuard
from .base import Service
from .invitation_service import InvitationService
from .notification import NotificationDispatcher, NotificationResult, Notifier
from .state_machine import InvitationCommand, InvitationStateMachine, Transition


class EstablishmentResult(DomainModel):
    """Outcome of an accept.

    ``relationship`` and ``invitation`` are committed state. ``notification``
    is the background task delivering the coach notice, if one was started.
    """

    relationship: Relationship
    invitation: Invitation
    replayed: bool = False
    profile_linked: bool = True
    notification: asyncio.Task[NotificationResult] | None = None


class RelationshipEstablisher(Service):
    """Turns an accepted invitation into a coach-athlete relationship."""

    def __init__(
        self,
        invitation_service: InvitationService,
        invitation_repository: InvitationRepository,
        relationship_repository: RelationshipRepository,
        account_repository: AccountRepository,
        coach_profile_repository: CoachProfileRepository,
        athlete_profile_repository: AthleteProfileRepository,
        transaction_manager: TransactionManager,
        state_machine: InvitationStateMachine,
        guard: AuthorizationGuard,
        dispatcher: NotificationDispatcher,
        notifier: Notifier,
        clock: Clock,
        terms_version: str,
        app_url: str,
    ) -> None:
        """Initialize relationship establisher.

        Args:
            invitation_service: Resolves tokens to invitations
            invitation_repository: Invitation repository
            relationship_repository: Relationship repository
            account_repository: Account repository
            coach_profile_repository: Coach profile repository
            athlete_profile_repository: Athlete profile repository
            transaction_manager: Groups the relationship and invitation writes
            state_machine: Authorizes the accept transition
            guard: Confirms the caller is the invitee
            dispatcher: Runs the coach notice in the background
            notifier: Email delivery
            clock: Source of the current time
            terms_version: Terms version athletes must consent to
            app_url: Frontend base URL for links in the coach notice
        """
        self.invitation_service = invitation_service
        self.invitation_repository = invitation_repository
        self.relationship_repository = relationship_repository
        self.account_repository = account_repository
        self.coach_profile_repository = coach_profile_repository
        self.athlete_profile_repository = athlete_profile_repository
        self.transaction_manager = transaction_manager
        self.state_machine = state_machine
        self.guard = guard
        self.dispatcher = dispatcher
        self.notifier = notifier
        self.clock = clock
        self.terms_version = terms_version
        self.app_url = app_url.rstrip("/")

    async def accept(
        self,
        account_id: AccountId,
        raw_token: str,
        athlete_id: AthleteProfileId,
        terms_version: str,
    ) -> EstablishmentResult:
        """Accept an invitation on behalf of the athlete it addresses.

        Args:
            account_id: Authenticated athlete's account id
            raw_token: Token from the invitation link
            athlete_id: The caller's athlete profile id
            terms_version: Terms version the athlete consented to

        Returns:
            Committed relationship and invitation, plus side-effect outcomes

        Raises:
            NotFoundError: If the token is unknown or addressed to someone else
            InvalidStateTransitionError: If the invitation is not pending
            PreconditionFailedError: If a profile is missing or the terms
                version is not the current one
            EstablishmentFailedError: If storage failed during the core writes
        """
        with logfire.span(
            "relationship_establisher.accept",
            account_id=str(account_id),
            athlete_id=str(athlete_id),
            token=raw_token[:8] + "...",
        ):
            invitation = await self.invitation_service.get_by_token(raw_token)
            account = await self.account_repository.find_by_id(account_id)
            self.guard.ensure_invitee(invitation, account, "token")

            if terms_version != self.terms_version:
                logfire.warn(
                    "Unsupported terms version",
                    invitation_id=str(invitation.id),
                    terms_version=terms_version,
                    current=self.terms_version,
                )
                raise PreconditionFailedError(
                    f"Terms version {terms_version} is not the current version"
                )

            # accepted_at is authoritative even if status disagrees
            if invitation.accepted_at is not None:
                raise InvalidStateTransitionError(
                    InvitationCommand.ACCEPT.value, InvitationStatus.ACCEPTED.value
                )

            now = self.clock.now()
            transition = self.state_machine.transition(
                InvitationCommand.ACCEPT, invitation, now
            )

            athlete = await self.athlete_profile_repository.find_by_id(athlete_id)
            if athlete is None or athlete.account_id != account.id:
                raise PreconditionFailedError("Athlete profile not found")

            coach_profile = await self.coach_profile_repository.find_by_account_id(
                AccountId(invitation.coach_id)
            )
            if coach_profile is None:
                logfire.error(
                    "Coach profile missing for invitation",
                    invitation_id=str(invitation.id),
                    coach_id=str(invitation.coach_id),
                )
                raise PreconditionFailedError("Coach profile not found")

            coach_account = await self.account_repository.find_by_id(
                AccountId(invitation.coach_id)
            )

            relationship, accepted, replayed = await self._write_acceptance(
                invitation, transition, coach_profile, athlete
            )
            logfire.info(
                "Relationship established",
                invitation_id=str(invitation.id),
                relationship_id=str(relationship.id),
                replayed=replayed,
            )

            profile_linked = await self._link_profile(athlete, coach_profile)
            await self._make_durable(invitation)
            notification = self._notify_coach(
                accepted, coach_account, account, athlete, coach_profile
            )

            return EstablishmentResult(
                relationship=relationship,
                invitation=accepted,
                replayed=replayed,
                profile_linked=profile_linked,
                notification=notification,
            )

    async def _write_acceptance(
        self,
        invitation: Invitation,
        transition: Transition,
        coach_profile: CoachProfile,
        athlete: AthleteProfile,
    ) -> tuple[Relationship, Invitation, bool]:
        """Create (or reuse) the relationship and mark the invitation accepted."""
        now = self.clock.now()
        try:
            async with self.transaction_manager.transaction():
                existing = await self.relationship_repository.find_by_invitation(
                    invitation.id
                )
                if existing is not None:
                    logfire.warn(
                        "Replaying accept against existing relationship",
                        invitation_id=str(invitation.id),
                        relationship_id=str(existing.id),
                    )
                    relationship = existing
                else:
                    relationship = await self.relationship_repository.create(
                        Relationship(
                            id=RelationshipId(uuid4()),
                            coach_id=coach_profile.id,
                            athlete_id=athlete.id,
                            invitation_id=invitation.id,
                            terms_accepted_at=now,
                            terms_version=self.terms_version,
                            status=RelationshipStatus.ACTIVE,
                            created_at=now,
                        )
                    )

                accepted = await self.invitation_repository.update_status(
                    invitation.id,
                    expected=transition.expected,
                    status=transition.target,
                    updated_at=now,
                    accepted_at=now,
                    athlete_id=athlete.id,
                )
                if accepted is None:
                    await self._raise_lost_race(invitation)
                    raise EstablishmentFailedError(
                        str(invitation.id), "invitation update did not apply"
                    )
        except DuplicateRelationshipError as e:
            # Another accept created the relationship after our lookup
            await self._raise_lost_race(invitation)
            raise EstablishmentFailedError(str(invitation.id), str(e)) from e
        except DomainError:
            raise
        except Exception as e:
            logfire.error(
                "Relationship establishment failed",
                invitation_id=str(invitation.id),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise EstablishmentFailedError(str(invitation.id), str(e)) from e

        return relationship, accepted, existing is not None

    async def _raise_lost_race(self, invitation: Invitation) -> None:
        """Raise if the invitation is no longer pending; return otherwise."""
        current = await self.invitation_repository.find_by_id(invitation.id)
        if current is None:
            raise EstablishmentFailedError(str(invitation.id), "invitation disappeared")
        if current.status == InvitationStatus.PENDING and current.accepted_at is None:
            return
        status = self.state_machine.derive_status(current, self.clock.now())
        logfire.warn(
            "Accept lost a race",
            invitation_id=str(invitation.id),
            status=status.value,
        )
        raise InvalidStateTransitionError(InvitationCommand.ACCEPT.value, status.value)

    async def _link_profile(
        self, athlete: AthleteProfile, coach_profile: CoachProfile
    ) -> bool:
        """Point the athlete profile at the coach. Failure is reported, not raised."""
        try:
            async with self.transaction_manager.transaction():
                linked = await self.athlete_profile_repository.link_coach(
                    athlete.id, coach_profile.id
                )
        except Exception as e:
            logfire.error(
                "Failed to link athlete profile to coach",
                athlete_id=str(athlete.id),
                coach_profile_id=str(coach_profile.id),
                error=str(e),
            )
            return False

        if linked is None:
            logfire.warn("Athlete profile vanished before linking", athlete_id=str(athlete.id))
            return False
        return True

    async def _make_durable(self, invitation: Invitation) -> None:
        """Commit the accept before anyone is told about it."""
        try:
            await self.transaction_manager.commit()
        except Exception as e:
            logfire.error(
                "Commit of accepted invitation failed",
                invitation_id=str(invitation.id),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise EstablishmentFailedError(str(invitation.id), str(e)) from e

    def _notify_coach(
        self,
        invitation: Invitation,
        coach_account: Account | None,
        athlete_account: Account,
        athlete: AthleteProfile,
        coach_profile: CoachProfile,
    ) -> asyncio.Task[NotificationResult] | None:
        """Start the acceptance notice to the coach."""
        if coach_account is None:
            logfire.warn(
                "Skipping acceptance notice, coach account missing",
                invitation_id=str(invitation.id),
            )
            return None

        accepted_at = invitation.accepted_at or self.clock.now()
        context = AcceptanceContext(
            accepted_at=accepted_at.isoformat(),
            athlete_profile_url=(
                f"{self.app_url}/coach/{coach_profile.workspace_slug}/athletes/{athlete.id}"
            ),
            experience_level=athlete.experience_level,
            goal_race_distance=athlete.goal_race_distance,
            goal_race_date=athlete.goal_race_date,
        )
        return self.dispatcher.dispatch(
            "acceptance_notice",
            self.notifier.send_acceptance_notice(
                coach=ContactInfo(
                    name=coach_account.display_name, email=coach_account.email.root
                ),
                athlete=ContactInfo(
                    name=athlete_account.display_name, email=athlete_account.email.root
                ),
                context=context,
            ),
        )

"""Token validation for the athlete landing page."""

import logfire

from coachlink.domain.error import BrokenReferenceError
from coachlink.domain.model.common import DomainModel
from coachlink.domain.model.invitation import Invitation
from coachlink.domain.repository import AccountRepository, CoachProfileRepository
from coachlink.domain.value import (
    AccountId,
    AccountRole,
    CoachSummary,
    InvitationStatus,
)
from coachlink.util.clock import Clock

from .base import Service
from .expiry_policy import ExpiryPolicy
from .invitation_service import InvitationService
from .state_machine import InvitationStateMachine


class TokenVerdict(DomainModel):
    """Read-only view of an invitation as seen through its token."""

    invitation: Invitation
    status: InvitationStatus
    is_valid: bool
    is_expired: bool
    is_accepted: bool
    is_cancelled: bool
    coach: CoachSummary
    has_account: bool
    existing_role: AccountRole | None = None


class TokenValidator(Service):
    """Resolves a raw token into a verdict without changing anything."""

    def __init__(
        self,
        invitation_service: InvitationService,
        account_repository: AccountRepository,
        coach_profile_repository: CoachProfileRepository,
        state_machine: InvitationStateMachine,
        expiry_policy: ExpiryPolicy,
        clock: Clock,
    ) -> None:
        self.invitation_service = invitation_service
        self.account_repository = account_repository
        self.coach_profile_repository = coach_profile_repository
        self.state_machine = state_machine
        self.expiry_policy = expiry_policy
        self.clock = clock

    async def validate(self, raw_token: str) -> TokenVerdict:
        """Validate a token.

        ``has_account`` and ``existing_role`` describe the invitation email
        and are reported whether or not the invitation is still valid.

        Args:
            raw_token: Token as received in the invitation link

        Returns:
            Verdict with derived flags and the coach's public summary

        Raises:
            NotFoundError: If the token is malformed or unknown
            BrokenReferenceError: If the inviting coach no longer exists
        """
        with logfire.span("token_validator.validate", token=raw_token[:8] + "..."):
            invitation = await self.invitation_service.get_by_token(raw_token)
            now = self.clock.now()

            is_expired = self.expiry_policy.is_expired(invitation.expires_at, now)
            status_accepted = invitation.status == InvitationStatus.ACCEPTED
            if status_accepted != (invitation.accepted_at is not None):
                logfire.warn(
                    "Invitation acceptance fields disagree",
                    invitation_id=str(invitation.id),
                    status=invitation.status.value,
                    has_accepted_at=invitation.accepted_at is not None,
                )
            is_accepted = status_accepted or invitation.accepted_at is not None
            is_cancelled = invitation.status == InvitationStatus.CANCELLED
            is_valid = (
                not is_expired
                and not is_accepted
                and not is_cancelled
                and invitation.status == InvitationStatus.PENDING
            )

            coach = await self._coach_summary(invitation)
            existing = await self.account_repository.find_by_email(invitation.email)

            verdict = TokenVerdict(
                invitation=invitation,
                status=self.state_machine.derive_status(invitation, now),
                is_valid=is_valid,
                is_expired=is_expired,
                is_accepted=is_accepted,
                is_cancelled=is_cancelled,
                coach=coach,
                has_account=existing is not None,
                existing_role=existing.role if existing else None,
            )
            logfire.info(
                "Invitation token validated",
                invitation_id=str(invitation.id),
                is_valid=is_valid,
                status=verdict.status.value,
                has_account=verdict.has_account,
            )
            return verdict

    async def _coach_summary(self, invitation: Invitation) -> CoachSummary:
        account_id = AccountId(invitation.coach_id)
        account = await self.account_repository.find_by_id(account_id)
        if account is None:
            logfire.error(
                "Invitation references missing coach account",
                invitation_id=str(invitation.id),
                coach_id=str(invitation.coach_id),
            )
            raise BrokenReferenceError(
                "coach account", str(invitation.coach_id), f"Invitation {invitation.id}"
            )

        profile = await self.coach_profile_repository.find_by_account_id(account_id)
        if profile is None:
            logfire.error(
                "Invitation references missing coach profile",
                invitation_id=str(invitation.id),
                coach_id=str(invitation.coach_id),
            )
            raise BrokenReferenceError(
                "coach profile", str(invitation.coach_id), f"Invitation {invitation.id}"
            )

        return CoachSummary(
            name=account.display_name,
            first_name=account.first_name,
            last_name=account.last_name,
            email=account.email.root,
            photo_url=profile.profile_photo_url,
            qualifications=list(profile.qualifications),
            specializations=list(profile.specializations),
            philosophy=profile.coaching_philosophy,
            years_experience=profile.years_experience,
            workspace_slug=profile.workspace_slug,
        )

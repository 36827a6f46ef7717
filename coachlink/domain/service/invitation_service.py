"""Invitation domain service.

Coach-side commands (create, resend, cancel, list) and the athlete-side
decline. Acceptance lives in ``RelationshipEstablisher``.
"""

from typing import NoReturn
from uuid import uuid4

import logfire
from pydantic import ValidationError

from coachlink.domain.error import (
    DuplicatePendingInvitationError,
    InvalidStateTransitionError,
    NotFoundError,
    PreconditionFailedError,
)
from coachlink.domain.model.common import DomainModel
from coachlink.domain.model.invitation import Invitation
from coachlink.domain.repository import (
    AccountRepository,
    CoachProfileRepository,
    InvitationRepository,
    TransactionManager,
)
from coachlink.domain.value import (
    AccountId,
    CoachAccountId,
    CoachDisplayInfo,
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
)
from coachlink.util.clock import Clock

from .authorization import AuthorizationGuard
from .base import Service
from .expiry_policy import ExpiryPolicy
from .notification import NotificationDispatcher, Notifier
from .state_machine import InvitationCommand, InvitationStateMachine
from .token_generator import TokenGenerator


class InvitationDelivery(DomainModel):
    """Invitation state after a send or resend, plus the email outcome."""

    invitation: Invitation
    email_sent: bool
    email_error: str | None = None


class InvitationService(Service):
    """Domain service for invitation lifecycle commands."""

    def __init__(
        self,
        invitation_repository: InvitationRepository,
        account_repository: AccountRepository,
        coach_profile_repository: CoachProfileRepository,
        transaction_manager: TransactionManager,
        token_generator: TokenGenerator,
        expiry_policy: ExpiryPolicy,
        state_machine: InvitationStateMachine,
        guard: AuthorizationGuard,
        dispatcher: NotificationDispatcher,
        notifier: Notifier,
        clock: Clock,
        rotate_token_on_resend: bool = False,
    ) -> None:
        """Initialize invitation service.

        Args:
            invitation_repository: Invitation repository
            account_repository: Account repository
            coach_profile_repository: Coach profile repository
            transaction_manager: Commits an invitation before it is emailed
            token_generator: Issues invitation tokens
            expiry_policy: Computes expiry windows
            state_machine: Authorizes status changes
            guard: Ownership checks
            dispatcher: Runs notifier calls
            notifier: Email delivery
            clock: Source of the current time
            rotate_token_on_resend: Issue a new token on every resend
        """
        self.invitation_repository = invitation_repository
        self.account_repository = account_repository
        self.coach_profile_repository = coach_profile_repository
        self.transaction_manager = transaction_manager
        self.token_generator = token_generator
        self.expiry_policy = expiry_policy
        self.state_machine = state_machine
        self.guard = guard
        self.dispatcher = dispatcher
        self.notifier = notifier
        self.clock = clock
        self.rotate_token_on_resend = rotate_token_on_resend

    async def create_invitation(
        self,
        coach_id: CoachAccountId,
        email: Email,
        message: str | None = None,
    ) -> InvitationDelivery:
        """Create a pending invitation and email it.

        Args:
            coach_id: Authenticated coach's account id
            email: Athlete email (already normalized by ``Email``)
            message: Optional personal note

        Returns:
            The invitation (``pending``, or ``email_failed`` if sending
            failed) and the email outcome

        Raises:
            PreconditionFailedError: If the coach has no profile or account
            DuplicatePendingInvitationError: If a pending invitation exists
        """
        with logfire.span(
            "invitation_service.create_invitation",
            coach_id=str(coach_id),
            email=email.root,
        ):
            sender = await self._resolve_sender(coach_id)

            existing = await self.invitation_repository.find_pending_by_coach_and_email(
                coach_id, email
            )
            if existing:
                logfire.warn(
                    "Pending invitation already exists",
                    coach_id=str(coach_id),
                    invitation_id=str(existing.id),
                )
                raise DuplicatePendingInvitationError(email.root)

            now = self.clock.now()
            invitation = Invitation(
                id=InvitationId(uuid4()),
                coach_id=coach_id,
                email=email,
                message=message,
                token=self.token_generator.generate(),
                status=InvitationStatus.PENDING,
                sent_at=now,
                expires_at=self.expiry_policy.expires_at(now),
                created_at=now,
                updated_at=now,
            )

            # Storage re-checks pending uniqueness under the insert
            saved = await self.invitation_repository.insert(invitation)
            logfire.info(
                "Invitation created",
                invitation_id=str(saved.id),
                coach_id=str(coach_id),
            )
            return await self._send(saved, sender)

    async def resend_invitation(
        self, coach_id: CoachAccountId, invitation_id: InvitationId
    ) -> InvitationDelivery:
        """Refresh the send window and email the invitation again.

        Raises:
            NotFoundError: If missing or owned by another coach
            InvalidStateTransitionError: If not pending, expired or email_failed
            PreconditionFailedError: If the coach has no profile or account
        """
        with logfire.span(
            "invitation_service.resend_invitation",
            coach_id=str(coach_id),
            invitation_id=str(invitation_id),
        ):
            invitation = await self.get_invitation(coach_id, invitation_id)
            now = self.clock.now()
            transition = self.state_machine.transition(
                InvitationCommand.RESEND, invitation, now
            )
            sender = await self._resolve_sender(coach_id)

            token = self.token_generator.generate() if self.rotate_token_on_resend else None
            refreshed = await self.invitation_repository.refresh_send_window(
                invitation.id,
                expected=transition.expected,
                sent_at=now,
                expires_at=self.expiry_policy.expires_at(now),
                updated_at=now,
                token=token,
            )
            if refreshed is None:
                await self._raise_lost_race(InvitationCommand.RESEND, invitation_id)

            logfire.info(
                "Invitation send window refreshed",
                invitation_id=str(invitation_id),
                previous_status=transition.source.value,
                token_rotated=token is not None,
            )
            return await self._send(refreshed, sender)

    async def cancel_invitation(
        self, coach_id: CoachAccountId, invitation_id: InvitationId
    ) -> Invitation:
        """Cancel a pending or email_failed invitation.

        Raises:
            NotFoundError: If missing or owned by another coach
            InvalidStateTransitionError: If not pending or email_failed
        """
        with logfire.span(
            "invitation_service.cancel_invitation",
            coach_id=str(coach_id),
            invitation_id=str(invitation_id),
        ):
            invitation = await self.get_invitation(coach_id, invitation_id)
            now = self.clock.now()
            transition = self.state_machine.transition(
                InvitationCommand.CANCEL, invitation, now
            )
            cancelled = await self.invitation_repository.update_status(
                invitation.id,
                expected=transition.expected,
                status=transition.target,
                updated_at=now,
            )
            if cancelled is None:
                await self._raise_lost_race(InvitationCommand.CANCEL, invitation_id)

            logfire.info("Invitation cancelled", invitation_id=str(invitation_id))
            return cancelled

    async def decline_invitation(self, account_id: AccountId, raw_token: str) -> Invitation:
        """Decline an invitation on behalf of the athlete it addresses.

        Raises:
            NotFoundError: If the token is unknown or addressed to someone else
            InvalidStateTransitionError: If the invitation is not pending
        """
        with logfire.span(
            "invitation_service.decline_invitation",
            account_id=str(account_id),
            token=raw_token[:8] + "...",
        ):
            invitation = await self.get_by_token(raw_token)
            account = await self.account_repository.find_by_id(account_id)
            self.guard.ensure_invitee(invitation, account, "token")

            now = self.clock.now()
            transition = self.state_machine.transition(
                InvitationCommand.DECLINE, invitation, now
            )
            declined = await self.invitation_repository.update_status(
                invitation.id,
                expected=transition.expected,
                status=transition.target,
                updated_at=now,
            )
            if declined is None:
                await self._raise_lost_race(InvitationCommand.DECLINE, invitation.id)

            logfire.info("Invitation declined", invitation_id=str(invitation.id))
            return declined

    async def get_by_token(self, raw_token: str) -> Invitation:
        """Resolve a raw token to its invitation.

        Malformed and unknown tokens get the same ``NotFoundError``.
        """
        try:
            token = InvitationToken(raw_token)
        except ValidationError:
            logfire.info("Malformed invitation token")
            raise NotFoundError("Invitation", "token")

        invitation = await self.invitation_repository.find_by_token(token)
        if invitation is None:
            logfire.info("Invitation token not found", token=token.masked())
            raise NotFoundError("Invitation", "token")
        return invitation

    async def get_invitation(
        self, coach_id: CoachAccountId, invitation_id: InvitationId
    ) -> Invitation:
        """Load one of the coach's own invitations.

        Raises:
            NotFoundError: If missing or owned by another coach
        """
        return self.guard.ensure_coach_owns(
            await self.invitation_repository.find_by_id(invitation_id),
            coach_id,
            str(invitation_id),
        )

    async def list_invitations(
        self,
        coach_id: CoachAccountId,
        status: InvitationStatus | None = None,
        email: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[Invitation], int]:
        """List the coach's invitations, newest first.

        Returns:
            The requested page and the total number of matches
        """
        with logfire.span(
            "invitation_service.list_invitations",
            coach_id=str(coach_id),
            status=status.value if status else None,
            limit=limit,
            offset=offset,
        ):
            invitations = await self.invitation_repository.list_by_coach(
                coach_id, status, email, limit, offset
            )
            total = await self.invitation_repository.count_by_coach(
                coach_id, status, email
            )
            logfire.info(
                "Invitations listed",
                coach_id=str(coach_id),
                count=len(invitations),
                total=total,
            )
            return invitations, total

    async def status_counts(self, coach_id: CoachAccountId) -> dict[InvitationStatus, int]:
        """Per-status counts of the coach's invitations."""
        return await self.invitation_repository.status_counts(coach_id)

    async def list_pending_for_account(self, account_id: AccountId) -> list[Invitation]:
        """Pending, unexpired invitations addressed to an account's email.

        Raises:
            NotFoundError: If the account does not exist
        """
        with logfire.span(
            "invitation_service.list_pending_for_account", account_id=str(account_id)
        ):
            account = await self.account_repository.find_by_id(account_id)
            if account is None:
                raise NotFoundError("Account", str(account_id))
            invitations = await self.invitation_repository.list_pending_for_email(
                account.email, self.clock.now()
            )
            logfire.info(
                "Pending invitations listed",
                account_id=str(account_id),
                count=len(invitations),
            )
            return invitations

    async def _resolve_sender(self, coach_id: CoachAccountId) -> CoachDisplayInfo:
        """Build the coach's email identity from account and profile."""
        profile = await self.coach_profile_repository.find_by_account_id(
            AccountId(coach_id)
        )
        if profile is None:
            raise PreconditionFailedError("Coach profile not found")

        account = await self.account_repository.find_by_id(AccountId(coach_id))
        if account is None:
            raise PreconditionFailedError("Coach account not found")

        return CoachDisplayInfo(
            name=account.display_name,
            email=account.email.root,
            qualifications=list(profile.qualifications),
        )

    async def _send(
        self, invitation: Invitation, sender: CoachDisplayInfo
    ) -> InvitationDelivery:
        """Commit the invitation, then email it.

        The link must resolve by the time the email arrives. On failure the
        invitation moves to ``email_failed``.
        """
        await self.transaction_manager.commit()
        result = await self.dispatcher.deliver(
            "invitation",
            self.notifier.send_invitation(
                coach=sender,
                athlete_email=invitation.email.root,
                token=invitation.token,
                message=invitation.message,
                expires_at=invitation.expires_at,
            ),
        )
        if result.success:
            return InvitationDelivery(invitation=invitation, email_sent=True)

        now = self.clock.now()
        transition = self.state_machine.transition(
            InvitationCommand.SEND_FAILED, invitation, now
        )
        failed = await self.invitation_repository.update_status(
            invitation.id,
            expected=transition.expected,
            status=transition.target,
            updated_at=now,
        )
        if failed is None:
            # Cancelled or accepted while the email was in flight; leave it
            current = await self.invitation_repository.find_by_id(invitation.id)
            logfire.warn(
                "Send failure ignored, invitation changed meanwhile",
                invitation_id=str(invitation.id),
                status=current.status.value if current else None,
            )
            failed = current or invitation
        else:
            logfire.warn(
                "Invitation marked email_failed",
                invitation_id=str(invitation.id),
                error=result.error,
            )
        return InvitationDelivery(
            invitation=failed, email_sent=False, email_error=result.error
        )

    async def _raise_lost_race(
        self, command: InvitationCommand, invitation_id: InvitationId
    ) -> NoReturn:
        """Report a conditional write that found a different status."""
        current = await self.invitation_repository.find_by_id(invitation_id)
        if current is None:
            raise NotFoundError("Invitation", str(invitation_id))
        status = self.state_machine.derive_status(current, self.clock.now())
        logfire.warn(
            "Invitation changed concurrently",
            invitation_id=str(invitation_id),
            command=command.value,
            status=status.value,
        )
        raise InvalidStateTransitionError(command.value, status.value)

"""Invitation repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from coachlink.domain.model.invitation import Invitation
from coachlink.domain.value import (
    AthleteProfileId,
    CoachAccountId,
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
)


class InvitationRepository(ABC):
    """Repository for Invitation entity.

    Defines the contract for invitation persistence operations.
    Implementations live in the persistence layer. Status changes are always
    conditional on the status the caller last observed, so concurrent
    commands collapse to a single winner.
    """

    @abstractmethod
    async def find_by_id(self, invitation_id: InvitationId) -> Invitation | None:
        """Find an invitation by ID.

        Args:
            invitation_id: The invitation's unique identifier

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_token(self, token: InvitationToken) -> Invitation | None:
        """Find an invitation by its bearer token.

        Args:
            token: The invitation token

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_pending_by_coach_and_email(
        self, coach_id: CoachAccountId, email: Email
    ) -> Invitation | None:
        """Find the pending invitation for a coach/email pair.

        Args:
            coach_id: The inviting coach's account id
            email: Normalized athlete email

        Returns:
            The pending invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation.

        Args:
            invitation: The invitation to insert

        Returns:
            The stored invitation

        Raises:
            DuplicatePendingInvitationError: If a pending invitation already
                exists for the same (coach, email)
        """
        pass

    @abstractmethod
    async def update_status(
        self,
        invitation_id: InvitationId,
        expected: frozenset[InvitationStatus],
        status: InvitationStatus,
        updated_at: datetime,
        accepted_at: datetime | None = None,
        athlete_id: AthleteProfileId | None = None,
    ) -> Invitation | None:
        """Change status only if the current status is one of ``expected``.

        Args:
            invitation_id: Invitation to update
            expected: Statuses the invitation must currently have
            status: New status
            updated_at: Audit timestamp
            accepted_at: Acceptance timestamp, set when accepting
            athlete_id: Athlete profile id, set when accepting

        Returns:
            The updated invitation, or None if it is missing or its status
            was not in ``expected``
        """
        pass

    @abstractmethod
    async def refresh_send_window(
        self,
        invitation_id: InvitationId,
        expected: frozenset[InvitationStatus],
        sent_at: datetime,
        expires_at: datetime,
        updated_at: datetime,
        token: InvitationToken | None = None,
    ) -> Invitation | None:
        """Move an invitation back to pending with a fresh send window.

        Args:
            invitation_id: Invitation to update
            expected: Statuses the invitation must currently have
            sent_at: New send timestamp
            expires_at: New expiry timestamp
            updated_at: Audit timestamp
            token: Replacement token, or None to keep the current one

        Returns:
            The updated invitation, or None if the condition did not hold
        """
        pass

    @abstractmethod
    async def list_by_coach(
        self,
        coach_id: CoachAccountId,
        status: InvitationStatus | None = None,
        email: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Invitation]:
        """List a coach's invitations, newest first.

        Args:
            coach_id: The coach's account id
            status: Optional stored-status filter
            email: Optional case-insensitive email substring filter
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of invitations
        """
        pass

    @abstractmethod
    async def count_by_coach(
        self,
        coach_id: CoachAccountId,
        status: InvitationStatus | None = None,
        email: str | None = None,
    ) -> int:
        """Count a coach's invitations matching the same filters as listing."""
        pass

    @abstractmethod
    async def status_counts(
        self, coach_id: CoachAccountId
    ) -> dict[InvitationStatus, int]:
        """Count a coach's invitations per stored status.

        Returns:
            Mapping with an entry for every status (zero when absent)
        """
        pass

    @abstractmethod
    async def list_pending_for_email(
        self, email: Email, now: datetime
    ) -> list[Invitation]:
        """List pending, unexpired invitations addressed to an email.

        Args:
            email: Normalized athlete email
            now: Current time used for the expiry cut-off

        Returns:
            Invitations ordered by send time, newest first
        """
        pass

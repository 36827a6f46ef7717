"""In-memory invitation repository for testing."""

from datetime import datetime
from typing import Optional

from coachlink.domain.error import DuplicatePendingInvitationError
from coachlink.domain.model.invitation import Invitation
from coachlink.domain.repository.invitation import InvitationRepository
from coachlink.domain.value import (
    AthleteProfileId,
    CoachAccountId,
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
)

from .database import InMemoryDatabase


class InMemoryInvitationRepository(InvitationRepository):
    """In-memory implementation of InvitationRepository for testing.

    Mirrors the storage constraints: unique token and at most one pending
    invitation per (coach, email).
    """

    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID."""
        return self._db.invitations.get(invitation_id)

    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        """Find an invitation by its token."""
        for invitation in self._db.invitations.values():
            if invitation.token == token:
                return invitation
        return None

    async def find_pending_by_coach_and_email(
        self, coach_id: CoachAccountId, email: Email
    ) -> Optional[Invitation]:
        """Find the pending invitation for a coach/email pair."""
        for invitation in self._db.invitations.values():
            if (
                invitation.coach_id == coach_id
                and invitation.email == email
                and invitation.status == InvitationStatus.PENDING
            ):
                return invitation
        return None

    def _check_pending_unique(self, candidate: Invitation) -> None:
        if candidate.status != InvitationStatus.PENDING:
            return
        for other in self._db.invitations.values():
            if (
                other.id != candidate.id
                and other.coach_id == candidate.coach_id
                and other.email == candidate.email
                and other.status == InvitationStatus.PENDING
            ):
                raise DuplicatePendingInvitationError(candidate.email.root)

    async def insert(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation.

        Raises:
            DuplicatePendingInvitationError: If a pending one already exists
            ValueError: If the id or token is already taken
        """
        if invitation.id in self._db.invitations:
            raise ValueError(f"Invitation {invitation.id} already exists")
        if await self.find_by_token(invitation.token):
            raise ValueError("Invitation token already exists")
        self._check_pending_unique(invitation)
        self._db.invitations[invitation.id] = invitation
        return invitation

    async def update_status(
        self,
        invitation_id: InvitationId,
        expected: frozenset[InvitationStatus],
        status: InvitationStatus,
        updated_at: datetime,
        accepted_at: datetime | None = None,
        athlete_id: AthleteProfileId | None = None,
    ) -> Optional[Invitation]:
        """Change status only if the current status is one of ``expected``."""
        current = self._db.invitations.get(invitation_id)
        if current is None or current.status not in expected:
            return None

        changes: dict = {"status": status, "updated_at": updated_at}
        if accepted_at is not None:
            changes["accepted_at"] = accepted_at
        if athlete_id is not None:
            changes["athlete_id"] = athlete_id
        updated = current.model_copy(update=changes)
        self._db.invitations[invitation_id] = updated
        return updated

    async def refresh_send_window(
        self,
        invitation_id: InvitationId,
        expected: frozenset[InvitationStatus],
        sent_at: datetime,
        expires_at: datetime,
        updated_at: datetime,
        token: InvitationToken | None = None,
    ) -> Optional[Invitation]:
        """Move an invitation back to pending with a fresh send window."""
        current = self._db.invitations.get(invitation_id)
        if current is None or current.status not in expected:
            return None

        changes: dict = {
            "status": InvitationStatus.PENDING,
            "sent_at": sent_at,
            "expires_at": expires_at,
            "updated_at": updated_at,
        }
        if token is not None:
            changes["token"] = token
        updated = current.model_copy(update=changes)
        self._check_pending_unique(updated)
        self._db.invitations[invitation_id] = updated
        return updated

    def _matching(
        self,
        coach_id: CoachAccountId,
        status: InvitationStatus | None,
        email: str | None,
    ) -> list[Invitation]:
        needle = email.lower() if email else None
        return [
            invitation
            for invitation in self._db.invitations.values()
            if invitation.coach_id == coach_id
            and (status is None or invitation.status == status)
            and (needle is None or needle in invitation.email.root)
        ]

    async def list_by_coach(
        self,
        coach_id: CoachAccountId,
        status: InvitationStatus | None = None,
        email: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Invitation]:
        """List a coach's invitations, newest first."""
        matches = self._matching(coach_id, status, email)
        matches.sort(key=lambda inv: inv.created_at, reverse=True)
        return matches[offset : offset + limit]

    async def count_by_coach(
        self,
        coach_id: CoachAccountId,
        status: InvitationStatus | None = None,
        email: str | None = None,
    ) -> int:
        """Count a coach's invitations matching the listing filters."""
        return len(self._matching(coach_id, status, email))

    async def status_counts(
        self, coach_id: CoachAccountId
    ) -> dict[InvitationStatus, int]:
        """Count a coach's invitations per stored status."""
        counts = {status: 0 for status in InvitationStatus}
        for invitation in self._matching(coach_id, None, None):
            counts[invitation.status] += 1
        return counts

    async def list_pending_for_email(
        self, email: Email, now: datetime
    ) -> list[Invitation]:
        """List pending, unexpired invitations addressed to an email."""
        matches = [
            invitation
            for invitation in self._db.invitations.values()
            if invitation.email == email
            and invitation.status == InvitationStatus.PENDING
            and invitation.expires_at is not None
            and invitation.expires_at > now
        ]
        matches.sort(key=lambda inv: inv.sent_at or inv.created_at, reverse=True)
        return matches

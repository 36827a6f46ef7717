"""PostgreSQL implementation of Invitation repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coachlink.domain.error import DuplicatePendingInvitationError
from coachlink.domain.model import Invitation
from coachlink.domain.repository import InvitationRepository
from coachlink.domain.value import (
    AthleteProfileId,
    CoachAccountId,
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
)
from coachlink.persistence.mappers import invitation_to_dict, row_to_invitation
from coachlink.persistence.tables import invitations_table

PENDING_UNIQUE_INDEX = "uq_invitations_pending_coach_email"


class PostgresInvitationRepository(InvitationRepository):
    """PostgreSQL implementation of InvitationRepository.

    Status changes are single ``UPDATE ... WHERE status IN (...) RETURNING``
    statements, so the condition and the write cannot be interleaved.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID."""
        stmt = select(invitations_table).where(invitations_table.c.id == invitation_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        """Find an invitation by its token."""
        stmt = select(invitations_table).where(invitations_table.c.token == token.root)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_pending_by_coach_and_email(
        self, coach_id: CoachAccountId, email: Email
    ) -> Optional[Invitation]:
        """Find the pending invitation for a coach/email pair.

        Served by the partial unique index on (coach_id, email).
        """
        stmt = select(invitations_table).where(
            and_(
                invitations_table.c.coach_id == coach_id,
                invitations_table.c.email == email.root,
                invitations_table.c.status == InvitationStatus.PENDING.value,
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def insert(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation.

        Raises:
            DuplicatePendingInvitationError: If the partial unique index rejects it
        """
        stmt = insert(invitations_table).values(**invitation_to_dict(invitation))
        try:
            # Savepoint keeps the request session usable after a violation
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            if PENDING_UNIQUE_INDEX in str(e.orig):
                raise DuplicatePendingInvitationError(invitation.email.root) from e
            raise
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
        values: dict = {"status": status.value, "updated_at": updated_at}
        if accepted_at is not None:
            values["accepted_at"] = accepted_at
        if athlete_id is not None:
            values["athlete_id"] = athlete_id

        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.id == invitation_id,
                    invitations_table.c.status.in_([s.value for s in expected]),
                )
            )
            .values(**values)
            .returning(invitations_table)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

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
        values: dict = {
            "status": InvitationStatus.PENDING.value,
            "sent_at": sent_at,
            "expires_at": expires_at,
            "updated_at": updated_at,
        }
        if token is not None:
            values["token"] = token.root

        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.id == invitation_id,
                    invitations_table.c.status.in_([s.value for s in expected]),
                )
            )
            .values(**values)
            .returning(invitations_table)
        )
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(stmt)
                row = result.mappings().first()
        except IntegrityError as e:
            # An email_failed/expired row returning to pending next to a newer pending one
            if PENDING_UNIQUE_INDEX in str(e.orig):
                current = await self.find_by_id(invitation_id)
                raise DuplicatePendingInvitationError(
                    current.email.root if current else str(invitation_id)
                ) from e
            raise
        return row_to_invitation(dict(row)) if row else None

    def _coach_filter(
        self,
        coach_id: CoachAccountId,
        status: InvitationStatus | None,
        email: str | None,
    ) -> list:
        conditions = [invitations_table.c.coach_id == coach_id]
        if status:
            conditions.append(invitations_table.c.status == status.value)
        if email:
            conditions.append(
                invitations_table.c.email.icontains(email, autoescape=True)
            )
        return conditions

    async def list_by_coach(
        self,
        coach_id: CoachAccountId,
        status: InvitationStatus | None = None,
        email: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Invitation]:
        """List a coach's invitations, newest first."""
        stmt = (
            select(invitations_table)
            .where(and_(*self._coach_filter(coach_id, status, email)))
            .order_by(invitations_table.c.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        rows = result.mappings().all()
        return [row_to_invitation(dict(row)) for row in rows]

    async def count_by_coach(
        self,
        coach_id: CoachAccountId,
        status: InvitationStatus | None = None,
        email: str | None = None,
    ) -> int:
        """Count a coach's invitations matching the listing filters."""
        stmt = (
            select(func.count())
            .select_from(invitations_table)
            .where(and_(*self._coach_filter(coach_id, status, email)))
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def status_counts(
        self, coach_id: CoachAccountId
    ) -> dict[InvitationStatus, int]:
        """Count a coach's invitations per stored status."""
        stmt = (
            select(invitations_table.c.status, func.count())
            .where(invitations_table.c.coach_id == coach_id)
            .group_by(invitations_table.c.status)
        )
        result = await self.session.execute(stmt)
        counts = {status: 0 for status in InvitationStatus}
        for status, count in result.all():
            counts[InvitationStatus(status)] = count
        return counts

    async def list_pending_for_email(
        self, email: Email, now: datetime
    ) -> list[Invitation]:
        """List pending, unexpired invitations addressed to an email."""
        stmt = (
            select(invitations_table)
            .where(
                and_(
                    invitations_table.c.email == email.root,
                    invitations_table.c.status == InvitationStatus.PENDING.value,
                    invitations_table.c.expires_at > now,
                )
            )
            .order_by(invitations_table.c.sent_at.desc())
        )
        result = await self.session.execute(stmt)
        rows = result.mappings().all()
        return [row_to_invitation(dict(row)) for row in rows]

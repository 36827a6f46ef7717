"""Integration tests for PostgresInvitationRepository.

These tests verify value object handling and the conditional writes
against a real database. Run with ``pytest -m integration`` once the
migrations have been applied.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from coachlink.domain.error import DuplicatePendingInvitationError
from coachlink.domain.model import Account, Invitation
from coachlink.domain.repository import (
    AccountRepository,
    InvitationRepository,
    TransactionManager,
)
from coachlink.domain.value import (
    AccountId,
    AccountRole,
    CoachAccountId,
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
)
from tests.harness import create_env_fixture

pytestmark = pytest.mark.integration

# Integration test fixture
integration_env = create_env_fixture(unmock={"persistence"})


async def seed_coach_account(integration_env) -> CoachAccountId:
    accounts = await integration_env.get(AccountRepository)
    account = await accounts.save(
        Account(
            id=AccountId(uuid4()),
            email=Email(f"coach-{uuid4().hex[:8]}@example.com"),
            role=AccountRole.COACH,
            first_name="Jane",
        )
    )
    return CoachAccountId(account.id)


def make_invitation(coach_id: CoachAccountId, email: str) -> Invitation:
    now = datetime.now(timezone.utc)
    return Invitation(
        id=InvitationId(uuid4()),
        coach_id=coach_id,
        email=Email(email),
        token=InvitationToken(uuid4().hex),
        status=InvitationStatus.PENDING,
        sent_at=now,
        expires_at=now + timedelta(days=14),
        created_at=now,
        updated_at=now,
    )


class TestInvitationRepositoryIntegration:
    """Integration tests for PostgresInvitationRepository."""

    @pytest.mark.asyncio
    async def test_find_by_token_round_trips_value_objects(self, integration_env):
        # Arrange
        repo = await integration_env.get(InvitationRepository)
        coach_id = await seed_coach_account(integration_env)
        invitation = make_invitation(coach_id, "runner@example.com")
        await repo.insert(invitation)

        # Act
        found = await repo.find_by_token(invitation.token)

        # Assert
        assert found is not None
        assert found.id == invitation.id
        assert found.token == invitation.token
        assert found.email == invitation.email
        assert found.status == InvitationStatus.PENDING

    @pytest.mark.asyncio
    async def test_partial_unique_index_rejects_second_pending(self, integration_env):
        # Arrange
        repo = await integration_env.get(InvitationRepository)
        coach_id = await seed_coach_account(integration_env)
        await repo.insert(make_invitation(coach_id, "runner@example.com"))

        # Act & Assert
        with pytest.raises(DuplicatePendingInvitationError):
            await repo.insert(make_invitation(coach_id, "runner@example.com"))

        # Session is still usable after the violation
        assert await repo.count_by_coach(coach_id) == 1

    @pytest.mark.asyncio
    async def test_update_status_is_conditional(self, integration_env):
        # Arrange
        repo = await integration_env.get(InvitationRepository)
        coach_id = await seed_coach_account(integration_env)
        invitation = await repo.insert(make_invitation(coach_id, "runner@example.com"))
        now = datetime.now(timezone.utc)

        # Act
        cancelled = await repo.update_status(
            invitation.id,
            expected=frozenset({InvitationStatus.PENDING}),
            status=InvitationStatus.CANCELLED,
            updated_at=now,
        )
        again = await repo.update_status(
            invitation.id,
            expected=frozenset({InvitationStatus.PENDING}),
            status=InvitationStatus.CANCELLED,
            updated_at=now,
        )

        # Assert
        assert cancelled is not None
        assert cancelled.status == InvitationStatus.CANCELLED
        assert again is None


class TestPostgresTransactionManagerIntegration:
    """Early commit of the request session."""

    @pytest.mark.asyncio
    async def test_committed_invitation_survives_session_rollback(self, integration_env):
        # Arrange
        repo = await integration_env.get(InvitationRepository)
        transactions = await integration_env.get(TransactionManager)
        session = await integration_env.get(AsyncSession)
        coach_id = await seed_coach_account(integration_env)
        invitation = make_invitation(coach_id, "committed@example.com")
        await repo.insert(invitation)

        # Act
        await transactions.commit()
        await session.rollback()

        # Assert
        found = await repo.find_by_id(invitation.id)
        assert found is not None
        assert found.status == InvitationStatus.PENDING

"""Unit tests for InvitationService."""

from datetime import timedelta
from uuid import uuid4

import pytest

from coachlink.adapter.email import MockEmailNotifier
from coachlink.domain.error import (
    DuplicatePendingInvitationError,
    InvalidStateTransitionError,
    NotFoundError,
    PreconditionFailedError,
)
from coachlink.domain.repository import InvitationRepository
from coachlink.domain.service import InvitationService, InvitationStateMachine
from coachlink.domain.value import (
    AccountId,
    CoachAccountId,
    Email,
    InvitationId,
    InvitationStatus,
)
from coachlink.persistence.repository.inmemory import InMemoryDatabase
from coachlink.util.clock import FrozenClock
from tests.conftest import seed_athlete, seed_coach
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class TestCreateInvitation:
    """Tests for create_invitation."""

    @pytest.mark.asyncio
    async def test_create_invitation_sends_email(self, unit_env):
        """A new invitation is pending, expires in 14 days and is emailed."""
        # Arrange
        service = await unit_env.get(InvitationService)
        notifier = await unit_env.get(MockEmailNotifier)
        clock = await unit_env.get(FrozenClock)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))

        # Act
        delivery = await service.create_invitation(
            coach.account_id, Email("Runner@Example.com "), "Join my squad"
        )

        # Assert
        invitation = delivery.invitation
        assert delivery.email_sent is True
        assert delivery.email_error is None
        assert invitation.status == InvitationStatus.PENDING
        assert invitation.email.root == "runner@example.com"
        assert invitation.sent_at == clock.now()
        assert invitation.expires_at == clock.now() + timedelta(days=14)
        assert len(notifier.invitations) == 1
        sent = notifier.invitations[0]
        assert sent["athlete_email"] == "runner@example.com"
        assert sent["token"] == invitation.token
        assert sent["coach"].name == "Jane Runner"
        assert sent["coach"].qualifications == ["UESCA Running Coach"]

    @pytest.mark.asyncio
    async def test_invitation_is_committed_before_email(self, unit_env):
        """The link in the email must already resolve."""
        # Arrange
        service = await unit_env.get(InvitationService)
        notifier = await unit_env.get(MockEmailNotifier)
        db = await unit_env.get(InMemoryDatabase)
        coach = seed_coach(db)
        commits_at_send = []
        original_send = notifier.send_invitation

        async def recording_send(**kwargs):
            commits_at_send.append(db.commits)
            return await original_send(**kwargs)

        notifier.send_invitation = recording_send

        # Act
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )
        await service.resend_invitation(coach.account_id, created.invitation.id)

        # Assert
        assert commits_at_send == [1, 2]

    @pytest.mark.asyncio
    async def test_duplicate_pending_is_rejected(self, unit_env):
        """A second pending invitation for the same email is refused."""
        # Arrange
        service = await unit_env.get(InvitationService)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        await service.create_invitation(coach.account_id, Email("runner@example.com"))

        # Act & Assert
        with pytest.raises(DuplicatePendingInvitationError):
            await service.create_invitation(coach.account_id, Email("RUNNER@example.com"))

    @pytest.mark.asyncio
    async def test_other_coach_can_invite_same_email(self, unit_env):
        """Pending uniqueness is per coach."""
        # Arrange
        service = await unit_env.get(InvitationService)
        db = await unit_env.get(InMemoryDatabase)
        first = seed_coach(db, email="one@example.com")
        second = seed_coach(db, email="two@example.com")

        # Act
        a = await service.create_invitation(first.account_id, Email("runner@example.com"))
        b = await service.create_invitation(second.account_id, Email("runner@example.com"))

        # Assert
        assert a.invitation.id != b.invitation.id
        assert a.invitation.token != b.invitation.token

    @pytest.mark.asyncio
    async def test_missing_coach_profile_is_precondition_failure(self, unit_env):
        """Without a coach profile nothing is written."""
        # Arrange
        service = await unit_env.get(InvitationService)
        db = await unit_env.get(InMemoryDatabase)
        coach = seed_coach(db, with_profile=False)

        # Act & Assert
        with pytest.raises(PreconditionFailedError, match="Coach profile not found"):
            await service.create_invitation(coach.account_id, Email("runner@example.com"))
        assert db.invitations == {}

    @pytest.mark.asyncio
    async def test_email_failure_marks_email_failed(self, unit_env):
        """The invitation survives a failed send as email_failed."""
        # Arrange
        service = await unit_env.get(InvitationService)
        notifier = await unit_env.get(MockEmailNotifier)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        notifier.fail_next = 1

        # Act
        delivery = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )

        # Assert
        assert delivery.email_sent is False
        assert delivery.email_error == "Mock email failure"
        assert delivery.invitation.status == InvitationStatus.EMAIL_FAILED

    @pytest.mark.asyncio
    async def test_notifier_exception_is_treated_as_failure(self, unit_env):
        """A raising notifier never fails the command."""
        # Arrange
        service = await unit_env.get(InvitationService)
        notifier = await unit_env.get(MockEmailNotifier)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        notifier.raise_next = True

        # Act
        delivery = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )

        # Assert
        assert delivery.email_sent is False
        assert "exploded" in delivery.email_error
        assert delivery.invitation.status == InvitationStatus.EMAIL_FAILED


class TestResendInvitation:
    """Tests for resend_invitation."""

    @pytest.mark.asyncio
    async def test_resend_refreshes_window_and_keeps_token(self, unit_env):
        """Resend restarts the 14-day window from now."""
        # Arrange
        service = await unit_env.get(InvitationService)
        clock = await unit_env.get(FrozenClock)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )
        clock.advance(days=5)

        # Act
        delivery = await service.resend_invitation(coach.account_id, created.invitation.id)

        # Assert
        assert delivery.email_sent is True
        assert delivery.invitation.status == InvitationStatus.PENDING
        assert delivery.invitation.sent_at == clock.now()
        assert delivery.invitation.expires_at == clock.now() + timedelta(days=14)
        assert delivery.invitation.token == created.invitation.token

    @pytest.mark.asyncio
    async def test_fifteen_day_old_invitation_is_expired_then_revived(self, unit_env):
        """After 15 days the invitation reads expired; resend makes it pending."""
        # Arrange
        service = await unit_env.get(InvitationService)
        machine = await unit_env.get(InvitationStateMachine)
        clock = await unit_env.get(FrozenClock)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )
        clock.advance(days=15)

        # Assert - expired on read
        stored = await service.get_invitation(coach.account_id, created.invitation.id)
        assert machine.derive_status(stored, clock.now()) == InvitationStatus.EXPIRED

        # Act
        delivery = await service.resend_invitation(coach.account_id, created.invitation.id)

        # Assert
        refreshed = delivery.invitation
        assert machine.derive_status(refreshed, clock.now()) == InvitationStatus.PENDING
        assert refreshed.expires_at == clock.now() + timedelta(days=14)

    @pytest.mark.asyncio
    async def test_email_failed_invitation_can_be_resent(self, unit_env):
        """An email_failed invitation goes back to pending on a successful resend."""
        # Arrange
        service = await unit_env.get(InvitationService)
        notifier = await unit_env.get(MockEmailNotifier)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        notifier.fail_next = 1
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )
        assert created.invitation.status == InvitationStatus.EMAIL_FAILED

        # Act
        delivery = await service.resend_invitation(coach.account_id, created.invitation.id)

        # Assert
        assert delivery.email_sent is True
        assert delivery.invitation.status == InvitationStatus.PENDING
        assert len(notifier.invitations) == 2

    @pytest.mark.asyncio
    async def test_resend_failure_marks_email_failed_again(self, unit_env):
        """A resend whose email fails leaves the invitation email_failed."""
        # Arrange
        service = await unit_env.get(InvitationService)
        notifier = await unit_env.get(MockEmailNotifier)
        clock = await unit_env.get(FrozenClock)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )
        resend_time = clock.advance(days=2)
        notifier.fail_next = 1

        # Act
        delivery = await service.resend_invitation(coach.account_id, created.invitation.id)

        # Assert
        assert delivery.email_sent is False
        assert delivery.invitation.status == InvitationStatus.EMAIL_FAILED
        assert delivery.invitation.sent_at == resend_time
        assert delivery.invitation.expires_at == resend_time + timedelta(days=14)

    @pytest.mark.asyncio
    async def test_email_failed_resend_that_fails_again_restarts_window(self, unit_env):
        """email_failed -> resend -> email fails: still email_failed, fresh window."""
        # Arrange
        service = await unit_env.get(InvitationService)
        notifier = await unit_env.get(MockEmailNotifier)
        clock = await unit_env.get(FrozenClock)
        repo = await unit_env.get(InvitationRepository)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        notifier.fail_next = 1
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )
        assert created.invitation.status == InvitationStatus.EMAIL_FAILED
        resend_time = clock.advance(hours=25)
        notifier.fail_next = 1

        # Act
        delivery = await service.resend_invitation(coach.account_id, created.invitation.id)

        # Assert
        stored = await repo.find_by_id(created.invitation.id)
        assert delivery.email_sent is False
        assert stored.status == InvitationStatus.EMAIL_FAILED
        assert stored.expires_at == resend_time + timedelta(days=14)
        assert len(notifier.invitations) == 2

    @pytest.mark.asyncio
    async def test_resend_cancelled_is_rejected(self, unit_env):
        """Cancelled invitations are terminal."""
        # Arrange
        service = await unit_env.get(InvitationService)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )
        await service.cancel_invitation(coach.account_id, created.invitation.id)

        # Act & Assert
        with pytest.raises(InvalidStateTransitionError, match="cancelled"):
            await service.resend_invitation(coach.account_id, created.invitation.id)

    @pytest.mark.asyncio
    async def test_resend_by_other_coach_is_not_found(self, unit_env):
        """Another coach cannot see or resend the invitation."""
        # Arrange
        service = await unit_env.get(InvitationService)
        db = await unit_env.get(InMemoryDatabase)
        owner = seed_coach(db, email="owner@example.com")
        other = seed_coach(db, email="other@example.com")
        created = await service.create_invitation(
            owner.account_id, Email("runner@example.com")
        )

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.resend_invitation(other.account_id, created.invitation.id)

    @pytest.mark.asyncio
    async def test_resend_unknown_invitation_is_not_found(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.resend_invitation(coach.account_id, InvitationId(uuid4()))

    @pytest.mark.asyncio
    async def test_resend_expired_conflicts_with_newer_pending(self, unit_env):
        """Reviving an expired invitation cannot create a second pending one."""
        # Arrange
        service = await unit_env.get(InvitationService)
        clock = await unit_env.get(FrozenClock)
        db = await unit_env.get(InMemoryDatabase)
        coach = seed_coach(db)
        old = await service.create_invitation(coach.account_id, Email("runner@example.com"))
        clock.advance(days=15)
        # Stored as expired so a fresh pending invitation may be created
        db.invitations[old.invitation.id] = old.invitation.model_copy(
            update={"status": InvitationStatus.EXPIRED}
        )
        await service.create_invitation(coach.account_id, Email("runner@example.com"))

        # Act & Assert
        with pytest.raises(DuplicatePendingInvitationError):
            await service.resend_invitation(coach.account_id, old.invitation.id)


class TestRotateTokenOnResend:
    """Token rotation is opt-in."""

    @pytest.mark.asyncio
    async def test_rotation_issues_new_token(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)
        service.rotate_token_on_resend = True
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )

        # Act
        delivery = await service.resend_invitation(coach.account_id, created.invitation.id)

        # Assert
        assert delivery.invitation.token != created.invitation.token
        with pytest.raises(NotFoundError):
            await service.get_by_token(created.invitation.token.root)


class TestCancelInvitation:
    """Tests for cancel_invitation."""

    @pytest.mark.asyncio
    async def test_cancel_pending(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )

        # Act
        cancelled = await service.cancel_invitation(coach.account_id, created.invitation.id)

        # Assert
        assert cancelled.status == InvitationStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_email_failed(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)
        notifier = await unit_env.get(MockEmailNotifier)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        notifier.fail_next = 1
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )

        # Act
        cancelled = await service.cancel_invitation(coach.account_id, created.invitation.id)

        # Assert
        assert cancelled.status == InvitationStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_expired_is_rejected(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)
        clock = await unit_env.get(FrozenClock)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )
        clock.advance(days=15)

        # Act & Assert
        with pytest.raises(InvalidStateTransitionError, match="expired"):
            await service.cancel_invitation(coach.account_id, created.invitation.id)

    @pytest.mark.asyncio
    async def test_cancelled_token_no_longer_validates_as_pending(self, unit_env):
        """The token still resolves but the invitation is cancelled."""
        # Arrange
        service = await unit_env.get(InvitationService)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )
        await service.cancel_invitation(coach.account_id, created.invitation.id)

        # Act
        found = await service.get_by_token(created.invitation.token.root)

        # Assert
        assert found.status == InvitationStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_frees_email_for_new_invitation(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )
        await service.cancel_invitation(coach.account_id, created.invitation.id)

        # Act
        again = await service.create_invitation(coach.account_id, Email("runner@example.com"))

        # Assert
        assert again.invitation.status == InvitationStatus.PENDING


class TestDeclineInvitation:
    """Tests for decline_invitation."""

    @pytest.mark.asyncio
    async def test_invitee_can_decline(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)
        db = await unit_env.get(InMemoryDatabase)
        coach = seed_coach(db)
        athlete = seed_athlete(db)
        created = await service.create_invitation(
            coach.account_id, Email(athlete.account.email.root)
        )

        # Act
        declined = await service.decline_invitation(
            athlete.account.id, created.invitation.token.root
        )

        # Assert
        assert declined.status == InvitationStatus.DECLINED

    @pytest.mark.asyncio
    async def test_other_account_cannot_decline(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)
        db = await unit_env.get(InMemoryDatabase)
        coach = seed_coach(db)
        stranger = seed_athlete(db, email="stranger@example.com")
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )

        # Act & Assert
        with pytest.raises(NotFoundError):
            await service.decline_invitation(
                stranger.account.id, created.invitation.token.root
            )


class TestGetByToken:
    """Tests for token lookup."""

    @pytest.mark.asyncio
    async def test_malformed_and_unknown_tokens_look_the_same(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)

        # Act & Assert
        with pytest.raises(NotFoundError) as malformed:
            await service.get_by_token("short")
        with pytest.raises(NotFoundError) as unknown:
            await service.get_by_token("x" * 43)

        assert str(malformed.value) == str(unknown.value)


class TestListInvitations:
    """Tests for listing."""

    @pytest.mark.asyncio
    async def test_list_newest_first_with_filters(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)
        clock = await unit_env.get(FrozenClock)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        for name in ("alpha", "bravo", "charlie"):
            await service.create_invitation(coach.account_id, Email(f"{name}@example.com"))
            clock.advance(minutes=1)
        charlie = (await service.list_invitations(coach.account_id, email="CHARLIE"))[0][0]
        await service.cancel_invitation(coach.account_id, charlie.id)

        # Act
        page, total = await service.list_invitations(coach.account_id, limit=2)
        pending, pending_total = await service.list_invitations(
            coach.account_id, status=InvitationStatus.PENDING
        )
        counts = await service.status_counts(coach.account_id)

        # Assert
        assert total == 3
        assert [i.email.root for i in page] == ["charlie@example.com", "bravo@example.com"]
        assert pending_total == 2
        assert {i.email.root for i in pending} == {"alpha@example.com", "bravo@example.com"}
        assert counts[InvitationStatus.PENDING] == 2
        assert counts[InvitationStatus.CANCELLED] == 1

    @pytest.mark.asyncio
    async def test_list_pending_for_account_skips_expired(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)
        clock = await unit_env.get(FrozenClock)
        db = await unit_env.get(InMemoryDatabase)
        old_coach = seed_coach(db, email="old@example.com")
        new_coach = seed_coach(db, email="new@example.com")
        athlete = seed_athlete(db)
        await service.create_invitation(old_coach.account_id, athlete.account.email)
        clock.advance(days=10)
        fresh = await service.create_invitation(new_coach.account_id, athlete.account.email)
        clock.advance(days=5)

        # Act
        inbox = await service.list_pending_for_account(athlete.account.id)

        # Assert
        assert [i.id for i in inbox] == [fresh.invitation.id]

    @pytest.mark.asyncio
    async def test_list_pending_for_unknown_account(self, unit_env):
        service = await unit_env.get(InvitationService)

        with pytest.raises(NotFoundError):
            await service.list_pending_for_account(AccountId(uuid4()))


class TestConditionalWrites:
    """Storage-level guards behind the service."""

    @pytest.mark.asyncio
    async def test_update_status_requires_expected_status(self, unit_env):
        # Arrange
        service = await unit_env.get(InvitationService)
        repo = await unit_env.get(InvitationRepository)
        clock = await unit_env.get(FrozenClock)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))
        created = await service.create_invitation(
            coach.account_id, Email("runner@example.com")
        )

        # Act
        result = await repo.update_status(
            created.invitation.id,
            expected=frozenset({InvitationStatus.EMAIL_FAILED}),
            status=InvitationStatus.CANCELLED,
            updated_at=clock.now(),
        )

        # Assert
        assert result is None
        assert (await repo.find_by_id(created.invitation.id)).status == InvitationStatus.PENDING

    @pytest.mark.asyncio
    async def test_coach_id_is_account_id(self, unit_env):
        """Invitations store the coach account id, not the profile id."""
        # Arrange
        service = await unit_env.get(InvitationService)
        coach = seed_coach(await unit_env.get(InMemoryDatabase))

        # Act
        delivery = await service.create_invitation(
            CoachAccountId(coach.account.id), Email("runner@example.com")
        )

        # Assert
        assert delivery.invitation.coach_id == coach.account.id
        assert delivery.invitation.coach_id != coach.profile.id

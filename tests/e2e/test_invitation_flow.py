"""End-to-end tests for the invitation lifecycle over HTTP."""

from dataclasses import dataclass

import pytest
from dishka.integrations.fastapi import FastapiProvider
from fastapi.testclient import TestClient

from coachlink.adapter.email import MockEmailNotifier
from coachlink.config import AuthSettings
from coachlink.domain.model import Account
from coachlink.domain.service import NotificationDispatcher
from coachlink.interface.api.app import create_app
from coachlink.persistence.repository.inmemory import InMemoryDatabase
from coachlink.util.clock import FrozenClock
from coachlink.util.jwt import create_token
from tests.conftest import seed_athlete, seed_coach
from tests.di import build_test_container


@dataclass
class Env:
    """Running app plus handles on its mocked components."""

    client: TestClient
    db: InMemoryDatabase
    clock: FrozenClock
    notifier: MockEmailNotifier
    dispatcher: NotificationDispatcher
    auth: AuthSettings

    def login(self, account: Account) -> None:
        """Set the session cookie for ``account``."""
        token = create_token(
            str(account.id), account.email.root, account.role.value, self.auth
        )
        self.client.cookies.set("auth_token", token)


@pytest.fixture
def env():
    """App wired to the mock container."""
    container = build_test_container(None, FastapiProvider())
    app = create_app(container)

    with TestClient(app) as client:
        yield Env(
            client=client,
            db=client.portal.call(container.get, InMemoryDatabase),
            clock=client.portal.call(container.get, FrozenClock),
            notifier=client.portal.call(container.get, MockEmailNotifier),
            dispatcher=client.portal.call(container.get, NotificationDispatcher),
            auth=client.portal.call(container.get, AuthSettings),
        )


class TestInvitationFlow:
    """Coach invites, athlete validates and accepts."""

    def test_invite_validate_accept(self, env):
        # Arrange
        coach = seed_coach(env.db)
        athlete = seed_athlete(env.db)

        # Act - coach invites
        env.login(coach.account)
        created = env.client.post(
            "/invitations/",
            json={"email": "Athlete@Example.com", "message": "Welcome!"},
        )

        # Assert
        assert created.status_code == 201
        body = created.json()
        assert body["email_sent"] is True
        assert body["invitation"]["status"] == "pending"
        assert "token" not in body["invitation"]
        token = env.notifier.invitations[0]["token"].root

        # Act - anyone can validate the link
        env.client.cookies.clear()
        validated = env.client.get(f"/invitations/validate/{token}")

        # Assert
        assert validated.status_code == 200
        assert validated.json()["valid"] is True
        assert validated.json()["coach"]["name"] == "Jane Runner"
        assert validated.json()["has_account"] is True

        # Act - athlete accepts
        env.login(athlete.account)
        accepted = env.client.post(
            "/invitations/accept",
            json={
                "token": token,
                "athlete_id": str(athlete.profile.id),
                "terms_version": "1.0",
            },
        )

        # Assert
        assert accepted.status_code == 200
        assert accepted.json()["coach_id"] == str(coach.profile.id)
        assert accepted.json()["profile_linked"] is True
        assert env.db.athlete_profiles[athlete.profile.id].coach_id == coach.profile.id

        # Act - accepting again conflicts
        again = env.client.post(
            "/invitations/accept",
            json={
                "token": token,
                "athlete_id": str(athlete.profile.id),
                "terms_version": "1.0",
            },
        )

        # Assert
        assert again.status_code == 409

    def test_accept_is_committed_before_coach_is_notified(self, env):
        # Arrange
        coach = seed_coach(env.db)
        athlete = seed_athlete(env.db)
        env.login(coach.account)
        env.client.post("/invitations/", json={"email": "athlete@example.com"})
        token = env.notifier.invitations[0]["token"].root
        commits_before_accept = env.db.commits
        commits_at_notice = []
        original_notice = env.notifier.send_acceptance_notice

        async def recording_notice(**kwargs):
            commits_at_notice.append(env.db.commits)
            return await original_notice(**kwargs)

        env.notifier.send_acceptance_notice = recording_notice

        # Act
        env.login(athlete.account)
        accepted = env.client.post(
            "/invitations/accept",
            json={
                "token": token,
                "athlete_id": str(athlete.profile.id),
                "terms_version": "1.0",
            },
        )
        env.client.portal.call(env.dispatcher.drain)

        # Assert
        assert accepted.status_code == 200
        assert commits_at_notice == [commits_before_accept + 1]

    def test_coach_dashboard_and_cancel(self, env):
        # Arrange
        coach = seed_coach(env.db)
        env.login(coach.account)
        created = env.client.post("/invitations/", json={"email": "runner@example.com"})
        invitation_id = created.json()["invitation"]["invitation_id"]

        # Act
        listed = env.client.get("/invitations/", params={"status": "pending"})
        cancelled = env.client.delete(f"/invitations/{invitation_id}")
        cancelled_again = env.client.delete(f"/invitations/{invitation_id}")

        # Assert
        assert listed.status_code == 200
        assert listed.json()["total"] == 1
        assert listed.json()["stats"]["pending"] == 1
        assert cancelled.status_code == 200
        assert cancelled.json()["invitation"]["status"] == "cancelled"
        assert cancelled_again.status_code == 409

    def test_resend_after_expiry(self, env):
        # Arrange
        coach = seed_coach(env.db)
        env.login(coach.account)
        created = env.client.post("/invitations/", json={"email": "runner@example.com"})
        invitation_id = created.json()["invitation"]["invitation_id"]
        env.clock.advance(days=15)

        # Act
        resent = env.client.patch(f"/invitations/{invitation_id}/resend")

        # Assert
        assert resent.status_code == 200
        assert resent.json()["invitation"]["effective_status"] == "pending"
        assert len(env.notifier.invitations) == 2
        assert env.notifier.invitations[0]["token"] == env.notifier.invitations[1]["token"]

    def test_athlete_declines_from_inbox(self, env):
        # Arrange
        coach = seed_coach(env.db)
        athlete = seed_athlete(env.db)
        env.login(coach.account)
        env.client.post("/invitations/", json={"email": athlete.account.email.root})

        # Act
        env.login(athlete.account)
        inbox = env.client.get("/invitations/pending")
        token = inbox.json()["invitations"][0]["token"]
        declined = env.client.post("/invitations/decline", json={"token": token})
        inbox_after = env.client.get("/invitations/pending")

        # Assert
        assert inbox.json()["total"] == 1
        assert declined.status_code == 200
        assert declined.json()["status"] == "declined"
        assert inbox_after.json()["total"] == 0


class TestInvitationErrors:
    """HTTP status mapping for rejected requests."""

    def test_requires_session(self, env):
        response = env.client.get("/invitations/")

        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"

    def test_invalid_session(self, env):
        env.client.cookies.set("auth_token", "not-a-jwt")

        response = env.client.get("/invitations/pending")

        assert response.status_code == 401

    def test_invalid_email_is_bad_request(self, env):
        coach = seed_coach(env.db)
        env.login(coach.account)

        response = env.client.post("/invitations/", json={"email": "nope"})

        assert response.status_code == 400

    def test_duplicate_pending_conflicts(self, env):
        coach = seed_coach(env.db)
        env.login(coach.account)
        env.client.post("/invitations/", json={"email": "runner@example.com"})

        response = env.client.post("/invitations/", json={"email": "runner@example.com"})

        assert response.status_code == 409

    def test_coach_without_profile_is_unprocessable(self, env):
        coach = seed_coach(env.db, with_profile=False)
        env.login(coach.account)

        response = env.client.post("/invitations/", json={"email": "runner@example.com"})

        assert response.status_code == 422

    def test_malformed_and_unknown_tokens_look_the_same(self, env):
        malformed = env.client.get("/invitations/validate/bad!")
        unknown = env.client.get(f"/invitations/validate/{'x' * 43}")

        assert malformed.status_code == unknown.status_code == 404
        assert malformed.json() == unknown.json()

    def test_other_coaches_invitation_is_not_found(self, env):
        # Arrange
        owner = seed_coach(env.db)
        intruder = seed_coach(env.db, email="intruder@example.com")
        env.login(owner.account)
        created = env.client.post("/invitations/", json={"email": "runner@example.com"})
        invitation_id = created.json()["invitation"]["invitation_id"]

        # Act
        env.login(intruder.account)
        response = env.client.delete(f"/invitations/{invitation_id}")

        # Assert
        assert response.status_code == 404

    def test_broken_coach_reference_hides_details(self, env):
        # Arrange
        coach = seed_coach(env.db)
        env.login(coach.account)
        env.client.post("/invitations/", json={"email": "runner@example.com"})
        token = env.notifier.invitations[0]["token"].root
        del env.db.coach_profiles[coach.profile.id]

        # Act
        response = env.client.get(f"/invitations/validate/{token}")

        # Assert
        assert response.status_code == 500
        assert response.json()["detail"] == (
            "Invitation data is inconsistent, please contact support"
        )

    def test_stale_terms_are_unprocessable(self, env):
        coach = seed_coach(env.db)
        athlete = seed_athlete(env.db)
        env.login(coach.account)
        env.client.post("/invitations/", json={"email": athlete.account.email.root})
        token = env.notifier.invitations[0]["token"].root

        env.login(athlete.account)
        response = env.client.post(
            "/invitations/accept",
            json={
                "token": token,
                "athlete_id": str(athlete.profile.id),
                "terms_version": "0.9",
            },
        )

        assert response.status_code == 422


class TestHealth:
    """Health endpoint."""

    def test_health(self, env):
        response = env.client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["notifications_in_flight"] == 0

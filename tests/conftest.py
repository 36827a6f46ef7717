"""Test configuration and shared seed helpers."""

from dataclasses import dataclass
from datetime import date
from uuid import uuid4

from coachlink.domain.model import Account, AthleteProfile, CoachProfile
from coachlink.domain.value import (
    AccountId,
    AccountRole,
    AthleteProfileId,
    CoachAccountId,
    CoachProfileId,
    Email,
)
from coachlink.persistence.repository.inmemory import InMemoryDatabase


@dataclass
class SeededCoach:
    """Coach account plus profile."""

    account: Account
    profile: CoachProfile

    @property
    def account_id(self) -> CoachAccountId:
        return CoachAccountId(self.account.id)


@dataclass
class SeededAthlete:
    """Athlete account plus profile."""

    account: Account
    profile: AthleteProfile


def seed_coach(
    db: InMemoryDatabase,
    email: str = "coach@example.com",
    first_name: str | None = "Jane",
    last_name: str | None = "Runner",
    with_profile: bool = True,
) -> SeededCoach:
    """Store a coach account and (by default) its coach profile."""
    account = Account(
        id=AccountId(uuid4()),
        email=Email(email),
        role=AccountRole.COACH,
        first_name=first_name,
        last_name=last_name,
    )
    db.accounts[account.id] = account

    profile = CoachProfile(
        id=CoachProfileId(uuid4()),
        account_id=account.id,
        workspace_slug=f"coach-{str(account.id)[:8]}",
        qualifications=["UESCA Running Coach"],
        specializations=["marathon"],
        coaching_philosophy="Consistency over intensity",
        years_experience=8,
    )
    if with_profile:
        db.coach_profiles[profile.id] = profile
    return SeededCoach(account=account, profile=profile)


def seed_athlete(
    db: InMemoryDatabase,
    email: str = "athlete@example.com",
    first_name: str | None = "Sam",
    last_name: str | None = "Strider",
    with_profile: bool = True,
) -> SeededAthlete:
    """Store an athlete account and (by default) its athlete profile."""
    account = Account(
        id=AccountId(uuid4()),
        email=Email(email),
        role=AccountRole.ATHLETE,
        first_name=first_name,
        last_name=last_name,
    )
    db.accounts[account.id] = account

    profile = AthleteProfile(
        id=AthleteProfileId(uuid4()),
        account_id=account.id,
        experience_level="intermediate",
        goal_race_distance="Marathon",
        goal_race_date=date(2025, 10, 12),
    )
    if with_profile:
        db.athlete_profiles[profile.id] = profile
    return SeededAthlete(account=account, profile=profile)

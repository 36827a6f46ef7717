"""In-memory profile repositories for testing."""

from typing import Optional

from coachlink.domain.model.profile import AthleteProfile, CoachProfile
from coachlink.domain.repository.profile import (
    AthleteProfileRepository,
    CoachProfileRepository,
)
from coachlink.domain.value import AccountId, AthleteProfileId, CoachProfileId

from .database import InMemoryDatabase


class InMemoryCoachProfileRepository(CoachProfileRepository):
    """In-memory implementation of CoachProfileRepository for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database

    async def find_by_account_id(self, account_id: AccountId) -> Optional[CoachProfile]:
        """Resolve the coach profile belonging to an account."""
        for profile in self._db.coach_profiles.values():
            if profile.account_id == account_id:
                return profile
        return None

    async def save(self, profile: CoachProfile) -> CoachProfile:
        """Create or update a coach profile."""
        self._db.coach_profiles[profile.id] = profile
        return profile


class InMemoryAthleteProfileRepository(AthleteProfileRepository):
    """In-memory implementation of AthleteProfileRepository for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database

    async def find_by_id(self, athlete_id: AthleteProfileId) -> Optional[AthleteProfile]:
        """Find an athlete profile by ID."""
        return self._db.athlete_profiles.get(athlete_id)

    async def link_coach(
        self, athlete_id: AthleteProfileId, coach_id: CoachProfileId
    ) -> Optional[AthleteProfile]:
        """Record the athlete's current coach."""
        current = self._db.athlete_profiles.get(athlete_id)
        if current is None:
            return None
        updated = current.model_copy(update={"coach_id": coach_id})
        self._db.athlete_profiles[athlete_id] = updated
        return updated

    async def save(self, profile: AthleteProfile) -> AthleteProfile:
        """Create or update an athlete profile."""
        self._db.athlete_profiles[profile.id] = profile
        return profile

"""Coach and athlete profile repository interfaces."""

from abc import ABC, abstractmethod

from coachlink.domain.model.profile import AthleteProfile, CoachProfile
from coachlink.domain.value import AccountId, AthleteProfileId, CoachProfileId


class CoachProfileRepository(ABC):
    """Repository for coach profiles."""

    @abstractmethod
    async def find_by_account_id(self, account_id: AccountId) -> CoachProfile | None:
        """Resolve the coach profile belonging to an account.

        Args:
            account_id: The coach's account id

        Returns:
            The coach profile if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, profile: CoachProfile) -> CoachProfile:
        """Create or update a coach profile."""
        pass


class AthleteProfileRepository(ABC):
    """Repository for athlete profiles."""

    @abstractmethod
    async def find_by_id(self, athlete_id: AthleteProfileId) -> AthleteProfile | None:
        """Find an athlete profile by ID."""
        pass

    @abstractmethod
    async def link_coach(
        self, athlete_id: AthleteProfileId, coach_id: CoachProfileId
    ) -> AthleteProfile | None:
        """Record the athlete's current coach.

        Args:
            athlete_id: Athlete profile to update
            coach_id: Coach *profile* id

        Returns:
            The updated profile, or None if the athlete profile is missing
        """
        pass

    @abstractmethod
    async def save(self, profile: AthleteProfile) -> AthleteProfile:
        """Create or update an athlete profile."""
        pass

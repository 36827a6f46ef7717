"""Coach and athlete profile read models."""

from datetime import date
from typing import Optional

from pydantic import Field

from coachlink.domain.model.common import DomainModel
from coachlink.domain.value import AccountId, AthleteProfileId, CoachProfileId


class CoachProfile(DomainModel):
    """Coach profile, keyed by its own id and linked to one account."""

    id: CoachProfileId
    account_id: AccountId
    workspace_slug: Optional[str] = None
    qualifications: list[str] = Field(default_factory=list)
    specializations: list[str] = Field(default_factory=list)
    coaching_philosophy: Optional[str] = None
    years_experience: Optional[int] = Field(default=None, ge=0)
    profile_photo_url: Optional[str] = None


class AthleteProfile(DomainModel):
    """Athlete profile.

    ``coach_id`` is the coach *profile* id of the athlete's current coach.
    """

    id: AthleteProfileId
    account_id: AccountId
    coach_id: Optional[CoachProfileId] = None
    experience_level: Optional[str] = None
    goal_race_distance: Optional[str] = None
    goal_race_date: Optional[date] = None

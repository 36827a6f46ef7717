"""Domain model entities for coachlink."""

from coachlink.domain.model.account import Account
from coachlink.domain.model.invitation import Invitation
from coachlink.domain.model.profile import AthleteProfile, CoachProfile
from coachlink.domain.model.relationship import Relationship

__all__ = [
    "Account",
    "AthleteProfile",
    "CoachProfile",
    "Invitation",
    "Relationship",
]

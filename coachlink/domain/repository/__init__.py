"""Repository interfaces for the coachlink domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from coachlink.domain.repository.account import AccountRepository
from coachlink.domain.repository.invitation import InvitationRepository
from coachlink.domain.repository.profile import (
    AthleteProfileRepository,
    CoachProfileRepository,
)
from coachlink.domain.repository.relationship import RelationshipRepository
from coachlink.domain.repository.transaction import TransactionManager

__all__ = [
    "AccountRepository",
    "AthleteProfileRepository",
    "CoachProfileRepository",
    "InvitationRepository",
    "RelationshipRepository",
    "TransactionManager",
]

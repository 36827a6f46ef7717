"""In-memory repository implementations for testing."""

from .account import InMemoryAccountRepository
from .database import InMemoryDatabase
from .invitation import InMemoryInvitationRepository
from .profile import InMemoryAthleteProfileRepository, InMemoryCoachProfileRepository
from .relationship import InMemoryRelationshipRepository
from .transaction import InMemoryTransactionManager

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryAthleteProfileRepository",
    "InMemoryCoachProfileRepository",
    "InMemoryDatabase",
    "InMemoryInvitationRepository",
    "InMemoryRelationshipRepository",
    "InMemoryTransactionManager",
]

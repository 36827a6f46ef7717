"""PostgreSQL repository implementations."""

from coachlink.persistence.repository.account import PostgresAccountRepository
from coachlink.persistence.repository.invitation import PostgresInvitationRepository
from coachlink.persistence.repository.profile import (
    PostgresAthleteProfileRepository,
    PostgresCoachProfileRepository,
)
from coachlink.persistence.repository.relationship import (
    PostgresRelationshipRepository,
)
from coachlink.persistence.repository.transaction import PostgresTransactionManager

__all__ = [
    "PostgresAccountRepository",
    "PostgresAthleteProfileRepository",
    "PostgresCoachProfileRepository",
    "PostgresInvitationRepository",
    "PostgresRelationshipRepository",
    "PostgresTransactionManager",
]

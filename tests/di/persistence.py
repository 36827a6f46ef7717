"""Mock persistence providers for testing."""

from dishka import Scope, provide

from coachlink.domain.repository import (
    AccountRepository,
    AthleteProfileRepository,
    CoachProfileRepository,
    InvitationRepository,
    RelationshipRepository,
    TransactionManager,
)
from coachlink.persistence.repository.inmemory import (
    InMemoryAccountRepository,
    InMemoryAthleteProfileRepository,
    InMemoryCoachProfileRepository,
    InMemoryDatabase,
    InMemoryInvitationRepository,
    InMemoryRelationshipRepository,
    InMemoryTransactionManager,
)
from coachlink.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    One ``InMemoryDatabase`` per container (APP scope) so data survives
    across requests in e2e tests; each test builds its own container.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_database(self) -> InMemoryDatabase:
        """Provide the shared in-memory store."""
        return InMemoryDatabase()

    @provide(scope=Scope.REQUEST)
    def get_account_repository(self, database: InMemoryDatabase) -> AccountRepository:
        """Provide in-memory account repository."""
        return InMemoryAccountRepository(database)

    @provide(scope=Scope.REQUEST)
    def get_coach_profile_repository(
        self, database: InMemoryDatabase
    ) -> CoachProfileRepository:
        """Provide in-memory coach profile repository."""
        return InMemoryCoachProfileRepository(database)

    @provide(scope=Scope.REQUEST)
    def get_athlete_profile_repository(
        self, database: InMemoryDatabase
    ) -> AthleteProfileRepository:
        """Provide in-memory athlete profile repository."""
        return InMemoryAthleteProfileRepository(database)

    @provide(scope=Scope.REQUEST)
    def get_invitation_repository(
        self, database: InMemoryDatabase
    ) -> InvitationRepository:
        """Provide in-memory invitation repository."""
        return InMemoryInvitationRepository(database)

    @provide(scope=Scope.REQUEST)
    def get_relationship_repository(
        self, database: InMemoryDatabase
    ) -> RelationshipRepository:
        """Provide in-memory relationship repository."""
        return InMemoryRelationshipRepository(database)

    @provide(scope=Scope.REQUEST)
    def get_transaction_manager(self, database: InMemoryDatabase) -> TransactionManager:
        """Provide snapshot-restoring transaction manager."""
        return InMemoryTransactionManager(database)

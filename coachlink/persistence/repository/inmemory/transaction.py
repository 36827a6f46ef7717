"""In-memory transaction manager for testing."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from coachlink.domain.repository import TransactionManager

from .database import InMemoryDatabase


class InMemoryTransactionManager(TransactionManager):
    """Restores a snapshot of the store when the block raises."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        snapshot = self.database.snapshot()
        try:
            yield
        except BaseException:
            self.database.restore(snapshot)
            raise

    async def commit(self) -> None:
        # Writes are visible as soon as they are made
        self.database.commits += 1

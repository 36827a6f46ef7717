"""PostgreSQL transaction manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from coachlink.domain.repository import TransactionManager


class PostgresTransactionManager(TransactionManager):
    """Maps domain transactions onto savepoints of the request session.

    A savepoint rolls back only the writes made inside it. ``commit``
    commits the request session early; whatever is left uncommitted is
    committed when the request ends.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with self.session.begin_nested():
            yield

    async def commit(self) -> None:
        """Commit the request session; later writes open a new transaction."""
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

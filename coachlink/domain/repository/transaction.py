"""Transaction boundary interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class TransactionManager(ABC):
    """Groups repository writes into one all-or-nothing unit.

    Leaving the context normally keeps the writes; leaving it with an
    exception discards every write made inside it.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Open a (possibly nested) transaction."""
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Make every write so far durable.

        Called before anything outside the service learns about the writes,
        such as an email pointing at them.
        """
        pass

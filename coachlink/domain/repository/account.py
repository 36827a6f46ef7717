"""Account repository interface."""

from abc import ABC, abstractmethod

from coachlink.domain.model.account import Account
from coachlink.domain.value import AccountId, Email


class AccountRepository(ABC):
    """Read access to accounts owned by the identity layer."""

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Account | None:
        """Find an account by ID."""
        pass

    @abstractmethod
    async def find_by_email(self, email: Email) -> Account | None:
        """Find an account by its (normalized) email."""
        pass

    @abstractmethod
    async def save(self, account: Account) -> Account:
        """Create or update an account."""
        pass

"""In-memory account repository for testing."""

from typing import Optional

from coachlink.domain.model.account import Account
from coachlink.domain.repository.account import AccountRepository
from coachlink.domain.value import AccountId, Email

from .database import InMemoryDatabase


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID."""
        return self._db.accounts.get(account_id)

    async def find_by_email(self, email: Email) -> Optional[Account]:
        """Find an account by its normalized email."""
        for account in self._db.accounts.values():
            if account.email == email:
                return account
        return None

    async def save(self, account: Account) -> Account:
        """Create or update an account."""
        self._db.accounts[account.id] = account
        return account

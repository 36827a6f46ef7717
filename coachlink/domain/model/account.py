"""Account read model.

Accounts are issued by the identity layer; this subsystem only reads them
to resolve contact details and to decide between sign-up and sign-in.
"""

from typing import Optional

from coachlink.domain.model.common import DomainModel
from coachlink.domain.value import AccountId, AccountRole, Email


class Account(DomainModel):
    """Platform account."""

    id: AccountId
    email: Email
    role: AccountRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Full name, falling back to the email address."""
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else self.email.root

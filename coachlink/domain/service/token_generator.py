"""Invitation token generation."""

import secrets

from coachlink.domain.value import InvitationToken

from .base import Service


class TokenGenerator(Service):
    """Issues unguessable, URL-safe bearer tokens.

    Tokens carry ``token_bytes`` bytes of entropy and are treated like a
    session secret. Uniqueness is also enforced by storage.
    """

    def __init__(self, token_bytes: int = 32) -> None:
        self.token_bytes = token_bytes

    def generate(self) -> InvitationToken:
        """Generate a new invitation token."""
        return InvitationToken(secrets.token_urlsafe(self.token_bytes))

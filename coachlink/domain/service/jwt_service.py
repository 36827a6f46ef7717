"""JWT token domain service."""

import logfire

from coachlink.config import AuthSettings
from coachlink.util.jwt import JWTError, TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for JWT token operations."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, user_id: str, email: str, role: str) -> str:
        """Create JWT token for an account.

        Args:
            user_id: Account ID
            email: Account email
            role: Account role

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_token", user_id=user_id, role=role):
            token = create_token(user_id, email, role, self.auth_settings)
            logfire.info("JWT token created", user_id=user_id, role=role)
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
                logfire.info("JWT token verified", user_id=payload.user_id)
                return payload
            except JWTError as e:
                logfire.warn("JWT token rejected", error=str(e))
                raise

    def verify_cookie(self, auth_token: str | None) -> TokenPayload:
        """Verify the ``auth_token`` session cookie.

        Args:
            auth_token: Cookie value, if the request carried one

        Returns:
            Token payload

        Raises:
            JWTError: If the cookie is missing, invalid or expired
        """
        if not auth_token:
            raise JWTError("Not authenticated")
        return self.verify_token(auth_token)

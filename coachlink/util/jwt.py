"""JWT token utilities.

Session cookies are issued by the identity layer. ``create_token`` exists
for that layer and for tests; this service itself only verifies.
"""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel, ValidationError

from coachlink.config import AuthSettings
from coachlink.util.error import UtilError


class TokenPayload(BaseModel):
    """JWT token payload."""

    user_id: str
    email: str
    role: str
    exp: datetime


class JWTError(UtilError):
    """JWT-related error."""

    pass


def create_token(user_id: str, email: str, role: str, settings: AuthSettings) -> str:
    """Create a JWT token for an account.

    Args:
        user_id: Account ID
        email: Account email
        role: Account role (coach, athlete, admin)
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    expiry = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expiry_days)

    payload = {
        "user_id": user_id,
        "email": email,
        "role": role,
        "exp": expiry,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a JWT token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except (jwt.InvalidTokenError, ValidationError):
        # Signed tokens missing claims are rejected like forged ones
        raise JWTError("Invalid token")

"""Domain value objects for coachlink.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from datetime import date
from enum import Enum

from pydantic import Field, field_validator

from coachlink.domain.value.common import RootValueObject, ValueObject


class InvitationStatus(str, Enum):
    """Status of a coach-to-athlete invitation.

    ``EXPIRED`` can be stored, but is normally derived at read time from a
    pending invitation whose window has closed.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    EMAIL_FAILED = "email_failed"


class RelationshipStatus(str, Enum):
    """Status of a coach-athlete relationship."""

    ACTIVE = "active"


class AccountRole(str, Enum):
    """Role of a platform account."""

    COACH = "coach"
    ATHLETE = "athlete"
    ADMIN = "admin"


class InvitationToken(RootValueObject[str]):
    """URL-safe bearer token addressing one invitation."""

    @field_validator("root")
    @classmethod
    def validate_token_format(cls, v: str) -> str:
        """Validate token is URL-safe and within length limits."""
        if not re.fullmatch(r"[A-Za-z0-9_\-]{16,255}", v):
            raise ValueError("Token must be 16-255 URL-safe characters")
        return v

    def masked(self) -> str:
        """Return a log-safe prefix of the token."""
        return self.root[:8] + "..."


class Email(RootValueObject[str]):
    """Email address, lower-cased and stripped on construction."""

    @field_validator("root", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize case and surrounding whitespace."""
        if isinstance(v, str):
            v = v.strip().lower()
        return v

    @field_validator("root")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        """Validate the address has a local part and a dotted domain."""
        if len(v) > 320 or not re.fullmatch(r"[^@\s]+@[^@\s]+\.[^@\s]+", v):
            raise ValueError("Invalid email address")
        return v


class CoachSummary(ValueObject):
    """Public view of the inviting coach, shown on the invitation page."""

    name: str
    first_name: str | None = None
    last_name: str | None = None
    email: str
    photo_url: str | None = None
    qualifications: list[str] = Field(default_factory=list)
    specializations: list[str] = Field(default_factory=list)
    philosophy: str | None = None
    years_experience: int | None = None
    workspace_slug: str | None = None


class ContactInfo(ValueObject):
    """Name and address used when emailing a person."""

    name: str
    email: str


class AcceptanceContext(ValueObject):
    """Athlete details included in the acceptance notice to the coach."""

    accepted_at: str
    athlete_profile_url: str
    experience_level: str | None = None
    goal_race_distance: str | None = None
    goal_race_date: date | None = None


class CoachDisplayInfo(ValueObject):
    """How the inviting coach is presented in the invitation email."""

    name: str
    email: str
    qualifications: list[str] = Field(default_factory=list)

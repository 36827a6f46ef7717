"""Domain value objects for coachlink."""

from coachlink.domain.value.identifiers import (
    AccountId,
    AthleteProfileId,
    CoachAccountId,
    CoachProfileId,
    InvitationId,
    RelationshipId,
)
from coachlink.domain.value.types import (
    AcceptanceContext,
    AccountRole,
    CoachDisplayInfo,
    CoachSummary,
    ContactInfo,
    Email,
    InvitationStatus,
    InvitationToken,
    RelationshipStatus,
)

__all__ = [
    # Identifiers
    "AccountId",
    "CoachAccountId",
    "CoachProfileId",
    "AthleteProfileId",
    "InvitationId",
    "RelationshipId",
    # Types
    "AcceptanceContext",
    "AccountRole",
    "CoachDisplayInfo",
    "CoachSummary",
    "ContactInfo",
    "Email",
    "InvitationStatus",
    "InvitationToken",
    "RelationshipStatus",
]

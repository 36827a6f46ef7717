"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from coachlink.domain.model import (
    Account,
    AthleteProfile,
    CoachProfile,
    Invitation,
    Relationship,
)
from coachlink.domain.value import (
    AccountId,
    AccountRole,
    AthleteProfileId,
    CoachAccountId,
    CoachProfileId,
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    RelationshipId,
    RelationshipStatus,
)


def _uuid(value: Any) -> UUID | None:
    """Normalize a UUID column value, which asyncpg may return as str."""
    if value is None:
        return None
    return UUID(value) if isinstance(value, str) else value


def row_to_invitation(row: Dict[str, Any]) -> Invitation:
    """Convert database row to Invitation domain model.

    Args:
        row: Database row as dict

    Returns:
        Invitation domain model
    """
    athlete_id = _uuid(row.get("athlete_id"))
    return Invitation(
        id=InvitationId(_uuid(row["id"])),
        coach_id=CoachAccountId(_uuid(row["coach_id"])),
        email=Email(row["email"]),
        message=row.get("message"),
        token=InvitationToken(root=row["token"]),
        status=InvitationStatus(row["status"]),
        sent_at=row.get("sent_at"),
        expires_at=row.get("expires_at"),
        accepted_at=row.get("accepted_at"),
        athlete_id=AthleteProfileId(athlete_id) if athlete_id else None,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def invitation_to_dict(invitation: Invitation) -> Dict[str, Any]:
    """Convert Invitation domain model to database dict.

    Args:
        invitation: Invitation domain model

    Returns:
        Dict suitable for database insertion/update
    """
    # Email and InvitationToken dump to their root strings
    data = invitation.model_dump()
    data["status"] = invitation.status.value
    return data


def row_to_relationship(row: Dict[str, Any]) -> Relationship:
    """Convert database row to Relationship domain model."""
    return Relationship(
        id=RelationshipId(_uuid(row["id"])),
        coach_id=CoachProfileId(_uuid(row["coach_id"])),
        athlete_id=AthleteProfileId(_uuid(row["athlete_id"])),
        invitation_id=InvitationId(_uuid(row["invitation_id"])),
        terms_accepted_at=row["terms_accepted_at"],
        terms_version=row["terms_version"],
        status=RelationshipStatus(row["status"]),
        created_at=row["created_at"],
    )


def relationship_to_dict(relationship: Relationship) -> Dict[str, Any]:
    """Convert Relationship domain model to database dict."""
    data = relationship.model_dump()
    data["status"] = relationship.status.value
    return data


def row_to_account(row: Dict[str, Any]) -> Account:
    """Convert database row to Account domain model."""
    return Account(
        id=AccountId(_uuid(row["id"])),
        email=Email(row["email"]),
        role=AccountRole(row["role"]),
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
    )


def account_to_dict(account: Account) -> Dict[str, Any]:
    """Convert Account domain model to database dict."""
    data = account.model_dump()
    data["role"] = account.role.value
    return data


def row_to_coach_profile(row: Dict[str, Any]) -> CoachProfile:
    """Convert database row to CoachProfile domain model."""
    return CoachProfile(
        id=CoachProfileId(_uuid(row["id"])),
        account_id=AccountId(_uuid(row["account_id"])),
        workspace_slug=row.get("workspace_slug"),
        qualifications=list(row.get("qualifications") or []),
        specializations=list(row.get("specializations") or []),
        coaching_philosophy=row.get("coaching_philosophy"),
        years_experience=row.get("years_experience"),
        profile_photo_url=row.get("profile_photo_url"),
    )


def coach_profile_to_dict(profile: CoachProfile) -> Dict[str, Any]:
    """Convert CoachProfile domain model to database dict."""
    return profile.model_dump()


def row_to_athlete_profile(row: Dict[str, Any]) -> AthleteProfile:
    """Convert database row to AthleteProfile domain model."""
    coach_id = _uuid(row.get("coach_id"))
    return AthleteProfile(
        id=AthleteProfileId(_uuid(row["id"])),
        account_id=AccountId(_uuid(row["account_id"])),
        coach_id=CoachProfileId(coach_id) if coach_id else None,
        experience_level=row.get("experience_level"),
        goal_race_distance=row.get("goal_race_distance"),
        goal_race_date=row.get("goal_race_date"),
    )


def athlete_profile_to_dict(profile: AthleteProfile) -> Dict[str, Any]:
    """Convert AthleteProfile domain model to database dict."""
    return profile.model_dump()

"""SQLAlchemy table definitions for Coachlink.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# ACCOUNTS TABLE (owned by the identity layer, read here)
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("email", String(320), nullable=False, unique=True),  # Lower-cased
    Column(
        "role",
        postgresql.ENUM(
            "coach", "athlete", "admin", name="account_role", create_type=False
        ),
        nullable=False,
    ),
    Column("first_name", String(100), nullable=True),
    Column("last_name", String(100), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# COACH PROFILES TABLE
# ============================================================================
coach_profiles_table = Table(
    "coach_profiles",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "account_id",
        UUID,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("workspace_slug", String(100), nullable=True, unique=True),
    Column("qualifications", postgresql.ARRAY(Text), nullable=False, server_default="{}"),
    Column(
        "specializations", postgresql.ARRAY(Text), nullable=False, server_default="{}"
    ),
    Column("coaching_philosophy", Text, nullable=True),
    Column("years_experience", Integer, nullable=True),
    Column("profile_photo_url", Text, nullable=True),
)

# ============================================================================
# ATHLETE PROFILES TABLE
# ============================================================================
athlete_profiles_table = Table(
    "athlete_profiles",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "account_id",
        UUID,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    # Current coach, by coach *profile* id
    Column(
        "coach_id",
        UUID,
        ForeignKey("coach_profiles.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("experience_level", String(50), nullable=True),
    Column("goal_race_distance", String(50), nullable=True),
    Column("goal_race_date", Date, nullable=True),
)

Index("idx_athlete_profiles_coach_id", athlete_profiles_table.c.coach_id)

# ============================================================================
# INVITATIONS TABLE
# ============================================================================
invitations_table = Table(
    "invitations",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    # Inviting coach, by *account* id
    Column(
        "coach_id", UUID, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    ),
    Column("email", String(320), nullable=False),  # Lower-cased at creation
    Column("message", Text, nullable=True),
    Column("token", String(255), nullable=False, unique=True),
    Column(
        "status",
        postgresql.ENUM(
            "pending",
            "accepted",
            "declined",
            "expired",
            "cancelled",
            "email_failed",
            name="invitation_status",
            create_type=False,
        ),
        nullable=False,
        server_default="pending",
    ),
    Column("sent_at", TIMESTAMP(timezone=True), nullable=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column("accepted_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "athlete_id",
        UUID,
        ForeignKey("athlete_profiles.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_invitations_coach_created", invitations_table.c.coach_id, invitations_table.c.created_at.desc())
Index("idx_invitations_email_status", invitations_table.c.email, invitations_table.c.status)
# At most one pending invitation per (coach, email)
Index(
    "uq_invitations_pending_coach_email",
    invitations_table.c.coach_id,
    invitations_table.c.email,
    unique=True,
    postgresql_where=text("status = 'pending'"),
)

# ============================================================================
# RELATIONSHIPS TABLE
# ============================================================================
relationships_table = Table(
    "relationships",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "coach_id",
        UUID,
        ForeignKey("coach_profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "athlete_id",
        UUID,
        ForeignKey("athlete_profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "invitation_id",
        UUID,
        ForeignKey("invitations.id", ondelete="RESTRICT"),
        nullable=False,
    ),
    Column("terms_accepted_at", TIMESTAMP(timezone=True), nullable=False),
    Column("terms_version", String(20), nullable=False),
    Column(
        "status",
        postgresql.ENUM("active", name="relationship_status", create_type=False),
        nullable=False,
        server_default="active",
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("invitation_id", name="uq_relationships_invitation"),
)

Index("idx_relationships_coach_id", relationships_table.c.coach_id)
Index("idx_relationships_athlete_id", relationships_table.c.athlete_id)

"""initial_schema

Create the schema for coach-athlete invitations:
- Accounts (identity layer, read by this service)
- Coach profiles and athlete profiles
- Invitations (token-addressed, one pending per coach + email)
- Relationships (one per accepted invitation)

Revision ID: 3c1f5a9d2e47
Revises:
Create Date: 2025-11-02 10:14:52.481903

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f5a9d2e47"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Enable required extensions
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE account_role AS ENUM ('coach', 'athlete', 'admin');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE invitation_status AS ENUM (
                'pending', 'accepted', 'declined', 'expired', 'cancelled', 'email_failed'
            );
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE relationship_status AS ENUM ('active');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # ACCOUNTS table
    # ========================================================================
    op.create_table(
        "accounts",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column(
            "role",
            postgresql.ENUM(name="account_role", create_type=False),
            nullable=False,
        ),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_accounts_email"),
    )

    # ========================================================================
    # COACH_PROFILES table
    # ========================================================================
    op.create_table(
        "coach_profiles",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column("workspace_slug", sa.String(100), nullable=True),
        sa.Column(
            "qualifications",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "specializations",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("coaching_philosophy", sa.Text(), nullable=True),
        sa.Column("years_experience", sa.Integer(), nullable=True),
        sa.Column("profile_photo_url", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("account_id", name="uq_coach_profiles_account"),
        sa.UniqueConstraint("workspace_slug", name="uq_coach_profiles_workspace_slug"),
    )

    # ========================================================================
    # ATHLETE_PROFILES table
    # ========================================================================
    op.create_table(
        "athlete_profiles",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column("coach_id", sa.UUID(), nullable=True),  # Coach *profile* id
        sa.Column("experience_level", sa.String(50), nullable=True),
        sa.Column("goal_race_distance", sa.String(50), nullable=True),
        sa.Column("goal_race_date", sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["coach_id"], ["coach_profiles.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("account_id", name="uq_athlete_profiles_account"),
    )
    op.create_index(
        "idx_athlete_profiles_coach_id", "athlete_profiles", ["coach_id"]
    )

    # ========================================================================
    # INVITATIONS table
    # ========================================================================
    op.create_table(
        "invitations",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("coach_id", sa.UUID(), nullable=False),  # Coach *account* id
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("token", sa.String(255), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(name="invitation_status", create_type=False),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("sent_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("accepted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("athlete_id", sa.UUID(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["coach_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["athlete_id"], ["athlete_profiles.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token", name="uq_invitations_token"),
    )
    op.create_index(
        "idx_invitations_coach_created",
        "invitations",
        ["coach_id", sa.text("created_at DESC")],
    )
    op.create_index(
        "idx_invitations_email_status", "invitations", ["email", "status"]
    )

    # Partial unique constraint: only one pending invitation per coach + email
    op.execute("""
        CREATE UNIQUE INDEX uq_invitations_pending_coach_email
        ON invitations (coach_id, email)
        WHERE status = 'pending'
    """)

    # ========================================================================
    # RELATIONSHIPS table
    # ========================================================================
    op.create_table(
        "relationships",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("coach_id", sa.UUID(), nullable=False),  # Coach *profile* id
        sa.Column("athlete_id", sa.UUID(), nullable=False),
        sa.Column("invitation_id", sa.UUID(), nullable=False),
        sa.Column("terms_accepted_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("terms_version", sa.String(20), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(name="relationship_status", create_type=False),
            nullable=False,
            server_default="active",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(
            ["coach_id"], ["coach_profiles.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["athlete_id"], ["athlete_profiles.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["invitation_id"], ["invitations.id"], ondelete="RESTRICT"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invitation_id", name="uq_relationships_invitation"),
    )
    op.create_index("idx_relationships_coach_id", "relationships", ["coach_id"])
    op.create_index("idx_relationships_athlete_id", "relationships", ["athlete_id"])


def downgrade() -> None:
    """Downgrade schema."""
    # Drop tables (in reverse order of dependencies)
    op.drop_table("relationships")
    op.execute("DROP INDEX IF EXISTS uq_invitations_pending_coach_email")
    op.drop_table("invitations")
    op.drop_table("athlete_profiles")
    op.drop_table("coach_profiles")
    op.drop_table("accounts")

    # Drop ENUM types
    op.execute("DROP TYPE IF EXISTS relationship_status")
    op.execute("DROP TYPE IF EXISTS invitation_status")
    op.execute("DROP TYPE IF EXISTS account_role")

    # Drop extensions (commented out to avoid issues with shared extensions)
    # op.execute("DROP EXTENSION IF EXISTS \"uuid-ossp\"")

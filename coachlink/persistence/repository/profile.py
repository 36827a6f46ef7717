"""PostgreSQL implementations of coach and athlete profile repositories."""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from coachlink.domain.model import AthleteProfile, CoachProfile
from coachlink.domain.repository import (
    AthleteProfileRepository,
    CoachProfileRepository,
)
from coachlink.domain.value import AccountId, AthleteProfileId, CoachProfileId
from coachlink.persistence.mappers import (
    athlete_profile_to_dict,
    coach_profile_to_dict,
    row_to_athlete_profile,
    row_to_coach_profile,
)
from coachlink.persistence.tables import athlete_profiles_table, coach_profiles_table


class PostgresCoachProfileRepository(CoachProfileRepository):
    """PostgreSQL implementation of CoachProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_account_id(self, account_id: AccountId) -> Optional[CoachProfile]:
        """Resolve the coach profile belonging to an account."""
        stmt = select(coach_profiles_table).where(
            coach_profiles_table.c.account_id == account_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_coach_profile(dict(row)) if row else None

    async def save(self, profile: CoachProfile) -> CoachProfile:
        """Upsert a coach profile."""
        values = coach_profile_to_dict(profile)
        stmt = pg_insert(coach_profiles_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[coach_profiles_table.c.id],
            set_={k: v for k, v in values.items() if k != "id"},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return profile


class PostgresAthleteProfileRepository(AthleteProfileRepository):
    """PostgreSQL implementation of AthleteProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, athlete_id: AthleteProfileId) -> Optional[AthleteProfile]:
        """Find an athlete profile by ID."""
        stmt = select(athlete_profiles_table).where(
            athlete_profiles_table.c.id == athlete_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_athlete_profile(dict(row)) if row else None

    async def link_coach(
        self, athlete_id: AthleteProfileId, coach_id: CoachProfileId
    ) -> Optional[AthleteProfile]:
        """Record the athlete's current coach."""
        stmt = (
            update(athlete_profiles_table)
            .where(athlete_profiles_table.c.id == athlete_id)
            .values(coach_id=coach_id)
            .returning(athlete_profiles_table)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_athlete_profile(dict(row)) if row else None

    async def save(self, profile: AthleteProfile) -> AthleteProfile:
        """Upsert an athlete profile."""
        values = athlete_profile_to_dict(profile)
        stmt = pg_insert(athlete_profiles_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[athlete_profiles_table.c.id],
            set_={k: v for k, v in values.items() if k != "id"},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return profile

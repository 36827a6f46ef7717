"""PostgreSQL implementation of Relationship repository."""

from typing import Optional

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coachlink.domain.error import DuplicateRelationshipError
from coachlink.domain.model import Relationship
from coachlink.domain.repository import RelationshipRepository
from coachlink.domain.value import InvitationId
from coachlink.persistence.mappers import relationship_to_dict, row_to_relationship
from coachlink.persistence.tables import relationships_table


class PostgresRelationshipRepository(RelationshipRepository):
    """PostgreSQL implementation of RelationshipRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, relationship: Relationship) -> Relationship:
        """Insert a relationship.

        Raises:
            DuplicateRelationshipError: If ``uq_relationships_invitation`` rejects it
        """
        stmt = insert(relationships_table).values(**relationship_to_dict(relationship))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            if "uq_relationships_invitation" in str(e.orig):
                raise DuplicateRelationshipError(str(relationship.invitation_id)) from e
            raise
        return relationship

    async def find_by_invitation(
        self, invitation_id: InvitationId
    ) -> Optional[Relationship]:
        """Find the relationship created from an invitation."""
        stmt = select(relationships_table).where(
            relationships_table.c.invitation_id == invitation_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_relationship(dict(row)) if row else None

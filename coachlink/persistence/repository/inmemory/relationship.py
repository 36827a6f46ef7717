"""In-memory relationship repository for testing."""

from typing import Optional

from coachlink.domain.error import DuplicateRelationshipError
from coachlink.domain.model.relationship import Relationship
from coachlink.domain.repository.relationship import RelationshipRepository
from coachlink.domain.value import InvitationId

from .database import InMemoryDatabase


class InMemoryRelationshipRepository(RelationshipRepository):
    """In-memory implementation of RelationshipRepository for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database

    async def create(self, relationship: Relationship) -> Relationship:
        """Store a relationship, one per invitation."""
        if await self.find_by_invitation(relationship.invitation_id):
            raise DuplicateRelationshipError(str(relationship.invitation_id))
        self._db.relationships[relationship.id] = relationship
        return relationship

    async def find_by_invitation(
        self, invitation_id: InvitationId
    ) -> Optional[Relationship]:
        """Find the relationship created from an invitation."""
        for relationship in self._db.relationships.values():
            if relationship.invitation_id == invitation_id:
                return relationship
        return None

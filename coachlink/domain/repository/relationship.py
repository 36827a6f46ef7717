"""Relationship repository interface."""

from abc import ABC, abstractmethod

from coachlink.domain.model.relationship import Relationship
from coachlink.domain.value import InvitationId


class RelationshipRepository(ABC):
    """Repository for Relationship entity.

    Storage guarantees at most one relationship per invitation.
    """

    @abstractmethod
    async def create(self, relationship: Relationship) -> Relationship:
        """Create a relationship.

        Args:
            relationship: The relationship to store

        Returns:
            The stored relationship

        Raises:
            DuplicateRelationshipError: If one already exists for the invitation
        """
        pass

    @abstractmethod
    async def find_by_invitation(
        self, invitation_id: InvitationId
    ) -> Relationship | None:
        """Find the relationship created from an invitation.

        Args:
            invitation_id: The originating invitation

        Returns:
            The relationship if found, None otherwise
        """
        pass

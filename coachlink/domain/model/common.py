"""Base model for all domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for all domain models.

    Entities are immutable; state changes produce a new instance via
    ``model_copy(update=...)`` and go back through a repository.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

"""Shared in-memory store backing the in-memory repositories."""

from dataclasses import dataclass, field

from coachlink.domain.model import (
    Account,
    AthleteProfile,
    CoachProfile,
    Invitation,
    Relationship,
)
from coachlink.domain.value import (
    AccountId,
    AthleteProfileId,
    CoachProfileId,
    InvitationId,
    RelationshipId,
)


@dataclass
class InMemoryDatabase:
    """Tables as dicts keyed by id.

    Models are immutable, so a shallow copy of every dict is a full snapshot.
    """

    accounts: dict[AccountId, Account] = field(default_factory=dict)
    coach_profiles: dict[CoachProfileId, CoachProfile] = field(default_factory=dict)
    athlete_profiles: dict[AthleteProfileId, AthleteProfile] = field(default_factory=dict)
    invitations: dict[InvitationId, Invitation] = field(default_factory=dict)
    relationships: dict[RelationshipId, Relationship] = field(default_factory=dict)
    commits: int = 0

    def snapshot(self) -> dict[str, dict]:
        return {
            "accounts": dict(self.accounts),
            "coach_profiles": dict(self.coach_profiles),
            "athlete_profiles": dict(self.athlete_profiles),
            "invitations": dict(self.invitations),
            "relationships": dict(self.relationships),
        }

    def restore(self, snapshot: dict[str, dict]) -> None:
        for name, rows in snapshot.items():
            table = getattr(self, name)
            table.clear()
            table.update(rows)

"""Coach-athlete relationship entity."""

from datetime import datetime

from coachlink.domain.model.common import DomainModel
from coachlink.domain.value import (
    AthleteProfileId,
    CoachProfileId,
    InvitationId,
    RelationshipId,
    RelationshipStatus,
)


class Relationship(DomainModel):
    """Durable record of an accepted coaching pairing.

    Created exactly once per invitation, at acceptance. Both sides are
    *profile* ids; the coach account id never appears here.
    """

    id: RelationshipId
    coach_id: CoachProfileId
    athlete_id: AthleteProfileId
    invitation_id: InvitationId
    terms_accepted_at: datetime
    terms_version: str
    status: RelationshipStatus = RelationshipStatus.ACTIVE
    created_at: datetime

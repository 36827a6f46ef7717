"""Invitation entity.

A coach invites an athlete by email. The invitation is addressed by an
unguessable token and stays open for a fixed window after each send.
"""

from datetime import datetime
from typing import Optional

from coachlink.domain.model.common import DomainModel
from coachlink.domain.value import (
    AthleteProfileId,
    CoachAccountId,
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
)


class Invitation(DomainModel):
    """Invitation entity.

    Business rules:
    - One pending invitation per (coach, email)
    - ``expires_at`` is recomputed from ``sent_at`` on every resend
    - ``expired`` is normally derived from ``expires_at``, not stored
    - Status only changes through the invitation state machine
    """

    id: InvitationId
    coach_id: CoachAccountId  # Coach *account* id, not the coach profile id
    email: Email
    message: Optional[str] = None
    token: InvitationToken
    status: InvitationStatus = InvitationStatus.PENDING
    sent_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    athlete_id: Optional[AthleteProfileId] = None
    created_at: datetime
    updated_at: datetime

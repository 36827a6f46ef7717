"""Invitation representation shared by the coach-side use cases."""

from datetime import datetime

from pydantic import BaseModel

from coachlink.domain.model import Invitation
from coachlink.domain.service import (
    ExpiryPolicy,
    InvitationCommand,
    InvitationStateMachine,
)
from coachlink.domain.value import InvitationStatus


class InvitationItem(BaseModel):
    """Invitation as shown to its coach.

    ``status`` is the stored status; ``effective_status`` applies expiry.
    ``can_resend`` and ``can_cancel`` drive the dashboard actions. The token
    is never included.
    """

    invitation_id: str
    email: str
    message: str | None = None
    status: InvitationStatus
    effective_status: InvitationStatus
    sent_at: datetime | None = None
    expires_at: datetime | None = None
    accepted_at: datetime | None = None
    created_at: datetime
    is_expired: bool
    days_until_expiry: int
    can_resend: bool
    can_cancel: bool


def to_invitation_item(
    invitation: Invitation,
    state_machine: InvitationStateMachine,
    expiry_policy: ExpiryPolicy,
    now: datetime,
) -> InvitationItem:
    """Build the coach-facing view of an invitation at ``now``."""
    return InvitationItem(
        invitation_id=str(invitation.id),
        email=invitation.email.root,
        message=invitation.message,
        status=invitation.status,
        effective_status=state_machine.derive_status(invitation, now),
        sent_at=invitation.sent_at,
        expires_at=invitation.expires_at,
        accepted_at=invitation.accepted_at,
        created_at=invitation.created_at,
        is_expired=expiry_policy.is_expired(invitation.expires_at, now),
        days_until_expiry=expiry_policy.days_until_expiry(invitation.expires_at, now),
        can_resend=state_machine.can(InvitationCommand.RESEND, invitation, now),
        can_cancel=state_machine.can(InvitationCommand.CANCEL, invitation, now),
    )

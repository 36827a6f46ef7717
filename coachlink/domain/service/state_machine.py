"""Invitation state machine.

Legal transitions:

    command      from (derived status)              to
    -------      ---------------------              --
    resend       pending, expired, email_failed     pending
    cancel       pending, email_failed              cancelled
    accept       pending                            accepted
    decline      pending                            declined
    send_failed  pending                            email_failed

``expired`` is derived: a stored ``pending`` invitation whose window has
closed reads as ``expired``. Nothing sweeps stored rows.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from coachlink.domain.error import InvalidStateTransitionError
from coachlink.domain.model.invitation import Invitation
from coachlink.domain.value import InvitationStatus

from .base import Service
from .expiry_policy import ExpiryPolicy


class InvitationCommand(str, Enum):
    """Caller-initiated commands that change an invitation's status."""

    RESEND = "resend"
    CANCEL = "cancel"
    ACCEPT = "accept"
    DECLINE = "decline"
    SEND_FAILED = "send_failed"


_TRANSITIONS: dict[InvitationCommand, tuple[frozenset[InvitationStatus], InvitationStatus]] = {
    InvitationCommand.RESEND: (
        frozenset(
            {
                InvitationStatus.PENDING,
                InvitationStatus.EXPIRED,
                InvitationStatus.EMAIL_FAILED,
            }
        ),
        InvitationStatus.PENDING,
    ),
    InvitationCommand.CANCEL: (
        frozenset({InvitationStatus.PENDING, InvitationStatus.EMAIL_FAILED}),
        InvitationStatus.CANCELLED,
    ),
    InvitationCommand.ACCEPT: (
        frozenset({InvitationStatus.PENDING}),
        InvitationStatus.ACCEPTED,
    ),
    InvitationCommand.DECLINE: (
        frozenset({InvitationStatus.PENDING}),
        InvitationStatus.DECLINED,
    ),
    InvitationCommand.SEND_FAILED: (
        frozenset({InvitationStatus.PENDING}),
        InvitationStatus.EMAIL_FAILED,
    ),
}


class Transition(BaseModel):
    """An authorized status change.

    ``expected`` is the stored status the caller observed; repositories apply
    the change only if the row still has it.
    """

    model_config = ConfigDict(frozen=True)

    command: InvitationCommand
    source: InvitationStatus
    expected: frozenset[InvitationStatus]
    target: InvitationStatus


class InvitationStateMachine(Service):
    """Decides which commands are legal from an invitation's derived status."""

    def __init__(self, expiry_policy: ExpiryPolicy) -> None:
        self.expiry_policy = expiry_policy

    def derive_status(self, invitation: Invitation, now: datetime) -> InvitationStatus:
        """Status as seen at ``now``, with expiry applied."""
        if invitation.status == InvitationStatus.PENDING and self.expiry_policy.is_expired(
            invitation.expires_at, now
        ):
            return InvitationStatus.EXPIRED
        return invitation.status

    def allowed_sources(self, command: InvitationCommand) -> frozenset[InvitationStatus]:
        """Derived statuses from which ``command`` is legal."""
        return _TRANSITIONS[command][0]

    def can(self, command: InvitationCommand, invitation: Invitation, now: datetime) -> bool:
        """Whether ``command`` is legal for the invitation at ``now``."""
        return self.derive_status(invitation, now) in self.allowed_sources(command)

    def transition(
        self, command: InvitationCommand, invitation: Invitation, now: datetime
    ) -> Transition:
        """Authorize ``command`` or raise.

        Raises:
            InvalidStateTransitionError: If the derived status does not allow it
        """
        sources, target = _TRANSITIONS[command]
        current = self.derive_status(invitation, now)
        if current not in sources:
            raise InvalidStateTransitionError(command.value, current.value)
        return Transition(
            command=command,
            source=current,
            expected=frozenset({invitation.status}),
            target=target,
        )

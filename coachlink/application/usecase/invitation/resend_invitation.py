"""Resend invitation use case."""

from uuid import UUID

from pydantic import BaseModel

from coachlink.application.usecase.base import BaseUseCase
from coachlink.domain.service import (
    ExpiryPolicy,
    InvitationService,
    InvitationStateMachine,
)
from coachlink.domain.value import CoachAccountId, InvitationId
from coachlink.util.clock import Clock

from .invitation_item import InvitationItem, to_invitation_item


class ResendInvitationRequest(BaseModel):
    """Resend invitation request."""

    coach_id: str
    invitation_id: str


class ResendInvitationResponse(BaseModel):
    """Resend invitation response."""

    invitation: InvitationItem
    email_sent: bool
    email_error: str | None = None
    message: str


class ResendInvitationUseCase(BaseUseCase):
    """Use case for resending a pending, expired or failed invitation."""

    def __init__(
        self,
        invitation_service: InvitationService,
        state_machine: InvitationStateMachine,
        expiry_policy: ExpiryPolicy,
        clock: Clock,
    ) -> None:
        self.invitation_service = invitation_service
        self.state_machine = state_machine
        self.expiry_policy = expiry_policy
        self.clock = clock

    async def execute(self, request: ResendInvitationRequest) -> ResendInvitationResponse:
        """Execute resend invitation flow.

        Raises:
            NotFoundError: If missing or owned by another coach
            InvalidStateTransitionError: If the invitation cannot be resent
        """
        delivery = await self.invitation_service.resend_invitation(
            coach_id=CoachAccountId(UUID(request.coach_id)),
            invitation_id=InvitationId(UUID(request.invitation_id)),
        )
        return ResendInvitationResponse(
            invitation=to_invitation_item(
                delivery.invitation, self.state_machine, self.expiry_policy, self.clock.now()
            ),
            email_sent=delivery.email_sent,
            email_error=delivery.email_error,
            message=(
                "Invitation resent successfully"
                if delivery.email_sent
                else "Invitation updated but email failed to send"
            ),
        )

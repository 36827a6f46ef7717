"""Create invitation use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field, ValidationError

from coachlink.application.usecase.base import BaseUseCase
from coachlink.domain.service import (
    ExpiryPolicy,
    InvitationService,
    InvitationStateMachine,
)
from coachlink.domain.value import CoachAccountId, Email
from coachlink.util.clock import Clock

from .invitation_item import InvitationItem, to_invitation_item


class CreateInvitationRequest(BaseModel):
    """Create invitation request."""

    coach_id: str  # Coach account ID from auth
    email: str
    message: str | None = Field(default=None, max_length=1000)


class CreateInvitationResponse(BaseModel):
    """Create invitation response."""

    invitation: InvitationItem
    email_sent: bool
    email_error: str | None = None
    message: str


class CreateInvitationUseCase(BaseUseCase):
    """Use case for a coach inviting an athlete by email."""

    def __init__(
        self,
        invitation_service: InvitationService,
        state_machine: InvitationStateMachine,
        expiry_policy: ExpiryPolicy,
        clock: Clock,
    ) -> None:
        """Initialize create invitation use case.

        Args:
            invitation_service: Invitation service
            state_machine: Derives effective status for the response
            expiry_policy: Computes expiry fields for the response
            clock: Source of the current time
        """
        self.invitation_service = invitation_service
        self.state_machine = state_machine
        self.expiry_policy = expiry_policy
        self.clock = clock

    async def execute(self, request: CreateInvitationRequest) -> CreateInvitationResponse:
        """Execute create invitation flow.

        An email failure does not fail the request: the invitation is
        created and reported as ``email_failed`` so the coach can resend.

        Raises:
            ValueError: If the email address is invalid
        """
        try:
            email = Email(request.email)
        except ValidationError:
            raise ValueError("Invalid email address")

        coach_id = CoachAccountId(UUID(request.coach_id))
        message = request.message.strip() if request.message else None

        delivery = await self.invitation_service.create_invitation(
            coach_id=coach_id,
            email=email,
            message=message or None,
        )

        if delivery.email_sent:
            text = "Invitation sent successfully"
        else:
            text = "Invitation created but email failed to send"
            logfire.warn(
                "Invitation created without email",
                invitation_id=str(delivery.invitation.id),
                error=delivery.email_error,
            )

        return CreateInvitationResponse(
            invitation=to_invitation_item(
                delivery.invitation, self.state_machine, self.expiry_policy, self.clock.now()
            ),
            email_sent=delivery.email_sent,
            email_error=delivery.email_error,
            message=text,
        )

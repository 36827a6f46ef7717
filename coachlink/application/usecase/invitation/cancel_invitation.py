"""Cancel invitation use case."""

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


class CancelInvitationRequest(BaseModel):
    """Cancel invitation request."""

    coach_id: str
    invitation_id: str


class CancelInvitationResponse(BaseModel):
    """Cancel invitation response."""

    invitation: InvitationItem
    message: str = "Invitation cancelled successfully"


class CancelInvitationUseCase(BaseUseCase):
    """Use case for cancelling an invitation."""

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

    async def execute(self, request: CancelInvitationRequest) -> CancelInvitationResponse:
        """Execute cancel invitation flow.

        Raises:
            NotFoundError: If missing or owned by another coach
            InvalidStateTransitionError: If not pending or email_failed
        """
        cancelled = await self.invitation_service.cancel_invitation(
            coach_id=CoachAccountId(UUID(request.coach_id)),
            invitation_id=InvitationId(UUID(request.invitation_id)),
        )
        return CancelInvitationResponse(
            invitation=to_invitation_item(
                cancelled, self.state_machine, self.expiry_policy, self.clock.now()
            )
        )

"""Decline invitation use case."""

from uuid import UUID

from pydantic import BaseModel

from coachlink.application.usecase.base import BaseUseCase
from coachlink.domain.service import InvitationService
from coachlink.domain.value import AccountId, InvitationStatus


class DeclineInvitationRequest(BaseModel):
    """Decline invitation request."""

    account_id: str  # Athlete account ID from auth
    token: str


class DeclineInvitationResponse(BaseModel):
    """Decline invitation response."""

    invitation_id: str
    status: InvitationStatus
    message: str = "Invitation declined"


class DeclineInvitationUseCase(BaseUseCase):
    """Use case for an athlete declining a coach's invitation."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(self, request: DeclineInvitationRequest) -> DeclineInvitationResponse:
        """Execute decline invitation flow."""
        declined = await self.invitation_service.decline_invitation(
            account_id=AccountId(UUID(request.account_id)),
            raw_token=request.token,
        )
        return DeclineInvitationResponse(
            invitation_id=str(declined.id), status=declined.status
        )

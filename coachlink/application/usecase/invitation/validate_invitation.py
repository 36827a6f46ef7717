"""Validate invitation use case."""

from datetime import datetime

from pydantic import BaseModel

from coachlink.application.usecase.base import BaseUseCase
from coachlink.domain.service import TokenValidator
from coachlink.domain.value import AccountRole, CoachSummary, InvitationStatus


class ValidateInvitationRequest(BaseModel):
    """Validate invitation request."""

    token: str


class InvitationDetails(BaseModel):
    """What the athlete landing page shows about the invitation."""

    invitation_id: str
    email: str
    message: str | None = None
    status: InvitationStatus
    expires_at: datetime | None = None
    is_expired: bool
    is_accepted: bool
    is_cancelled: bool


class ValidateInvitationResponse(BaseModel):
    """Validate invitation response."""

    valid: bool
    invitation: InvitationDetails
    coach: CoachSummary
    has_account: bool
    existing_role: AccountRole | None = None
    message: str


class ValidateInvitationUseCase(BaseUseCase):
    """Use case for checking an invitation token before sign-up or sign-in."""

    def __init__(self, token_validator: TokenValidator) -> None:
        self.token_validator = token_validator

    async def execute(self, request: ValidateInvitationRequest) -> ValidateInvitationResponse:
        """Execute validate invitation flow.

        Raises:
            NotFoundError: If the token is malformed or unknown
            BrokenReferenceError: If the inviting coach no longer exists
        """
        verdict = await self.token_validator.validate(request.token)
        invitation = verdict.invitation

        if verdict.is_valid:
            message = "Valid invitation"
        elif verdict.is_accepted:
            message = "Invitation already accepted"
        elif verdict.is_cancelled:
            message = "Invitation has been cancelled"
        elif verdict.is_expired:
            message = "Invitation has expired"
        else:
            message = f"Invitation is {verdict.status.value}"

        return ValidateInvitationResponse(
            valid=verdict.is_valid,
            invitation=InvitationDetails(
                invitation_id=str(invitation.id),
                email=invitation.email.root,
                message=invitation.message,
                status=verdict.status,
                expires_at=invitation.expires_at,
                is_expired=verdict.is_expired,
                is_accepted=verdict.is_accepted,
                is_cancelled=verdict.is_cancelled,
            ),
            coach=verdict.coach,
            has_account=verdict.has_account,
            existing_role=verdict.existing_role,
            message=message,
        )

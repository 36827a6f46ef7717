"""List pending invitations use case (athlete inbox)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from coachlink.application.usecase.base import BaseUseCase
from coachlink.domain.repository import AccountRepository
from coachlink.domain.service import ExpiryPolicy, InvitationService
from coachlink.domain.value import AccountId
from coachlink.util.clock import Clock


class PendingInvitationItem(BaseModel):
    """Invitation waiting for the athlete's answer."""

    invitation_id: str
    token: str  # The athlete is the token's addressee
    coach_name: str | None = None
    coach_email: str | None = None
    message: str | None = None
    sent_at: datetime | None = None
    expires_at: datetime | None = None
    days_until_expiry: int


class ListPendingInvitationsRequest(BaseModel):
    """List pending invitations request."""

    account_id: str  # Athlete account ID from auth


class ListPendingInvitationsResponse(BaseModel):
    """List pending invitations response."""

    invitations: list[PendingInvitationItem]
    total: int


class ListPendingInvitationsUseCase(BaseUseCase):
    """Use case for listing invitations addressed to the caller."""

    def __init__(
        self,
        invitation_service: InvitationService,
        account_repository: AccountRepository,
        expiry_policy: ExpiryPolicy,
        clock: Clock,
    ) -> None:
        self.invitation_service = invitation_service
        self.account_repository = account_repository
        self.expiry_policy = expiry_policy
        self.clock = clock

    async def execute(
        self, request: ListPendingInvitationsRequest
    ) -> ListPendingInvitationsResponse:
        """Execute list pending invitations flow.

        Raises:
            NotFoundError: If the caller's account does not exist
        """
        invitations = await self.invitation_service.list_pending_for_account(
            AccountId(UUID(request.account_id))
        )

        now = self.clock.now()
        items = []
        for invitation in invitations:
            coach = await self.account_repository.find_by_id(AccountId(invitation.coach_id))
            items.append(
                PendingInvitationItem(
                    invitation_id=str(invitation.id),
                    token=invitation.token.root,
                    coach_name=coach.display_name if coach else None,
                    coach_email=coach.email.root if coach else None,
                    message=invitation.message,
                    sent_at=invitation.sent_at,
                    expires_at=invitation.expires_at,
                    days_until_expiry=self.expiry_policy.days_until_expiry(
                        invitation.expires_at, now
                    ),
                )
            )

        return ListPendingInvitationsResponse(invitations=items, total=len(items))

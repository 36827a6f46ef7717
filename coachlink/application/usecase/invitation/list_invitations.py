"""List invitations use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from coachlink.application.usecase.base import BaseUseCase
from coachlink.config import InvitationSettings
from coachlink.domain.service import (
    ExpiryPolicy,
    InvitationService,
    InvitationStateMachine,
)
from coachlink.domain.value import CoachAccountId, InvitationStatus
from coachlink.util.clock import Clock

from .invitation_item import InvitationItem, to_invitation_item


class ListInvitationsRequest(BaseModel):
    """List invitations request."""

    coach_id: str  # Coach account ID from auth
    status: InvitationStatus | None = None
    email: str | None = None  # Case-insensitive substring
    limit: int | None = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)


class ListInvitationsResponse(BaseModel):
    """List invitations response."""

    invitations: list[InvitationItem]
    total: int
    limit: int
    offset: int
    stats: dict[InvitationStatus, int]


class ListInvitationsUseCase(BaseUseCase):
    """Use case for the coach's invitation dashboard."""

    def __init__(
        self,
        invitation_service: InvitationService,
        state_machine: InvitationStateMachine,
        expiry_policy: ExpiryPolicy,
        clock: Clock,
        settings: InvitationSettings,
    ) -> None:
        """Initialize list invitations use case.

        Args:
            invitation_service: Invitation service
            state_machine: Derives effective status
            expiry_policy: Computes expiry fields
            clock: Source of the current time
            settings: Invitation settings (page sizes)
        """
        self.invitation_service = invitation_service
        self.state_machine = state_machine
        self.expiry_policy = expiry_policy
        self.clock = clock
        self.settings = settings

    async def execute(self, request: ListInvitationsRequest) -> ListInvitationsResponse:
        """Execute list invitations flow.

        Args:
            request: List invitations request

        Returns:
            One page of invitations, newest first, with per-status counts
        """
        coach_id = CoachAccountId(UUID(request.coach_id))
        limit = min(
            request.limit or self.settings.default_page_size,
            self.settings.max_page_size,
        )
        email = request.email.strip() if request.email else None

        invitations, total = await self.invitation_service.list_invitations(
            coach_id=coach_id,
            status=request.status,
            email=email or None,
            limit=limit,
            offset=request.offset,
        )
        stats = await self.invitation_service.status_counts(coach_id)

        now = self.clock.now()
        return ListInvitationsResponse(
            invitations=[
                to_invitation_item(invitation, self.state_machine, self.expiry_policy, now)
                for invitation in invitations
            ],
            total=total,
            limit=limit,
            offset=request.offset,
            stats=stats,
        )

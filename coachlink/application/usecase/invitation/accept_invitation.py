"""Accept invitation use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from coachlink.application.usecase.base import BaseUseCase
from coachlink.domain.service import RelationshipEstablisher
from coachlink.domain.value import AccountId, AthleteProfileId


class AcceptInvitationRequest(BaseModel):
    """Accept invitation request."""

    account_id: str  # Athlete account ID from auth
    token: str
    athlete_id: str  # Athlete profile ID
    terms_version: str


class AcceptInvitationResponse(BaseModel):
    """Accept invitation response.

    ``notification_scheduled`` only says the coach notice was started; its
    delivery does not affect the acceptance.
    """

    relationship_id: str
    invitation_id: str
    coach_id: str  # Coach profile ID
    athlete_id: str
    accepted_at: datetime | None
    replayed: bool
    profile_linked: bool
    notification_scheduled: bool
    message: str = "Invitation accepted successfully"


class AcceptInvitationUseCase(BaseUseCase):
    """Use case for an athlete accepting a coach's invitation."""

    def __init__(self, relationship_establisher: RelationshipEstablisher) -> None:
        self.relationship_establisher = relationship_establisher

    async def execute(self, request: AcceptInvitationRequest) -> AcceptInvitationResponse:
        """Execute accept invitation flow.

        Raises:
            NotFoundError: If the token is unknown or addressed to someone else
            InvalidStateTransitionError: If the invitation is not pending
            PreconditionFailedError: If a profile is missing or terms are stale
            EstablishmentFailedError: If the core writes failed
        """
        result = await self.relationship_establisher.accept(
            account_id=AccountId(UUID(request.account_id)),
            raw_token=request.token,
            athlete_id=AthleteProfileId(UUID(request.athlete_id)),
            terms_version=request.terms_version,
        )
        return AcceptInvitationResponse(
            relationship_id=str(result.relationship.id),
            invitation_id=str(result.invitation.id),
            coach_id=str(result.relationship.coach_id),
            athlete_id=str(result.relationship.athlete_id),
            accepted_at=result.invitation.accepted_at,
            replayed=result.replayed,
            profile_linked=result.profile_linked,
            notification_scheduled=result.notification is not None,
        )

"""Invitation routes.

Coach-side endpoints manage a coach's invitations; athlete-side endpoints
resolve and act on an invitation token. Every endpoint except ``validate``
requires the ``auth_token`` session cookie.
"""

from uuid import UUID

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, Query, status
from pydantic import BaseModel, Field

from coachlink.application.usecase.invitation import (
    AcceptInvitationUseCase,
    CancelInvitationUseCase,
    CreateInvitationUseCase,
    DeclineInvitationUseCase,
    ListInvitationsUseCase,
    ListPendingInvitationsUseCase,
    ResendInvitationUseCase,
    ValidateInvitationUseCase,
)
from coachlink.application.usecase.invitation.accept_invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
)
from coachlink.application.usecase.invitation.cancel_invitation import (
    CancelInvitationRequest,
    CancelInvitationResponse,
)
from coachlink.application.usecase.invitation.create_invitation import (
    CreateInvitationRequest,
    CreateInvitationResponse,
)
from coachlink.application.usecase.invitation.decline_invitation import (
    DeclineInvitationRequest,
    DeclineInvitationResponse,
)
from coachlink.application.usecase.invitation.list_invitations import (
    ListInvitationsRequest,
    ListInvitationsResponse,
)
from coachlink.application.usecase.invitation.list_pending_invitations import (
    ListPendingInvitationsRequest,
    ListPendingInvitationsResponse,
)
from coachlink.application.usecase.invitation.resend_invitation import (
    ResendInvitationRequest,
    ResendInvitationResponse,
)
from coachlink.application.usecase.invitation.validate_invitation import (
    ValidateInvitationRequest,
    ValidateInvitationResponse,
)
from coachlink.domain.service import JWTService
from coachlink.domain.value import InvitationStatus
from coachlink.util.jwt import JWTError, TokenPayload

router = APIRouter(
    prefix="/invitations", tags=["invitations"], route_class=DishkaRoute
)


class CreateInvitationAPIRequest(BaseModel):
    """API request for inviting an athlete."""

    email: str
    message: str | None = Field(default=None, max_length=1000)


class AcceptInvitationAPIRequest(BaseModel):
    """API request for accepting an invitation."""

    token: str
    athlete_id: UUID
    terms_version: str


class DeclineInvitationAPIRequest(BaseModel):
    """API request for declining an invitation."""

    token: str


def authenticate(jwt_service: JWTService, auth_token: str | None) -> TokenPayload:
    """Verify the session cookie.

    Raises:
        HTTPException: 401 if the cookie is missing or invalid
    """
    try:
        return jwt_service.verify_cookie(auth_token)
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


@router.post(
    "/", response_model=CreateInvitationResponse, status_code=status.HTTP_201_CREATED
)
async def create_invitation(
    request: CreateInvitationAPIRequest,
    create_invitation_use_case: FromDishka[CreateInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CreateInvitationResponse:
    """Invite an athlete by email.

    The invitation is stored even if the email cannot be delivered;
    ``email_sent`` reports the delivery outcome.

    Raises:
        HTTPException: 401 if not authenticated, 400 on invalid input,
            409 if a pending invitation already exists for the email
    """
    payload = authenticate(jwt_service, auth_token)

    try:
        use_case_request = CreateInvitationRequest(
            coach_id=payload.user_id,
            email=request.email,
            message=request.message,
        )
        return await create_invitation_use_case.execute(use_case_request)
    except ValueError as e:
        logfire.warn("Invitation creation validation error", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/", response_model=ListInvitationsResponse)
async def list_invitations(
    list_invitations_use_case: FromDishka[ListInvitationsUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    status_filter: InvitationStatus | None = Query(default=None, alias="status"),
    email: str | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
) -> ListInvitationsResponse:
    """List the current coach's invitations, newest first.

    Args:
        status_filter: Stored status to filter by
        email: Case-insensitive substring of the invited email
        limit: Page size (defaults to the configured page size)
        offset: Number of results to skip
    """
    payload = authenticate(jwt_service, auth_token)

    request = ListInvitationsRequest(
        coach_id=payload.user_id,
        status=status_filter,
        email=email,
        limit=limit,
        offset=offset,
    )
    return await list_invitations_use_case.execute(request)


@router.get("/pending", response_model=ListPendingInvitationsResponse)
async def list_pending_invitations(
    list_pending_invitations_use_case: FromDishka[ListPendingInvitationsUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ListPendingInvitationsResponse:
    """List open invitations addressed to the current athlete."""
    payload = authenticate(jwt_service, auth_token)

    request = ListPendingInvitationsRequest(account_id=payload.user_id)
    return await list_pending_invitations_use_case.execute(request)


@router.get("/validate/{token}", response_model=ValidateInvitationResponse)
async def validate_invitation(
    token: str,
    validate_invitation_use_case: FromDishka[ValidateInvitationUseCase],
) -> ValidateInvitationResponse:
    """Resolve an invitation link for the landing page.

    Public: the token itself is the credential. Unknown and malformed
    tokens both return 404.
    """
    request = ValidateInvitationRequest(token=token)
    return await validate_invitation_use_case.execute(request)


@router.patch("/{invitation_id}/resend", response_model=ResendInvitationResponse)
async def resend_invitation(
    invitation_id: UUID,
    resend_invitation_use_case: FromDishka[ResendInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ResendInvitationResponse:
    """Resend an invitation and restart its expiry window.

    Raises:
        HTTPException: 401 if not authenticated
    """
    payload = authenticate(jwt_service, auth_token)

    request = ResendInvitationRequest(
        coach_id=payload.user_id, invitation_id=str(invitation_id)
    )
    return await resend_invitation_use_case.execute(request)


@router.delete("/{invitation_id}", response_model=CancelInvitationResponse)
async def cancel_invitation(
    invitation_id: UUID,
    cancel_invitation_use_case: FromDishka[CancelInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CancelInvitationResponse:
    """Cancel a pending invitation.

    Raises:
        HTTPException: 401 if not authenticated
    """
    payload = authenticate(jwt_service, auth_token)

    request = CancelInvitationRequest(
        coach_id=payload.user_id, invitation_id=str(invitation_id)
    )
    return await cancel_invitation_use_case.execute(request)


@router.post("/accept", response_model=AcceptInvitationResponse)
async def accept_invitation(
    request: AcceptInvitationAPIRequest,
    accept_invitation_use_case: FromDishka[AcceptInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> AcceptInvitationResponse:
    """Accept an invitation and establish the coaching relationship.

    Safe to retry: a replay against an already-created relationship
    returns it with ``replayed`` set.

    Raises:
        HTTPException: 401 if not authenticated
    """
    payload = authenticate(jwt_service, auth_token)

    use_case_request = AcceptInvitationRequest(
        account_id=payload.user_id,
        token=request.token,
        athlete_id=str(request.athlete_id),
        terms_version=request.terms_version,
    )
    return await accept_invitation_use_case.execute(use_case_request)


@router.post("/decline", response_model=DeclineInvitationResponse)
async def decline_invitation(
    request: DeclineInvitationAPIRequest,
    decline_invitation_use_case: FromDishka[DeclineInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> DeclineInvitationResponse:
    """Decline an invitation addressed to the current athlete.

    Raises:
        HTTPException: 401 if not authenticated
    """
    payload = authenticate(jwt_service, auth_token)

    use_case_request = DeclineInvitationRequest(
        account_id=payload.user_id, token=request.token
    )
    return await decline_invitation_use_case.execute(use_case_request)

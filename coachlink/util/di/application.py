"""Application layer DI providers."""

from dishka import Scope, provide

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
from coachlink.config import InvitationSettings
from coachlink.domain.repository import AccountRepository
from coachlink.domain.service import (
    ExpiryPolicy,
    InvitationService,
    InvitationStateMachine,
    RelationshipEstablisher,
    TokenValidator,
)
from coachlink.util.clock import Clock
from coachlink.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Coach-side use cases
    @provide(scope=Scope.REQUEST)
    def get_create_invitation_use_case(
        self,
        invitation_service: InvitationService,
        state_machine: InvitationStateMachine,
        expiry_policy: ExpiryPolicy,
        clock: Clock,
    ) -> CreateInvitationUseCase:
        """Provide create invitation use case."""
        return CreateInvitationUseCase(
            invitation_service=invitation_service,
            state_machine=state_machine,
            expiry_policy=expiry_policy,
            clock=clock,
        )

    @provide(scope=Scope.REQUEST)
    def get_resend_invitation_use_case(
        self,
        invitation_service: InvitationService,
        state_machine: InvitationStateMachine,
        expiry_policy: ExpiryPolicy,
        clock: Clock,
    ) -> ResendInvitationUseCase:
        """Provide resend invitation use case."""
        return ResendInvitationUseCase(
            invitation_service=invitation_service,
            state_machine=state_machine,
            expiry_policy=expiry_policy,
            clock=clock,
        )

    @provide(scope=Scope.REQUEST)
    def get_cancel_invitation_use_case(
        self,
        invitation_service: InvitationService,
        state_machine: InvitationStateMachine,
        expiry_policy: ExpiryPolicy,
        clock: Clock,
    ) -> CancelInvitationUseCase:
        """Provide cancel invitation use case."""
        return CancelInvitationUseCase(
            invitation_service=invitation_service,
            state_machine=state_machine,
            expiry_policy=expiry_policy,
            clock=clock,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_invitations_use_case(
        self,
        invitation_service: InvitationService,
        state_machine: InvitationStateMachine,
        expiry_policy: ExpiryPolicy,
        clock: Clock,
        settings: InvitationSettings,
    ) -> ListInvitationsUseCase:
        """Provide list invitations use case."""
        return ListInvitationsUseCase(
            invitation_service=invitation_service,
            state_machine=state_machine,
            expiry_policy=expiry_policy,
            clock=clock,
            settings=settings,
        )

    # Athlete-side use cases
    @provide(scope=Scope.REQUEST)
    def get_validate_invitation_use_case(
        self, token_validator: TokenValidator
    ) -> ValidateInvitationUseCase:
        """Provide validate invitation use case."""
        return ValidateInvitationUseCase(token_validator=token_validator)

    @provide(scope=Scope.REQUEST)
    def get_accept_invitation_use_case(
        self, relationship_establisher: RelationshipEstablisher
    ) -> AcceptInvitationUseCase:
        """Provide accept invitation use case."""
        return AcceptInvitationUseCase(relationship_establisher=relationship_establisher)

    @provide(scope=Scope.REQUEST)
    def get_decline_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> DeclineInvitationUseCase:
        """Provide decline invitation use case."""
        return DeclineInvitationUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_list_pending_invitations_use_case(
        self,
        invitation_service: InvitationService,
        account_repository: AccountRepository,
        expiry_policy: ExpiryPolicy,
        clock: Clock,
    ) -> ListPendingInvitationsUseCase:
        """Provide list pending invitations use case."""
        return ListPendingInvitationsUseCase(
            invitation_service=invitation_service,
            account_repository=account_repository,
            expiry_policy=expiry_policy,
            clock=clock,
        )

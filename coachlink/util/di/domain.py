"""Domain layer DI providers."""

from dishka import Scope, provide

from coachlink.config import AuthSettings, InvitationSettings, Settings
from coachlink.domain.repository import (
    AccountRepository,
    AthleteProfileRepository,
    CoachProfileRepository,
    InvitationRepository,
    RelationshipRepository,
    TransactionManager,
)
from coachlink.domain.service import (
    AuthorizationGuard,
    ExpiryPolicy,
    InvitationService,
    InvitationStateMachine,
    JWTService,
    NotificationDispatcher,
    Notifier,
    RelationshipEstablisher,
    TokenGenerator,
    TokenValidator,
)
from coachlink.util.clock import Clock
from coachlink.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Stateless policies and the notification dispatcher live for the whole app.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide(scope=Scope.APP)
    def get_token_generator(self, settings: InvitationSettings) -> TokenGenerator:
        """Provide invitation token generator."""
        return TokenGenerator(token_bytes=settings.token_bytes)

    @provide(scope=Scope.APP)
    def get_expiry_policy(self, settings: InvitationSettings) -> ExpiryPolicy:
        """Provide invitation expiry policy."""
        return ExpiryPolicy(window_days=settings.expiry_days)

    @provide(scope=Scope.APP)
    def get_state_machine(self, expiry_policy: ExpiryPolicy) -> InvitationStateMachine:
        """Provide invitation state machine."""
        return InvitationStateMachine(expiry_policy=expiry_policy)

    @provide(scope=Scope.APP)
    def get_authorization_guard(self) -> AuthorizationGuard:
        """Provide invitation authorization guard."""
        return AuthorizationGuard()

    @provide(scope=Scope.APP)
    def get_notification_dispatcher(self) -> NotificationDispatcher:
        """Provide the app-wide dispatcher (drained on shutdown)."""
        return NotificationDispatcher()

    @provide
    def get_invitation_service(
        self,
        invitation_repository: InvitationRepository,
        account_repository: AccountRepository,
        coach_profile_repository: CoachProfileRepository,
        transaction_manager: TransactionManager,
        token_generator: TokenGenerator,
        expiry_policy: ExpiryPolicy,
        state_machine: InvitationStateMachine,
        guard: AuthorizationGuard,
        dispatcher: NotificationDispatcher,
        notifier: Notifier,
        clock: Clock,
        settings: InvitationSettings,
    ) -> InvitationService:
        """Provide invitation domain service."""
        return InvitationService(
            invitation_repository=invitation_repository,
            account_repository=account_repository,
            coach_profile_repository=coach_profile_repository,
            transaction_manager=transaction_manager,
            token_generator=token_generator,
            expiry_policy=expiry_policy,
            state_machine=state_machine,
            guard=guard,
            dispatcher=dispatcher,
            notifier=notifier,
            clock=clock,
            rotate_token_on_resend=settings.rotate_token_on_resend,
        )

    @provide
    def get_token_validator(
        self,
        invitation_service: InvitationService,
        account_repository: AccountRepository,
        coach_profile_repository: CoachProfileRepository,
        state_machine: InvitationStateMachine,
        expiry_policy: ExpiryPolicy,
        clock: Clock,
    ) -> TokenValidator:
        """Provide invitation token validator."""
        return TokenValidator(
            invitation_service=invitation_service,
            account_repository=account_repository,
            coach_profile_repository=coach_profile_repository,
            state_machine=state_machine,
            expiry_policy=expiry_policy,
            clock=clock,
        )

    @provide
    def get_relationship_establisher(
        self,
        invitation_service: InvitationService,
        invitation_repository: InvitationRepository,
        relationship_repository: RelationshipRepository,
        account_repository: AccountRepository,
        coach_profile_repository: CoachProfileRepository,
        athlete_profile_repository: AthleteProfileRepository,
        transaction_manager: TransactionManager,
        state_machine: InvitationStateMachine,
        guard: AuthorizationGuard,
        dispatcher: NotificationDispatcher,
        notifier: Notifier,
        clock: Clock,
        settings: Settings,
    ) -> RelationshipEstablisher:
        """Provide relationship establisher."""
        return RelationshipEstablisher(
            invitation_service=invitation_service,
            invitation_repository=invitation_repository,
            relationship_repository=relationship_repository,
            account_repository=account_repository,
            coach_profile_repository=coach_profile_repository,
            athlete_profile_repository=athlete_profile_repository,
            transaction_manager=transaction_manager,
            state_machine=state_machine,
            guard=guard,
            dispatcher=dispatcher,
            notifier=notifier,
            clock=clock,
            terms_version=settings.invitations.terms_version,
            app_url=settings.api.frontend_url,
        )

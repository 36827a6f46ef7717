"""Domain services."""

from .authorization import AuthorizationGuard
from .base import Service
from .expiry_policy import ExpiryPolicy
from .invitation_service import InvitationDelivery, InvitationService
from .jwt_service import JWTService
from .notification import NotificationDispatcher, NotificationResult, Notifier
from .relationship_establisher import EstablishmentResult, RelationshipEstablisher
from .state_machine import InvitationCommand, InvitationStateMachine, Transition
from .token_generator import TokenGenerator
from .token_validator import TokenValidator, TokenVerdict

__all__ = [
    "AuthorizationGuard",
    "EstablishmentResult",
    "ExpiryPolicy",
    "InvitationCommand",
    "InvitationDelivery",
    "InvitationService",
    "InvitationStateMachine",
    "JWTService",
    "NotificationDispatcher",
    "NotificationResult",
    "Notifier",
    "RelationshipEstablisher",
    "Service",
    "TokenGenerator",
    "TokenValidator",
    "TokenVerdict",
    "Transition",
]

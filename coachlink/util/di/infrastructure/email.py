"""Email infrastructure providers."""

from dishka import Scope, provide

from coachlink.adapter.email import ResendEmailNotifier
from coachlink.config import Settings
from coachlink.domain.service import Notifier
from coachlink.util.di.base import ProviderBase


class EmailProvider(ProviderBase):
    """Email component base."""

    __mock_component__ = "email"


class ProdEmailProvider(EmailProvider):
    """Production email provider using the Resend API."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_notifier(self, settings: Settings) -> Notifier:
        """Provide Resend-backed notifier."""
        return ResendEmailNotifier(
            settings=settings.email, app_url=settings.api.frontend_url
        )

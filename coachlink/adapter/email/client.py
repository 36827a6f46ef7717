"""Transactional email adapter.

Sends invitation and acceptance emails through the Resend HTTP API.
"""

from datetime import datetime

import httpx
import logfire

from coachlink.config import EmailSettings
from coachlink.domain.service.notification import NotificationResult, Notifier
from coachlink.domain.value import (
    AcceptanceContext,
    CoachDisplayInfo,
    ContactInfo,
    InvitationToken,
)

from .templates import render


class ResendEmailNotifier(Notifier):
    """Notifier backed by the Resend email API.

    Never raises for delivery problems: transport errors and non-2xx
    responses come back as a failed ``NotificationResult``.
    """

    def __init__(self, settings: EmailSettings, app_url: str) -> None:
        """Initialize the notifier.

        Args:
            settings: Email provider settings
            app_url: Frontend base URL used to build invitation links
        """
        self.settings = settings
        self.app_url = app_url.rstrip("/")

    def invitation_url(self, token: InvitationToken) -> str:
        """Link the athlete follows to open the invitation."""
        return f"{self.app_url}/invite/{token.root}"

    async def send_invitation(
        self,
        coach: CoachDisplayInfo,
        athlete_email: str,
        token: InvitationToken,
        message: str | None,
        expires_at: datetime,
    ) -> NotificationResult:
        """Send an invitation email to the athlete."""
        html = render(
            "invitation",
            coach_name=coach.name,
            coach_email=coach.email,
            qualifications=coach.qualifications,
            message=message,
            invitation_url=self.invitation_url(token),
            expires_on=expires_at.strftime("%d %B %Y") if expires_at else "",
        )
        return await self._send(
            {
                "from": self.settings.from_address,
                "to": [athlete_email],
                "subject": f"Coach invitation from {coach.name} - Coachlink",
                "html": html,
                "reply_to": coach.email,
            },
            kind="invitation",
            token=token.masked(),
        )

    async def send_acceptance_notice(
        self,
        coach: ContactInfo,
        athlete: ContactInfo,
        context: AcceptanceContext,
    ) -> NotificationResult:
        """Tell the coach that an athlete accepted."""
        goal_race = None
        if context.goal_race_distance:
            goal_race = context.goal_race_distance
            if context.goal_race_date:
                goal_race = f"{goal_race} on {context.goal_race_date.strftime('%d %B %Y')}"

        html = render(
            "acceptance_notice",
            coach_name=coach.name,
            athlete_name=athlete.name,
            athlete_email=athlete.email,
            experience_level=context.experience_level,
            goal_race=goal_race,
            accepted_at=_format_timestamp(context.accepted_at),
            athlete_profile_url=context.athlete_profile_url,
        )
        return await self._send(
            {
                "from": self.settings.notification_from_address,
                "to": [coach.email],
                "subject": f"{athlete.name} accepted your coaching invitation!",
                "html": html,
                "reply_to": athlete.email,
            },
            kind="acceptance_notice",
        )

    async def _send(self, payload: dict, kind: str, **log_fields) -> NotificationResult:
        """POST one email to the provider.

        Args:
            payload: Provider request body
            kind: Email kind, for logging
            **log_fields: Extra fields for log events

        Returns:
            Delivery outcome
        """
        try:
            async with httpx.AsyncClient(timeout=self.settings.timeout_seconds) as client:
                response = await client.post(
                    self.settings.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.settings.api_key}"},
                )
        except httpx.HTTPError as e:
            logfire.error("Email provider HTTP error", kind=kind, error=str(e), **log_fields)
            return NotificationResult(success=False, error=f"HTTP error: {e}")

        if not response.is_success:
            logfire.error(
                "Email provider rejected message",
                kind=kind,
                status_code=response.status_code,
                error=response.text,
                **log_fields,
            )
            return NotificationResult(
                success=False,
                error=f"Email provider returned {response.status_code}",
            )

        try:
            message_id = response.json().get("id")
        except ValueError:
            message_id = None
        logfire.info("Email sent", kind=kind, message_id=message_id, **log_fields)
        return NotificationResult(success=True, message_id=message_id)


def _format_timestamp(value: str) -> str:
    try:
        return datetime.fromisoformat(value).strftime("%d %B %Y, %H:%M")
    except ValueError:
        return value


class MockEmailNotifier(Notifier):
    """Mock notifier for testing.

    Records every email instead of sending it. Failures can be scripted
    with ``fail_all`` or ``fail_next``.
    """

    def __init__(self) -> None:
        self.invitations: list[dict] = []
        self.acceptance_notices: list[dict] = []
        self.fail_all = False
        self.fail_next = 0
        self.raise_next = False

    def _outcome(self) -> NotificationResult:
        if self.raise_next:
            self.raise_next = False
            raise RuntimeError("Mock email transport exploded")
        if self.fail_all:
            return NotificationResult(success=False, error="Mock email failure")
        if self.fail_next > 0:
            self.fail_next -= 1
            return NotificationResult(success=False, error="Mock email failure")
        return NotificationResult(success=True, message_id="mock-message-id")

    async def send_invitation(
        self,
        coach: CoachDisplayInfo,
        athlete_email: str,
        token: InvitationToken,
        message: str | None,
        expires_at: datetime,
    ) -> NotificationResult:
        """Record the invitation email."""
        result = self._outcome()
        self.invitations.append(
            {
                "coach": coach,
                "athlete_email": athlete_email,
                "token": token,
                "message": message,
                "expires_at": expires_at,
                "success": result.success,
            }
        )
        return result

    async def send_acceptance_notice(
        self,
        coach: ContactInfo,
        athlete: ContactInfo,
        context: AcceptanceContext,
    ) -> NotificationResult:
        """Record the acceptance notice."""
        result = self._outcome()
        self.acceptance_notices.append(
            {
                "coach": coach,
                "athlete": athlete,
                "context": context,
                "success": result.success,
            }
        )
        return result

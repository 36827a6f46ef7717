"""Notification contract and best-effort dispatch.

Email delivery never decides whether a state change happened. On the
send/resend path the outcome is awaited because a failure flips the
invitation to ``email_failed``; on the accept path it runs in the
background and the caller only gets a handle to the outcome.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from datetime import datetime

import logfire

from coachlink.domain.value import (
    AcceptanceContext,
    CoachDisplayInfo,
    ContactInfo,
    InvitationToken,
)
from coachlink.domain.value.common import ValueObject

from .base import Service


class NotificationResult(ValueObject):
    """Outcome of one delivery attempt."""

    success: bool
    message_id: str | None = None
    error: str | None = None


class Notifier(ABC):
    """Transactional email interface."""

    @abstractmethod
    async def send_invitation(
        self,
        coach: CoachDisplayInfo,
        athlete_email: str,
        token: InvitationToken,
        message: str | None,
        expires_at: datetime,
    ) -> NotificationResult:
        """Send an invitation email to the athlete.

        Args:
            coach: Coach name, email and qualifications
            athlete_email: Recipient address
            token: Token embedded in the invitation link
            message: Optional personal note from the coach
            expires_at: When the invitation closes

        Returns:
            Delivery outcome
        """
        pass

    @abstractmethod
    async def send_acceptance_notice(
        self,
        coach: ContactInfo,
        athlete: ContactInfo,
        context: AcceptanceContext,
    ) -> NotificationResult:
        """Tell the coach that an athlete accepted.

        Args:
            coach: Recipient
            athlete: The athlete who accepted
            context: Athlete details and profile link

        Returns:
            Delivery outcome
        """
        pass


class NotificationDispatcher(Service):
    """Runs notifier calls without letting their failures escape.

    Background deliveries are tracked until they finish so ``drain`` can
    wait for them at shutdown.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[NotificationResult]] = set()

    @property
    def in_flight(self) -> int:
        """Number of background deliveries not yet finished."""
        return len(self._tasks)

    async def deliver(
        self, kind: str, send: Awaitable[NotificationResult]
    ) -> NotificationResult:
        """Await a delivery and turn any failure into a failed result."""
        with logfire.span("notification.deliver", kind=kind):
            try:
                result = await send
            except Exception as e:
                logfire.error(
                    "Notification raised", kind=kind, error=str(e), error_type=type(e).__name__
                )
                return NotificationResult(success=False, error=str(e))

            if result.success:
                logfire.info("Notification sent", kind=kind)
            else:
                logfire.warn("Notification failed", kind=kind, error=result.error)
            return result

    def dispatch(
        self, kind: str, send: Awaitable[NotificationResult]
    ) -> asyncio.Task[NotificationResult]:
        """Start a delivery in the background and return its task.

        Must be called from a running event loop.
        """
        task = asyncio.create_task(self.deliver(kind, send), name=f"notify:{kind}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every background delivery to finish."""
        if not self._tasks:
            return
        logfire.info("Draining notifications", in_flight=len(self._tasks))
        await asyncio.gather(*list(self._tasks))

"""Observability configuration using Logfire.

Usage:
    import logfire

    logfire.info("Invitation created", invitation_id=str(invitation.id))

    with logfire.span("invitation_service.resend_invitation", invitation_id=...):
        ...

Tokens are bearer secrets: log ``InvitationToken.masked()`` (first 8
characters), never the full value.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from coachlink.config import ObservabilitySettings, Settings


def should_send(observability: ObservabilitySettings) -> bool:
    """Whether spans go to Logfire cloud.

    An explicit ``send_to_logfire`` wins; otherwise a token enables sending.
    """
    if observability.send_to_logfire is not None:
        return observability.send_to_logfire
    return bool(observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Set OBSERVABILITY__LOGFIRE_TOKEN to enable cloud sending. Without it,
    spans and logs only reach the console.

    Args:
        settings: Application settings
    """
    send_to_logfire = should_send(settings.observability)

    logfire.configure(
        service_name="coachlink-invitations",
        service_version=settings.git_sha,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=settings.observability.logfire_token,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
    )


def _request_attributes(request, attributes):
    # Only HTTP requests reach the invitation API
    return {
        **attributes,
        "method": request.method,
        "path": request.url.path,
        "client_host": request.client.host if request.client else None,
    }


def instrument_fastapi(app: FastAPI) -> None:
    """Instrument FastAPI application with Logfire.

    Headers are not captured: the ``auth_token`` cookie is a session
    secret. Health probes are not traced.

    Args:
        app: FastAPI application instance
    """
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        excluded_urls="/health",
        request_attributes_mapper=_request_attributes,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Instrument SQLAlchemy engine with Logfire.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)


def instrument_httpx() -> None:
    """Instrument outbound httpx requests (the email provider) with Logfire."""
    logfire.instrument_httpx()

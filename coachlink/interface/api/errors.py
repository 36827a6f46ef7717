"""Mapping of domain errors to HTTP responses."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from coachlink.domain.error import (
    BrokenReferenceError,
    DomainError,
    DuplicatePendingInvitationError,
    EstablishmentFailedError,
    InvalidStateTransitionError,
    NotFoundError,
    PreconditionFailedError,
)

# Most specific first; the first isinstance match wins
ERROR_STATUS: list[tuple[type[DomainError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidStateTransitionError, status.HTTP_409_CONFLICT),
    (DuplicatePendingInvitationError, status.HTTP_409_CONFLICT),
    (PreconditionFailedError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (BrokenReferenceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (EstablishmentFailedError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(error: DomainError) -> int:
    """HTTP status code for a domain error."""
    for error_type, code in ERROR_STATUS:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a domain error with its own message."""
    code = status_for(exc)

    if isinstance(exc, BrokenReferenceError):
        # Details stay in the logs; the client gets a stable message
        logfire.error(
            "Broken data reference",
            path=request.url.path,
            resource=exc.resource,
            identifier=exc.identifier,
            referenced_by=exc.referenced_by,
        )
        detail = "Invitation data is inconsistent, please contact support"
    else:
        detail = str(exc)

    if code >= 500:
        logfire.error(
            "Request failed", path=request.url.path, status=code, error=str(exc)
        )
    else:
        logfire.info(
            "Request rejected", path=request.url.path, status=code, error=str(exc)
        )

    return JSONResponse(status_code=code, content={"detail": detail})


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Reject malformed input that got past request validation."""
    logfire.warn("Request validation error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install domain and validation error handlers on the application."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)

"""Unit tests for domain error to HTTP status mapping."""

import pytest
from fastapi import Request

from coachlink.domain.error import (
    BrokenReferenceError,
    DomainError,
    DuplicatePendingInvitationError,
    EstablishmentFailedError,
    InvalidStateTransitionError,
    NotFoundError,
    PreconditionFailedError,
)
from coachlink.interface.api.errors import domain_error_handler, status_for


@pytest.mark.parametrize(
    "error, expected",
    [
        (NotFoundError("Invitation", "token"), 404),
        (InvalidStateTransitionError("cancel", "accepted"), 409),
        (DuplicatePendingInvitationError("runner@example.com"), 409),
        (PreconditionFailedError("Coach profile not found"), 422),
        (BrokenReferenceError("coach profile", "abc", "Invitation 1"), 500),
        (EstablishmentFailedError("1", "connection reset"), 503),
        (DomainError("unexpected"), 500),
    ],
)
def test_status_for(error, expected):
    assert status_for(error) == expected


def test_messages_are_caller_facing():
    assert str(NotFoundError("Invitation", "secret-id")) == "Invitation not found"
    assert (
        str(InvalidStateTransitionError("resend", "accepted"))
        == "Cannot resend invitation with status: accepted"
    )


@pytest.mark.asyncio
async def test_handler_hides_broken_reference_details():
    request = Request(
        {"type": "http", "method": "GET", "path": "/invitations/validate/x", "headers": []}
    )

    response = await domain_error_handler(
        request, BrokenReferenceError("coach profile", "abc", "Invitation 1")
    )

    assert response.status_code == 500
    assert b"abc" not in response.body
    assert b"please contact support" in response.body


@pytest.mark.asyncio
async def test_handler_passes_domain_message_through():
    request = Request(
        {"type": "http", "method": "DELETE", "path": "/invitations/1", "headers": []}
    )

    response = await domain_error_handler(
        request, InvalidStateTransitionError("cancel", "accepted")
    )

    assert response.status_code == 409
    assert b"Cannot cancel invitation with status: accepted" in response.body

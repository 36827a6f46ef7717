"""Ownership checks for invitation commands."""

import logfire

from coachlink.domain.error import NotFoundError
from coachlink.domain.model.account import Account
from coachlink.domain.model.invitation import Invitation
from coachlink.domain.value import CoachAccountId

from .base import Service


class AuthorizationGuard(Service):
    """Confirms the caller may act on an invitation.

    Every refusal is a ``NotFoundError`` so callers cannot tell another
    coach's invitation apart from one that does not exist.
    """

    def ensure_coach_owns(
        self,
        invitation: Invitation | None,
        caller_id: CoachAccountId,
        identifier: str,
    ) -> Invitation:
        """Return the invitation if ``caller_id`` is its coach.

        Args:
            invitation: Invitation as loaded, or None if not found
            caller_id: Authenticated caller's account id
            identifier: Id the caller asked for, echoed in the error

        Raises:
            NotFoundError: If missing or owned by another coach
        """
        if invitation is None:
            raise NotFoundError("Invitation", identifier)
        if invitation.coach_id != caller_id:
            logfire.warn(
                "Invitation access denied",
                invitation_id=str(invitation.id),
                caller_id=str(caller_id),
            )
            raise NotFoundError("Invitation", identifier)
        return invitation

    def ensure_invitee(
        self,
        invitation: Invitation | None,
        account: Account | None,
        identifier: str,
    ) -> Invitation:
        """Return the invitation if ``account`` is the athlete it addresses.

        Raises:
            NotFoundError: If missing or addressed to another email
        """
        if invitation is None or account is None:
            raise NotFoundError("Invitation", identifier)
        if account.email != invitation.email:
            logfire.warn(
                "Invitation addressed to another email",
                invitation_id=str(invitation.id),
                account_id=str(account.id),
            )
            raise NotFoundError("Invitation", identifier)
        return invitation

"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class NotFoundError(DomainError):
    """Raised when a resource is unknown or the caller may not see it.

    Unauthorized access is reported with this error too, so callers cannot
    probe for other coaches' invitations.
    """

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found")


class InvalidStateTransitionError(DomainError):
    """Raised when a command is not legal from the current status."""

    def __init__(self, action: str, status: str):
        self.action = action
        self.status = status
        super().__init__(f"Cannot {action} invitation with status: {status}")


class DuplicatePendingInvitationError(DomainError):
    """Raised when a pending invitation already exists for (coach, email)."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"A pending invitation already exists for {email}")


class PreconditionFailedError(DomainError):
    """Raised when a required profile linkage is missing."""

    def __init__(self, message: str):
        super().__init__(message)


class EstablishmentFailedError(DomainError):
    """Raised when the accept-time writes could not be completed.

    The caller should retry the whole accept; a replay is safe.
    """

    def __init__(self, invitation_id: str, reason: str):
        self.invitation_id = invitation_id
        super().__init__(
            f"Failed to establish relationship for invitation {invitation_id}: {reason}"
        )


class BrokenReferenceError(DomainError):
    """Raised when stored data points at a record that no longer exists."""

    def __init__(self, resource: str, identifier: str, referenced_by: str):
        self.resource = resource
        self.identifier = identifier
        self.referenced_by = referenced_by
        super().__init__(
            f"{referenced_by} references missing {resource} {identifier}"
        )


class DuplicateRelationshipError(DomainError):
    """Raised by storage when a relationship already exists for an invitation."""

    def __init__(self, invitation_id: str):
        self.invitation_id = invitation_id
        super().__init__(f"Relationship already exists for invitation {invitation_id}")

"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the business rules that span more than one entity
    or depend on collaborators such as repositories and the clock.
    """

    pass

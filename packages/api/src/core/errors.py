# This project was developed with assistance from AI tools.
"""Error taxonomy for the access engine.

Each kind maps to a distinct transport status in the route layer and must
never be reported as another kind.
"""


class AccessError(Exception):
    """Base class for access engine failures."""


class Unauthenticated(AccessError):
    """Credential absent, malformed, expired, or failing verification."""


class Forbidden(AccessError):
    """Caller may not see or act on the requested resource."""

    def __init__(
        self,
        message: str,
        *,
        subject_id: int | None = None,
        resource_id: int | str | None = None,
    ):
        super().__init__(message)
        self.subject_id = subject_id
        self.resource_id = resource_id


class NotFound(AccessError):
    """Referenced entity does not exist."""

    def __init__(self, resource: str, resource_id: int | str):
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id


class ConfigurationError(AccessError):
    """Required configuration missing. Raised at startup only."""


class StoreError(AccessError):
    """Record store query failed or timed out."""

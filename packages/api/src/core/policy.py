# This project was developed with assistance from AI tools.
"""Unit access policy resolved once at process start.

Every component that needs a distinguished unit id or the supervisory role
name reads it from the ``AccessPolicy`` built here; nothing else defines
those values.
"""

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from .config import Settings, settings
from .errors import ConfigurationError


class AccessPolicy(BaseModel):
    """Injected unit-visibility and redaction configuration."""

    model_config = ConfigDict(frozen=True)

    specialized_unit_id: int
    oversight_unit_id: int
    supervisory_role_name: str
    null_unit_is_visible: bool = False
    name_field: str = "name"
    identifier_fields: tuple[str, ...] = ("cpf", "nis")
    payload_field: str = "payload"


def load_access_policy(source: Settings) -> AccessPolicy:
    """Build the policy from settings.

    Raises:
        ConfigurationError: A required value is unset.
    """
    missing = [
        name
        for name in ("SPECIALIZED_UNIT_ID", "OVERSIGHT_UNIT_ID", "SUPERVISORY_ROLE_NAME")
        if getattr(source, name) in (None, "")
    ]
    if missing:
        raise ConfigurationError(f"Required access settings are unset: {', '.join(missing)}")

    return AccessPolicy(
        specialized_unit_id=source.SPECIALIZED_UNIT_ID,
        oversight_unit_id=source.OVERSIGHT_UNIT_ID,
        supervisory_role_name=source.SUPERVISORY_ROLE_NAME,
        null_unit_is_visible=source.NULL_UNIT_IS_VISIBLE,
        name_field=source.REDACTED_NAME_FIELD,
        identifier_fields=tuple(source.REDACTED_IDENTIFIER_FIELDS),
        payload_field=source.REDACTED_PAYLOAD_FIELD,
    )


@lru_cache
def get_access_policy() -> AccessPolicy:
    """Process-wide policy. First call happens in the app lifespan."""
    return load_access_policy(settings)

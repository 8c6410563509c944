# This project was developed with assistance from AI tools.
"""Authentication and authorization schemas."""

from db.enums import UserRole
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Subject(BaseModel):
    """The authenticated caller. Built per request, never cached."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str = ""
    role: UserRole
    home_unit_id: int | None = None


class AccessScope(BaseModel):
    """Unit ids a subject's queries are filtered to, or unrestricted."""

    model_config = ConfigDict(frozen=True)

    is_unrestricted: bool = False
    allowed_unit_ids: frozenset[int] = Field(default_factory=frozenset)
    include_unassigned: bool = False

    @model_validator(mode="after")
    def _restricted_scope_has_units(self) -> "AccessScope":
        if not self.is_unrestricted and not self.allowed_unit_ids:
            raise ValueError("A restricted scope needs at least one unit id")
        return self


class TokenPayload(BaseModel):
    """Decoded JWT claims issued by the login service."""

    id: int
    username: str = ""
    role: str
    unit_id: int | None = None

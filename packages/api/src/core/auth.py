# This project was developed with assistance from AI tools.
"""Identity resolution: bearer credential -> Subject.

Pure functions with no FastAPI or HTTP dependencies. The middleware layer
calls these and translates ``Unauthenticated`` into a 401 response.
"""

import logging

import jwt
from db.enums import UserRole
from pydantic import ValidationError

from ..schemas.auth import Subject, TokenPayload
from .errors import Unauthenticated

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""
    if authorization and authorization.startswith("Bearer "):
        token = authorization[7:].strip()
        return token or None
    return None


def _resolve_role(claim: str, supervisory_role_name: str) -> UserRole:
    """Map a role claim to a UserRole.

    The supervisory role is granted only through the configured role name.
    Anything unrecognized falls back to ``OTHER``, the most restrictive role.
    """
    if claim == supervisory_role_name:
        return UserRole.SUPERVISORY
    try:
        role = UserRole(claim)
    except ValueError:
        logger.info("Unrecognized role claim %r, treating as %s", claim, UserRole.OTHER.value)
        return UserRole.OTHER
    if role is UserRole.SUPERVISORY:
        return UserRole.OTHER
    return role


def resolve_subject(
    token: str | None,
    *,
    secret: str,
    algorithm: str,
    supervisory_role_name: str,
) -> Subject:
    """Verify a bearer token and build the Subject it identifies.

    A missing ``unit_id`` claim is not an error here; the Subject carries
    ``home_unit_id=None`` and scope calculation decides what that means.

    Args:
        token: The raw JWT, or None when the request carried none.
        secret: HMAC key the token must be signed with.
        algorithm: Accepted signing algorithm.
        supervisory_role_name: Role claim that maps to ``UserRole.SUPERVISORY``.

    Raises:
        Unauthenticated: Token missing, malformed, expired, badly signed,
            or lacking the identity claims.
    """
    if not token:
        raise Unauthenticated("Missing authentication token")

    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise Unauthenticated("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise Unauthenticated("Invalid token") from exc

    try:
        payload = TokenPayload(**claims)
    except ValidationError as exc:
        raise Unauthenticated("Token is missing identity claims") from exc

    return Subject(
        id=payload.id,
        username=payload.username,
        role=_resolve_role(payload.role, supervisory_role_name),
        home_unit_id=payload.unit_id,
    )

# This project was developed with assistance from AI tools.
"""
Request authentication and unit scoping for FastAPI routes.

Resolves the bearer token into a Subject, computes the caller's AccessScope
per request, and provides the route guards built on them (child-item
ownership, role and specialized-unit gates). Engine errors are translated to
HTTPException here; the app turns those into RFC 7807 bodies.
"""

import logging
from typing import Annotated

from db.enums import UserRole
from fastapi import Depends, HTTPException, Request, status

from ..core.auth import extract_bearer_token, resolve_subject
from ..core.config import settings
from ..core.errors import AccessError, Forbidden, NotFound, StoreError, Unauthenticated
from ..core.policy import AccessPolicy, get_access_policy
from ..schemas.auth import AccessScope, Subject
from ..services.access import child_tables, compute_scope, resolve_and_check_ownership
from ..services.audit import record_denial
from ..services.store import QueryClient, get_query_client

logger = logging.getLogger(__name__)


def to_http_exception(exc: AccessError) -> HTTPException:
    """Map an engine error kind to its HTTP status without merging kinds."""
    if isinstance(exc, Unauthenticated):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(exc, Forbidden):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, StoreError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Record store unavailable",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Access engine misconfigured",
    )


AccessPolicyDep = Annotated[AccessPolicy, Depends(get_access_policy)]
QueryClientDep = Annotated[QueryClient, Depends(get_query_client)]


async def get_current_subject(request: Request, policy: AccessPolicyDep) -> Subject:
    """FastAPI dependency: verify the bearer token and return the Subject."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    try:
        return resolve_subject(
            token,
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            supervisory_role_name=policy.supervisory_role_name,
        )
    except Unauthenticated as exc:
        raise to_http_exception(exc) from exc


CurrentSubject = Annotated[Subject, Depends(get_current_subject)]


async def get_access_scope(subject: CurrentSubject, policy: AccessPolicyDep) -> AccessScope:
    """FastAPI dependency: compute the caller's scope for this request."""
    try:
        return compute_scope(subject, policy)
    except Forbidden as exc:
        raise to_http_exception(exc) from exc


CurrentScope = Annotated[AccessScope, Depends(get_access_scope)]


async def audit_denial(client: QueryClient, subject: Subject, exc: Forbidden, *, resource: str) -> None:
    """Write a denial to the audit trail without changing the response.

    A failed audit write is logged; the caller still receives the 403.
    """
    try:
        await record_denial(client, subject, exc, resource=resource)
    except StoreError:
        logger.exception(
            "Failed to record access denial: user=%s resource=%s id=%s",
            subject.id,
            resource,
            exc.resource_id,
        )


def require_item_access(item_table: str):
    """Dependency factory: verify the caller may act on a child item.

    The route must declare an ``item_id`` path parameter. The dependency
    resolves to the owning case id.

    Usage:
        @router.put("/forwardings/{item_id}")
        async def update(case_id: Annotated[int, Depends(require_item_access("forwardings"))]):
            ...
    """
    if item_table not in child_tables():
        raise ValueError(f"Unsupported item table: {item_table!r}")

    async def _check(
        item_id: int,
        subject: CurrentSubject,
        scope: CurrentScope,
        client: QueryClientDep,
    ) -> int:
        try:
            return await resolve_and_check_ownership(
                client, item_id, item_table, scope, subject_id=subject.id
            )
        except Forbidden as exc:
            await audit_denial(client, subject, exc, resource=item_table)
            raise to_http_exception(exc) from exc
        except (NotFound, StoreError) as exc:
            raise to_http_exception(exc) from exc

    return _check


def require_roles(*allowed_roles: UserRole):
    """Dependency factory: restrict a route to specific roles.

    Usage:
        @router.post("/users", dependencies=[Depends(require_roles(UserRole.SUPERVISORY))])
    """

    async def _check(request: Request, subject: CurrentSubject, client: QueryClientDep) -> Subject:
        if subject.role not in allowed_roles:
            logger.warning(
                "RBAC denied: user=%s role=%s attempted route requiring %s",
                subject.id,
                subject.role.value,
                [r.value for r in allowed_roles],
            )
            exc = Forbidden(
                "Insufficient permissions",
                subject_id=subject.id,
                resource_id=request.url.path,
            )
            await audit_denial(client, subject, exc, resource="route")
            raise to_http_exception(exc)
        return subject

    return _check


async def require_specialized_unit(
    request: Request,
    subject: CurrentSubject,
    policy: AccessPolicyDep,
    client: QueryClientDep,
) -> Subject:
    """FastAPI dependency: route reserved for staff homed in the specialized unit.

    Supervisory callers always pass.
    """
    if subject.role is UserRole.SUPERVISORY or subject.home_unit_id == policy.specialized_unit_id:
        return subject

    logger.warning(
        "RBAC denied: user=%s role=%s unit=%s attempted specialized-unit route",
        subject.id,
        subject.role.value,
        subject.home_unit_id,
    )
    exc = Forbidden(
        "Route is restricted to the specialized unit",
        subject_id=subject.id,
        resource_id=request.url.path,
    )
    await audit_denial(client, subject, exc, resource="route")
    raise to_http_exception(exc)

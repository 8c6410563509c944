# This project was developed with assistance from AI tools.
"""Case read routes with unit scoping and identity redaction."""

from typing import Any

from db.enums import CaseStatus
from fastapi import APIRouter, Query

from ..core.errors import Forbidden, StoreError
from ..middleware.auth import (
    AccessPolicyDep,
    CurrentScope,
    CurrentSubject,
    QueryClientDep,
    audit_denial,
    to_http_exception,
)
from ..schemas.case import CaseListResponse, Pagination
from ..services import cases as case_service
from ..services.audit import ACTION_VIEW_CASE, write_audit_event


router = APIRouter()


@router.get("/", response_model=CaseListResponse)
async def list_cases(
    subject: CurrentSubject,
    scope: CurrentScope,
    policy: AccessPolicyDep,
    client: QueryClientDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    filter_status: CaseStatus | None = None,
) -> CaseListResponse:
    """List cases visible to the caller's unit scope."""
    try:
        rows, total = await case_service.list_cases(
            client,
            subject,
            scope,
            policy,
            status=filter_status,
            offset=offset,
            limit=limit,
        )
    except StoreError as exc:
        raise to_http_exception(exc) from exc

    return CaseListResponse(
        data=rows,
        pagination=Pagination(
            total=total,
            offset=offset,
            limit=limit,
            has_more=(offset + limit) < total,
        ),
    )


@router.get("/{case_id}")
async def get_case(
    case_id: int,
    subject: CurrentSubject,
    scope: CurrentScope,
    policy: AccessPolicyDep,
    client: QueryClientDep,
) -> dict[str, Any]:
    """Return one case if it is inside the caller's unit scope."""
    try:
        case = await case_service.get_case(client, case_id, subject, scope, policy)
        await write_audit_event(
            client,
            subject=subject,
            action=ACTION_VIEW_CASE,
            details={"case_id": case_id},
        )
    except Forbidden as exc:
        await audit_denial(client, subject, exc, resource="cases")
        raise to_http_exception(exc) from exc
    except StoreError as exc:
        raise to_http_exception(exc) from exc
    return case

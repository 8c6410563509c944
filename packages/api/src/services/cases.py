# This project was developed with assistance from AI tools.
"""Case read service.

Composes the caller's unit predicate into the case queries and redacts
the rows before they leave the service. Create/update rules for cases
live elsewhere.
"""

import logging
from typing import Any

from db import Case
from db.enums import CaseStatus

from ..core.errors import Forbidden
from ..core.policy import AccessPolicy
from ..schemas.auth import AccessScope, Subject
from .access import ColumnRef, build_predicate, redact
from .store import SupportsFetch

logger = logging.getLogger(__name__)

_CASE_COLUMNS = "c.id, c.unit_id, c.name, c.cpf, c.nis, c.status, c.payload, c.created_at"
_UNIT_COLUMN = ColumnRef("c", "unit_id")


async def list_cases(
    client: SupportsFetch,
    subject: Subject,
    scope: AccessScope,
    policy: AccessPolicy,
    *,
    status: CaseStatus | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[dict[str, Any]], int]:
    """List cases visible to the caller, newest first.

    Returns:
        Tuple of (redacted case rows, total matching count).
    """
    conditions: list[str] = []
    params: list[Any] = []

    if status is not None:
        params.append(status.value)
        conditions.append(f"c.status = ${len(params)}")

    predicate = build_predicate(scope, _UNIT_COLUMN, start_index=len(params))
    conditions.append(predicate.text)
    params.extend(predicate.values)

    where = " AND ".join(conditions)
    count_result = await client.fetch(
        f"SELECT count(*) AS total FROM {Case.__tablename__} c WHERE {where}",
        params,
    )
    total = count_result.rows[0]["total"] if count_result.rows else 0

    page_params = [*params, limit, offset]
    result = await client.fetch(
        f"SELECT {_CASE_COLUMNS} FROM {Case.__tablename__} c WHERE {where} "
        f"ORDER BY c.created_at DESC LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}",
        page_params,
    )
    return redact(subject, result.rows, policy), total


async def get_case(
    client: SupportsFetch,
    case_id: int,
    subject: Subject,
    scope: AccessScope,
    policy: AccessPolicy,
) -> dict[str, Any]:
    """Fetch a single case inside the caller's scope.

    The unit predicate is part of the read itself, so a case moved to
    another unit or deleted after any earlier check is never returned.

    Raises:
        Forbidden: Case missing or outside the caller's scope.
    """
    predicate = build_predicate(scope, _UNIT_COLUMN, start_index=1)
    result = await client.fetch(
        f"SELECT {_CASE_COLUMNS} FROM {Case.__tablename__} c "
        f"WHERE c.id = $1 AND {predicate.text}",
        [case_id, *predicate.values],
    )
    if result.rowcount == 0:
        logger.warning("Case access denied: user=%s case=%s", subject.id, case_id)
        raise Forbidden(
            "Case is outside the caller's unit scope",
            subject_id=subject.id,
            resource_id=case_id,
        )
    return redact(subject, result.rows[0], policy)

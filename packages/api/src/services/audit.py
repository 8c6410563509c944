# This project was developed with assistance from AI tools.
"""Access audit trail.

Appends rows to ``access_logs`` for case reads and access denials. The
statement goes through the same query client as the ownership checks.
"""

import json
import logging

from db import AccessLog

from ..core.errors import Forbidden
from ..schemas.auth import Subject
from .store import SupportsFetch

logger = logging.getLogger(__name__)

ACTION_VIEW_CASE = "VIEW_CASE"
ACTION_ACCESS_DENIED = "ACCESS_DENIED"

_INSERT_SQL = (
    f"INSERT INTO {AccessLog.__tablename__} (user_id, username, action, details) "
    "VALUES ($1, $2, $3, $4)"
)


async def write_audit_event(
    client: SupportsFetch,
    *,
    subject: Subject,
    action: str,
    details: dict | None = None,
) -> None:
    """Append one audit row.

    Args:
        client: Store query client.
        subject: Caller the event is attributed to.
        action: Event category (``VIEW_CASE``, ``ACCESS_DENIED``).
        details: JSON-serializable event payload.
    """
    await client.fetch(
        _INSERT_SQL,
        [
            subject.id,
            subject.username,
            action,
            json.dumps(details, default=str) if details is not None else None,
        ],
    )


async def record_denial(client: SupportsFetch, subject: Subject, exc: Forbidden, *, resource: str) -> None:
    """Audit a Forbidden outcome with the subject and resource it names."""
    await write_audit_event(
        client,
        subject=subject,
        action=ACTION_ACCESS_DENIED,
        details={
            "resource": resource,
            "resource_id": exc.resource_id,
            "role": subject.role.value,
            "reason": str(exc),
        },
    )

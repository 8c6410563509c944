# This project was developed with assistance from AI tools.
"""Unit-scoped access control and identity redaction.

Every resource route goes through the primitives in this module:

- ``compute_scope``: Subject -> AccessScope
- ``build_predicate``: AccessScope + column -> ``(text, values)`` fragment
- ``resolve_and_check_ownership``: child item -> visible parent case id
- ``redact``: mask specialized-unit identities for oversight callers

Scope calculation, predicate building and redaction are pure. Only the
ownership checks touch the store, through an injected query client.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, NamedTuple

from db import CASE_CHILD_MODELS, Case
from db.enums import UserRole

from ..core.errors import Forbidden, NotFound
from ..core.policy import AccessPolicy
from ..schemas.auth import AccessScope, Subject
from .store import SupportsFetch

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Child table name -> owning-case FK column, taken from the ORM models.
_CHILD_TABLES: dict[str, str] = {
    model.__tablename__: model.__table__.c.case_id.name for model in CASE_CHILD_MODELS
}


# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------


def compute_scope(subject: Subject, policy: AccessPolicy) -> AccessScope:
    """Compute the unit ids a subject may see.

    Supervisory callers are unrestricted. Everyone else needs a home unit
    and sees that unit only; the oversight unit additionally sees the
    specialized unit. Unrecognized roles get no exceptions.

    Raises:
        Forbidden: Non-supervisory subject without a unit assignment.
    """
    if subject.role is UserRole.SUPERVISORY:
        return AccessScope(is_unrestricted=True)

    if subject.home_unit_id is None:
        logger.warning(
            "Scope denied: user=%s role=%s has no unit assignment",
            subject.id,
            subject.role.value,
        )
        raise Forbidden("unit assignment missing", subject_id=subject.id)

    allowed = {subject.home_unit_id}
    if (
        subject.home_unit_id == policy.oversight_unit_id
        and policy.oversight_unit_id != policy.specialized_unit_id
    ):
        allowed.add(policy.specialized_unit_id)

    return AccessScope(
        allowed_unit_ids=frozenset(allowed),
        include_unassigned=policy.null_unit_is_visible,
    )


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ColumnRef:
    """Qualified column reference rendered as ``table."column"``."""

    table: str
    column: str

    def __post_init__(self):
        for part in (self.table, self.column):
            if not _IDENTIFIER_RE.match(part):
                raise ValueError(f"Not a plain SQL identifier: {part!r}")

    @classmethod
    def parse(cls, ref: str) -> "ColumnRef":
        """Parse ``"alias.column"``."""
        table, sep, column = ref.partition(".")
        if not sep:
            raise ValueError(f"Column reference must be qualified: {ref!r}")
        return cls(table, column.strip('"'))

    def __str__(self) -> str:
        return f'{self.table}."{self.column}"'


class Predicate(NamedTuple):
    text: str
    values: list[Any]


def build_predicate(scope: AccessScope, column: ColumnRef | str, start_index: int) -> Predicate:
    """Build a unit filter fragment for ``column``.

    Placeholders are numbered from ``start_index + 1``, so a caller whose
    base query already binds N parameters passes N and appends ``values``
    to its own list. Calls share no state; filtering a joined table in the
    same query is a second call with the updated count.

    Args:
        scope: The caller's AccessScope.
        column: Unit-id column, as a ColumnRef or ``"alias.column"``.
        start_index: Number of parameters already bound by the caller.

    Returns:
        ``("TRUE", [])`` for unrestricted scopes, otherwise a parenthesized
        OR of equality tests plus their bound values.
    """
    if start_index < 0:
        raise ValueError("start_index must be non-negative")
    if scope.is_unrestricted:
        return Predicate("TRUE", [])

    ref = column if isinstance(column, ColumnRef) else ColumnRef.parse(column)
    values = sorted(scope.allowed_unit_ids)
    clauses = [f"{ref} = ${start_index + offset}" for offset in range(1, len(values) + 1)]
    if scope.include_unassigned:
        clauses.append(f"{ref} IS NULL")
    return Predicate(f"({' OR '.join(clauses)})", values)


# ---------------------------------------------------------------------------
# Ownership
# ---------------------------------------------------------------------------


async def check_case_access(
    client: SupportsFetch,
    case_id: int,
    scope: AccessScope,
    *,
    subject_id: int | None = None,
) -> int:
    """Verify that ``case_id`` falls inside ``scope``.

    A missing case and an out-of-scope case both yield zero rows and are
    reported as Forbidden; callers that must tell them apart look the row
    up first (see ``resolve_and_check_ownership``).

    Raises:
        Forbidden: Zero rows matched.
        StoreError: The store query failed or timed out.
    """
    predicate = build_predicate(scope, ColumnRef("c", "unit_id"), start_index=1)
    sql = f"SELECT c.id FROM {Case.__tablename__} c WHERE c.id = $1 AND {predicate.text}"
    result = await client.fetch(sql, [case_id, *predicate.values])

    if result.rowcount == 0:
        logger.warning("Case access denied: user=%s case=%s", subject_id, case_id)
        raise Forbidden(
            "Case is outside the caller's unit scope",
            subject_id=subject_id,
            resource_id=case_id,
        )
    return case_id


async def resolve_and_check_ownership(
    client: SupportsFetch,
    item_id: int,
    item_table: str,
    scope: AccessScope,
    *,
    subject_id: int | None = None,
) -> int:
    """Resolve the case owning a child item and verify the caller may see it.

    The two reads are not wrapped in a transaction. If the parent case is
    deleted between them, the visibility check finds nothing and the result
    is Forbidden.

    Args:
        client: Store query client.
        item_id: Primary key of the child item.
        item_table: One of the registered child tables.
        scope: The caller's AccessScope.
        subject_id: Caller id, carried on Forbidden for audit logging.

    Returns:
        The owning case id.

    Raises:
        ValueError: ``item_table`` is not a registered child table.
        NotFound: No item with ``item_id`` exists.
        Forbidden: The owning case is outside the caller's scope.
        StoreError: A store query failed or timed out.
    """
    fk_column = _CHILD_TABLES.get(item_table)
    if fk_column is None:
        raise ValueError(f"Unsupported item table: {item_table!r}")

    lookup = await client.fetch(
        f'SELECT "{fk_column}" FROM {item_table} WHERE id = $1',
        [item_id],
    )
    if lookup.rowcount == 0:
        raise NotFound(item_table, item_id)

    case_id = lookup.rows[0][fk_column]
    try:
        return await check_case_access(client, case_id, scope, subject_id=subject_id)
    except Forbidden as exc:
        raise Forbidden(
            f"{item_table} item belongs to a case outside the caller's unit scope",
            subject_id=subject_id,
            resource_id=item_id,
        ) from exc


def child_tables() -> frozenset[str]:
    """Names accepted by ``resolve_and_check_ownership``."""
    return frozenset(_CHILD_TABLES)


# ---------------------------------------------------------------------------
# Redaction
# ---------------------------------------------------------------------------


def _mask_identity(record: Mapping[str, Any], placeholder: str, policy: AccessPolicy) -> dict:
    masked = {k: v for k, v in record.items() if k not in policy.identifier_fields}
    masked[policy.name_field] = placeholder
    return masked


def _redact_case(record: Any, policy: AccessPolicy) -> Any:
    if not isinstance(record, Mapping) or record.get("unit_id") != policy.specialized_unit_id:
        return record

    placeholder = f"[REDACTED - ID: {record.get('id', 'XXX')}]"
    redacted = _mask_identity(record, placeholder, policy)

    payload = redacted.get(policy.payload_field)
    if isinstance(payload, Mapping):
        nested = {k: v for k, v in payload.items() if k not in policy.identifier_fields}
        if policy.name_field in nested:
            nested[policy.name_field] = placeholder
        redacted[policy.payload_field] = nested
    return redacted


def redact(subject: Subject, records: Any, policy: AccessPolicy) -> Any:
    """Mask specialized-unit case identities for oversight callers.

    The name becomes ``[REDACTED - ID: <id>]`` and identifier fields are
    removed, at the top level and inside the nested payload. Inputs are
    never mutated. Other callers and other units get their input back
    unchanged. Re-applying to a redacted record yields the same record.

    Args:
        subject: The caller.
        records: A case mapping, a list or tuple of them, or None. A tuple
            comes back as a tuple; any other sequence comes back as a list.
        policy: Access policy naming the specialized unit and the fields.
    """
    if subject.role is not UserRole.OVERSIGHT or records is None:
        return records
    if isinstance(records, Sequence) and not isinstance(records, (str, bytes)):
        redacted = [_redact_case(record, policy) for record in records]
        return tuple(redacted) if isinstance(records, tuple) else redacted
    return _redact_case(records, policy)

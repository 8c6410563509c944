# This project was developed with assistance from AI tools.
"""Case listing response schemas.

Case rows are passed through as plain mappings: redaction removes
identifier keys entirely, and a typed model would put them back as nulls.
"""

from typing import Any

from pydantic import BaseModel


class Pagination(BaseModel):
    """Offset/limit window over the caller's visible cases."""

    total: int
    offset: int
    limit: int
    has_more: bool


class CaseListResponse(BaseModel):
    """Paginated list of cases visible to the caller."""

    data: list[dict[str, Any]]
    pagination: Pagination

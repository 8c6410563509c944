# This project was developed with assistance from AI tools.
"""Problem Details body (RFC 7807) returned for every error status."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body shared by 401/403/404/422/5xx responses.

    401, 403 and 404 stay distinct: a missing child item is never reported
    as a denial and a denial is never reported as missing.
    """

    type: str = Field(default="about:blank", description="Problem type URI.")
    title: str = Field(description="Status phrase, e.g. 'Forbidden'.")
    status: int = Field(description="HTTP status code.")
    detail: str = Field(default="", description="What went wrong for this request.")
    request_id: str = Field(default="", description="Value of X-Request-ID, or a generated UUID.")

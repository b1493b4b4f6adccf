"""Common Pydantic schemas shared across the API."""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel


class ErrorBody(BaseModel):
    """Error payload inside the standard envelope."""

    message: str
    status: int
    details: Any | None = None


class ErrorResponse(BaseModel):
    """Standardized error response."""

    success: bool = False
    error: ErrorBody
    timestamp: str


def validation_details(errors: Sequence[Any]) -> list[dict[str, Any]]:
    """Flatten pydantic errors into one ``{field, message, type}`` per issue."""
    details = []
    for error in errors:
        loc = [str(x) for x in error.get("loc", ()) if x not in ("query", "body", "path")]
        details.append(
            {
                "field": ".".join(loc),
                "message": error["msg"],
                "type": error["type"],
            }
        )
    return details

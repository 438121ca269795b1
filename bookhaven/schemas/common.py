"""
Shared response shapes.

Every endpoint answers with the same envelope:

    {"success": true,  "data": {...}, "error": null, "message": "..."}
    {"success": false, "data": null,  "error": "...", "message": null}

Routers declare `response_model=APIResponse[SomeSchema]` so the OpenAPI docs
show the concrete payload inside the envelope.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class APIResponse(BaseModel, Generic[DataT]):
    """Standard response envelope."""

    success: bool = Field(default=True, description="Whether the request succeeded")
    data: DataT | None = Field(default=None, description="Response payload")
    error: str | None = Field(default=None, description="Error description on failure")
    message: str | None = Field(default=None, description="Human readable status message")


def ok(data=None, message: str | None = None) -> dict:
    """Build a success envelope."""
    return {"success": True, "data": data, "error": None, "message": message}


def fail(error: str, message: str | None = None) -> dict:
    """Build a failure envelope."""
    return {"success": False, "data": None, "error": error, "message": message}


class PaginationMeta(BaseModel):
    """Pagination block returned next to paged collections."""

    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of items")
    total_pages: int = Field(..., ge=0, description="Total number of pages")

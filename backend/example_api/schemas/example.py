"""
Example API — Pydantic Request/Response Schemas
=================================================

What:  Pydantic models defining the HTTP contract of the example resource.
Why:   Input validation, automatic serialization, and OpenAPI doc generation.
Who:   Used by route handlers as request bodies and response models.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models: What clients send
# ══════════════════════════════════════════════════════════════════════════


class ExampleCreate(BaseModel):
    """Body of POST /api/examples."""
    title: str = Field(description="Title of the new example")


# ══════════════════════════════════════════════════════════════════════════
# Response Models: What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class ExampleResponse(BaseModel):
    """
    What:  Representation of one example.
    Who:   Returned by GET /api/examples/{id} (200) and POST /api/examples (201).
    """
    id: int = Field(description="Example identifier")
    title: str = Field(description="Example title")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models: Consistent error format across all endpoints
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "example with ID '2' was not found",
            "request_id": "1f0c2b7a"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")

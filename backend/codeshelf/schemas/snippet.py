"""
CodeShelf — Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the JSON contract between client and server.
How:   FastAPI validates request bodies and serializes responses with them;
       the client sync layer parses responses with the same models.

Wire names:
    The snippet timestamp is `createdAt` on the wire and `created_at` in
    Python. Responses are serialized by alias (FastAPI's default), and
    `populate_by_name` lets both spellings parse.

Request bodies:
    Content fields are declared Optional with no length limits. Presence,
    trimming and the title limit are business rules enforced by
    services.validation, which reports them as 400 with a `missing` map
    rather than FastAPI's generic 422.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SnippetCreate(BaseModel):
    """Body of POST /api/snippets."""

    title: Optional[str] = Field(default=None, description="Snippet title (max 100 chars)")
    language: Optional[str] = Field(default=None, description="Language tag, stored lowercase")
    code: Optional[str] = Field(default=None, description="Snippet body")


class SnippetUpdate(BaseModel):
    """Body of PUT /api/snippets/{id}. Every field is optional."""

    title: Optional[str] = None
    language: Optional[str] = None
    code: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SnippetResponse(BaseModel):
    """
    Full representation of a stored snippet.

    Example:
        {
            "id": "0b7f3c1e-...",
            "title": "Hi",
            "language": "python",
            "code": "print(1)",
            "createdAt": "2026-10-19T12:00:00Z"
        }
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(description="Opaque snippet identifier")
    title: str
    language: str
    code: str
    created_at: datetime = Field(alias="createdAt", description="Creation time (UTC ISO 8601)")

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """SQLite returns naive datetimes; every stored timestamp is UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class SnippetListResponse(BaseModel):
    """Body of GET /api/snippets, newest first."""

    snippets: List[SnippetResponse]
    count: int = Field(description="Number of snippets in this response")


class SnippetCreatedResponse(BaseModel):
    """Body of POST /api/snippets (HTTP 201)."""

    snippet: SnippetResponse


class MessageResponse(BaseModel):
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body for every failed API call.

    Fields:
        error:      Machine-readable code (e.g. "validation_error", "not_found")
        message:    Human-readable description
        details:    Extra context for validation errors (field, max_length)
        missing:    {title, language, code} booleans when required fields are absent
        request_id: Correlation ID for the server log entry
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error context")
    missing: Optional[Dict[str, bool]] = Field(default=None, description="Absent required fields")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Body of GET /api/health."""

    status: str = Field(description="healthy or degraded")
    timestamp: datetime = Field(description="Server time (UTC)")
    uptime: float = Field(description="Seconds since the service started")
    environment: str
    version: str
    database: str = Field(description="connected or disconnected")

"""
CodeShelf Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the snippet API and its client.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
       The client sync layer maps HTTP errors back onto the same classes.
Who:   Raised by services, middleware and `codeshelf.client.api`.

Exception Hierarchy:
    CodeShelfError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── StoreError               → 500 Internal Server Error
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── APIConnectionError       → client side only (server unreachable)
"""

from typing import Any, Dict, Optional


class CodeShelfError(Exception):
    """
    Base exception for all CodeShelf application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only returned for validation errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CodeShelfError):
    """
    Raised when client input fails validation.

    When:    Missing or blank title/language/code, title over the length limit,
             malformed request body.
    HTTP:    400 Bad Request

    `missing` is the {title, language, code} boolean map returned when
    required fields are absent; it is None for other validation failures.

    Example response:
        {
            "error": "validation_error",
            "message": "Title, language, and code are required.",
            "missing": {"title": false, "language": true, "code": false}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        missing: Optional[Dict[str, bool]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        self.missing = missing


class NotFoundError(CodeShelfError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /api/snippets/{id} with an unknown id.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service layer converts
    that None into this exception.
    """

    def __init__(
        self,
        resource: str = "Snippet",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message or f"{resource} not found", context=ctx)
        self.resource_id = resource_id


class StoreError(CodeShelfError):
    """
    Raised when a persistence operation fails unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the SQL error is
    chained (`raise ... from exc`) and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(CodeShelfError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests (with a Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class APIConnectionError(CodeShelfError):
    """Raised by the client when the API cannot be reached at all."""

    def __init__(
        self,
        message: str = "Could not reach the snippet server",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

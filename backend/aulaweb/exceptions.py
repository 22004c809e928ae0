"""
Aula Web Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for each failure the API can report.
Why:   Services raise typed errors; global handlers in main.py turn them into
       JSON responses with the right status code. Route handlers never build
       error bodies themselves.
How:   Each exception carries a user-facing message and an optional context
       dict that is logged server-side only.

Exception Hierarchy:
    AulaWebError (base)
    ├── ConfigurationError  → 500 (required credential missing)
    ├── ValidationError     → 400 (client can fix the input)
    ├── NotFoundError       → 404
    ├── StorageError        → 500 (SQLite I/O or constraint failure)
    ├── FetchError          → 500 (weather provider unreachable/unparseable)
    └── UpstreamError       → upstream status, upstream body passed through
"""

from typing import Any, Dict, Optional


class AulaWebError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (returned as {"error": message})
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigurationError(AulaWebError):
    """
    Raised when a required external credential is not configured.

    When:    GET /weather without OPENWEATHER_KEY. Raised before any network
             call is attempted.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "No API key configured on server",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(AulaWebError):
    """
    Raised when client input fails validation.

    When:    Missing student fields, non-numeric year, malformed JSON body.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(AulaWebError):
    """
    Raised when a requested resource does not exist.

    When:    The SPA entry document is missing from the public directory.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageError(AulaWebError):
    """
    Raised when a Record Store operation fails.

    What:    A query or insert against the SQLite file failed.
    When:    Database file unreadable, table missing, constraint violation.
    HTTP:    500 Internal Server Error

    The message is the driver's own error text, which is what the student
    endpoints report back in {"error": ...}.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FetchError(AulaWebError):
    """
    Raised when the weather provider cannot be reached or its body parsed.

    When:    DNS/connection failure, timeout, invalid JSON in a 2xx response.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Error fetching weather",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamError(AulaWebError):
    """
    Raised when the weather provider answers with a non-2xx status.

    The handler replays the provider's status code and raw body bytes
    verbatim, so clients see e.g. OpenWeatherMap's own {"cod":"404",...}
    document in its original encoding.
    """

    def __init__(
        self,
        status_code: int,
        body: bytes,
        content_type: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["upstream_status"] = status_code
        super().__init__(message=f"Upstream provider returned HTTP {status_code}", context=ctx)
        self.status_code = status_code
        self.body = body
        self.content_type = content_type

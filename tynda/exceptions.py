"""
Tynda Backend — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for each error class the API reports.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) map them to
       JSON error responses with the matching HTTP status code.
Who:   Raised by services and the auth gate; caught by global handlers.

Exception Hierarchy:
    TyndaError (base)
    ├── ValidationError       → 400 Bad Request
    ├── AuthenticationError   → 401 Unauthorized
    ├── AuthorizationError    → 403 Forbidden
    ├── NotFoundError         → 404 Not Found
    └── DatabaseError         → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class TyndaError(Exception):
    """
    Base exception for all Tynda application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TyndaError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, malformed identifiers, names too long,
             unknown roles, self-targeted admin actions.
    HTTP:    400 Bad Request
    """

    status_code = 400

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


class AuthenticationError(TyndaError):
    """No valid session identifies a user. HTTP 401."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(TyndaError):
    """
    The caller is authenticated but lacks the privilege for the action.

    When:    Non-admin on an admin route; any attempt to demote or delete
             the super admin account.
    HTTP:    403 Forbidden

    Playlist ownership failures do NOT raise this: an unowned playlist is
    reported as NotFoundError so its existence is never confirmed.
    """

    status_code = 403

    def __init__(
        self,
        message: str = "Access denied",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TyndaError):
    """
    Raised when a requested resource does not exist (or is not visible to
    the caller).

    HTTP:    404 Not Found

    The message follows the "<Resource> not found" form clients already
    match on, e.g. "Playlist not found".
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(TyndaError):
    """
    Raised when a store operation fails unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the original
    exception is logged server-side with the context dict.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

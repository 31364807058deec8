"""
core/errors.py -- Closed set of error kinds raised by the blog API.

Every failure a store, the token layer or a route handler can report is one of
the classes below. api/main.py registers a single exception handler for
BlogApiError that turns any of them into the ErrorResponse envelope, so route
code raises and never builds error JSON by hand.

Messages are generic on purpose. The underlying cause (SQLAlchemy error, bcrypt
error) is logged by whoever catches it and chained with `raise ... from exc`,
but it is never part of the response body.

Layer rule: core/ is the kernel. No imports from api/, auth/, or blog/.
"""

from __future__ import annotations


class BlogApiError(Exception):
    """Base class. Subclasses pin code and status_code."""

    code: str = "internal_error"
    status_code: int = 500
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(BlogApiError):
    """Identity missing or invalid.

    Deliberately undifferentiated: bad token, expired token and deleted user
    all look the same. The HTTP status is chosen by the handler from
    Settings.unauthorized_status_code, not from this class.
    """

    code = "unauthorized"
    status_code = 401
    default_message = "Unauthorized"


class BadCredentials(BlogApiError):
    code = "bad_credentials"
    status_code = 401
    default_message = "Invalid email or password."


class Forbidden(BlogApiError):
    code = "forbidden"
    status_code = 403
    default_message = "You do not own this resource."


class NotFound(BlogApiError):
    code = "not_found"
    status_code = 404
    default_message = "Resource not found."


class EmptyResult(BlogApiError):
    """A query legitimately matched zero rows. Reported like NotFound."""

    code = "empty_result"
    status_code = 404
    default_message = "No matching records found."


class ValidationFailed(BlogApiError):
    code = "validation_error"
    status_code = 400
    default_message = "A required field is missing."


class Conflict(BlogApiError):
    code = "conflict"
    status_code = 409
    default_message = "A record with that value already exists."


class InternalError(BlogApiError):
    pass

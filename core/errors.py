"""
core/errors.py -- Typed failures raised by stores, auth helpers, and routes.

Every failure a client can see maps to one class here. Each carries the HTTP
status, a stable machine-readable code, and a default human message.
api/main.py registers one exception handler for PortfolioError that renders
the shared ErrorResponse envelope, so routes raise and never build error
responses by hand.

Anything that is not a PortfolioError reaches the catch-all handler and is
reported as a generic 500 -- the original message is only logged.

Layer rule: core/ is the kernel. No imports from api/, auth/, or portfolio/.
"""

from __future__ import annotations


class PortfolioError(Exception):
    """Base class for all client-visible failures."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(
        self,
        message: str | None = None,
        *,
        detail: str | None = None,
        status_code: int | None = None,
        code: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message or self.message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.headers = headers
        super().__init__(self.message)


class ValidationError(PortfolioError):
    """Malformed or missing request field."""

    status_code = 400
    code = "validation_error"
    message = "Request validation failed."


class AuthRequired(PortfolioError):
    """No bearer token was presented on a gated route."""

    status_code = 401
    code = "unauthorized"
    message = "Access token required."


class AuthInvalid(PortfolioError):
    """Token is malformed, forged, or expired -- or login credentials are wrong.

    Defaults to 403 (a token was presented but rejected). The login route
    raises it with status_code=401 and code="bad_credentials".
    """

    status_code = 403
    code = "forbidden"
    message = "Invalid or expired token."


class Conflict(PortfolioError):
    """A unique field (username, email, slug) is already taken."""

    status_code = 400
    code = "conflict"
    message = "Resource already exists."


class NotFound(PortfolioError):
    status_code = 404
    code = "not_found"
    message = "Resource not found."


class UnsupportedMediaType(PortfolioError):
    status_code = 415
    code = "unsupported_media_type"
    message = "Only image files are allowed."


class PayloadTooLarge(PortfolioError):
    status_code = 413
    code = "payload_too_large"
    message = "Upload is too large."


class InternalError(PortfolioError):
    """Explicitly raised server fault. Rendered with the generic message only."""

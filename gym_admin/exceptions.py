"""
exceptions.py
─────────────────────────────────────────────────────────────────────
Error taxonomy. ApiError subclasses carry the HTTP status and error
code the API base view renders; the rest are raised by services.
"""
from __future__ import annotations


class ApiError(Exception):
    status_code = 500
    code        = "INTERNAL_SERVER_ERROR"
    default_message = "Server error"

    def __init__(self, message: str | None = None, errors: dict | None = None):
        self.message = message or self.default_message
        self.errors  = errors
        super().__init__(self.message)


class ValidationFailed(ApiError):
    status_code = 400
    code        = "VALIDATION_ERROR"
    default_message = "Validation failed"


class Unauthorized(ApiError):
    status_code = 401
    code        = "UNAUTHORIZED"
    default_message = "Authentication required. Please provide a valid token."


class Forbidden(ApiError):
    status_code = 403
    code        = "FORBIDDEN"
    default_message = "You do not have permission to perform this action"


class NotFound(ApiError):
    status_code = 404
    code        = "NOT_FOUND"
    default_message = "Resource not found"


class Conflict(ApiError):
    status_code = 409
    code        = "DUPLICATE_ENTRY"
    default_message = "Resource already exists"


class UpstreamError(ApiError):
    status_code = 502
    code        = "UPSTREAM_ERROR"
    default_message = "Identity provider unavailable"


# ── Service-level errors ──────────────────────────────────────────────

class TenantRequiredError(Exception):
    """A tenant-scoped accessor was built without a gym id."""


class IdentityProviderError(Exception):
    """The identity provider rejected a call or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class TenantSweepError(Exception):
    """Listing a tenant's members failed; that gym's sweep was aborted."""

    def __init__(self, gym_id, cause: Exception):
        self.gym_id = gym_id
        self.cause  = cause
        super().__init__(f"Member sweep aborted for gym {gym_id}: {cause}")


class OtpDeliveryError(Exception):
    """The verification email could not be sent."""

from typing import Any, Mapping, Optional


class ServiceError(Exception):
    """Base class for errors raised by the service layer.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, entity ids)
        code: machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Service error"
    default_code = "SERVICE_ERROR"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(ServiceError):
    """Raised when input data is invalid or a required field is missing. http_status is 400."""

    http_status = 400
    default_message = "Invalid input"
    default_code = "SERVICE_VALIDATION_ERROR"


class AuthorizationError(ServiceError):
    """Raised when the acting user may not perform the operation (ownership or role mismatch)."""

    http_status = 403
    default_message = "Not permitted"
    default_code = "AUTHORIZATION_ERROR"


class NotFoundError(ServiceError):
    """Raised when a requested resource was not found. http_status is 404."""

    http_status = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"


class ConflictError(ServiceError):
    """Raised on state conflicts: already-processed requests, duplicate votes, uniqueness violations."""

    http_status = 409
    default_message = "Conflict"
    default_code = "CONFLICT"


class UpstreamFormatError(ServiceError):
    """Raised when the text generation service answers without a usable candidate."""

    http_status = 502
    default_message = "Text generation service returned no usable candidate"
    default_code = "UPSTREAM_FORMAT_ERROR"


class UpstreamServiceError(ServiceError):
    """Wraps transport and deserialization failures from the text generation service.

    The original exception is kept as ``__cause__``.
    """

    http_status = 502
    default_message = "Text generation service call failed"
    default_code = "UPSTREAM_SERVICE_ERROR"

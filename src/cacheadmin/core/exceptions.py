"""Error taxonomy for cacheadmin.

Validation errors are raised before any request is built and are never
retried. Transport errors cover everything that can go wrong once a
request is on the wire. Neither kind is fatal to the hosting process.
"""

from typing import Any


class CacheAdminError(Exception):
    """Base class for all cacheadmin errors."""

    pass


class ValidationError(CacheAdminError):
    """Raised when user input cannot form a valid flush request."""

    pass


class MissingFieldError(ValidationError):
    """A field required by the selected scope is absent or blank."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} is required")


class InvalidEnumError(ValidationError):
    """A token does not name any known value of an enumeration."""

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value!r}")


class EmptySelectionError(ValidationError):
    """No backend was selected for a flush."""

    def __init__(self, family: Any) -> None:
        self.family = family
        super().__init__("At least one backend must be selected for flushing")


class TransportError(CacheAdminError):
    """Raised when a request to the admin API fails.

    Covers network failures, non-2xx responses and unreadable bodies.
    ``message`` is always a non-empty human-readable string.

    Attributes:
        message: Best available description of the failure.
        status_code: HTTP status, or None if no response was received.
        error_code: Machine-readable code from the error body, if any.
        details: Extra fields from the error body.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class ResponseFormatError(TransportError):
    """The response body could not be parsed into the expected shape."""

    pass


class SubmissionInProgressError(CacheAdminError):
    """A flush is already outstanding on this form."""

    def __init__(self, family: Any) -> None:
        self.family = family
        label = getattr(family, "label", family)
        super().__init__(f"A {label} flush is already in progress")

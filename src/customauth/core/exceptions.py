# SPDX-License-Identifier: MIT
# Copyright (c) 2026 CustomAuth Contributors

"""Exception hierarchy for CustomAuth.

Every failure an orchestration call can produce is one of these types, so
callers get a single error contract regardless of which resolution path
executed. Each class carries a stable ``code`` string.

Families:
- :class:`PreconditionError` - the session was never initialized.
- :class:`ValidationError` - caller-input defects, raised before any
  network attempt.
- :class:`BackendError` - any failure surfaced by the key resolution
  backend.
"""

from __future__ import annotations

from typing import Any


class CustomAuthException(Exception):  # noqa: N818
    """Base exception for all CustomAuth errors."""

    code = "CustomAuthException"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class PreconditionError(CustomAuthException):
    """A call was made in a state where it can never succeed."""

    code = "PreconditionException"


class NotInitializedError(PreconditionError):
    """Raised when an orchestration call is made before ``init``."""

    code = "NotInitializedException"

    def __init__(self, message: str = "CustomAuth.init has to be called first"):
        super().__init__(message)


class ValidationError(CustomAuthException):
    """Exception for caller-input defects.

    Raised when:
    - A required field is missing
    - A field has the wrong type
    - A login provider or aggregation strategy is unknown
    - The number of sub-verifiers does not fit the strategy
    """

    code = "ValidationException"

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class MissingConfigError(ValidationError):
    """Raised when ``init`` is missing one of its required arguments."""

    code = "MissingArgumentsException"


class MissingFieldError(ValidationError):
    """Raised when a required per-call field is absent."""

    code = "MissingArgumentException"


class InvalidArgumentError(ValidationError):
    """Raised when a field is present but malformed."""

    code = "InvalidArgumentException"


class InvalidProviderError(ValidationError):
    """Raised when ``typeOfLogin`` is not a known login provider."""

    code = "InvalidTypeOfLoginException"

    def __init__(self, provider: Any):
        super().__init__("Invalid type of login", field="typeOfLogin", value=provider)


class InvalidStrategyError(ValidationError):
    """Raised when an aggregate verifier type is not a known strategy."""

    code = "InvalidAggregateVerifierTypeException"

    def __init__(self, strategy: Any):
        super().__init__(
            "Invalid aggregate verifier type", field="aggregateVerifierType", value=strategy
        )


class ArityError(ValidationError):
    """Raised when the sub-verifier count does not fit the strategy."""

    code = "InvalidArgumentException"

    def __init__(self, message: str, field: str | None = None, count: int | None = None):
        super().__init__(message, field=field, value=count)
        self.count = count


class MethodNotImplementedError(ValidationError):
    """Raised by dispatch for an unknown method name."""

    code = "MethodNotImplemented"

    def __init__(self, method: str):
        super().__init__(f"Method not implemented: {method}", field="method", value=method)
        self.method = method


class BackendError(CustomAuthException):
    """Any failure surfaced by the key resolution backend.

    The original message is kept verbatim in ``details["detail"]``.
    """

    code = "SdkError"

    def __init__(self, detail: str, operation: str | None = None):
        details: dict[str, Any] = {"detail": detail}
        if operation:
            details["operation"] = operation
        super().__init__(f"Error from key resolution backend: {detail}", details)
        self.detail = detail
        self.operation = operation

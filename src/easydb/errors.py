"""
Structured error types for easydb.

Every failure the persistence layer can report is an ``EasyDBError``
subclass carrying a category, a retry hint, structured context, and the
chained driver exception when there is one.

Manifesto:
    - **Typed Error Hierarchy:** One error type per failure class
    - **Fail fast:** Template, validation and transaction-state errors are
      raised before any statement reaches the driver
    - **Nothing swallowed:** Driver failures are wrapped, never hidden,
      and keep the offending template and argument set for diagnosis

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                       EasyDBError                            │
        │  (category, retryable, context, cause)                      │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  TemplateError      ValidationError    TransactionStateError │
        │  (TEMPLATE)         (VALIDATION)       (TRANSACTION)         │
        │                                                              │
        │  BackendError       ConfigError                              │
        │  (DATABASE)         (CONFIG)                                 │
        │       │                                                      │
        │  DatabaseConnectionError (retryable)                         │
        └─────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Raise bare ``Exception`` from connection code
    ✅ DO: Use the matching EasyDBError subclass

    ❌ DON'T: Catch driver errors and return an empty result
    ✅ DO: Wrap them in BackendError with ``cause=`` and re-raise

Tags:
    error-handling, exception-hierarchy, easydb

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    TEMPLATE = "TEMPLATE"         # Placeholder / argument mismatch
    VALIDATION = "VALIDATION"     # Condition, pagination, order-by, pattern
    TRANSACTION = "TRANSACTION"   # Illegal begin/commit/rollback
    DATABASE = "DATABASE"         # Driver, constraint, connectivity
    CONFIG = "CONFIG"             # Unknown backend, missing driver

    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        backend: Backend name (``sqlite``, ``postgresql``, ``mysql``)
        table: Table the operation targeted
        operation: Connection operation (``list``, ``create``, ...)
        metadata: Additional key-value pairs
    """

    backend: str | None = None
    table: str | None = None
    operation: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["backend", "table", "operation"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class EasyDBError(Exception):
    """
    Base exception for all easydb errors.

    Subclasses set ``default_category`` and ``default_retryable`` so that
    callers (who own retry policy) can decide without string matching.

    Examples:
        >>> error = EasyDBError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(table="users").context.table
        'users'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> EasyDBError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ValidationError("bad page").with_context(table="users")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CALL-SHAPE ERRORS (raised before any I/O)
# =============================================================================


class TemplateError(EasyDBError):
    """A template placeholder has no matching argument, or positional counts differ."""

    default_category = ErrorCategory.TEMPLATE

    def __init__(
        self,
        message: str,
        *,
        template: str | None = None,
        placeholder: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.template = template
        self.placeholder = placeholder

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.template is not None:
            result["template"] = self.template
        if self.placeholder is not None:
            result["placeholder"] = self.placeholder
        return result


class ValidationError(EasyDBError):
    """
    Malformed condition, pagination, order-by token, or condition pattern.

    Never retryable - the call must be fixed.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.constraint = constraint

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        if self.constraint:
            result["constraint"] = self.constraint
        return result


class TransactionStateError(EasyDBError):
    """Illegal transaction transition (begin while active, commit/rollback while idle)."""

    default_category = ErrorCategory.TRANSACTION

    def __init__(
        self,
        message: str,
        *,
        state: str | None = None,
        action: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.state = state
        self.action = action


# =============================================================================
# BACKEND ERRORS
# =============================================================================


class BackendError(EasyDBError):
    """
    Driver failure: connectivity, constraint violation, syntax, timeout.

    Carries the template and argument set that produced the failing
    statement, plus the compiled SQL and bound parameters.
    """

    default_category = ErrorCategory.DATABASE

    def __init__(
        self,
        message: str,
        *,
        template: str | None = None,
        template_args: Mapping[str, Any] | Sequence[Any] | None = None,
        sql: str | None = None,
        params: tuple[Any, ...] | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.template = template
        self.template_args = template_args
        self.sql = sql
        self.params = params

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.template is not None:
            result["template"] = self.template
        if isinstance(self.template_args, Mapping):
            result["arg_names"] = sorted(str(k) for k in self.template_args)
        elif self.template_args is not None:
            result["arg_count"] = len(self.template_args)
        if self.sql is not None:
            result["sql"] = self.sql
        return result


class DatabaseConnectionError(BackendError):
    """Could not open (or lost) the driver connection."""

    default_retryable = True


class ConfigError(EasyDBError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, EasyDBError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "EasyDBError",
    "TemplateError",
    "ValidationError",
    "TransactionStateError",
    "BackendError",
    "DatabaseConnectionError",
    "ConfigError",
    "is_retryable",
]

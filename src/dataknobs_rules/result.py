"""Validation result types shared by the schema validator and evaluators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .exceptions import RecordValidationError


class _Missing:
    """Marker for a key that is absent from a record.

    Distinct from ``None``, which is a present value.
    """

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Missing:
        return self

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class ViolationKind(Enum):
    """Categories of validation failure."""

    REQUIRED = "required"
    LENGTH = "length"
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    TYPE = "type"
    PATTERN = "pattern"
    NOT_INCLUDED = "not_included"


@dataclass(frozen=True)
class Violation:
    """Structured description of the first failure found in a record.

    ``message`` is the human-readable error; the other attributes let callers
    react to a failure without parsing that message.
    """

    field: str
    kind: ViolationKind
    message: str
    params: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "kind": self.kind.value,
            "message": self.message,
            "params": dict(self.params),
        }


@dataclass
class ValidationResult:
    """Outcome of validating one field or one record.

    A result is either valid, carrying the (possibly transformed) value, or
    invalid, carrying the single violation that stopped validation.

    Example:
        ```python
        result = schema.validate({"id": "ab"})
        if not result:
            print(result.error)
        ```
    """

    valid: bool
    value: Any  # The (possibly transformed) value
    violation: Violation | None = None

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    @property
    def error(self) -> str | None:
        """The error message, or None for a valid result."""
        return self.violation.message if self.violation else None

    @property
    def field(self) -> str | None:
        """Name of the field that failed, or None for a valid result."""
        return self.violation.field if self.violation else None

    def raise_for_error(self) -> Any:
        """Return the validated value, raising if the result is invalid.

        Returns:
            The validated value

        Raises:
            RecordValidationError: If the result is invalid
        """
        if self.violation is not None:
            raise RecordValidationError(self.violation)
        return self.value

    @classmethod
    def success(cls, value: Any) -> ValidationResult:
        """Create a successful validation result.

        Args:
            value: The validated value

        Returns:
            Successful ValidationResult
        """
        return cls(valid=True, value=value)

    @classmethod
    def failure(cls, value: Any, violation: Violation) -> ValidationResult:
        """Create a failed validation result.

        Args:
            value: The value that failed validation
            violation: The violation that caused the failure

        Returns:
            Failed ValidationResult
        """
        return cls(valid=False, value=value, violation=violation)

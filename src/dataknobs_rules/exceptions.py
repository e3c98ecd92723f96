"""Exception hierarchy for the dataknobs_rules package.

Validation failures are never raised by the engine: they are returned as
:class:`~dataknobs_rules.result.ValidationResult` values. The exceptions
here signal faults in how the engine is being used (bad rule configuration,
unknown rule types, unreadable settings) plus one opt-in exception for
callers who prefer to raise on an invalid record.

Example:
    ```python
    from dataknobs_rules import RulesError, StringRule

    try:
        StringRule(min_length=-1)
    except RulesError as e:
        logger.error(f"Error: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from dataknobs_rules.result import Violation


class RulesError(Exception):
    """Base exception for the dataknobs_rules package.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        """Initialize the exception with optional context.

        Args:
            message: Error message
            context: Optional context dictionary
            details: Optional details dictionary (takes precedence over context)
        """
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class RuleConfigurationError(RulesError):
    """Raised when a rule is constructed with inconsistent options."""

    def __init__(self, option: str, message: str, value: Any = None):
        self.option = option
        super().__init__(
            f"Invalid rule option '{option}': {message}",
            context={"option": option, "value": value},
        )


class RecordValidationError(RulesError):
    """Raised by ``ValidationResult.raise_for_error`` for an invalid record.

    The message is the plain validation error; the structured violation is
    available both as ``violation`` and through ``context``.
    """

    def __init__(self, violation: Violation):
        self.violation = violation
        super().__init__(violation.message, context=violation.to_dict())


class EvaluatorNotFoundError(RulesError):
    """Raised when no evaluator is registered for a rule type."""

    def __init__(self, type_name: str, available: list[str] | None = None):
        self.type_name = type_name
        self.available = available or []
        super().__init__(
            f"No field evaluator registered for rule type '{type_name}'",
            context={"type_name": type_name, "available": self.available},
        )


class RegistrationError(RulesError):
    """Raised when an evaluator registration conflicts with an existing one."""

    pass


class SettingsError(RulesError):
    """Raised when validator settings are invalid or cannot be loaded."""

    pass


__all__ = [
    "RulesError",
    "RuleConfigurationError",
    "RecordValidationError",
    "EvaluatorNotFoundError",
    "RegistrationError",
    "SettingsError",
]

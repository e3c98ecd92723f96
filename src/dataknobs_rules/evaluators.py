"""Field evaluators: the per-type validation and transformation pipelines.

A field evaluator turns one rule and one raw value into a
:class:`ValidationResult`. Adding a field type means writing a new
:class:`Rule` subclass with its own ``type_name`` plus a
:class:`FieldEvaluator` for it, then registering the evaluator:

    ```python
    from dataclasses import dataclass
    from typing import ClassVar

    from dataknobs_rules import FieldEvaluator, Rule, ValidationResult, default_registry


    @dataclass(frozen=True)
    class FlagRule(Rule):
        type_name: ClassVar[str] = "flag"


    class FlagEvaluator(FieldEvaluator):
        rule_type = FlagRule

        def evaluate(self, rule, field, value):
            absent = self.resolve_absent(rule, field, value)
            if absent is not None:
                return absent
            return ValidationResult.success(bool(value))


    default_registry.register(FlagEvaluator())
    ```
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any, ClassVar, Dict

from . import checks
from .exceptions import EvaluatorNotFoundError, RegistrationError
from .result import MISSING, ValidationResult, Violation, ViolationKind
from .rules import Rule, StringRule

logger = logging.getLogger(__name__)


class FieldEvaluator(ABC):
    """Base class for the evaluator of one rule type."""

    rule_type: ClassVar[type[Rule]]

    @property
    def type_name(self) -> str:
        return self.rule_type.type_name

    @abstractmethod
    def evaluate(self, rule: Any, field: str, value: Any) -> ValidationResult:
        """Validate and transform a single field value.

        Args:
            rule: Rule of this evaluator's ``rule_type``
            field: Field name, used in error messages
            value: Raw value, or ``MISSING`` if the key is absent

        Returns:
            ValidationResult whose value is the transformed value, or
            ``MISSING`` if nothing should be stored for the field
        """
        pass

    def resolve_absent(self, rule: Rule, field: str, value: Any) -> ValidationResult | None:
        """Settle an absent key before any type-specific step runs.

        Returns a final result when the value is absent and there is no
        default to fall back on, otherwise None so evaluation continues.
        Callers that need the default must use :meth:`fill_default`.
        """
        if value is not MISSING or rule.has_default:
            return None
        if rule.required:
            return ValidationResult.failure(
                value,
                Violation(field, ViolationKind.REQUIRED, f"{field} is required"),
            )
        return ValidationResult.success(MISSING)

    @staticmethod
    def fill_default(rule: Rule, value: Any) -> Any:
        return rule.default if value is MISSING else value


class StringEvaluator(FieldEvaluator):
    """Evaluator for :class:`StringRule`.

    Steps run in a fixed order and the first failing check ends evaluation:

    1. absent key: default, ``required`` error, or skip the field
    2. booleans and numbers are converted to strings; other non-string
       values (``None`` excepted) fail
    3. ``length``, then ``min_length``, then ``max_length``
    4. ``pattern_rule``
    5. ``included``
    6. ``trim``
    7. ``replace_rule``

    Transforms run only after every check has passed, so a failing value is
    reported exactly as it was received (after conversion).
    """

    rule_type = StringRule

    def evaluate(self, rule: StringRule, field: str, value: Any) -> ValidationResult:
        absent = self.resolve_absent(rule, field, value)
        if absent is not None:
            return absent
        value = self.fill_default(rule, value)

        violation = checks.check_type(field, value)
        if violation is not None:
            return ValidationResult.failure(value, violation)
        value = checks.coerce_to_string(value)

        violation = next(
            (v for v in self._violations(rule, field, value) if v is not None),
            None,
        )
        if violation is not None:
            return ValidationResult.failure(value, violation)

        if rule.trim:
            value = checks.trim(value)
        if rule.replace_rule is not None:
            value = checks.replace(value, rule.replace_rule)

        return ValidationResult.success(value)

    def _violations(
        self, rule: StringRule, field: str, value: str | None
    ) -> Iterator[Violation | None]:
        """Yield the outcome of each configured check, lazily and in order."""
        if rule.length is not None:
            yield checks.check_length(field, value, rule.length)
        if rule.min_length is not None:
            yield checks.check_min_length(field, value, rule.min_length)
        if rule.max_length is not None:
            yield checks.check_max_length(field, value, rule.max_length)
        if rule.pattern_rule is not None:
            yield checks.check_pattern(field, value, rule.pattern_rule)
        if rule.included is not None:
            yield checks.check_included(field, value, rule.included)


class EvaluatorRegistry:
    """Thread-safe mapping from rule type name to field evaluator.

    Example:
        ```python
        registry = EvaluatorRegistry("custom")
        registry.register(StringEvaluator())
        registry.for_rule(StringRule()).evaluate(StringRule(), "id", "abc")
        ```
    """

    def __init__(self, name: str = "evaluators"):
        """Initialize the registry.

        Args:
            name: Registry name for identification
        """
        self._name = name
        self._items: Dict[str, FieldEvaluator] = {}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        """Get registry name."""
        return self._name

    def register(self, evaluator: FieldEvaluator, allow_overwrite: bool = False) -> None:
        """Register an evaluator under its rule type name.

        Args:
            evaluator: Evaluator to register
            allow_overwrite: Whether to replace an evaluator already registered
                for the same rule type

        Raises:
            RegistrationError: If the rule type is taken and allow_overwrite is False
        """
        key = evaluator.type_name
        with self._lock:
            if not allow_overwrite and key in self._items:
                raise RegistrationError(
                    f"Evaluator for '{key}' already registered in {self._name}",
                    context={"key": key, "registry": self._name},
                )
            self._items[key] = evaluator
        logger.debug(f"Registered {type(evaluator).__name__} for '{key}' in {self._name}")

    def unregister(self, type_name: str) -> FieldEvaluator:
        """Unregister and return the evaluator for a rule type.

        Raises:
            EvaluatorNotFoundError: If nothing is registered for the type
        """
        with self._lock:
            if type_name not in self._items:
                raise EvaluatorNotFoundError(type_name, list(self._items.keys()))
            return self._items.pop(type_name)

    def get(self, type_name: str) -> FieldEvaluator:
        """Get the evaluator for a rule type name.

        Raises:
            EvaluatorNotFoundError: If nothing is registered for the type
        """
        with self._lock:
            if type_name not in self._items:
                raise EvaluatorNotFoundError(type_name, list(self._items.keys()))
            return self._items[type_name]

    def for_rule(self, rule: Rule) -> FieldEvaluator:
        """Get the evaluator matching a rule's type tag."""
        return self.get(rule.type_name)

    def has(self, type_name: str) -> bool:
        with self._lock:
            return type_name in self._items

    def list_keys(self) -> list[str]:
        with self._lock:
            return list(self._items.keys())

    def copy(self, name: str | None = None) -> EvaluatorRegistry:
        """Create an independent registry holding the same evaluators."""
        clone = EvaluatorRegistry(name or self._name)
        with self._lock:
            clone._items = dict(self._items)
        return clone

    def __contains__(self, type_name: str) -> bool:
        return self.has(type_name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __repr__(self) -> str:
        return f"EvaluatorRegistry(name={self._name!r}, types={self.list_keys()})"


default_registry = EvaluatorRegistry("default")
default_registry.register(StringEvaluator())

"""Schema definition and record validation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from .evaluators import EvaluatorRegistry, default_registry
from .result import MISSING, ValidationResult
from .rules import Rule
from .settings import UnknownFieldPolicy, ValidatorSettings

logger = logging.getLogger(__name__)


class Schema:
    """Mapping of field names to rules, validating records against them.

    Fields are evaluated in declaration order and validation stops at the
    first failing field. The input record is never modified; a successful
    validation returns a new dictionary holding the transformed values.

    Example:
        ```python
        schema = Schema({
            "id": StringRule(required=True, min_length=3),
            "name": StringRule(trim=True),
        })
        result = schema.validate({"id": "abc", "name": " Ada "})
        assert result.value == {"id": "abc", "name": "Ada"}
        ```
    """

    def __init__(
        self,
        rules: Mapping[str, Rule],
        name: str = "unnamed_schema",
        unknown_fields: UnknownFieldPolicy | str = UnknownFieldPolicy.KEEP,
        registry: EvaluatorRegistry | None = None,
    ):
        """Initialize schema.

        Args:
            rules: Field name to rule mapping
            name: Schema name for identification
            unknown_fields: Keep or drop record keys not covered by a rule
            registry: Evaluator registry (defaults to the shared registry)

        Raises:
            TypeError: If a rule is not a Rule instance
            EvaluatorNotFoundError: If no evaluator handles a rule's type
        """
        self.name = name
        self.unknown_fields = UnknownFieldPolicy.parse(unknown_fields)
        self.registry = default_registry if registry is None else registry

        for field_name, rule in rules.items():
            if not isinstance(rule, Rule):
                raise TypeError(
                    f"Rule for field '{field_name}' must be a Rule, got {type(rule).__name__}"
                )
            # Fail at construction rather than halfway through a record
            self.registry.for_rule(rule)

        self._rules: Mapping[str, Rule] = MappingProxyType(dict(rules))

    @classmethod
    def from_settings(
        cls,
        rules: Mapping[str, Rule],
        settings: ValidatorSettings,
        registry: EvaluatorRegistry | None = None,
    ) -> Schema:
        """Create a schema configured by validator settings."""
        logger.info(f"Creating schema: {settings.schema_name}")
        return cls(
            rules,
            name=settings.schema_name,
            unknown_fields=settings.unknown_fields,
            registry=registry,
        )

    @property
    def rules(self) -> Mapping[str, Rule]:
        """Read-only view of the field rules."""
        return self._rules

    def __contains__(self, field_name: str) -> bool:
        return field_name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return (
            f"Schema(name={self.name!r}, fields={list(self._rules)}, "
            f"unknown_fields={self.unknown_fields.value!r})"
        )

    def validate(self, record: Mapping[str, Any]) -> ValidationResult:
        """Validate a record against this schema.

        Args:
            record: Mapping of field names to values

        Returns:
            ValidationResult holding the new record on success, or the
            original record and the first violation on failure

        Raises:
            TypeError: If record is not a mapping
        """
        if not isinstance(record, Mapping):
            raise TypeError(f"Record must be a mapping, got {type(record).__name__}")

        validated = dict(record) if self.unknown_fields is UnknownFieldPolicy.KEEP else {}

        for field_name, rule in self._rules.items():
            evaluator = self.registry.for_rule(rule)
            result = evaluator.evaluate(rule, field_name, record.get(field_name, MISSING))

            if not result.valid:
                logger.debug(f"Schema '{self.name}' rejected field '{field_name}': {result.error}")
                return ValidationResult.failure(record, result.violation)  # type: ignore[arg-type]

            if result.value is not MISSING:
                validated[field_name] = result.value

        return ValidationResult.success(validated)

    def validate_many(
        self,
        records: Iterable[Mapping[str, Any]],
        stop_on_error: bool = False,
    ) -> list[ValidationResult]:
        """Validate multiple records independently.

        Args:
            records: Records to validate
            stop_on_error: If True, stop after the first invalid record

        Returns:
            List of ValidationResults, one per validated record
        """
        results = []

        for record in records:
            result = self.validate(record)
            results.append(result)

            if not result.valid and stop_on_error:
                break

        return results

    def to_dict(self) -> dict[str, Any]:
        """Convert schema to dictionary representation."""
        return {
            "name": self.name,
            "unknown_fields": self.unknown_fields.value,
            "fields": {name: rule.to_dict() for name, rule in self._rules.items()},
        }


def validate(record: Mapping[str, Any], schema: Schema | Mapping[str, Rule]) -> ValidationResult:
    """Validate a record against a schema or a plain field-to-rule mapping.

    Example:
        ```python
        result = validate({"id": 1, "new_user": True}, {"id": StringRule(), "new_user": StringRule()})
        assert result.value == {"id": "1", "new_user": "true"}
        ```
    """
    if not isinstance(schema, Schema):
        schema = Schema(schema)
    return schema.validate(record)

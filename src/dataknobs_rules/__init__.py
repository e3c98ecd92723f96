"""Declarative record validation with typed, composable field rules.

A schema maps field names to rules. Validating a record runs each field's
rule through the evaluator registered for the rule's type, returning either
a new, transformed record or the first error found:

    ```python
    from dataknobs_rules import Schema, StringRule

    schema = Schema({"id": StringRule(required=True, min_length=3)})

    schema.validate({"id": "abc"}).value   # {'id': 'abc'}
    schema.validate({"id": "ab"}).error    # 'id length must be greater than or equal to 3 characters'
    ```
"""

from .evaluators import EvaluatorRegistry, FieldEvaluator, StringEvaluator, default_registry
from .exceptions import (
    EvaluatorNotFoundError,
    RecordValidationError,
    RegistrationError,
    RuleConfigurationError,
    RulesError,
    SettingsError,
)
from .result import MISSING, ValidationResult, Violation, ViolationKind
from .rules import PatternRule, ReplaceRule, Rule, StringRule
from .schema import Schema, validate
from .settings import UnknownFieldPolicy, ValidatorSettings

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Validation
    "Schema",
    "validate",
    # Rules
    "Rule",
    "StringRule",
    "PatternRule",
    "ReplaceRule",
    # Evaluators
    "FieldEvaluator",
    "StringEvaluator",
    "EvaluatorRegistry",
    "default_registry",
    # Result types
    "ValidationResult",
    "Violation",
    "ViolationKind",
    "MISSING",
    # Settings
    "ValidatorSettings",
    "UnknownFieldPolicy",
    # Exceptions
    "RulesError",
    "RuleConfigurationError",
    "RecordValidationError",
    "EvaluatorNotFoundError",
    "RegistrationError",
    "SettingsError",
]

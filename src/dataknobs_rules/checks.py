"""Primitive checks and transforms used by field evaluators.

Checks are pure functions of ``(field, value, option)`` returning a
:class:`Violation` on failure and ``None`` on success. Transforms return the
new value. ``None`` is a legitimate input everywhere: checks treat it as an
empty value and transforms leave it untouched.
"""

from __future__ import annotations

from decimal import Decimal
from numbers import Integral
from typing import Any

from .result import Violation, ViolationKind
from .rules import PatternRule, ReplaceRule


class CoercionError(TypeError):
    """Raised when a value has no string form the engine accepts."""


def coerce_to_string(value: Any) -> str | None:
    """Convert a scalar to the string form the string checks operate on.

    Booleans become ``"true"``/``"false"``; integers, floats and decimals use
    ``str()``. Other numbers such as fractions have no plain literal form and
    are rejected. Strings and ``None`` are returned unchanged.

    Raises:
        CoercionError: If the value is not a string, boolean, integer, float,
            decimal or None
    """
    if value is None or isinstance(value, str):
        return value
    # bool is an Integral subclass, so check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Integral, float, Decimal)):
        return str(value)
    raise CoercionError(f"Cannot convert {type(value).__name__} to a string")


def effective_length(value: str | None) -> int:
    return 0 if value is None else len(value)


def check_type(field: str, value: Any) -> Violation | None:
    try:
        coerce_to_string(value)
    except CoercionError:
        return Violation(
            field,
            ViolationKind.TYPE,
            f"{field} must be a string",
            {"type": type(value).__name__},
        )
    return None


def check_length(field: str, value: str | None, length: int) -> Violation | None:
    if effective_length(value) != length:
        return Violation(
            field,
            ViolationKind.LENGTH,
            f"{field} length must be {length} characters",
            {"length": length},
        )
    return None


def check_min_length(field: str, value: str | None, min_length: int) -> Violation | None:
    if effective_length(value) < min_length:
        return Violation(
            field,
            ViolationKind.MIN_LENGTH,
            f"{field} length must be greater than or equal to {min_length} characters",
            {"min_length": min_length},
        )
    return None


def check_max_length(field: str, value: str | None, max_length: int) -> Violation | None:
    if effective_length(value) > max_length:
        return Violation(
            field,
            ViolationKind.MAX_LENGTH,
            f"{field} length must be less than or equal to {max_length} characters",
            {"max_length": max_length},
        )
    return None


def check_pattern(field: str, value: str | None, pattern_rule: PatternRule) -> Violation | None:
    if value is not None and pattern_rule.matches(value):
        return None
    if pattern_rule.error_message is not None:
        message = pattern_rule.error_message
    else:
        message = f"{field} must be in a valid format"
    return Violation(
        field,
        ViolationKind.PATTERN,
        message,
        {"pattern": pattern_rule.pattern.pattern},
    )


def check_included(field: str, value: str | None, included: tuple[str, ...]) -> Violation | None:
    if value is not None and value in included:
        return None
    return Violation(
        field,
        ViolationKind.NOT_INCLUDED,
        f"{field} isn't into the list.",
        {"included": list(included)},
    )


def trim(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip()


def replace(value: str | None, replace_rule: ReplaceRule) -> str | None:
    if value is None:
        return None
    return replace_rule.apply(value)

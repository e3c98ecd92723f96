"""Rule definitions: immutable per-field validation and transformation policy.

Each rule variant carries a ``type_name`` tag. The schema validator uses that
tag, and only that tag, to pick the field evaluator for the rule.

Example:
    ```python
    import re

    from dataknobs_rules import PatternRule, ReplaceRule, StringRule

    username = StringRule(
        required=True,
        min_length=3,
        max_length=20,
        pattern_rule=PatternRule(r"^[a-zA-Z0-9_]*$", "username must be alphanumeric"),
        replace_rule=ReplaceRule(re.compile(r"[0-9]"), "X", global_=False),
        trim=True,
    )
    ```
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, fields
from re import Pattern as RegexPattern
from typing import Any, ClassVar

from .exceptions import RuleConfigurationError
from .result import MISSING


@dataclass(frozen=True)
class Rule:
    """Base class for all rule variants.

    Subclasses set ``type_name`` and add their own options. Every rule
    supports ``required`` and ``default``.
    """

    type_name: ClassVar[str] = "rule"

    required: bool = False
    default: Any = MISSING

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def to_dict(self) -> dict[str, Any]:
        """Describe the rule's configured options as a plain dictionary.

        Unset options are left out.
        """
        data: dict[str, Any] = {"type": self.type_name}
        for rule_field in fields(self):
            value = getattr(self, rule_field.name)
            if value is MISSING or value is None:
                continue
            if isinstance(value, (PatternRule, ReplaceRule)):
                value = value.to_dict()
            elif isinstance(value, tuple):
                value = list(value)
            data[rule_field.name] = value
        return data


@dataclass(frozen=True)
class PatternRule:
    """Regular expression a string value must match.

    The pattern is searched anywhere in the value; anchor it with ``^``/``$``
    to require a full match.

    Attributes:
        pattern: Compiled regex, or a string compiled once at construction
        error_message: Message reported instead of the default on mismatch
    """

    pattern: RegexPattern[str]
    error_message: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.pattern, str):
            try:
                object.__setattr__(self, "pattern", re.compile(self.pattern))
            except re.error as e:
                raise RuleConfigurationError("pattern", str(e), self.pattern) from e
        elif not isinstance(self.pattern, RegexPattern):
            raise RuleConfigurationError(
                "pattern",
                f"expected a regex or string, got {type(self.pattern).__name__}",
                self.pattern,
            )

    def matches(self, value: str) -> bool:
        return self.pattern.search(value) is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"pattern": self.pattern.pattern}
        if self.error_message is not None:
            data["error_message"] = self.error_message
        return data


@dataclass(frozen=True)
class ReplaceRule:
    """Substitution applied to a string value after it has validated.

    Attributes:
        pattern: A compiled regex (``re.sub`` semantics, including group
            references in ``replacement``) or a literal substring
        replacement: Replacement text
        global_: If True replace every occurrence, otherwise only the first
    """

    pattern: RegexPattern[str] | str
    replacement: str
    global_: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.pattern, (str, RegexPattern)):
            raise RuleConfigurationError(
                "replace.pattern",
                f"expected a regex or string, got {type(self.pattern).__name__}",
                self.pattern,
            )
        if isinstance(self.pattern, str) and not self.pattern:
            raise RuleConfigurationError("replace.pattern", "literal pattern cannot be empty", "")
        if not isinstance(self.replacement, str):
            raise RuleConfigurationError(
                "replace.replacement", "replacement must be a string", self.replacement
            )

    @property
    def is_regex(self) -> bool:
        return isinstance(self.pattern, RegexPattern)

    def apply(self, value: str) -> str:
        count = 0 if self.global_ else 1
        if isinstance(self.pattern, RegexPattern):
            return self.pattern.sub(self.replacement, value, count=count)
        return value.replace(self.pattern, self.replacement, -1 if self.global_ else 1)

    def to_dict(self) -> dict[str, Any]:
        pattern = self.pattern.pattern if isinstance(self.pattern, RegexPattern) else self.pattern
        return {
            "pattern": pattern,
            "regex": self.is_regex,
            "replacement": self.replacement,
            "global": self.global_,
        }


@dataclass(frozen=True)
class StringRule(Rule):
    """Validation and transformation policy for a string field.

    Numbers and booleans are accepted and converted to their string form
    before any check runs. ``None`` is carried through unconverted; each
    check decides how to treat it (it counts as length 0, never matches a
    pattern and is never in an allowed list).

    Attributes:
        required: Fail when the key is absent from the record
        default: Value used when the key is absent from the record
        min_length: Minimum length (inclusive)
        max_length: Maximum length (inclusive)
        length: Exact length
        pattern_rule: Regex the value must match
        replace_rule: Substitution applied to a valid value
        included: Allowed values
        trim: Strip leading and trailing whitespace from a valid value
    """

    type_name: ClassVar[str] = "string"

    min_length: int | None = None
    max_length: int | None = None
    length: int | None = None
    pattern_rule: PatternRule | None = None
    replace_rule: ReplaceRule | None = None
    included: tuple[str, ...] | None = None
    trim: bool = False

    def __post_init__(self) -> None:
        for option in ("min_length", "max_length", "length"):
            bound = getattr(self, option)
            if bound is None:
                continue
            if isinstance(bound, bool) or not isinstance(bound, int):
                raise RuleConfigurationError(option, "must be an integer", bound)
            if bound < 0:
                raise RuleConfigurationError(option, "cannot be negative", bound)

        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise RuleConfigurationError(
                "min_length",
                f"min_length ({self.min_length}) cannot be greater than max_length ({self.max_length})",
                self.min_length,
            )

        if self.included is not None:
            if isinstance(self.included, str) or not isinstance(self.included, Iterable):
                raise RuleConfigurationError(
                    "included", "must be a collection of strings", self.included
                )
            included = tuple(self.included)
            for item in included:
                if not isinstance(item, str):
                    raise RuleConfigurationError(
                        "included",
                        f"allowed values must be strings, got {type(item).__name__}",
                        item,
                    )
            object.__setattr__(self, "included", included)

        if self.pattern_rule is not None and not isinstance(self.pattern_rule, PatternRule):
            object.__setattr__(self, "pattern_rule", PatternRule(self.pattern_rule))


__all__ = ["Rule", "PatternRule", "ReplaceRule", "StringRule"]

"""Validator settings with dictionary, file and environment sources.

Settings can be loaded from a YAML or JSON file and then overridden with
environment variables of the form ``DATAKNOBS_RULES__<ATTRIBUTE>``:

    ```yaml
    # validator.yaml
    unknown_fields: drop
    schema_name: signup
    ```

    ```python
    settings = ValidatorSettings.from_file("validator.yaml").with_env_overrides()
    schema = Schema.from_settings(rules, settings)
    ```
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml  # type: ignore[import-untyped]

from .exceptions import SettingsError

logger = logging.getLogger(__name__)


class UnknownFieldPolicy(Enum):
    """What the schema validator does with record keys it has no rule for."""

    KEEP = "keep"
    DROP = "drop"

    @classmethod
    def parse(cls, value: Union[str, UnknownFieldPolicy]) -> UnknownFieldPolicy:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            choices = ", ".join(policy.value for policy in cls)
            raise SettingsError(
                f"Invalid unknown_fields policy: {value!r} (expected one of: {choices})",
                context={"setting": "unknown_fields", "value": value},
            ) from e


@dataclass(frozen=True)
class ValidatorSettings:
    """Engine-wide options for building schemas.

    Attributes:
        unknown_fields: Keep or drop record keys that no rule covers
        schema_name: Name given to schemas built from these settings
    """

    ENV_PREFIX = "DATAKNOBS_RULES__"

    unknown_fields: UnknownFieldPolicy = UnknownFieldPolicy.KEEP
    schema_name: str = "unnamed_schema"

    def __post_init__(self) -> None:
        object.__setattr__(self, "unknown_fields", UnknownFieldPolicy.parse(self.unknown_fields))
        if not isinstance(self.schema_name, str) or not self.schema_name:
            raise SettingsError(
                "schema_name must be a non-empty string",
                context={"setting": "schema_name", "value": self.schema_name},
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ValidatorSettings:
        """Create settings from a dictionary.

        Raises:
            SettingsError: If the dictionary holds unknown keys or bad values
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise SettingsError(
                f"Unknown validator settings: {', '.join(sorted(unknown))}",
                context={"unknown": sorted(unknown), "known": sorted(known)},
            )
        return cls(**dict(data))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> ValidatorSettings:
        """Load settings from a YAML or JSON file.

        Raises:
            SettingsError: If the file is missing, unreadable or malformed
        """
        path = Path(path).resolve()
        if not path.exists():
            raise SettingsError(f"Settings file not found: {path}", context={"path": str(path)})

        suffix = path.suffix.lower()
        try:
            with open(path) as f:
                if suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f)
                elif suffix == ".json":
                    data = json.load(f)
                else:
                    raise SettingsError(
                        f"Unsupported settings file format: {suffix}",
                        context={"path": str(path)},
                    )
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise SettingsError(
                f"Cannot parse settings file {path}: {e}", context={"path": str(path)}
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SettingsError(
                f"Settings file must contain a mapping, got {type(data).__name__}",
                context={"path": str(path)},
            )

        logger.info(f"Loaded validator settings from {path}")
        return cls.from_dict(data)

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> ValidatorSettings:
        """Return a copy with ``DATAKNOBS_RULES__<ATTRIBUTE>`` variables applied.

        Args:
            environ: Environment to read (defaults to ``os.environ``)
        """
        environ = os.environ if environ is None else environ
        known = {f.name for f in fields(self)}
        overrides: Dict[str, Any] = {}

        for key, value in environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            attribute = key[len(self.ENV_PREFIX) :].lower()
            if attribute not in known:
                logger.warning(f"Ignoring unknown validator setting from environment: {key}")
                continue
            overrides[attribute] = value

        if not overrides:
            return self
        logger.debug(f"Applying validator setting overrides: {sorted(overrides)}")
        return replace(self, **overrides)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["unknown_fields"] = self.unknown_fields.value
        return data

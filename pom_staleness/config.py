"""
Configuration surface consumed by a host (build plugin, CLI, CI job).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Union

from .repository import MAVEN_CENTRAL_URL
from .reporting import Severity, parse_level


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ValueError(f"Invalid boolean for {name}: {value!r}")


@dataclass(frozen=True)
class CheckConfig:
    level: Severity = Severity.WARNING
    enabled: bool = True
    path: Path = Path("pom.xml")
    include_parent: bool = True
    include_plugins: bool = True
    max_workers: int = 1
    timeout: float = 10.0
    repository_url: str = MAVEN_CENTRAL_URL
    include_prereleases: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", parse_level(self.level))
        object.__setattr__(self, "path", Path(self.path))
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "CheckConfig":
        """Build a config from host-provided values, e.g. plugin parameters.

        Unknown keys are rejected. Strings are coerced for boolean and
        numeric fields.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        kwargs = dict(values)
        for name in ("enabled", "include_parent", "include_plugins", "include_prereleases"):
            if name in kwargs:
                kwargs[name] = _as_bool(name, kwargs[name])
        if "max_workers" in kwargs:
            kwargs["max_workers"] = int(kwargs["max_workers"])
        if "timeout" in kwargs:
            kwargs["timeout"] = float(kwargs["timeout"])
        return cls(**kwargs)


def load_config(values: Union[CheckConfig, Mapping[str, Any], None] = None) -> CheckConfig:
    if values is None:
        return CheckConfig()
    if isinstance(values, CheckConfig):
        return values
    return CheckConfig.from_mapping(values)

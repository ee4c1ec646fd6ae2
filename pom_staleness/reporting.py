"""
Severity policy, report messages and export utilities.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Union

import pandas as pd

from .errors import UnknownSeverityLevel
from .models import AnalysisResult, ArtifactVersion


DISABLED_NOTICE = "Dependency analysis is disabled."
UP_TO_DATE_NOTICE = "All dependencies are up to date."


class Severity(Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


_SEVERITY_ALIASES = {"OFF": Severity.INFO}


def parse_level(value: Union[str, Severity]) -> Severity:
    """Turn a configured level into a :class:`Severity`.

    Matching is case-insensitive and ``OFF`` is an alias of INFO.
    """
    if isinstance(value, Severity):
        return value
    if isinstance(value, str):
        name = value.strip().upper()
        if name in _SEVERITY_ALIASES:
            return _SEVERITY_ALIASES[name]
        try:
            return Severity(name)
        except ValueError:
            pass
    raise UnknownSeverityLevel(f"Unknown level: {value!r}")


@dataclass(frozen=True)
class Action:
    message: str


@dataclass(frozen=True)
class Fail(Action):
    """The enclosing build step must fail."""


@dataclass(frozen=True)
class Warn(Action):
    """Log at warning level, do not fail."""


@dataclass(frozen=True)
class Inform(Action):
    """Log informationally."""


def describe_outdated(artifact: ArtifactVersion, newer: Sequence[ArtifactVersion]) -> str:
    return "{} (version {}) has newer versions: {}".format(
        artifact.coordinate.identifier,
        artifact.display_version,
        "; ".join(version.display_version for version in newer),
    )


def build_message(outdated: Mapping[ArtifactVersion, Sequence[ArtifactVersion]]) -> str:
    """One line per outdated artifact, in the mapping's order."""
    return "\n".join(describe_outdated(artifact, newer) for artifact, newer in outdated.items())


def skipped_notice(result: AnalysisResult) -> str:
    return (
        f"not all dependencies were checked: {len(result.skipped)} of "
        f"{result.checked_count} could not be queried."
    )


def report(result: AnalysisResult, level: Union[str, Severity]) -> Action:
    """Map an analysis result and a severity level to an action."""
    severity = parse_level(level)
    if result.outdated:
        message = build_message(result.outdated)
        if severity is Severity.ERROR:
            return Fail(message)
        if severity is Severity.WARNING:
            return Warn(message)
        return Inform(message)
    if result.skipped:
        return Inform(skipped_notice(result))
    return Inform(UP_TO_DATE_NOTICE)


class ReportEmitter:
    """Write actions to an injected logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("pom_staleness.report")

    def emit(self, action: Action) -> Action:
        if isinstance(action, Fail):
            self.logger.error(action.message)
        elif isinstance(action, Warn):
            self.logger.warning(action.message)
        else:
            self.logger.info(action.message)
        return action


def result_summary(result: AnalysisResult) -> Dict:
    return {
        "checked_count": result.checked_count,
        "outdated": [
            {
                "artifact": artifact.coordinate.identifier,
                "version": artifact.version,
                "packaging": artifact.packaging.value,
                "newer_versions": [newer.version for newer in versions],
            }
            for artifact, versions in result.outdated.items()
        ],
        "skipped": sorted(str(artifact) for artifact in result.skipped),
    }


def save_results_json(result: AnalysisResult, output_dir: Path, name: str = "pom") -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    results_file = output_dir / f"{name}_staleness.json"
    with open(results_file, "w") as f:
        json.dump(result_summary(result), f, indent=2, default=str)
    return results_file


def export_outdated_csv(result: AnalysisResult, output_dir: Path, name: str = "pom") -> Optional[Path]:
    if not result.outdated:
        return None
    output_dir.mkdir(parents=True, exist_ok=True)
    csv_file = output_dir / f"{name}_outdated.csv"
    rows = [
        {
            "group": artifact.coordinate.group,
            "artifact_id": artifact.coordinate.artifact_id,
            "version": artifact.version,
            "newer_version": newer.version,
            "observed_at": newer.observed_at,
        }
        for artifact, versions in result.outdated.items()
        for newer in versions
    ]
    df = pd.DataFrame(rows)
    df.to_csv(csv_file, index=False, columns=["group", "artifact_id", "version", "newer_version", "observed_at"])
    return csv_file

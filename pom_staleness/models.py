"""
Core data models for build descriptor staleness analysis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple, Union

from .time_utils import ensure_utc, utc_now


UNRESOLVED = "<unresolved>"


@dataclass(frozen=True)
class ArtifactCoordinate:
    """The version-independent (group, artifact id) identity of an artifact."""

    group: str
    artifact_id: str

    def __post_init__(self) -> None:
        if not self.group or not self.group.strip():
            raise ValueError("Artifact group must not be empty")
        if not self.artifact_id or not self.artifact_id.strip():
            raise ValueError("Artifact id must not be empty")

    @property
    def identifier(self) -> str:
        return f"{self.group}:{self.artifact_id}"

    def __str__(self) -> str:
        return self.identifier


class PackagingType(Enum):
    """Known packaging types. UNKNOWN marks a raw value that matched none."""

    JAR = "jar"
    WAR = "war"
    EAR = "ear"
    POM = "pom"
    EJB = "ejb"
    RAR = "rar"
    BUNDLE = "bundle"
    MAVEN_PLUGIN = "maven-plugin"
    TEST_JAR = "test-jar"
    UNKNOWN = "unknown"

    @classmethod
    def lookup(cls, raw: Optional[str]) -> "PackagingType":
        """Match a raw packaging string exactly; anything else is UNKNOWN."""
        if raw is None:
            return cls.UNKNOWN
        return _PACKAGING_BY_NAME.get(raw, cls.UNKNOWN)


_PACKAGING_BY_NAME: Dict[str, PackagingType] = {
    member.value: member for member in PackagingType if member is not PackagingType.UNKNOWN
}


@dataclass(frozen=True)
class ArtifactVersion:
    """A coordinate at a specific version, as declared or as published.

    ``version`` is None when the declared version could not be resolved.
    Equality and hashing use only (coordinate, version).
    """

    coordinate: ArtifactCoordinate
    version: Optional[str]
    packaging: PackagingType = field(default=PackagingType.UNKNOWN, compare=False)
    observed_at: datetime = field(default_factory=utc_now, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "observed_at", ensure_utc(self.observed_at))

    @property
    def resolved(self) -> bool:
        return self.version is not None

    @property
    def display_version(self) -> str:
        return self.version if self.resolved else UNRESOLVED

    def __str__(self) -> str:
        return f"{self.coordinate.identifier}:{self.display_version}"


@dataclass(frozen=True)
class BuildFileDescriptor:
    """Flattened view of a build descriptor."""

    parent: Optional[ArtifactVersion]
    dependencies: Tuple[ArtifactVersion, ...] = ()
    plugins: Tuple[ArtifactVersion, ...] = ()

    def artifacts(
        self, include_parent: bool = True, include_plugins: bool = True
    ) -> Tuple[ArtifactVersion, ...]:
        """All declared artifacts in descriptor order: parent, dependencies, plugins."""
        ordered = []
        if include_parent and self.parent is not None:
            ordered.append(self.parent)
        ordered.extend(self.dependencies)
        if include_plugins:
            ordered.extend(self.plugins)
        return tuple(ordered)


@dataclass(frozen=True)
class Current:
    artifact: ArtifactVersion


@dataclass(frozen=True)
class Outdated:
    artifact: ArtifactVersion
    newer: Tuple[ArtifactVersion, ...]


@dataclass(frozen=True)
class Skipped:
    artifact: ArtifactVersion
    error: Exception


QueryOutcome = Union[Current, Outdated, Skipped]


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one analysis run.

    ``outdated`` preserves the order in which artifacts were analysed and
    is exposed read-only.
    """

    outdated: Mapping[ArtifactVersion, Tuple[ArtifactVersion, ...]]
    skipped: FrozenSet[ArtifactVersion]
    checked_count: int

    def __post_init__(self) -> None:
        for artifact, newer in self.outdated.items():
            if not newer:
                raise ValueError(f"Outdated entry for {artifact} has no newer versions")
            if not all(version.resolved for version in newer):
                raise ValueError(f"Outdated entry for {artifact} lists an unresolved version")
        if not isinstance(self.outdated, MappingProxyType):
            object.__setattr__(self, "outdated", MappingProxyType(dict(self.outdated)))
        object.__setattr__(self, "skipped", frozenset(self.skipped))

    @classmethod
    def from_outcomes(cls, outcomes) -> "AnalysisResult":
        """Partition tagged outcomes into a result, keeping outcome order."""
        outdated: Dict[ArtifactVersion, Tuple[ArtifactVersion, ...]] = {}
        skipped = set()
        count = 0
        for outcome in outcomes:
            count += 1
            if isinstance(outcome, Outdated):
                newer = tuple(version for version in outcome.newer if version.resolved)
                if newer:
                    outdated[outcome.artifact] = newer
            elif isinstance(outcome, Skipped):
                skipped.add(outcome.artifact)
        return cls(outdated=MappingProxyType(outdated), skipped=frozenset(skipped), checked_count=count)

    @property
    def is_current(self) -> bool:
        return not self.outdated and not self.skipped

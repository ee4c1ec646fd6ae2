"""
Interfaces for build files and artifact repositories.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import ArtifactVersion, BuildFileDescriptor


class RepositoryQuery(Protocol):
    """Look up published versions of an artifact.

    Version ordering and "newer than" semantics belong to the repository.
    Implementations raise on network or response problems.
    """

    def find_newer_than(self, artifact: ArtifactVersion) -> Sequence[ArtifactVersion]:
        ...


class BuildFile(Protocol):
    """A project's build file, e.g. pom.xml."""

    def descriptor(self) -> BuildFileDescriptor:
        ...

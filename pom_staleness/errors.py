"""
Exception taxonomy for the analyser.

Descriptor and configuration errors abort a run. ``QueryError`` is raised by
repository implementations and is always recovered per artifact.
"""

__all__ = [
    "AnalyserError",
    "DescriptorError",
    "DescriptorNotFound",
    "DescriptorMalformed",
    "QueryError",
    "UnknownSeverityLevel",
    "StaleDependenciesError",
]


class AnalyserError(Exception):
    """Base class for errors that stop an analysis run."""


class DescriptorError(AnalyserError):
    """The build descriptor could not be turned into a descriptor model."""

    def __init__(self, path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class DescriptorNotFound(DescriptorError):
    """The descriptor file is missing or unreadable."""


class DescriptorMalformed(DescriptorError):
    """The descriptor content is not a well-formed project descriptor."""


class QueryError(Exception):
    """A repository lookup for a single artifact failed."""

    def __init__(self, artifact, reason: str) -> None:
        super().__init__(f"Query for {artifact} failed: {reason}")
        self.artifact = artifact
        self.reason = reason


class UnknownSeverityLevel(AnalyserError, ValueError):
    """A configured severity level is not one of the recognized levels."""


class StaleDependenciesError(AnalyserError):
    """Outdated artifacts were found and the severity level demands a failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

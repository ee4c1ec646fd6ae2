"""
Maven repository client implementing the repository query interface.
"""

from __future__ import annotations

import logging
import re
import threading
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import requests
from packaging import version as pkg_version

from .errors import QueryError
from .interfaces import RepositoryQuery
from .models import ArtifactCoordinate, ArtifactVersion
from .time_utils import utc_now


logger = logging.getLogger(__name__)

MAVEN_CENTRAL_URL = "https://repo1.maven.org/maven2"

# Qualifier ranks below the release marker sort before the plain release.
_QUALIFIER_RANKS = {
    "alpha": 0,
    "a": 0,
    "beta": 1,
    "b": 1,
    "milestone": 2,
    "m": 2,
    "rc": 3,
    "cr": 3,
    "snapshot": 4,
    "ea": 0,
    "pre": 0,
    "dev": 0,
}
_RELEASE_QUALIFIERS = {"", "ga", "final", "release"}
_TOKEN = re.compile(r"\d+|[A-Za-z]+")


def version_key(value: str) -> Tuple[Tuple[int, int, str], ...]:
    """Sort key approximating Maven version ordering.

    Numeric segments compare numerically, and trailing zero segments are
    dropped so 1.0 and 1.0.0 are equal. Pre-release qualifiers sort before
    the release, unknown qualifiers after it.
    """
    key = []
    for token in _TOKEN.findall(value):
        if token.isdigit():
            key.append((3, int(token), ""))
            continue
        lowered = token.lower()
        if lowered in _RELEASE_QUALIFIERS:
            continue
        _drop_trailing_zeros(key)
        if lowered in _QUALIFIER_RANKS:
            key.append((0, _QUALIFIER_RANKS[lowered], ""))
        else:
            key.append((2, 0, lowered))
    _drop_trailing_zeros(key)
    key.append((1, 0, ""))
    return tuple(key)


def _drop_trailing_zeros(key: list) -> None:
    while key and key[-1] == (3, 0, ""):
        key.pop()


def is_prerelease(value: str) -> bool:
    try:
        return pkg_version.Version(value).is_prerelease
    except pkg_version.InvalidVersion:
        return any(token.lower() in _QUALIFIER_RANKS for token in _TOKEN.findall(value))


def metadata_url(base_url: str, coordinate: ArtifactCoordinate) -> str:
    group_path = coordinate.group.replace(".", "/")
    return f"{base_url.rstrip('/')}/{group_path}/{coordinate.artifact_id}/maven-metadata.xml"


def parse_metadata_versions(content: bytes) -> List[str]:
    """Extract ``<versioning><versions><version>`` values in published order."""
    root = ET.fromstring(content)
    return [
        element.text.strip()
        for element in root.findall("./versioning/versions/version")
        if element.text and element.text.strip()
    ]


@dataclass
class RepositoryCache:
    """Shared in-memory cache for repository lookups within one process.

    The version table is shared between threads under ``lock``. Sessions are
    not: each thread gets its own from ``session_factory``.
    """

    versions: Dict[ArtifactCoordinate, List[str]] = field(default_factory=dict)
    session_factory: Callable[[], requests.Session] = requests.Session
    lock: threading.Lock = field(default_factory=threading.Lock)
    _local: threading.local = field(default_factory=threading.local, repr=False)

    @property
    def session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self.session_factory()
            self._local.session = session
        return session


class MavenCentralRepository(RepositoryQuery):
    """Look up newer versions via a repository's ``maven-metadata.xml``."""

    def __init__(
        self,
        base_url: str = MAVEN_CENTRAL_URL,
        timeout: float = 10.0,
        include_prereleases: bool = False,
        cache: Optional[RepositoryCache] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.include_prereleases = include_prereleases
        self.cache = cache or RepositoryCache()

    def find_newer_than(self, artifact: ArtifactVersion) -> List[ArtifactVersion]:
        if artifact.version is None:
            raise QueryError(artifact, "artifact has no resolved version")
        published = self.published_versions(artifact)
        newer = self.newer_versions(artifact.version, published)
        observed = utc_now()
        return [
            ArtifactVersion(
                coordinate=artifact.coordinate,
                version=name,
                packaging=artifact.packaging,
                observed_at=observed,
            )
            for name in newer
        ]

    def published_versions(self, artifact: ArtifactVersion) -> List[str]:
        coordinate = artifact.coordinate
        with self.cache.lock:
            cached = self.cache.versions.get(coordinate)
        if cached is not None:
            logger.debug("Cache hit: versions %s", coordinate.identifier)
            return cached

        url = metadata_url(self.base_url, coordinate)
        logger.info("Fetching metadata for %s", coordinate.identifier)
        try:
            with self.cache.session.get(url, timeout=self.timeout) as response:
                if response.status_code == 404:
                    raise QueryError(artifact, f"unknown artifact ({url})")
                response.raise_for_status()
                content = response.content
        except requests.RequestException as e:
            raise QueryError(artifact, str(e)) from e

        try:
            versions = parse_metadata_versions(content)
        except ET.ParseError as e:
            raise QueryError(artifact, f"malformed metadata: {e}") from e

        with self.cache.lock:
            self.cache.versions[coordinate] = versions
        return versions

    def newer_versions(self, current: str, published: List[str]) -> List[str]:
        """Published versions strictly newer than ``current``, ascending."""
        current_key = version_key(current)
        allow_pre = self.include_prereleases or is_prerelease(current)
        candidates = {
            name
            for name in published
            if version_key(name) > current_key and (allow_pre or not is_prerelease(name))
        }
        return sorted(candidates, key=lambda name: (version_key(name), name))

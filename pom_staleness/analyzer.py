"""
Staleness analysis: query the repository for every declared artifact.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Sequence

from tqdm import tqdm

from .interfaces import RepositoryQuery
from .models import AnalysisResult, ArtifactVersion, Current, Outdated, QueryOutcome, Skipped


logger = logging.getLogger(__name__)


def unique_artifacts(artifacts: Iterable[ArtifactVersion]) -> List[ArtifactVersion]:
    """Drop repeated (coordinate, version) entries, keeping first occurrence order."""
    seen = set()
    ordered = []
    for artifact in artifacts:
        if artifact in seen:
            continue
        seen.add(artifact)
        ordered.append(artifact)
    return ordered


class StalenessAnalyzer:
    """Find artifacts with newer published versions.

    A failing lookup never aborts the batch: the artifact is recorded as
    skipped and analysis moves on.
    """

    def __init__(self, max_workers: int = 1, progress: bool = False) -> None:
        """Initialize the analyzer.

        Args:
            max_workers: Maximum number of concurrent repository queries.
                1 queries artifacts sequentially.
            progress: Show a progress bar while querying.
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers
        self.progress = progress

    def analyze(
        self, artifacts: Sequence[ArtifactVersion], query: RepositoryQuery
    ) -> AnalysisResult:
        artifacts = list(artifacts)
        logger.info("Checking %d artifacts for newer versions", len(artifacts))
        if self.max_workers == 1 or len(artifacts) <= 1:
            outcomes = [self.check(artifact, query) for artifact in self._track(artifacts)]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # map() yields in submission order, whatever the completion order.
                outcomes = list(
                    self._track(
                        executor.map(lambda artifact: self.check(artifact, query), artifacts),
                        total=len(artifacts),
                    )
                )
        result = AnalysisResult.from_outcomes(outcomes)
        logger.info(
            "Checked %d artifacts: %d outdated, %d skipped",
            result.checked_count,
            len(result.outdated),
            len(result.skipped),
        )
        return result

    def check(self, artifact: ArtifactVersion, query: RepositoryQuery) -> QueryOutcome:
        """Query one artifact and tag the outcome."""
        try:
            newer = tuple(query.find_newer_than(artifact))
        except Exception as e:
            logger.warning("Skipping %s: %s", artifact, e)
            return Skipped(artifact=artifact, error=e)
        if not newer:
            logger.debug("%s is current", artifact)
            return Current(artifact=artifact)
        logger.debug("%s has %d newer versions", artifact, len(newer))
        return Outdated(artifact=artifact, newer=newer)

    def _track(self, iterable, total=None):
        if not self.progress:
            return iterable
        return tqdm(iterable, total=total, unit="artifact", desc="Checking artifacts")

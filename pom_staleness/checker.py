"""
Top-level check: the callable a host (build plugin, CLI, CI job) wraps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Union

from .analyzer import StalenessAnalyzer, unique_artifacts
from .build_file import PomBuildFile
from .config import CheckConfig, load_config
from .errors import StaleDependenciesError
from .interfaces import BuildFile, RepositoryQuery
from .models import AnalysisResult, ArtifactVersion, BuildFileDescriptor
from .repository import MavenCentralRepository
from .reporting import DISABLED_NOTICE, Action, Fail, Inform, ReportEmitter, report


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckReport:
    """The emitted action and, unless analysis was disabled, its result."""

    action: Action
    result: Optional[AnalysisResult] = None

    @property
    def failed(self) -> bool:
        return isinstance(self.action, Fail)

    def raise_for_failure(self) -> None:
        if self.failed:
            raise StaleDependenciesError(self.action.message)


def select_artifacts(descriptor: BuildFileDescriptor, config: CheckConfig) -> List[ArtifactVersion]:
    """Artifacts to query: resolved, de-duplicated, in descriptor order."""
    selected = []
    for artifact in descriptor.artifacts(
        include_parent=config.include_parent, include_plugins=config.include_plugins
    ):
        if not artifact.resolved:
            logger.warning("Not checking %s: version could not be resolved", artifact.coordinate)
            continue
        selected.append(artifact)
    return unique_artifacts(selected)


def default_repository(config: CheckConfig) -> RepositoryQuery:
    return MavenCentralRepository(
        base_url=config.repository_url,
        timeout=config.timeout,
        include_prereleases=config.include_prereleases,
    )


def run_check(
    config: Union[CheckConfig, Mapping[str, Any], None] = None,
    query: Optional[RepositoryQuery] = None,
    build_file: Callable[..., BuildFile] = PomBuildFile,
    emitter: Optional[ReportEmitter] = None,
    analyzer: Optional[StalenessAnalyzer] = None,
) -> CheckReport:
    """Run one analysis invocation and emit its report.

    Descriptor and configuration errors propagate. A stale result at ERROR
    level is returned as a failed report; call ``raise_for_failure`` to turn
    it into an exception.
    """
    config = load_config(config)
    emitter = emitter or ReportEmitter()
    if not config.enabled:
        return CheckReport(action=emitter.emit(Inform(DISABLED_NOTICE)))

    descriptor = build_file(config.path).descriptor()
    artifacts = select_artifacts(descriptor, config)
    if query is None:
        query = default_repository(config)
    if analyzer is None:
        analyzer = StalenessAnalyzer(max_workers=config.max_workers)
    result = analyzer.analyze(artifacts, query)
    action = emitter.emit(report(result, config.level))
    return CheckReport(action=action, result=result)

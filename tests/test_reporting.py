"""Tests for severity handling and report exports."""

import json
import logging
from pathlib import Path

import pandas as pd
import pytest

from conftest import artifact
from pom_staleness.errors import UnknownSeverityLevel
from pom_staleness.models import AnalysisResult, ArtifactCoordinate, ArtifactVersion, Current, Outdated, Skipped
from pom_staleness.reporting import (
    DISABLED_NOTICE,
    UP_TO_DATE_NOTICE,
    Fail,
    Inform,
    ReportEmitter,
    Severity,
    Warn,
    build_message,
    export_outdated_csv,
    parse_level,
    report,
    save_results_json,
)


def outdated_result():
    return AnalysisResult.from_outcomes([
        Outdated(artifact("g:a:1.0"), (artifact("g:a:1.1"), artifact("g:a:1.2"))),
        Current(artifact("g:b:2.0")),
        Outdated(artifact("org.x:y:3"), (artifact("org.x:y:4"),)),
    ])


def test_message_format():
    result = AnalysisResult.from_outcomes([
        Outdated(artifact("g:a:1.0"), (artifact("g:a:1.1"), artifact("g:a:1.2"))),
    ])

    assert build_message(result.outdated) == "g:a (version 1.0) has newer versions: 1.1; 1.2"


def test_message_has_one_line_per_artifact():
    lines = build_message(outdated_result().outdated).splitlines()

    assert lines == [
        "g:a (version 1.0) has newer versions: 1.1; 1.2",
        "org.x:y (version 3) has newer versions: 4",
    ]


@pytest.mark.parametrize(
    "level, expected",
    [
        (Severity.ERROR, Fail),
        (Severity.WARNING, Warn),
        (Severity.INFO, Inform),
        ("error", Fail),
        ("OFF", Inform),
    ],
)
def test_severity_maps_to_action(level, expected):
    action = report(outdated_result(), level)

    assert type(action) is expected
    assert "g:a (version 1.0) has newer versions: 1.1; 1.2" in action.message


def test_error_failure_names_every_outdated_artifact():
    action = report(outdated_result(), Severity.ERROR)

    for identifier in ("g:a", "org.x:y"):
        assert identifier in action.message
    for name in ("1.1", "1.2", "4"):
        assert name in action.message


def test_skips_only_inform_even_at_error():
    result = AnalysisResult.from_outcomes([
        Skipped(artifact("g:a:1.0"), RuntimeError("down")),
        Current(artifact("g:b:1.0")),
    ])

    action = report(result, Severity.ERROR)

    assert isinstance(action, Inform)
    assert action.message.startswith("not all dependencies were checked")


def test_everything_current():
    action = report(AnalysisResult.from_outcomes([Current(artifact("g:a:1"))]), Severity.ERROR)

    assert action == Inform(UP_TO_DATE_NOTICE)


def test_unknown_level_fails_regardless_of_result():
    empty = AnalysisResult.from_outcomes([])

    with pytest.raises(UnknownSeverityLevel):
        report(empty, "FATAL")
    with pytest.raises(UnknownSeverityLevel):
        report(outdated_result(), None)


def test_parse_level():
    assert parse_level(" warning ") is Severity.WARNING
    assert parse_level(Severity.ERROR) is Severity.ERROR
    with pytest.raises(ValueError):
        parse_level("LOUD")


def test_emitter_logs_at_matching_level(caplog):
    logger = logging.getLogger("test.report")
    emitter = ReportEmitter(logger)

    with caplog.at_level(logging.DEBUG, logger="test.report"):
        emitter.emit(Fail("failed"))
        emitter.emit(Warn("warned"))
        emitter.emit(Inform(DISABLED_NOTICE))

    assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
        (logging.ERROR, "failed"),
        (logging.WARNING, "warned"),
        (logging.INFO, DISABLED_NOTICE),
    ]


def test_reporting_exports(tmp_path: Path):
    output_dir = tmp_path / "out"

    json_file = save_results_json(outdated_result(), output_dir, "demo")
    csv_file = export_outdated_csv(outdated_result(), output_dir, "demo")

    summary = json.loads(json_file.read_text())
    assert summary["checked_count"] == 3
    assert summary["outdated"][0]["newer_versions"] == ["1.1", "1.2"]

    df = pd.read_csv(csv_file, dtype=str)
    assert list(df["newer_version"]) == ["1.1", "1.2", "4"]
    assert list(df["artifact_id"]) == ["a", "a", "y"]


def test_csv_export_skipped_when_nothing_outdated(tmp_path: Path):
    result = AnalysisResult.from_outcomes([Current(artifact("g:a:1"))])

    assert export_outdated_csv(result, tmp_path) is None


def test_unresolved_current_version_is_rendered_as_marker():
    unresolved = ArtifactVersion(ArtifactCoordinate("g", "a"), None)
    result = AnalysisResult.from_outcomes([Outdated(unresolved, (artifact("g:a:2.0"),))])

    assert build_message(result.outdated) == "g:a (version <unresolved>) has newer versions: 2.0"


def test_unresolved_newer_versions_are_left_out_of_the_message():
    newer = (ArtifactVersion(ArtifactCoordinate("g", "a"), None), artifact("g:a:1.1"))
    result = AnalysisResult.from_outcomes([Outdated(artifact("g:a:1.0"), newer)])

    assert report(result, Severity.WARNING) == Warn("g:a (version 1.0) has newer versions: 1.1")

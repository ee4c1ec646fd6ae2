#!/usr/bin/env python3
"""
Example script showing how to use the pom staleness checker.
"""

import logging
from pathlib import Path

from pom_staleness import CheckConfig, PomBuildFile, Severity, StalenessAnalyzer, report, run_check
from pom_staleness.repository import MavenCentralRepository
from pom_staleness.reporting import save_results_json


def example_basic_check():
    """Example: Warn about outdated artifacts of ./pom.xml."""
    print("="*60)
    print("Example 1: Basic Check")
    print("="*60)

    result = run_check(CheckConfig(path=Path("pom.xml"), level=Severity.WARNING))
    print(f"Action: {type(result.action).__name__}")
    print(result.action.message)


def example_strict_check():
    """Example: Fail the build step when anything is outdated."""
    print("\n" + "="*60)
    print("Example 2: Strict Check")
    print("="*60)

    result = run_check({"level": "ERROR", "path": "pom.xml", "max_workers": "8"})
    result.raise_for_failure()


def example_step_by_step():
    """Example: Drive each stage yourself and export the result."""
    print("\n" + "="*60)
    print("Example 3: Step by Step")
    print("="*60)

    descriptor = PomBuildFile("pom.xml").descriptor()
    artifacts = [a for a in descriptor.artifacts() if a.resolved]
    repository = MavenCentralRepository(timeout=5.0)
    result = StalenessAnalyzer(max_workers=4, progress=True).analyze(artifacts, repository)

    print(report(result, Severity.INFO).message)
    print(f"Saved: {save_results_json(result, Path('./output'))}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    example_basic_check()
    example_step_by_step()
    example_strict_check()

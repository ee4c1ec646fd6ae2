"""
POM Staleness Checker

Reports which parent, dependency and plugin versions declared in a pom.xml
have newer releases in a Maven repository.
"""

__version__ = "0.1.0"

from .analyzer import StalenessAnalyzer
from .build_file import PomBuildFile, parse_build_file
from .checker import CheckReport, run_check
from .config import CheckConfig
from .reporting import Fail, Inform, ReportEmitter, Severity, Warn, report

__all__ = [
    "CheckConfig",
    "CheckReport",
    "Fail",
    "Inform",
    "PomBuildFile",
    "ReportEmitter",
    "Severity",
    "StalenessAnalyzer",
    "Warn",
    "parse_build_file",
    "report",
    "run_check",
]

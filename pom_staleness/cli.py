"""
Command-line interface for the build descriptor staleness check.
"""

import argparse
import logging
import sys
from pathlib import Path

from .checker import run_check
from .config import CheckConfig
from .errors import AnalyserError, StaleDependenciesError
from .repository import MAVEN_CENTRAL_URL
from .reporting import export_outdated_csv, save_results_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report dependencies, plugins and parent of a pom.xml that have newer versions"
    )

    parser.add_argument(
        "--path",
        default="pom.xml",
        help="Path to the build descriptor. Default: pom.xml"
    )

    parser.add_argument(
        "--level",
        default="WARNING",
        help="What to do with outdated artifacts: ERROR, WARNING or INFO (OFF). Default: WARNING"
    )

    parser.add_argument(
        "--disabled",
        action="store_true",
        help="Skip the analysis entirely"
    )

    parser.add_argument(
        "--no-parent",
        action="store_true",
        help="Do not check the parent artifact"
    )

    parser.add_argument(
        "--no-plugins",
        action="store_true",
        help="Do not check build plugins"
    )

    parser.add_argument(
        "--include-prereleases",
        action="store_true",
        help="Report pre-release versions (alpha, beta, RC, milestones, snapshots) as newer"
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of concurrent repository queries. Default: 1"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Timeout in seconds for each repository query. Default: 10"
    )

    parser.add_argument(
        "--repository-url",
        default=MAVEN_CENTRAL_URL,
        help=f"Maven repository base URL. Default: {MAVEN_CENTRAL_URL}"
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Write JSON and CSV results to this directory"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = CheckConfig(
            level=args.level,
            enabled=not args.disabled,
            path=Path(args.path),
            include_parent=not args.no_parent,
            include_plugins=not args.no_plugins,
            max_workers=args.workers,
            timeout=args.timeout,
            repository_url=args.repository_url,
            include_prereleases=args.include_prereleases,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        report = run_check(config)
        if args.output_dir and report.result is not None:
            output_dir = Path(args.output_dir)
            name = config.path.stem
            results_file = save_results_json(report.result, output_dir, name)
            print(f"Results saved to: {results_file}")
            csv_file = export_outdated_csv(report.result, output_dir, name)
            if csv_file is not None:
                print(f"Outdated artifacts saved to: {csv_file}")
        report.raise_for_failure()
    except StaleDependenciesError:
        sys.exit(1)
    except AnalyserError as e:
        print(f"Error during analysis: {e}", file=sys.stderr)
        sys.exit(2)
    return 0


if __name__ == "__main__":
    sys.exit(main())

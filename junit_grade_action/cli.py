"""CLI entry point for the JUnit grading action."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from junit_grade_action.models.config import GraderConfig
from junit_grade_action.models.report import GradingReport
from junit_grade_action.orchestrator import GradingOrchestrator
from junit_grade_action.sink import encode_report, publish

STATUS_SYMBOLS = {
    "pass": "✅",
    "error": "❌",
}

# CLI argument name -> GraderConfig field
CONFIG_FIELDS = {
    "test_name": "test_name",
    "test_class": "test_classes",
    "setup_command": "setup_command",
    "timeout": "timeout_minutes",
    "max_score": "max_score",
    "lib_path": "lib_path",
    "partial_credit": "partial_credit",
    "build_command": "build_command_override",
    "run_command": "run_command_override",
}


def log_report_summary(log: logging.Logger, report: GradingReport) -> None:
    """Log a human-readable summary of a grading report."""
    log.info("=" * 80)
    log.info("Grading Summary:")
    log.info("=" * 80)

    for test in report.tests:
        symbol = STATUS_SYMBOLS.get(test.status, "?")
        if test.score is None:
            log.info("%s %s: %s", symbol, test.name, test.status)
        else:
            log.info(
                "%s %s: %s (%g of %g points)",
                symbol,
                test.name,
                test.status,
                test.score,
                report.max_score,
            )
        log.info("  Message: %s", test.message)

    if report.plain_text_table:
        log.info("Failures:\n%s", report.plain_text_table)


def build_config(inputs: Mapping[str, str | None]) -> GraderConfig:
    """Build the grader configuration from raw action inputs.

    Empty inputs fall back to the configuration defaults, like unset
    action inputs do.
    """
    values: dict[str, Any] = {
        CONFIG_FIELDS[name]: value
        for name, value in inputs.items()
        if name in CONFIG_FIELDS and value is not None and value.strip()
    }
    return GraderConfig(**values)


async def run(config: GraderConfig, output_path: Path | None = None) -> int:
    """Grade the submission, publish the report and return the exit code."""
    log = logging.getLogger("junit_grade_action")

    log.info(
        "Grading %s: classes=%s max_score=%g partial_credit=%s",
        config.display_name,
        ", ".join(config.test_classes),
        config.max_score,
        config.partial_credit,
    )

    report = await GradingOrchestrator(config=config).grade()

    log_report_summary(log, report)
    publish(encode_report(report), output_path)

    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Compile and run JUnit tests, then grade the results"
    )
    parser.add_argument("--test-name", required=True, help="Display name of the test")
    parser.add_argument(
        "--test-class",
        required=True,
        help="Comma-separated JUnit test classes to run",
    )
    parser.add_argument(
        "--setup-command",
        default="",
        help="Command to run before building (output is ignored)",
    )
    parser.add_argument("--timeout", default="", help="Timeout in minutes (default 5)")
    parser.add_argument("--max-score", default="", help="Maximum score (default 0)")
    parser.add_argument(
        "--lib-path", default="", help="Folder holding the JUnit jars (default lib)"
    )
    parser.add_argument(
        "--partial-credit",
        default="",
        help="Award partial credit for partially passing tests (true/false)",
    )
    parser.add_argument("--build-command", default="", help="Override javac command")
    parser.add_argument("--run-command", default="", help="Override JUnitCore command")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="GitHub Actions output file (prints to stdout when omitted)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = build_config(vars(args))
    except ValidationError as exc:
        parser.error(f"invalid configuration: {exc}")

    exit_code = asyncio.run(run(config, output_path=args.output))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

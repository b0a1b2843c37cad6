"""Interpret one test-runner output into a grading report."""

import logging

from junit_grade_action.assembler import assemble_report
from junit_grade_action.classifier import classify_failures
from junit_grade_action.lexer import RunnerSummary, scan_report
from junit_grade_action.models.config import GraderConfig
from junit_grade_action.models.outcome import (
    AllFailed,
    ExecutionError,
    PartiallyFailed,
    Passed,
    RunOutcome,
)
from junit_grade_action.models.report import GradingReport
from junit_grade_action.scorer import AmbiguousScoreError, score

log = logging.getLogger(__name__)


def classify_outcome(
    summary: RunnerSummary,
    *,
    returncode: int,
    stdout: str,
    stderr: str,
    command: str,
) -> RunOutcome:
    """Decide how a finished test run ended.

    Output without a version line or failure headers cannot be graded. A
    non-zero exit without any recognized failure is a crash, whatever the
    marker line says.
    """
    if summary.is_empty:
        if returncode != 0:
            reason = f"Test runner exited with code {returncode} before reporting results"
        else:
            reason = "Test runner output contains no test results"
        return ExecutionError(
            stage="run", reason=reason, command=command, stdout=stdout, stderr=stderr
        )

    if returncode != 0 and summary.failed == 0:
        return ExecutionError(
            stage="run",
            reason=f"Test runner exited with code {returncode} but no test failed",
            command=command,
            total=summary.total,
            stdout=stdout,
            stderr=stderr,
        )

    if summary.failed == 0:
        return Passed(total=summary.total, stdout=stdout, stderr=stderr)
    if summary.failed >= summary.total:
        return AllFailed(total=summary.total, stdout=stdout, stderr=stderr)
    return PartiallyFailed(
        total=summary.total, failed=summary.failed, stdout=stdout, stderr=stderr
    )


def interpret_run(
    config: GraderConfig,
    *,
    returncode: int,
    stdout: str,
    stderr: str = "",
) -> GradingReport:
    """Grade a completed test run from its exit code and captured output."""
    summary = scan_report(stdout)
    log.info(
        "Runner output: marker_line=%r glyphs=%r failure_blocks=%d exit_code=%d",
        summary.marker_line,
        summary.glyphs,
        len(summary.blocks),
        returncode,
    )

    outcome = classify_outcome(
        summary,
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
        command=config.run_command,
    )
    if isinstance(outcome, ExecutionError):
        log.warning("Test run crashed: %s", outcome.reason)
        return assemble_report(config, outcome)

    try:
        result = score(
            summary.total, summary.failed, config.max_score, config.partial_credit
        )
    except AmbiguousScoreError as exc:
        log.warning("Cannot score run: %s", exc)
        return assemble_report(
            config,
            ExecutionError(
                stage="run",
                reason=str(exc),
                command=config.run_command,
                total=0,
                stdout=stdout,
                stderr=stderr,
            ),
        )

    records = classify_failures(summary.blocks)
    log.info(
        "%d of %d test(s) failed, awarded %.2f of %.2f points",
        summary.failed,
        summary.total,
        result.awarded,
        result.max_score,
    )
    return assemble_report(config, outcome, records, result)

"""Assemble grading reports and render failure tables."""

import html
import re
from collections.abc import Mapping, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from junit_grade_action.models.config import GraderConfig
from junit_grade_action.models.outcome import (
    AllFailed,
    ExecutionError,
    ExecutionStage,
    FailureRecord,
    PartiallyFailed,
    Passed,
    RunOutcome,
    ScoreResult,
)
from junit_grade_action.models.report import GradingReport, TestEntry

TABLE_HEADERS = ("Message", "Expected", "Actual")
PLAIN_TABLE_WIDTH = 120

LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")

STAGE_HEADLINES: Mapping[ExecutionStage, str] = {
    "setup": ":x: Error running setup command",
    "build": ":x: Error building Java code",
    "run": ":x: Error running tests",
}

STAGE_ACTIONS: Mapping[ExecutionStage, str] = {
    "setup": "running setup command",
    "build": "building submitted code",
    "run": "running tests",
}


def format_points(value: float) -> str:
    """Format points without a trailing ``.0``."""
    return f"{value:g}"


def render_plain_table(records: Sequence[FailureRecord]) -> str:
    """Render failures as a plain-text table for console logs.

    Unstructured records occupy the message cell and leave the value
    cells empty.
    """
    table = Table(*TABLE_HEADERS, box=box.ASCII, show_lines=True)
    for record in records:
        if record.is_structured:
            table.add_row(
                Text(record.message),
                Text(record.expected or ""),
                Text(record.actual or ""),
            )
        else:
            table.add_row(Text(record.message), "", "")

    console = Console(
        width=PLAIN_TABLE_WIDTH, color_system=None, highlight=False, emoji=False
    )
    with console.capture() as capture:
        console.print(table)
    return capture.get().rstrip("\n")


def _html_cell(value: str, *, colspan: int | None = None) -> str:
    content = LINE_BREAK_PATTERN.sub("<br>", html.escape(value, quote=False))
    if colspan:
        return f'<td colspan="{colspan}">{content}</td>'
    return f"<td>{content}</td>"


def render_html_table(records: Sequence[FailureRecord]) -> str:
    """Render failures as an HTML table for the markdown report body."""
    head = "".join(f"<th>{header}</th>" for header in TABLE_HEADERS)
    rows: list[str] = []
    for record in records:
        if record.is_structured:
            cells = (
                _html_cell(record.message)
                + _html_cell(record.expected or "")
                + _html_cell(record.actual or "")
            )
        else:
            cells = _html_cell(record.message, colspan=len(TABLE_HEADERS))
        rows.append(f"<tr>{cells}</tr>")
    return f"<table><thead><tr>{head}</tr></thead><tbody>{''.join(rows)}</tbody></table>"


def _output_section(title: str, text: str) -> str:
    if not text.strip():
        return ""
    return f"\n\n{title}:\n\n```\n{text.strip()}\n```\n"


def _plural(count: int) -> str:
    return "test" if count == 1 else "tests"


def _execution_error_markdown(outcome: ExecutionError) -> str:
    markdown = STAGE_HEADLINES[outcome.stage]
    if outcome.stage == "setup":
        markdown += (
            "\n\nThis is probably something that your teacher needs to fix"
            f"\n\n```shell\n{outcome.command}\n```"
        )
    markdown += f"\n\nError: {outcome.reason}"
    markdown += _output_section("Standard Output", outcome.stdout)
    markdown += _output_section("Error Output", outcome.stderr)
    return markdown


def _failure_headline(outcome: PartiallyFailed | AllFailed, score: ScoreResult) -> str:
    max_points = format_points(score.max_score)
    if isinstance(outcome, AllFailed):
        return (
            f":x: All {outcome.total} {_plural(outcome.total)} failed "
            f"({format_points(score.awarded)} of {max_points} points)"
        )
    return (
        f":x: {outcome.failed} of {outcome.total} {_plural(outcome.total)} failed "
        f"({format_points(score.awarded)} of {max_points} points)"
    )


def assemble_report(
    config: GraderConfig,
    outcome: RunOutcome,
    records: Sequence[FailureRecord] = (),
    score: ScoreResult | None = None,
) -> GradingReport:
    """Merge an outcome, its failures and its score into a report.

    Passed and failed runs need a score; execution errors never get one.
    """
    name = config.display_name

    match outcome:
        case ExecutionError(stage=stage, command=command):
            return GradingReport(
                status="error",
                max_score=config.max_score,
                markdown=_execution_error_markdown(outcome),
                tests=[
                    TestEntry(
                        name=name,
                        status="error",
                        message=(
                            f"Error {STAGE_ACTIONS[stage]}, "
                            f"see {name} above for more details"
                        ),
                        test_code=command,
                    )
                ],
            )

        case Passed(total=total):
            if score is None:
                raise ValueError("A passed run needs a score")
            return GradingReport(
                status="pass",
                max_score=config.max_score,
                markdown=f"✅ {total} {_plural(total)} passed",
                tests=[
                    TestEntry(
                        name=name,
                        status="pass",
                        message="Tests passed",
                        test_code=config.run_command,
                        score=score.max_score,
                    )
                ],
            )

        case PartiallyFailed() | AllFailed():
            if score is None:
                raise ValueError("A failed run needs a score")
            markdown = _failure_headline(outcome, score) + "\n\n"
            markdown += render_html_table(records)
            markdown += _output_section("Error Output", outcome.stderr)
            return GradingReport(
                status="error",
                max_score=config.max_score,
                markdown=markdown,
                plain_text_table=render_plain_table(records),
                tests=[
                    TestEntry(
                        name=name,
                        status="error",
                        message=f"Error running tests, see {name} above for more details",
                        test_code=config.run_command,
                        score=score.awarded,
                    )
                ],
            )

    raise TypeError(f"Unsupported run outcome: {outcome!r}")

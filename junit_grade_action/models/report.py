"""Models for the grading report handed to the result sink."""

from collections.abc import Sequence
from typing import Literal, TypeAlias

from pydantic import Field

from junit_grade_action.models.base import Model

ReportStatus: TypeAlias = Literal["pass", "error"]


class TestEntry(Model):
    """Summary of one graded test as shown by the autograding reporter."""

    __test__ = False

    name: str = Field(..., description="Test display name")
    status: ReportStatus = Field(..., description="Outcome of the test")
    message: str = Field(..., description="Short human-readable outcome")
    test_code: str = Field(default="", description="Command that was executed")
    filename: str = Field(default="", description="Source file, unused")
    line_no: int = Field(default=0, description="Source line, unused")
    execution_time: float = Field(default=0, description="Timing placeholder")
    score: float | None = Field(
        default=None, description="Awarded points, absent when no score applies"
    )


class GradingReport(Model):
    """Terminal artifact of one grading attempt."""

    version: Literal[1] = 1
    status: ReportStatus
    max_score: float
    markdown: str = Field(..., description="Markdown/HTML body for the report")
    plain_text_table: str = Field(
        default="",
        exclude=True,
        description="Plain-text failure table for console logs, never published",
    )
    tests: Sequence[TestEntry] = Field(..., min_length=1)

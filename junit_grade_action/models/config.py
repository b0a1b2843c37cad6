"""Grader configuration supplied by the action inputs."""

import re
from typing import Any

from pydantic import Field, field_validator

from junit_grade_action.models.base import Model

JUNIT_RUNNER_CLASS = "org.junit.runner.JUnitCore"

_CLASS_SEPARATOR = re.compile(r"\s*,\s*")


class GraderConfig(Model):
    """Everything one grading attempt needs, passed explicitly to the engine."""

    test_name: str = Field(..., description="Display name of the graded test")
    test_classes: tuple[str, ...] = Field(
        ..., min_length=1, description="JUnit test classes to run"
    )
    setup_command: str | None = Field(
        default=None, description="Command run before building (output ignored)"
    )
    timeout_minutes: float = Field(
        default=5,
        gt=0,
        le=60,
        description="Timeout for each external step, in minutes",
    )
    max_score: float = Field(default=0, ge=0, description="Points for a full pass")
    lib_path: str = Field(default="lib", description="Folder holding the JUnit jars")
    partial_credit: bool = Field(
        default=False, description="Award points proportional to passing tests"
    )
    build_command_override: str | None = Field(
        default=None, description="Replaces the default javac invocation"
    )
    run_command_override: str | None = Field(
        default=None, description="Replaces the default JUnitCore invocation"
    )

    @field_validator("test_classes", mode="before")
    @classmethod
    def split_test_classes(cls, value: Any) -> Any:
        """Accept a comma-separated string as well as a list of class names."""
        if isinstance(value, str):
            value = _CLASS_SEPARATOR.split(value.strip())
        if isinstance(value, (list, tuple)):
            return tuple(item.strip() for item in value if item and item.strip())
        return value

    @field_validator("partial_credit", mode="before")
    @classmethod
    def parse_flag(cls, value: Any) -> Any:
        """Only the text ``true`` enables a flag given as a string."""
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return value

    @field_validator("setup_command", "build_command_override", "run_command_override")
    @classmethod
    def blank_as_none(cls, value: str | None) -> str | None:
        """Treat an empty command input as not configured."""
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def display_name(self) -> str:
        """Test name shown in reports, never empty."""
        return self.test_name.strip() or "Unknown Test"

    @property
    def timeout_seconds(self) -> float:
        """Timeout converted to seconds for subprocess waits."""
        return self.timeout_minutes * 60

    @property
    def build_command(self) -> str:
        """Shell command compiling the submission and the tests."""
        if self.build_command_override:
            return self.build_command_override
        return f'javac -cp "{self.lib_path}/*" -d . *.java'

    @property
    def run_command(self) -> str:
        """Shell command running the configured test classes with JUnitCore."""
        if self.run_command_override:
            return self.run_command_override
        classes = " ".join(self.test_classes)
        return f'java -cp "{self.lib_path}/*:." {JUNIT_RUNNER_CLASS} {classes}'

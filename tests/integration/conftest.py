"""Fixtures for integration tests."""

import shlex
import sys
from pathlib import Path
from typing import Protocol

import pytest


class ScriptFn(Protocol):
    """Protocol for fake tool creation function."""

    def __call__(self, source: str) -> str:
        """Write a Python script and return a shell command running it."""


@pytest.fixture
def python_script(tmp_path: Path) -> ScriptFn:
    """Return a function creating shell commands that run a Python script."""
    counter = [0]

    def _script(source: str) -> str:
        counter[0] += 1
        path = tmp_path / f"tool_{counter[0]}.py"
        path.write_text(source)
        return f"{shlex.quote(sys.executable)} {shlex.quote(str(path))}"

    return _script

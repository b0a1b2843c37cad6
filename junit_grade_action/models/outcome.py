"""Models for interpreted test runs: outcomes, failures and scores."""

from dataclasses import dataclass
from typing import Literal, TypeAlias

ExecutionStage: TypeAlias = Literal["setup", "build", "run"]


@dataclass(frozen=True, kw_only=True)
class Passed:
    """Every test in the run passed."""

    total: int
    stdout: str = ""
    stderr: str = ""

    @property
    def failed(self) -> int:
        return 0


@dataclass(frozen=True, kw_only=True)
class PartiallyFailed:
    """The run completed and some, but not all, tests failed."""

    total: int
    failed: int
    stdout: str = ""
    stderr: str = ""


@dataclass(frozen=True, kw_only=True)
class AllFailed:
    """The run completed and every test failed."""

    total: int
    stdout: str = ""
    stderr: str = ""

    @property
    def failed(self) -> int:
        return self.total


@dataclass(frozen=True, kw_only=True)
class ExecutionError:
    """The run could not be graded: setup, build or test execution broke.

    ``total`` is ``None`` when the number of tests is unknown.
    """

    stage: ExecutionStage
    reason: str
    command: str
    total: int | None = None
    stdout: str = ""
    stderr: str = ""

    @property
    def failed(self) -> int | None:
        return None


RunOutcome: TypeAlias = Passed | PartiallyFailed | AllFailed | ExecutionError


@dataclass(frozen=True, kw_only=True)
class FailureRecord:
    """One failure parsed out of a runner failure block.

    Structured records carry the expected and actual values of a failed
    comparison; unstructured records only carry a summary message.
    """

    message: str
    expected: str | None = None
    actual: str | None = None

    def __post_init__(self) -> None:
        if (self.expected is None) != (self.actual is None):
            raise ValueError("expected and actual must both be set or both be None")

    @property
    def is_structured(self) -> bool:
        return self.expected is not None


@dataclass(frozen=True, kw_only=True)
class ScoreResult:
    """Points awarded for a run."""

    awarded: float
    max_score: float
    allow_partial_credit: bool

    def __post_init__(self) -> None:
        if not 0 <= self.awarded <= self.max_score:
            raise ValueError(
                f"awarded score {self.awarded} outside [0, {self.max_score}]"
            )
        if not self.allow_partial_credit and self.awarded not in (0, self.max_score):
            raise ValueError("all-or-nothing scores must be 0 or the maximum")

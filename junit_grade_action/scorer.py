"""Compute awarded points from test counts."""

from decimal import ROUND_HALF_UP, Decimal

from junit_grade_action.models.outcome import ScoreResult

TWO_PLACES = Decimal("0.01")


class AmbiguousScoreError(ValueError):
    """Raised when no tests were detected, so no score can be derived."""


def round2(value: Decimal) -> float:
    """Round to two decimal places, halves away from zero."""
    return float(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def score(
    total_tests: int,
    failed_tests: int,
    max_score: float,
    allow_partial_credit: bool,
) -> ScoreResult:
    """Score a run.

    With partial credit the award is proportional to the passing tests,
    otherwise only a run without failures earns points.

    Raises:
        AmbiguousScoreError: If ``total_tests`` is zero
        ValueError: If the counts or the maximum are out of range

    """
    if total_tests == 0:
        raise AmbiguousScoreError("No tests were detected, the run cannot be scored")
    if total_tests < 0 or not 0 <= failed_tests <= total_tests:
        raise ValueError(
            f"Invalid test counts: {failed_tests} failed of {total_tests}"
        )
    if max_score < 0:
        raise ValueError(f"Maximum score must not be negative: {max_score}")

    if allow_partial_credit:
        passed = Decimal(total_tests - failed_tests)
        awarded = round2(passed / Decimal(total_tests) * Decimal(str(max_score)))
    else:
        awarded = max_score if failed_tests == 0 else 0.0

    return ScoreResult(
        awarded=min(max(awarded, 0.0), max_score),
        max_score=max_score,
        allow_partial_credit=allow_partial_credit,
    )

"""Canned JUnitCore console output for tests."""

from collections.abc import Sequence

JUNIT_VERSION = "4.13.2"


def failure_block(number: int, test: str, body: str) -> str:
    """Render one numbered failure as JUnitCore prints it."""
    return (
        f"{number}) {test}\n"
        f"{body}\n"
        f"\tat org.junit.Assert.fail(Assert.java:89)\n"
        f"\tat {test.split('(')[-1].rstrip(')')}.java:12\n"
    )


def junit_output(markers: str, failures: Sequence[str] = ()) -> str:
    """Render a complete JUnitCore run with the given marker line and failures.

    ``failures`` holds the exception line(s) of each failed test, in order.
    """
    output = f"JUnit version {JUNIT_VERSION}\n{markers}\nTime: 0.012\n"
    if not failures:
        total = len(markers)
        return output + f"\nOK ({total} test{'s' if total != 1 else ''})\n\n"

    noun = "failure" if len(failures) == 1 else "failures"
    verb = "was" if len(failures) == 1 else "were"
    output += f"There {verb} {len(failures)} {noun}:\n"
    for number, body in enumerate(failures, start=1):
        output += failure_block(number, f"test{number}(CalculatorTest)", body)
    output += (
        f"\nFAILURES!!!\nTests run: {len(markers)},  Failures: {len(failures)}\n\n"
    )
    return output


def comparison_failure(message: str, expected: str, actual: str) -> str:
    """Exception line of a failed assertEquals on strings."""
    prefix = f"{message} " if message else ""
    return f"org.junit.ComparisonFailure: {prefix}expected:<{expected}> but was:<{actual}>"


def assertion_error(message: str, expected: str, actual: str) -> str:
    """Exception line of a failed assertEquals on non-string values."""
    prefix = f"{message} " if message else ""
    return f"java.lang.AssertionError: {prefix}expected:<{expected}> but was:<{actual}>"

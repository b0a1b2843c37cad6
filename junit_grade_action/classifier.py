"""Classify failure blocks into comparison failures and generic errors."""

import logging
import re
from collections.abc import Iterable, Sequence

from junit_grade_action.lexer import FailureBlock
from junit_grade_action.models.outcome import FailureRecord

log = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Test failed"

COMPARISON_KINDS = ("AssertionError", "AssertionFailedError", "ComparisonFailure")

# "org.junit.ComparisonFailure: msg expected:<A> but was:<B>"
# Expected/actual may span lines; actual ends at the last ">" of its line.
COMPARISON_PATTERN = re.compile(
    rf"(?:{'|'.join(COMPARISON_KINDS)}):(?P<message>[^\r\n]*?)"
    r"expected\s*:\s*<(?P<expected>.*?)>\s*but was\s*:\s*"
    r"<(?P<actual>.*?)>[^\S\r\n]*(?=\r?\n|$)",
    re.DOTALL,
)

# Prefixes removed from the first line of a generic failure, in order.
MESSAGE_PREFIX_PATTERNS = (
    re.compile(r"^org\.junit\.runners\.model\.TestTimedOutException:\s*", re.I),
    re.compile(r"^(?:[A-Za-z_$][\w$]*\.)+[A-Za-z_$][\w$]*:\s*"),
)


def match_comparisons(text: str) -> Sequence[re.Match[str]]:
    """Find every ``<Kind>: <msg> expected:<A> but was:<B>`` in a block."""
    return list(COMPARISON_PATTERN.finditer(text))


def strip_exception_prefix(line: str) -> str:
    """Remove the timeout wrapper and any fully-qualified exception name."""
    for pattern in MESSAGE_PREFIX_PATTERNS:
        line = pattern.sub("", line, count=1).strip()
    return line


def first_line_message(text: str) -> str:
    """Summarize a generic failure by its first non-blank line."""
    for line in text.splitlines():
        if stripped := line.strip():
            return strip_exception_prefix(stripped) or stripped
    return DEFAULT_FAILURE_MESSAGE


def classify_failure(text: str) -> Sequence[FailureRecord]:
    """Turn one failure block into one or more failure records.

    A block containing comparison failures yields one structured record per
    comparison. Anything else yields a single record carrying a summary line.
    """
    if matches := match_comparisons(text):
        return [
            FailureRecord(
                message=match.group("message").strip() or DEFAULT_FAILURE_MESSAGE,
                expected=match.group("expected").strip(),
                actual=match.group("actual").strip(),
            )
            for match in matches
        ]

    return [FailureRecord(message=first_line_message(text))]


def classify_failures(blocks: Iterable[FailureBlock]) -> Sequence[FailureRecord]:
    """Classify blocks in order, flattening their records."""
    records: list[FailureRecord] = []
    for block in blocks:
        block_records = classify_failure(block.text)
        log.debug(
            "Failure %d (%s): %d record(s), structured=%s",
            block.number,
            block.description,
            len(block_records),
            block_records[0].is_structured,
        )
        records.extend(block_records)
    return records

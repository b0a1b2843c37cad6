"""Scan raw JUnitCore console output for the marker line and failure blocks.

JUnitCore prints its version, then one marker glyph per test on a single
line, then a numbered block for every failure::

    JUnit version 4.13.2
    ..E.E
    Time: 0.012
    There were 2 failures:
    1) testAdd(CalculatorTest)
    org.junit.ComparisonFailure: expected:<[4]> but was:<[5]>
    ...

Anything the tests print lands between the glyphs, so the progress output
after the version line is read glyph by glyph rather than matched whole.
Every pattern describing that layout lives in this module.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

PASS_GLYPH = "."
FAILURE_GLYPHS = "Ee"
IGNORED_GLYPH = "I"
LETTER_GLYPHS = FAILURE_GLYPHS + IGNORED_GLYPH

# "JUnit version 4.13.2"
VERSION_LINE_PATTERN = re.compile(
    r"version\s*\d+\.\d+(?:\.\d+)*[^\S\r\n]*\r?\n", re.IGNORECASE
)

# Progress output stops at the timing line or at the first failure header.
PROGRESS_END_PATTERN = re.compile(r"^(?:Time:|\d+\))", re.MULTILINE)

MARKER_RUN_PATTERN = re.compile(
    f"[{re.escape(PASS_GLYPH)}{FAILURE_GLYPHS}{IGNORED_GLYPH}]+"
)

# "1) testAdd(CalculatorTest)"
FAILURE_HEADER_PATTERN = re.compile(
    r"^(?P<number>\d+)\)(?P<description>.*)$", re.MULTILINE
)

FAILURE_GLYPH_PATTERN = re.compile(f"[{FAILURE_GLYPHS}]")


@dataclass(frozen=True, kw_only=True)
class FailureBlock:
    """Text following one numbered failure header."""

    number: int
    description: str
    text: str


@dataclass(frozen=True, kw_only=True)
class RunnerSummary:
    """Everything the lexer recognized in one runner output.

    ``progress`` is ``None`` when the output has no version line at all.
    """

    marker_line: str
    blocks: Sequence[FailureBlock]
    progress: str | None = None

    @property
    def glyphs(self) -> str:
        return marker_glyphs(self.progress or "")

    @property
    def total(self) -> int:
        """Number of tests, falling back to the failure headers seen."""
        if tests := count_tests(self.glyphs):
            return tests
        return len(self.blocks)

    @property
    def failed(self) -> int:
        if count_tests(self.glyphs):
            return count_failures(self.glyphs)
        return len(self.blocks)

    @property
    def is_empty(self) -> bool:
        """True when neither a version line nor a failure block was found."""
        return self.progress is None and not self.blocks


def find_marker_line(output: str) -> str:
    """Return the line that follows the runner version verbatim, or ``""``.

    Recognizes ``version <major>.<minor>[.<patch>]`` at the end of a line and
    returns the whole next line, whatever the tests printed into it.
    """
    if (match := VERSION_LINE_PATTERN.search(output)) is None:
        return ""
    return output[match.end() :].split("\n", 1)[0].removesuffix("\r")


def find_progress_output(output: str) -> str | None:
    """Return everything between the version line and the timing line.

    Returns ``None`` when no version line is present.
    """
    if (match := VERSION_LINE_PATTERN.search(output)) is None:
        return None
    progress = output[match.end() :]
    if (end := PROGRESS_END_PATTERN.search(progress)) is not None:
        progress = progress[: end.start()]
    return progress


def _is_word(char: str) -> bool:
    return char.isalnum() or char == "_"


def marker_glyphs(progress: str) -> str:
    """Extract the marker glyphs from progress output, dropping printed text.

    A glyph run inside a word (``java.lang``, ``Hello``) is printed text. A
    run touching a word on one side loses its letter glyphs on that side, so
    ``.Exception`` keeps its dot.
    """
    glyphs: list[str] = []
    for run in MARKER_RUN_PATTERN.finditer(progress):
        before = progress[run.start() - 1] if run.start() > 0 else ""
        after = progress[run.end()] if run.end() < len(progress) else ""
        if _is_word(before) and _is_word(after):
            continue
        text = run.group()
        if _is_word(before):
            text = text.lstrip(LETTER_GLYPHS)
        if _is_word(after):
            text = text.rstrip(LETTER_GLYPHS)
        glyphs.append(text)
    return "".join(glyphs)


def count_tests(glyphs: str) -> int:
    """Count executed tests in a glyph string; ignored tests do not count."""
    return len(glyphs) - glyphs.count(IGNORED_GLYPH)


def count_failures(marker_line: str) -> int:
    """Count failure glyphs in a marker line, ignoring case."""
    return len(FAILURE_GLYPH_PATTERN.findall(marker_line))


def split_failure_blocks(output: str) -> Sequence[FailureBlock]:
    """Split runner output on ``<n>) <description>`` header lines.

    Text before the first header is dropped. Each block keeps the text between
    its header and the next one unchanged.
    """
    headers = list(FAILURE_HEADER_PATTERN.finditer(output))
    blocks: list[FailureBlock] = []
    for index, header in enumerate(headers):
        end = headers[index + 1].start() if index + 1 < len(headers) else len(output)
        blocks.append(
            FailureBlock(
                number=int(header.group("number")),
                description=header.group("description").strip(),
                text=output[header.end() : end],
            )
        )
    return blocks


def scan_report(output: str) -> RunnerSummary:
    """Lex a complete runner output."""
    return RunnerSummary(
        marker_line=find_marker_line(output),
        progress=find_progress_output(output),
        blocks=split_failure_blocks(output),
    )

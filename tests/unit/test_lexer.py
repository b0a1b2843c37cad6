"""Tests for the runner output lexer."""

import pytest

from junit_grade_action.lexer import (
    count_failures,
    count_tests,
    find_marker_line,
    find_progress_output,
    marker_glyphs,
    scan_report,
    split_failure_blocks,
)
from junit_grade_action.testing.junit_output import comparison_failure, junit_output


class TestFindMarkerLine:
    """Tests for find_marker_line function."""

    def test_returns_marker_line_after_version(self) -> None:
        """Returns the glyph line printed right after the version."""
        output = junit_output(".....")

        assert find_marker_line(output) == "....."

    def test_accepts_version_without_patch(self) -> None:
        """Accepts a two-part version number."""
        assert find_marker_line("JUnit version 4.12\n..E\nTime: 0.1\n") == "..E"

    def test_handles_windows_line_endings(self) -> None:
        """Accepts CRLF line endings around the marker line."""
        assert find_marker_line("JUnit version 4.13.2\r\n.E.\r\nTime: 0\r\n") == ".E."

    def test_accepts_lowercase_failure_glyph(self) -> None:
        """Failure glyphs are matched case-insensitively."""
        assert find_marker_line("JUnit version 4.13.2\n.e.\n") == ".e."

    def test_marker_line_at_end_of_output(self) -> None:
        """Matches a marker line without a trailing newline."""
        assert find_marker_line("JUnit version 4.13.2\n...") == "..."

    def test_keeps_printed_text_verbatim(self) -> None:
        """Returns the line as printed, including test output."""
        output = "JUnit version 4.13.2\n.Hello\n..\nTime: 0.01\n"

        assert find_marker_line(output) == ".Hello"

    @pytest.mark.parametrize(
        "output",
        [
            "",
            "Error: Could not find or load main class org.junit.runner.JUnitCore\n",
            "..E.E\n",
        ],
    )
    def test_returns_empty_string_without_marker_line(self, output: str) -> None:
        """Returns an empty string when no marker line follows a version."""
        assert find_marker_line(output) == ""


class TestFindProgressOutput:
    """Tests for find_progress_output function."""

    def test_stops_at_timing_line(self) -> None:
        """Covers every line between the version and the timing line."""
        output = "JUnit version 4.13.2\n.Hello\n..\nTime: 0.01\n\nOK (3 tests)\n"

        assert find_progress_output(output) == ".Hello\n..\n"

    def test_stops_at_first_failure_header(self) -> None:
        """Ends at a failure header when no timing line was printed."""
        output = "JUnit version 4.13.2\n.E\n1) testOne(MyTest)\nboom\n"

        assert find_progress_output(output) == ".E\n"

    def test_returns_none_without_version(self) -> None:
        """Returns None when no version line is present."""
        assert find_progress_output("..E.E\n") is None


@pytest.mark.parametrize(
    ("progress", "expected"),
    [
        ("..E.E\n", "..E.E"),
        (".Hello\n..\n", "..."),
        ("..I.\n", "..I."),
        (".hi\n.E.\n", "..E."),
        (".Exception in thread main java.lang.Error\n", "."),
        ("Sum is 3.5\n.", "."),
        ("\n", ""),
    ],
)
def test_marker_glyphs(progress: str, expected: str) -> None:
    """Keeps marker glyphs and drops text printed by the tests."""
    assert marker_glyphs(progress) == expected


@pytest.mark.parametrize(
    ("glyphs", "expected"),
    [("", 0), ("..E.E", 5), ("..I.", 3), ("III", 0)],
)
def test_count_tests(glyphs: str, expected: int) -> None:
    """Counts pass and failure glyphs but not ignored tests."""
    assert count_tests(glyphs) == expected


@pytest.mark.parametrize(
    ("marker_line", "expected"),
    [
        ("", 0),
        (".....", 0),
        ("..E.E", 2),
        ("EEE", 3),
        (".e.E", 2),
    ],
)
def test_count_failures(marker_line: str, expected: int) -> None:
    """Counts failure glyphs ignoring case."""
    assert count_failures(marker_line) == expected


class TestSplitFailureBlocks:
    """Tests for split_failure_blocks function."""

    def test_returns_empty_without_headers(self) -> None:
        """Returns no blocks when no numbered header is present."""
        assert split_failure_blocks(junit_output("...")) == []

    def test_splits_blocks_in_order(self) -> None:
        """Creates one block per header, preserving order and numbering."""
        output = junit_output(
            "..E.E",
            [
                comparison_failure("", "4", "5"),
                "java.lang.NullPointerException",
            ],
        )

        blocks = split_failure_blocks(output)

        assert [block.number for block in blocks] == [1, 2]
        assert [block.description for block in blocks] == [
            "test1(CalculatorTest)",
            "test2(CalculatorTest)",
        ]
        assert "ComparisonFailure" in blocks[0].text
        assert "NullPointerException" not in blocks[0].text
        assert "NullPointerException" in blocks[1].text

    def test_discards_text_before_first_header(self) -> None:
        """Drops everything preceding the first header."""
        output = "preamble\nmore preamble\n1) testOne(MyTest)\nboom\n"

        blocks = split_failure_blocks(output)

        assert len(blocks) == 1
        assert "preamble" not in blocks[0].text
        assert blocks[0].text == "\nboom\n"

    def test_header_must_start_a_line(self) -> None:
        """Numbers in the middle of a line are not headers."""
        assert split_failure_blocks("value was 3) not a header\n") == []


class TestScanReport:
    """Tests for scan_report function."""

    def test_counts_from_marker_line(self) -> None:
        """Derives totals from the marker line."""
        output = junit_output(
            "..E.E",
            [comparison_failure("", "1", "2"), comparison_failure("", "3", "4")],
        )

        summary = scan_report(output)

        assert summary.marker_line == "..E.E"
        assert summary.total == 5
        assert summary.failed == 2
        assert len(summary.blocks) == 2
        assert not summary.is_empty

    def test_counts_from_headers_without_marker_line(self) -> None:
        """Falls back to the number of failure headers."""
        output = "1) testOne(MyTest)\nboom\n2) testTwo(MyTest)\nbang\n"

        summary = scan_report(output)

        assert summary.marker_line == ""
        assert summary.total == 2
        assert summary.failed == 2

    def test_empty_output(self) -> None:
        """Reports an empty summary when nothing is recognized."""
        summary = scan_report("")

        assert summary.is_empty
        assert summary.total == 0
        assert summary.failed == 0

    def test_counts_around_printed_text(self) -> None:
        """Ignores text the tests print between their marker glyphs."""
        output = "JUnit version 4.13.2\n.Hello\n..\nTime: 0.01\n\nOK (3 tests)\n"

        summary = scan_report(output)

        assert summary.marker_line == ".Hello"
        assert summary.glyphs == "..."
        assert summary.total == 3
        assert summary.failed == 0

    def test_ignored_tests_are_not_counted(self) -> None:
        """Leaves ignored tests out of the total."""
        summary = scan_report(junit_output("..I."))

        assert summary.total == 3
        assert summary.failed == 0

    def test_version_without_tests_is_not_empty(self) -> None:
        """A version line with a blank marker line means zero tests."""
        summary = scan_report("JUnit version 4.13.2\n\nTime: 0\n\nOK (0 tests)\n")

        assert not summary.is_empty
        assert summary.total == 0

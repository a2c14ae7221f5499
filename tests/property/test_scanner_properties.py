import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from linescan import FixedText, ScanError, scan_str

LINE_CHARS = list("ab ,:;1é日\r")

line_text = st.text(alphabet=st.sampled_from(LINE_CHARS), max_size=40)
multi_line_text = st.text(alphabet=st.sampled_from(LINE_CHARS + ["\n"]), max_size=80)

OPERATIONS = [
    "next_char",
    "expect_a",
    "until_comma",
    "until_or_end_colon",
    "fixed_3",
    "fixed_until_semicolon",
    "token",
    "token_int",
    "has_next",
    "peek",
]


def _apply(scanner, op):
    if op == "next_char":
        scanner.next_char()
    elif op == "expect_a":
        scanner.expect("a")
    elif op == "until_comma":
        scanner.scan_token_until(",")
    elif op == "until_or_end_colon":
        scanner.scan_token_until_or_end(":")
    elif op == "fixed_3":
        scanner.scan_fixed(FixedText(3))
    elif op == "fixed_until_semicolon":
        scanner.scan_fixed_until(FixedText(2), ";")
    elif op == "token":
        scanner.scan_token()
    elif op == "token_int":
        scanner.scan_token(int)
    elif op == "has_next":
        scanner.has_next()
    elif op == "peek":
        scanner.peek()


@pytest.mark.property
class TestScannerProperties:
    """Property-based tests for scanner invariants."""

    @given(multi_line_text, st.lists(st.sampled_from(OPERATIONS), max_size=30))
    @settings(max_examples=100, deadline=None)
    def test_buffered_line_always_has_unread_text(self, text, ops):
        """Property: a buffered line never contains a newline and the cursor is inside it."""
        scanner = scan_str(text)
        for op in ops:
            try:
                _apply(scanner, op)
            except ScanError:
                pass
            line = scanner.buffer.current_line
            if line is not None:
                assert 0 <= scanner.buffer.cursor < len(line)
                assert "\n" not in line

    @given(multi_line_text)
    @settings(max_examples=100, deadline=None)
    def test_characters_reassemble_input(self, text):
        """Property: reading char by char yields the input minus its line terminators."""
        assert "".join(scan_str(text)) == text.replace("\n", "")

    @given(line_text)
    def test_trailing_newline_is_transparent(self, line):
        """Property: one line with or without a trailing newline scans the same."""
        assert list(scan_str(line)) == list(scan_str(line + "\n"))

        with_nl, without_nl = scan_str(line + "\n"), scan_str(line)
        assert with_nl.has_next() == without_nl.has_next()
        if without_nl.has_next():
            assert with_nl.scan_token() == without_nl.scan_token()

    @given(multi_line_text)
    def test_has_next_is_idempotent(self, text):
        """Property: a second has_next sees the same answer and changes nothing."""
        scanner = scan_str(text)
        first = scanner.has_next()
        state = (scanner.buffer.current_line, scanner.buffer.cursor, scanner.line_number)
        assert scanner.has_next() == first
        assert (scanner.buffer.current_line, scanner.buffer.cursor, scanner.line_number) == state

    @given(line_text, line_text)
    def test_scan_token_until_moves_past_delimiter(self, head, tail):
        """Property: the delimiter occurrence that ended a token is never matched again."""
        head = head.replace(",", "")
        line = f"{head},{tail}"
        scanner = scan_str(line)
        assert scanner.scan_token_until(",") == head
        if tail:
            assert scanner.peek() == tail
        else:
            assert not scanner.has_next()

    @given(line_text)
    def test_failed_match_is_a_no_op(self, line):
        """Property: a failing expect or scan-until leaves the cursor where it was."""
        scanner = scan_str(line + "x")
        if line:
            scanner.next_char()
        before = scanner.buffer.cursor
        if "," not in scanner.peek():
            with pytest.raises(ScanError):
                scanner.scan_token_until(",")
            assert scanner.buffer.cursor == before
        with pytest.raises(ScanError):
            scanner.expect("zz")
        assert scanner.buffer.cursor == before

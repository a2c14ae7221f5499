import io

import pytest

from linescan.buffer import Cursor, FixedText, LineBuffer, copy_text
from linescan.exceptions import EndOfInput


class TestFixedText:
    def test_defaults(self):
        buf = FixedText(3)
        assert buf.capacity == 3
        assert len(buf) == 3
        assert buf == "   "
        assert str(buf) == "   "

    def test_from_text_and_clear(self):
        buf = FixedText.from_text("abc")
        assert buf.text == "abc"
        buf.clear("-")
        assert buf == "---"
        assert buf == FixedText(3, fill="-")

    def test_invalid_construction(self):
        with pytest.raises(ValueError):
            FixedText(-1)
        with pytest.raises(ValueError):
            FixedText(2, fill="ab")

    def test_not_hashable(self):
        with pytest.raises(TypeError):
            hash(FixedText(1))


class TestCopyText:
    def test_copies_head_only(self):
        dest = FixedText.from_text("xxxxx")
        copy_text("abc", dest, 2)
        assert dest == "abxxx"

    def test_copy_between_buffers(self):
        src = FixedText.from_text("hello")
        dest = FixedText(5)
        copy_text(src, dest, 5)
        assert dest == "hello"

    @pytest.mark.parametrize(
        "source,capacity,count",
        [("abc", 2, 3), ("ab", 5, 3), ("abc", 3, -1)],
    )
    def test_out_of_bounds(self, source, capacity, count):
        dest = FixedText(capacity, fill=".")
        with pytest.raises(ValueError):
            copy_text(source, dest, count)
        assert dest == "." * capacity

    def test_alias_rejected(self):
        buf = FixedText.from_text("abc")
        with pytest.raises(ValueError, match="alias"):
            copy_text(buf, buf, 1)


class TestCursor:
    def test_advance_and_remainder(self):
        cursor = Cursor("hello", 1)
        assert cursor.remainder == "ello"
        cursor.advance(2)
        assert cursor.pos == 3
        assert cursor.remainder == "lo"
        cursor.consume_all()
        assert cursor.remainder == ""

    def test_advance_past_end(self):
        cursor = Cursor("ab", 1)
        with pytest.raises(ValueError):
            cursor.advance(2)
        with pytest.raises(ValueError):
            cursor.advance(-1)
        assert cursor.pos == 1


class TestLineBuffer:
    def test_ensure_ready_skips_empty_lines(self):
        buf = LineBuffer(io.StringIO("\n\nabc\n"))
        assert buf.current_line is None
        buf.ensure_ready()
        assert buf.current_line == "abc"
        assert buf.cursor == 0
        assert buf.line_number == 3

    def test_strips_only_one_newline(self):
        buf = LineBuffer(io.BytesIO(b"a\r\n"))
        assert buf.has_next()
        assert buf.current_line == "a\r"

    def test_with_current_line_end_of_input(self):
        buf = LineBuffer(io.StringIO(""))
        with pytest.raises(EndOfInput) as exc_info:
            buf.with_current_line(lambda cursor: cursor.remainder)
        assert exc_info.value.payload == ""

    def test_cursor_kept_when_callback_raises(self):
        buf = LineBuffer(io.StringIO("abcd"))

        def op(cursor):
            cursor.advance(2)
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            buf.with_current_line(op)
        assert buf.cursor == 2
        assert buf.remainder() == "cd"

    def test_consumed_line_is_dropped(self):
        buf = LineBuffer(io.StringIO("ab\ncd"))
        buf.with_current_line(lambda cursor: cursor.consume_all())
        assert buf.current_line is None
        assert buf.remainder() == ""
        assert buf.has_next()
        assert buf.current_line == "cd"

    def test_discard_line(self):
        buf = LineBuffer(io.StringIO("ab\ncd"))
        buf.ensure_ready()
        buf.discard_line()
        assert buf.current_line is None
        assert buf.cursor == 0

    def test_read_error_is_end_of_input(self):
        class Broken:
            def readline(self):
                raise OSError("device gone")

            def close(self):
                pass

        buf = LineBuffer(Broken())
        assert not buf.has_next()
        assert not buf.has_next()

    def test_close_owned_source(self):
        source = io.StringIO("x")
        with LineBuffer(source) as buf:
            assert buf.has_next()
        assert buf.closed
        assert source.closed

    def test_close_borrowed_source(self):
        source = io.StringIO("x")
        buf = LineBuffer(source, owns_source=False)
        buf.close()
        buf.close()
        assert not source.closed
        with pytest.raises(ValueError):
            buf.ensure_ready()

    def test_name(self):
        assert LineBuffer(io.StringIO(""), name="data").name == "data"
        assert LineBuffer(io.StringIO("")).name == "<source>"

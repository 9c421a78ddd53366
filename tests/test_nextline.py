import io
import os

import pytest

from tinyshell.nextline import LineReader


class _TrickleStream:
    """Returns at most a few characters per read, like a slow pipe."""

    def __init__(self, text, step):
        self._text = text
        self._step = step

    def read(self, size):
        taken = self._text[:min(size, self._step)]
        self._text = self._text[len(taken):]
        return taken


def test_lines_keep_newlines():
    reader = LineReader(io.StringIO("one\ntwo\nthree"))
    assert reader.read_line() == "one\n"
    assert reader.read_line() == "two\n"
    assert reader.read_line() == "three"
    assert reader.read_line() is None


def test_empty_source_gives_none():
    assert LineReader(io.StringIO("")).read_line() is None


def test_none_repeats_after_end():
    reader = LineReader(io.StringIO("x\n"))
    assert list(reader) == ["x\n"]
    assert reader.read_line() is None
    assert reader.read_line() is None


@pytest.mark.parametrize("buffer_size", [1, 2, 3, 5, 8, 1024])
def test_join_round_trip_for_any_buffer_size(buffer_size):
    text = "first line\n\nthird\na very long line " * 7 + "\ntail"
    lines = list(LineReader(io.StringIO(text), buffer_size))
    assert "".join(lines) == text
    assert all(line.endswith("\n") for line in lines[:-1])
    assert all(line.count("\n") <= 1 for line in lines)


def test_empty_lines_are_returned():
    assert list(LineReader(io.StringIO("\n\n"), 1)) == ["\n", "\n"]


def test_bytes_stream():
    reader = LineReader(io.BytesIO(b"a\nb\n"), 3)
    assert list(reader) == [b"a\n", b"b\n"]


def test_short_reads():
    text = "alpha\nbeta\ngamma\n"
    lines = list(LineReader(_TrickleStream(text, 2), 16))
    assert lines == text.splitlines(keepends=True)


def test_file_descriptor_source():
    read_end, write_end = os.pipe()
    try:
        os.write(write_end, b"echo hi\nexit\n")
        os.close(write_end)
        write_end = None
        lines = list(LineReader(read_end, 4))
    finally:
        os.close(read_end)
        if write_end is not None:
            os.close(write_end)
    assert lines == [b"echo hi\n", b"exit\n"]


@pytest.mark.parametrize("buffer_size", [0, -1])
def test_non_positive_buffer_size_raises(buffer_size):
    with pytest.raises(ValueError):
        LineReader(io.StringIO("x"), buffer_size)


def test_negative_descriptor_raises():
    with pytest.raises(ValueError):
        LineReader(-1)


def test_closed_descriptor_raises_oserror():
    read_end, write_end = os.pipe()
    os.close(read_end)
    os.close(write_end)
    with pytest.raises(OSError):
        LineReader(read_end).read_line()
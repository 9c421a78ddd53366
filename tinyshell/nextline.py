"""Line-by-line reading from a stream or a file descriptor."""

from __future__ import annotations

import os
from collections.abc import Iterator
from typing import IO, AnyStr, Generic

BUFFER_SIZE = 1024


class LineReader(Generic[AnyStr]):
    """Read lines from ``source`` in chunks of ``buffer_size``.

    ``source`` is either an object with a ``read(size)`` method returning
    ``str`` or ``bytes``, or an integer file descriptor (read as bytes).
    Each line keeps its trailing newline; the last line may lack one.
    Characters read past a newline are kept for the next call.
    """

    def __init__(self, source: IO[AnyStr] | int, buffer_size: int = BUFFER_SIZE) -> None:
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        if isinstance(source, int) and source < 0:
            raise ValueError(f"invalid file descriptor {source}")
        self._source = source
        self._buffer_size = buffer_size
        self._pending: AnyStr | None = None

    def _read_chunk(self) -> AnyStr:
        if isinstance(self._source, int):
            return os.read(self._source, self._buffer_size)  # type: ignore[return-value]
        return self._source.read(self._buffer_size)

    def read_line(self) -> AnyStr | None:
        """Return the next line, or ``None`` once the source is exhausted."""
        while True:
            pending = self._pending
            if pending:
                newline = b"\n" if isinstance(pending, bytes) else "\n"
                index = pending.find(newline)  # type: ignore[arg-type]
                if index >= 0:
                    self._pending = pending[index + 1:]
                    return pending[:index + 1]
            chunk = self._read_chunk()
            if not chunk:
                self._pending = None
                return pending if pending else None
            self._pending = chunk if pending is None else pending + chunk

    def __iter__(self) -> Iterator[AnyStr]:
        while (line := self.read_line()) is not None:
            yield line
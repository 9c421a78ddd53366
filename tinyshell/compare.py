"""String and byte comparison and search with C semantics.

Comparisons return the difference between the first pair of differing
characters (0 when equal), treating the end of a string as a NUL.
Searches return an index, or ``None`` when nothing is found.
"""

from __future__ import annotations

from collections.abc import Sequence


def _code_at(text: str, index: int) -> int:
    return ord(text[index]) if index < len(text) else 0


def _char(char: str | int) -> str:
    if isinstance(char, str):
        if len(char) != 1:
            raise ValueError("expected exactly one character")
        return char
    if isinstance(char, bool) or not isinstance(char, int):
        raise TypeError(f"expected a character or an int, got {type(char).__name__}")
    return chr(char & 0xFF)


def _require_count(count: int, *buffers: Sequence[int]) -> None:
    if count < 0:
        raise ValueError(f"count must not be negative, got {count}")
    if any(count > len(buffer) for buffer in buffers):
        raise ValueError("count exceeds the length of the data")


def strcmp(first: str, second: str) -> int:
    """Compare two strings; the sign of the result orders them."""
    return strncmp(first, second, max(len(first), len(second)) + 1)


def strncmp(first: str, second: str, count: int) -> int:
    """Compare at most ``count`` characters of two strings."""
    if count < 0:
        raise ValueError(f"count must not be negative, got {count}")
    for index in range(count):
        left = _code_at(first, index)
        right = _code_at(second, index)
        if left != right or left == 0:
            return left - right
    return 0


def memcmp(first: bytes, second: bytes, count: int) -> int:
    """Compare the first ``count`` bytes of two buffers."""
    _require_count(count, first, second)
    for left, right in zip(first[:count], second[:count]):
        if left != right:
            return left - right
    return 0


def memchr(data: bytes, char: int, count: int) -> int | None:
    """Index of the first byte equal to ``char`` within ``count`` bytes."""
    _require_count(count, data)
    index = bytes(data[:count]).find(char & 0xFF)
    return None if index < 0 else index


def strchr(text: str, char: str | int) -> int | None:
    """Index of the first ``char`` in ``text``; a NUL matches the end."""
    target = _char(char)
    if target == "\0":
        return len(text)
    index = text.find(target)
    return None if index < 0 else index


def strrchr(text: str, char: str | int) -> int | None:
    """Index of the last ``char`` in ``text``; a NUL matches the end."""
    target = _char(char)
    if target == "\0":
        return len(text)
    index = text.rfind(target)
    return None if index < 0 else index
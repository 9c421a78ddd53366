"""String helpers with the semantics the shell relies on.

These mirror classic C string routines, but take and return Python
strings. Sizes, starts and lengths are unsigned quantities, so negative
values are rejected with ``ValueError``.
"""

from __future__ import annotations

from collections.abc import Callable, MutableSequence
from typing import Any

_WHITESPACE = frozenset("\t\n\v\f\r ")
_INT_BITS = 32


def _require_unsigned(value: int, what: str) -> None:
    if value < 0:
        raise ValueError(f"{what} must not be negative, got {value}")


def _wrap_int32(value: int) -> int:
    """Reduce ``value`` to a signed 32-bit integer, as C int arithmetic does."""
    modulus = 1 << _INT_BITS
    value %= modulus
    if value >= modulus // 2:
        value -= modulus
    return value


def atoi(text: str) -> int:
    """Parse a leading decimal integer.

    Leading whitespace is skipped, one optional sign is accepted and
    digits are read until the first non-digit. Text without digits gives
    0. The result wraps around like a 32-bit signed integer.
    """
    position = 0
    while position < len(text) and text[position] in _WHITESPACE:
        position += 1
    sign = 1
    if position < len(text) and text[position] in "+-":
        if text[position] == "-":
            sign = -1
        position += 1
    start = position
    while position < len(text) and "0" <= text[position] <= "9":
        position += 1
    digits = text[start:position]
    if not digits:
        return 0
    return _wrap_int32(sign * int(digits))


def itoa(number: int) -> str:
    """Return the decimal representation of ``number``."""
    return str(number)


def split(text: str, separator: str) -> list[str]:
    """Split ``text`` on a single-character separator, dropping empty fields."""
    if len(separator) != 1:
        raise ValueError("separator must be exactly one character")
    return [field for field in text.split(separator) if field]


def strtrim(text: str, chars: str) -> str:
    """Remove every character found in ``chars`` from both ends of ``text``."""
    return text.strip(chars) if chars else text


def substr(text: str, start: int, length: int) -> str:
    """Return at most ``length`` characters of ``text`` beginning at ``start``.

    A start at or past the end of the text yields an empty string.
    """
    _require_unsigned(start, "start")
    _require_unsigned(length, "length")
    if start >= len(text):
        return ""
    return text[start:start + length]


def strnstr(haystack: str, needle: str, length: int) -> str | None:
    """Find ``needle`` entirely within the first ``length`` characters.

    Returns the tail of ``haystack`` that begins with the match, the whole
    haystack for an empty needle, or ``None`` when there is no match.
    """
    _require_unsigned(length, "length")
    if not needle:
        return haystack
    index = haystack.find(needle, 0, length)
    if index < 0:
        return None
    return haystack[index:]


def strlcat(dest: str, src: str, size: int) -> tuple[str, int]:
    """Append ``src`` to ``dest`` within a buffer of ``size`` characters.

    Returns the resulting text and the length the full concatenation would
    have needed. When ``dest`` already fills the buffer it is left as is
    and the reported length is ``size + len(src)``.
    """
    _require_unsigned(size, "size")
    if len(dest) >= size:
        return dest, len(src) + size
    room = size - 1 - len(dest)
    return dest + src[:room], len(dest) + len(src)


def strlcpy(src: str, size: int) -> tuple[str, int]:
    """Copy ``src`` into a buffer of ``size`` characters.

    Returns the copied text (at most ``size - 1`` characters, empty for a
    zero-sized buffer) and the full length of ``src``.
    """
    _require_unsigned(size, "size")
    if size == 0:
        return "", len(src)
    return src[:size - 1], len(src)


def strjoin(first: str, second: str) -> str:
    """Return ``first`` followed by ``second``."""
    return first + second


def strmapi(text: str, func: Callable[[int, str], str]) -> str:
    """Build a new string from ``func(index, char)`` for every character."""
    return "".join(func(index, char) for index, char in enumerate(text))


def striteri(
    text: MutableSequence[Any], func: Callable[[int, MutableSequence[Any]], None]
) -> None:
    """Call ``func(index, text)`` for every position, letting it edit in place."""
    for index in range(len(text)):
        func(index, text)
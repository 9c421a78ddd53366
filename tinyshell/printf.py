"""A small printf with the conversions the shell uses.

Supported conversions:

``%c``
    a character, given as a one-character string or an integer code
``%s``
    a string; ``None`` prints ``(null)``
``%d`` / ``%i``
    a signed 32-bit integer
``%u``
    an unsigned 32-bit integer
``%x`` / ``%X``
    an unsigned 32-bit integer in lower or upper case hexadecimal
``%p``
    an address (an int, or any other object by identity); a null one
    prints ``(nil)``
``%t``
    a sequence of strings, each followed by one space; ``None`` prints
    ``(null)``
``%%``
    a literal percent sign

A conversion character that is not listed is dropped together with its
``%`` and consumes no argument.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, TextIO

_INT_BITS = 32
_POINTER_BITS = 64


def _signed32(value: int) -> int:
    modulus = 1 << _INT_BITS
    value %= modulus
    return value - modulus if value >= modulus // 2 else value


def _unsigned32(value: int) -> int:
    return value % (1 << _INT_BITS)


def _as_int(value: Any, conversion: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"%{conversion} needs an int, got {type(value).__name__}")
    return value


def _char(value: Any) -> str:
    if isinstance(value, str):
        if len(value) != 1:
            raise ValueError("%c needs exactly one character")
        return value
    return chr(_as_int(value, "c") & 0xFF)


def _pointer(value: Any) -> str:
    if value is None or value == 0:
        return "(nil)"
    address = value if isinstance(value, int) and not isinstance(value, bool) else id(value)
    return "0x" + format(address % (1 << _POINTER_BITS), "x")


def _table(value: Sequence[str] | None) -> tuple[str, int]:
    if value is None:
        return "(null)", len("(null)")
    # The reported count is the number of entries, not of characters.
    return "".join(f"{entry} " for entry in value), len(value)


def _convert(conversion: str, value: Any) -> tuple[str, int]:
    if conversion == "c":
        return _char(value), 1
    if conversion == "s":
        text = "(null)" if value is None else str(value)
        return text, len(text)
    if conversion in "di":
        text = str(_signed32(_as_int(value, conversion)))
        return text, len(text)
    if conversion == "u":
        text = str(_unsigned32(_as_int(value, conversion)))
        return text, len(text)
    if conversion == "x":
        text = format(_unsigned32(_as_int(value, conversion)), "x")
        return text, len(text)
    if conversion == "X":
        text = format(_unsigned32(_as_int(value, conversion)), "X")
        return text, len(text)
    if conversion == "p":
        text = _pointer(value)
        return text, len(text)
    if conversion == "t":
        return _table(value)
    raise AssertionError(conversion)


_CONSUMING = frozenset("csdiuxXpt")


def _pieces(template: str, args: Sequence[Any]) -> Iterator[tuple[str, int]]:
    remaining = iter(args)
    chars = iter(template)
    for char in chars:
        if char != "%":
            yield char, 1
            continue
        conversion = next(chars, None)
        if conversion is None:
            raise ValueError("format string ends with a lone '%'")
        if conversion == "%":
            yield "%", 1
        elif conversion in _CONSUMING:
            try:
                value = next(remaining)
            except StopIteration:
                raise TypeError(
                    f"not enough arguments for format string at %{conversion}"
                ) from None
            yield _convert(conversion, value)


def render(template: str, *args: Any) -> str:
    """Return ``template`` with its conversions filled in from ``args``."""
    return "".join(text for text, _ in _pieces(template, args))


def fprintf(stream: TextIO, template: str, *args: Any) -> int:
    """Write the formatted text to ``stream`` and return the output count.

    The count is the number of characters written, except that ``%t``
    counts one per entry of the table it prints.
    """
    pieces = list(_pieces(template, args))
    stream.write("".join(text for text, _ in pieces))
    return sum(count for _, count in pieces)
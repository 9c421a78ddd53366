"""Character classification and case conversion in the C locale.

Every function accepts either a one-character string or an integer code
point. The classifiers return a bool. The case converters return the same
kind of value they were given. Only ASCII letters change case.
"""

from __future__ import annotations

from typing import overload


def _code(char: str | int) -> int:
    if isinstance(char, str):
        if len(char) != 1:
            raise ValueError("expected exactly one character")
        return ord(char)
    if isinstance(char, bool) or not isinstance(char, int):
        raise TypeError(f"expected a character or an int, got {type(char).__name__}")
    return char


def isalpha(char: str | int) -> bool:
    """True for ASCII letters."""
    code = _code(char)
    return ord("A") <= code <= ord("Z") or ord("a") <= code <= ord("z")


def isdigit(char: str | int) -> bool:
    """True for the decimal digits 0-9."""
    return ord("0") <= _code(char) <= ord("9")


def isalnum(char: str | int) -> bool:
    """True for ASCII letters and decimal digits."""
    return isalpha(char) or isdigit(char)


def isascii(char: str | int) -> bool:
    """True for code points 0 to 127."""
    return 0x00 <= _code(char) <= 0x7F


def isprint(char: str | int) -> bool:
    """True for printable ASCII, space included (0x20 to 0x7E)."""
    return 0x20 <= _code(char) <= 0x7E


_CASE_SHIFT = ord("a") - ord("A")


@overload
def tolower(char: str) -> str: ...
@overload
def tolower(char: int) -> int: ...


def tolower(char: str | int) -> str | int:
    """Turn an ASCII upper-case letter into lower case; leave anything else."""
    code = _code(char)
    if ord("A") <= code <= ord("Z"):
        code += _CASE_SHIFT
    return chr(code) if isinstance(char, str) else code


@overload
def toupper(char: str) -> str: ...
@overload
def toupper(char: int) -> int: ...


def toupper(char: str | int) -> str | int:
    """Turn an ASCII lower-case letter into upper case; leave anything else."""
    code = _code(char)
    if ord("a") <= code <= ord("z"):
        code -= _CASE_SHIFT
    return chr(code) if isinstance(char, str) else code
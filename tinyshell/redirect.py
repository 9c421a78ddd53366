"""Opening, resolving and closing the redirections of a command line.

A command line is described by its *group*: a flat list of entries in
which a command is named by its index (``"0"``, ``"1"``, ...), a pipe by
an entry starting with ``|`` and a redirection by ``!`` followed by the
redirection's file name.
"""

from __future__ import annotations

import errno
import os
import sys
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

_HEREDOC_PROMPT = "heredoc> "


class RedirectKind(Enum):
    """What a redirection does with its file."""

    INPUT = "i"
    OUTPUT = "o"
    HEREDOC = "h"
    APPEND = "a"


@dataclass
class Redirection:
    """A file a command reads from or writes to.

    For a here-document ``name`` is the temporary file that receives the
    text, ``limit`` is the delimiter and ``lines`` the text to read; when
    ``lines`` is ``None`` the text is asked for interactively. ``fd`` is
    set once the redirection is opened.
    """

    name: str
    kind: RedirectKind
    limit: str | None = None
    lines: Iterable[str] | None = None
    fd: int | None = None


class RedirectionError(Exception):
    """A redirection could not be opened or resolved."""


def _describe(name: str, error: OSError) -> str:
    if error.errno == errno.EACCES:
        reason = "Permission denied"
    elif error.errno == errno.ENOENT:
        reason = "Aucun fichier ou dossier de ce nom"
    else:
        reason = error.strerror or str(error)
    return f"{name}: {reason}"


def _prompt_lines() -> Iterator[str]:
    while True:
        try:
            yield input(_HEREDOC_PROMPT)
        except EOFError:
            return


def write_heredoc(delimiter: str, path: str, lines: Iterable[str]) -> int:
    """Write ``lines`` to ``path`` until one equals ``delimiter``.

    Returns the number of lines written. Running out of lines before the
    delimiter is reported but is not an error.
    """
    try:
        handle = open(path, "w", encoding="utf-8")
    except OSError as error:
        raise RedirectionError(_describe(path, error)) from error
    written = 0
    with handle:
        for line in lines:
            if line.endswith("\n"):
                line = line[:-1]
            if line == delimiter:
                break
            handle.write(f"{line}\n")
            written += 1
        else:
            print(f"here-document delimited by end-of-file (wanted `{delimiter}')")
    return written


_OPEN_FLAGS = {
    RedirectKind.INPUT: os.O_RDONLY,
    RedirectKind.OUTPUT: os.O_CREAT | os.O_WRONLY | os.O_TRUNC,
    RedirectKind.APPEND: os.O_CREAT | os.O_WRONLY | os.O_APPEND,
    RedirectKind.HEREDOC: os.O_RDONLY,
}


def open_redirection(redirection: Redirection) -> int:
    """Open ``redirection``, store its descriptor on it and return it.

    A here-document first collects its text into its file, which is then
    opened for reading.
    """
    if redirection.kind is RedirectKind.HEREDOC:
        if redirection.limit is None:
            raise RedirectionError(f"{redirection.name}: here-document without delimiter")
        source = redirection.lines if redirection.lines is not None else _prompt_lines()
        write_heredoc(redirection.limit, redirection.name, source)
    try:
        fd = os.open(redirection.name, _OPEN_FLAGS[redirection.kind], 0o644)
    except OSError as error:
        raise RedirectionError(_describe(redirection.name, error)) from error
    redirection.fd = fd
    return fd


def open_all(redirections: Iterable[Redirection]) -> None:
    """Open every redirection in order, stopping at the first failure."""
    for redirection in redirections:
        open_redirection(redirection)


def close_all(redirections: Iterable[Redirection]) -> None:
    """Close every opened descriptor and remove here-document files."""
    for redirection in redirections:
        fd = redirection.fd
        if fd is not None and fd not in (0, 1):
            try:
                os.close(fd)
            except OSError:
                pass
        redirection.fd = None
        if redirection.kind is RedirectKind.HEREDOC:
            try:
                os.unlink(redirection.name)
            except OSError as error:
                print(
                    f"Erreur {error.strerror}: cannot remove {redirection.name}",
                    file=sys.stderr,
                )


def redirection_kind(
    redirections: Iterable[Redirection], name: str
) -> RedirectKind | None:
    """Kind of the last redirection called ``name``, or ``None``."""
    kind = None
    for redirection in redirections:
        if redirection.name == name:
            kind = redirection.kind
    return kind


def last_input_command(
    group: Sequence[str], redirections: Sequence[Redirection]
) -> int:
    """Index of the last command segment holding an input or here-document."""
    found = 0
    segment = 0
    for entry in group:
        if redirection_kind(redirections, entry[1:]) in (
            RedirectKind.INPUT,
            RedirectKind.HEREDOC,
        ):
            found = segment
        if entry.startswith("|"):
            segment += 1
    return found


def _segments(group: Sequence[str]) -> list[list[str]]:
    segments: list[list[str]] = [[]]
    for entry in group:
        if entry.startswith("|"):
            segments.append([])
        else:
            segments[-1].append(entry)
    return segments


def _first_named(redirections: Iterable[Redirection], name: str) -> Redirection | None:
    return next((r for r in redirections if r.name == name), None)


def resolve_redirections(
    group: Sequence[str], index: int, redirections: Sequence[Redirection]
) -> tuple[int | None, int | None]:
    """Input and output descriptors for command ``index``.

    The first command reads from 0 and the last writes to 1 unless a
    redirection says otherwise; ``None`` means the pipe decides.
    """
    segments = _segments(group)
    key = str(index)
    for position, segment in enumerate(segments):
        if key in segment:
            break
    else:
        raise RedirectionError(f"no command {index} in this line")
    stdin: int | None = 0 if position == 0 else None
    stdout: int | None = 1 if position == len(segments) - 1 else None
    for entry in segment:
        if not entry.startswith("!"):
            continue
        redirection = _first_named(redirections, entry[1:])
        if redirection is None or redirection.fd is None:
            raise RedirectionError(f"{entry[1:]}: redirection is not open")
        if redirection.kind in (RedirectKind.INPUT, RedirectKind.HEREDOC):
            stdin = redirection.fd
        else:
            stdout = redirection.fd
    return stdin, stdout
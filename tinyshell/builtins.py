"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TextIO

from tinyshell.charclass import isalnum, isalpha
from tinyshell.environment import Environment, split_assignment
from tinyshell.libft import atoi

_RED = "\033[31m"
_RESET = "\033[0m"
_WHITESPACE = "\t\n\v\f\r "


@dataclass
class Command:
    """One command of a line: its name, its argument vector and its streams."""

    name: str
    args: list[str] = field(default_factory=list)
    input: int = 0
    output: int = 1

    def __post_init__(self) -> None:
        if not self.args:
            self.args = [self.name]


@dataclass
class ShellState:
    """What persists between command lines."""

    environment: Environment = field(default_factory=Environment)
    last_status: int = 0


class ShellExit(Exception):
    """Raised by the ``exit`` builtin; ``status`` is the process exit code."""

    def __init__(self, status: int) -> None:
        self.status = status % 256
        super().__init__(f"exit {self.status}")


def _finish(state: ShellState, status: int) -> int:
    state.last_status = status
    return status


def echo(state: ShellState, command: Command, out: TextIO) -> int:
    """Print the arguments; leading ``-n`` style flags drop the newline."""
    args = command.args[1:]
    newline = True
    while args and args[0].startswith("-") and set(args[0][1:]) <= {"n"}:
        newline = False
        args = args[1:]
    if args:
        text = args[0] + "".join(f" {arg}" for arg in args[1:] if arg != "")
        out.write(text)
    if newline:
        out.write("\n")
    return _finish(state, 0)


def pwd(state: ShellState, command: Command, out: TextIO) -> int:
    """Print the working directory."""
    try:
        path = os.getcwd()
    except OSError as error:
        print(f"pwd: {error.strerror}", file=sys.stderr)
        return _finish(state, 1)
    out.write(f"{path}\n")
    return _finish(state, 0)


def _change_directory(state: ShellState, path: str) -> None:
    os.chdir(path)
    if "PWD" in state.environment:
        state.environment.set("PWD", os.getcwd())


def cd(state: ShellState, command: Command, out: TextIO) -> int:
    """Change directory to the argument, to HOME without one, or print it for ``-``."""
    if len(command.args) > 2:
        return _finish(state, 1)
    if len(command.args) == 1:
        home = state.environment.get("HOME")
        if home is None:
            print("minishell: cd: HOME not set", file=sys.stderr)
            return _finish(state, 1)
        target = home
    elif command.args[1] == "-":
        pwd(state, command, out)
        return _finish(state, 0)
    else:
        target = command.args[1]
    try:
        _change_directory(state, target)
    except OSError as error:
        print(f"minishell: cd: {target}: {error.strerror}", file=sys.stderr)
        return _finish(state, 1)
    return _finish(state, 0)


def _valid_export(text: str) -> bool:
    if not text or (not isalpha(text[0]) and text[0] != "_"):
        print(f"{_RED}'{text}': not a valid identifier.{_RESET}")
        return False
    name = text.partition("=")[0]
    if any(not isalnum(char) and char != "_" for char in name):
        print(f"{_RED}'{text}': not a valid identifier{_RESET}")
        return False
    return True


def export(state: ShellState, command: Command, out: TextIO) -> int:
    """Set every ``NAME=value`` argument; others are ignored.

    Stops with status 1 at the first invalid name.
    """
    for arg in command.args[1:]:
        if "=" not in arg:
            continue
        if not _valid_export(arg):
            return _finish(state, 1)
        name, value = split_assignment(arg)
        state.environment.set(name, value or "")
    return _finish(state, 0)


def _valid_unset(text: str) -> bool:
    valid = (
        bool(text)
        and (isalpha(text[0]) or text[0] == "_")
        and all(isalnum(char) or char == "_" for char in text)
    )
    if not valid:
        print(f"{_RED} unset: {text}: invalid parameter name.{_RESET}")
    return valid


def unset(state: ShellState, command: Command, out: TextIO) -> int:
    """Remove each named variable; stop with status 1 at an invalid name."""
    for arg in command.args[1:]:
        if not _valid_unset(arg):
            return _finish(state, 1)
        state.environment.remove(arg)
    return _finish(state, 0)


def env(state: ShellState, command: Command, out: TextIO) -> int:
    """Print the environment."""
    out.write(state.environment.render())
    return _finish(state, 0)


def parse_exit_status(text: str) -> int:
    """Read the status argument of ``exit``.

    Digits followed by anything else give 2 and a complaint; text without
    leading digits gives 0.
    """
    rest = text.lstrip(_WHITESPACE)
    if rest[:1] in ("+", "-"):
        rest = rest[1:]
    digits = len(rest) - len(rest.lstrip("0123456789"))
    if digits and digits < len(rest):
        print(f"{text}: numeric argument required")
        return 2
    return atoi(text)


def exit_builtin(state: ShellState, command: Command, out: TextIO) -> int:
    """Leave the shell by raising :class:`ShellExit`.

    With more than two arguments it complains and returns 127 instead.
    """
    count = len(command.args)
    if count > 3:
        print("bash: exit: too many arguments")
        state.last_status = 127
        return 1
    if count == 2:
        state.last_status = parse_exit_status(command.args[1])
    raise ShellExit(state.last_status)


_BUILTINS: dict[str, Callable[[ShellState, Command, TextIO], int]] = {
    "echo": echo,
    "cd": cd,
    "pwd": pwd,
    "export": export,
    "unset": unset,
    "env": env,
    "exit": exit_builtin,
}


def is_builtin(name: str) -> bool:
    """True when ``name`` is run by the shell itself."""
    return name in _BUILTINS


def run_builtin(state: ShellState, command: Command, out: TextIO) -> int | None:
    """Run ``command`` if it is a builtin and return its status, else ``None``."""
    builtin = _BUILTINS.get(command.name)
    if builtin is None:
        return None
    return builtin(state, command, out)
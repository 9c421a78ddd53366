"""Running a parsed command line: single commands and pipelines."""

from __future__ import annotations

import copy
import os
import subprocess
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Protocol, TextIO

from tinyshell.builtins import Command, ShellExit, ShellState, is_builtin, run_builtin
from tinyshell.environment import Environment
from tinyshell.libft import split
from tinyshell.redirect import (
    Redirection,
    RedirectionError,
    close_all,
    open_all,
    resolve_redirections,
)

NOT_FOUND_STATUS = 127


class _Job(Protocol):
    def wait(self) -> int: ...


class _Finished:
    """A job that already ran to completion."""

    def __init__(self, status: int) -> None:
        self.returncode = status

    def wait(self) -> int:
        return self.returncode


@dataclass
class Line:
    """A parsed command line: its group layout, commands and redirections."""

    group: list[str]
    commands: list[Command]
    redirections: list[Redirection] = field(default_factory=list)


def find_executable(environment: Environment, name: str) -> str | None:
    """First executable ``dir/name`` along PATH.

    Returns ``name`` itself when no directory holds it, and ``None`` when
    PATH is not set.
    """
    path = environment.get("PATH")
    if path is None:
        return None
    for directory in split(path, ":"):
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.F_OK | os.X_OK):
            return candidate
    return name


def has_pipe_after(group: list[str], index: int) -> bool:
    """True when command ``index`` is followed by a pipe in ``group``."""
    key = str(index)
    for position, entry in enumerate(group):
        if entry == key:
            return any(e.startswith("|") for e in group[position + 1:])
    return False


@contextmanager
def _stream(fd: int) -> Iterator[TextIO]:
    if fd == 1:
        yield sys.stdout
        sys.stdout.flush()
        return
    with open(fd, "w", encoding="utf-8", closefd=False) as handle:
        yield handle


def _environ(environment: Environment) -> dict[str, str]:
    return {name: environment.get(name) or "" for name in environment}


def _not_found(name: str) -> _Finished:
    print(f"minishell: Command '{name}' not found", file=sys.stderr)
    return _Finished(NOT_FOUND_STATUS)


def run_command(state: ShellState, command: Command, stdin: int, stdout: int) -> _Job:
    """Start ``command`` reading ``stdin`` and writing ``stdout``.

    Builtins run at once; other commands are started as processes. The
    returned job's ``wait()`` gives the exit status.
    """
    if is_builtin(command.name):
        with _stream(stdout) as out:
            status = run_builtin(state, command, out)
        return _Finished(status if status is not None else 0)
    executable = find_executable(state.environment, command.name)
    if executable is None:
        return _not_found(command.name)
    if "/" not in executable:
        executable = os.path.join(os.curdir, executable)
    try:
        return subprocess.Popen(
            command.args,
            executable=executable,
            stdin=None if stdin == 0 else stdin,
            stdout=None if stdout == 1 else stdout,
            env=_environ(state.environment),
        )
    except OSError:
        return _not_found(command.name)


def _status(job: _Job) -> int:
    status = job.wait()
    return 128 - status if status < 0 else status


def _run_in_pipeline(state: ShellState, command: Command, stdin: int, stdout: int) -> _Job:
    if not is_builtin(command.name):
        return run_command(state, command, stdin, stdout)
    # A builtin inside a pipeline must not change the shell itself.
    scratch = copy.deepcopy(state)
    cwd = os.getcwd()
    try:
        return run_command(scratch, command, stdin, stdout)
    except ShellExit as leaving:
        return _Finished(leaving.status)
    finally:
        os.chdir(cwd)


def _run_single(state: ShellState, line: Line) -> int:
    stdin, stdout = resolve_redirections(line.group, 0, line.redirections)
    job = run_command(
        state,
        line.commands[0],
        0 if stdin is None else stdin,
        1 if stdout is None else stdout,
    )
    return _status(job)


def _run_pipeline(state: ShellState, line: Line) -> int:
    jobs: list[_Job] = []
    previous = 0
    last = len(line.commands) - 1
    try:
        for index, command in enumerate(line.commands):
            read_end, write_end = os.pipe() if index < last else (0, 1)
            try:
                stdin, stdout = resolve_redirections(line.group, index, line.redirections)
                jobs.append(
                    _run_in_pipeline(
                        state,
                        command,
                        previous if stdin is None else stdin,
                        write_end if stdout is None else stdout,
                    )
                )
            except BaseException:
                if read_end != 0:
                    os.close(read_end)
                raise
            finally:
                if write_end != 1:
                    os.close(write_end)
                if previous != 0:
                    os.close(previous)
                previous = 0
            previous = read_end
    except BaseException:
        for job in jobs:
            job.wait()
        raise
    statuses = [_status(job) for job in jobs]
    return statuses[-1]


def run_line(state: ShellState, line: Line) -> int:
    """Run every command of ``line`` and return the status of the last.

    A redirection that cannot be opened is reported and gives status 1.
    The ``exit`` builtin of a lone command raises
    :class:`~tinyshell.builtins.ShellExit`.
    """
    if not line.commands:
        return state.last_status
    try:
        open_all(line.redirections)
        if len(line.commands) == 1:
            status = _run_single(state, line)
        else:
            status = _run_pipeline(state, line)
    except RedirectionError as error:
        print(f"minishell: {error}", file=sys.stderr)
        status = 1
    finally:
        close_all(line.redirections)
    state.last_status = status
    return status
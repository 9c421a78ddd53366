import os
import sys

import pytest

from tinyshell.builtins import Command, ShellExit, ShellState
from tinyshell.environment import Environment
from tinyshell.pipeline import (
    Line,
    find_executable,
    has_pipe_after,
    run_command,
    run_line,
)
from tinyshell.redirect import RedirectKind, Redirection

PY_DIR = os.path.dirname(sys.executable)
PY_NAME = os.path.basename(sys.executable)


def _state(path=PY_DIR):
    return ShellState(environment=Environment({"PATH": path}))


def _read_all(fd):
    chunks = []
    while chunk := os.read(fd, 4096):
        chunks.append(chunk)
    os.close(fd)
    return b"".join(chunks)


def test_find_executable_on_path(tmp_path):
    tool = tmp_path / "tool"
    tool.write_text("#!/bin/sh\n")
    tool.chmod(0o755)
    environment = Environment({"PATH": f"/nonexistent::{tmp_path}"})
    assert find_executable(environment, "tool") == f"{tmp_path}/tool"


def test_find_executable_falls_back_to_name(tmp_path):
    environment = Environment({"PATH": str(tmp_path)})
    assert find_executable(environment, "tool") == "tool"


def test_find_executable_without_path():
    assert find_executable(Environment(), "tool") is None


def test_has_pipe_after():
    group = ["0", "!f", "|", "1"]
    assert has_pipe_after(group, 0) is True
    assert has_pipe_after(group, 1) is False
    assert has_pipe_after(group, 5) is False


def test_run_command_builtin_writes_to_fd():
    state = _state()
    read_end, write_end = os.pipe()
    job = run_command(state, Command("echo", ["echo", "hi"]), 0, write_end)
    os.close(write_end)
    assert _read_all(read_end) == b"hi\n"
    assert job.wait() == 0


def test_run_command_external_process():
    state = _state()
    read_end, write_end = os.pipe()
    command = Command(PY_NAME, [PY_NAME, "-c", "print('out')"])
    job = run_command(state, command, 0, write_end)
    os.close(write_end)
    assert _read_all(read_end).strip() == b"out"
    assert job.wait() == 0


def test_run_command_external_status():
    state = _state()
    command = Command(PY_NAME, [PY_NAME, "-c", "import sys; sys.exit(4)"])
    assert run_command(state, command, 0, 1).wait() == 4


def test_run_command_not_found(tmp_path, capsys):
    state = _state(str(tmp_path))
    job = run_command(state, Command("no-such-command"), 0, 1)
    assert job.wait() == 127
    assert "Command 'no-such-command' not found" in capsys.readouterr().err


def test_run_line_redirects_builtin_output(tmp_path):
    out = tmp_path / "out.txt"
    state = _state()
    line = Line(
        group=["0", f"!{out}"],
        commands=[Command("echo", ["echo", "hi", "there"])],
        redirections=[Redirection(str(out), RedirectKind.OUTPUT)],
    )
    assert run_line(state, line) == 0
    assert out.read_text() == "hi there\n"
    assert line.redirections[0].fd is None


def test_run_line_pipeline(tmp_path):
    out = tmp_path / "out.txt"
    state = _state()
    upper = "import sys; sys.stdout.write(sys.stdin.read().upper())"
    line = Line(
        group=["0", "|", "1", f"!{out}"],
        commands=[
            Command("echo", ["echo", "hello"]),
            Command(PY_NAME, [PY_NAME, "-c", upper]),
        ],
        redirections=[Redirection(str(out), RedirectKind.OUTPUT)],
    )
    assert run_line(state, line) == 0
    assert out.read_text() == "HELLO\n"


def test_run_line_heredoc_feeds_command(tmp_path):
    out = tmp_path / "out.txt"
    doc = tmp_path / "doc.tmp"
    state = _state()
    copy_input = "import sys; sys.stdout.write(sys.stdin.read())"
    line = Line(
        group=["0", f"!{doc}", f"!{out}"],
        commands=[Command(PY_NAME, [PY_NAME, "-c", copy_input])],
        redirections=[
            Redirection(str(doc), RedirectKind.HEREDOC, limit="EOF", lines=["x", "EOF"]),
            Redirection(str(out), RedirectKind.OUTPUT),
        ],
    )
    assert run_line(state, line) == 0
    assert out.read_text() == "x\n"
    assert not doc.exists()


def test_run_line_missing_input(tmp_path, capsys):
    missing = tmp_path / "missing"
    state = _state()
    line = Line(
        group=["0", f"!{missing}"],
        commands=[Command("echo", ["echo", "x"])],
        redirections=[Redirection(str(missing), RedirectKind.INPUT)],
    )
    assert run_line(state, line) == 1
    assert state.last_status == 1
    assert "Aucun fichier" in capsys.readouterr().err


def test_run_line_exit_raises():
    state = _state()
    line = Line(group=["0"], commands=[Command("exit", ["exit", "3"])])
    with pytest.raises(ShellExit) as caught:
        run_line(state, line)
    assert caught.value.status == 3


def test_builtin_in_pipeline_does_not_change_shell(capsys):
    state = _state()
    line = Line(
        group=["0", "|", "1"],
        commands=[
            Command("export", ["export", "LEAK=1"]),
            Command("echo", ["echo", "done"]),
        ],
    )
    assert run_line(state, line) == 0
    assert "LEAK" not in state.environment
    assert capsys.readouterr().out == "done\n"


def test_single_export_changes_shell():
    state = _state()
    line = Line(group=["0"], commands=[Command("export", ["export", "KEEP=yes"])])
    assert run_line(state, line) == 0
    assert state.environment.get("KEEP") == "yes"


def test_pipeline_status_is_last_command():
    state = _state()
    line = Line(
        group=["0", "|", "1"],
        commands=[
            Command("echo", ["echo", "x"]),
            Command(PY_NAME, [PY_NAME, "-c", "import sys; sys.stdin.read(); sys.exit(5)"]),
        ],
    )
    assert run_line(state, line) == 5
    assert state.last_status == 5
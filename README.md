# tinyshell

The core of a small POSIX-style shell, in plain Python. It has an
ordered environment store, the usual builtins (`echo`, `cd`, `pwd`,
`export`, `unset`, `env`, `exit`), file redirections and here-documents,
and a runner that executes single commands or pipelines of external
programs. Alongside come a few string helpers, a tiny `printf`-style
formatter and a chunked line reader.

It needs Python 3.10 or later and nothing outside the standard library.

## Modules

| Module | What it holds |
| --- | --- |
| `tinyshell.environment` | `Environment`, an ordered `NAME=value` store, and `split_assignment` |
| `tinyshell.builtins` | `Command`, `ShellState`, `ShellExit`, the builtins, `is_builtin`, `run_builtin`, `parse_exit_status` |
| `tinyshell.redirect` | `Redirection`, `RedirectKind`, `RedirectionError`, opening and closing files, `write_heredoc`, `resolve_redirections` |
| `tinyshell.pipeline` | `Line`, `find_executable`, `has_pipe_after`, `run_command`, `run_line` |
| `tinyshell.printf` | `render` and `fprintf` for `%c %s %d %i %u %x %X %p %t %%` |
| `tinyshell.nextline` | `LineReader`, reading a stream or file descriptor one line at a time |
| `tinyshell.libft`, `tinyshell.compare`, `tinyshell.charclass` | string, comparison and character-class helpers with C semantics |

## The environment

Variables keep the order in which they were first set:

```python
from tinyshell.environment import Environment

env = Environment.from_entries(["HOME=/home/user", "PATH=/usr/bin:/bin"])
env.get("HOME")        # '/home/user'
env.set("EDITOR", "vi")
env.remove("PATH")
env.to_entries()       # ['HOME=/home/user', 'EDITOR=vi']
```

## Running a command line

A command line is described by a `Line`. Its `group` is a flat list in
which each command appears by its index (`"0"`, `"1"`, ...), a pipe as an
entry starting with `|`, and a redirection as `!` followed by the
redirection's file name.

```python
import os

from tinyshell.builtins import Command, ShellState
from tinyshell.environment import Environment
from tinyshell.pipeline import Line, run_line
from tinyshell.redirect import Redirection, RedirectKind

state = ShellState(Environment(dict(os.environ)))

line = Line(
    group=["0", "|", "1", "!count.txt"],
    commands=[Command("ls", ["ls", "-l"]), Command("wc", ["wc", "-l"])],
    redirections=[Redirection("count.txt", RedirectKind.OUTPUT)],
)
status = run_line(state, line)   # also stored in state.last_status
```

`run_line` opens every redirection first; one that cannot be opened is
reported on standard error and gives status 1. Here-documents
(`RedirectKind.HEREDOC`) write their text to the redirection's file until
a line equals `limit`; the text comes from `lines`, or is asked for with
a `heredoc> ` prompt when `lines` is `None`. The file is removed once the
line has run.

Programs are looked up along `PATH` with `find_executable`. A command
that cannot be started prints `minishell: Command '<name>' not found` and
gives status 127.

## Builtins

Builtins write to the stream they are given and record their status in
`ShellState.last_status`:

- `echo` joins its arguments with spaces; leading `-n`, `-nn`, ... flags
  drop the final newline.
- `cd` goes to its argument, to `HOME` without one, and only prints the
  working directory for `-`. It updates `PWD` when that is set.
- `export` sets every `NAME=value` argument and ignores the others.
- `unset` removes each named variable.
- `exit` raises `ShellExit` instead of ending the interpreter, so the
  caller decides what to do; in a pipeline it only ends that stage.

Inside a pipeline a builtin works on a copy of the shell state and does
not change the shell itself.

## Helpers

```python
from tinyshell.libft import atoi, itoa, split
from tinyshell.printf import render

split("a:b::c", ":")                   # ['a', 'b', 'c']
itoa(-42)                              # '-42'
atoi("  +17abc")                       # 17
render("%s has %d items\n", "list", 3) # 'list has 3 items\n'
render("%x %X", 255, 255)              # 'ff FF'
```

## What it does not do

There is no interactive prompt and no command to start: the package
offers no read-eval loop. Nor does it read command text: there is no
tokenizer, no quoting and no `$VAR` expansion, so a `Line` has to be
built by the caller. Signal handling is left to the caller too.
"""A small POSIX-style shell core: environment, builtins, redirections and pipelines."""

__version__ = "0.1.0"
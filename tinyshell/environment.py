"""The shell's table of environment variables."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


def split_assignment(text: str) -> tuple[str, str | None]:
    """Split ``NAME=value`` at the first ``=``.

    The value is ``None`` when the text holds no ``=`` at all.
    """
    name, sep, value = text.partition("=")
    return (name, value) if sep else (name, None)


class Environment:
    """Ordered variables; new names go to the end, updates keep their place."""

    def __init__(self, variables: Mapping[str, str] | None = None) -> None:
        self._variables: dict[str, str] = dict(variables or {})

    @classmethod
    def from_entries(cls, entries: Iterable[str]) -> Environment:
        """Build from ``NAME=value`` strings; entries without ``=`` are skipped."""
        environment = cls()
        for entry in entries:
            name, value = split_assignment(entry)
            if value is not None:
                environment.set(name, value)
        return environment

    def get(self, name: str) -> str | None:
        """Value of ``name``, or ``None`` when it is not set."""
        return self._variables.get(name)

    def set(self, name: str, value: str) -> None:
        """Set ``name`` to ``value``."""
        self._variables[name] = value

    def remove(self, name: str) -> None:
        """Remove ``name`` if it is set."""
        self._variables.pop(name, None)

    def to_entries(self) -> list[str]:
        """The variables as ``NAME=value`` strings, in order."""
        return [f"{name}={value}" for name, value in self._variables.items()]

    def render(self) -> str:
        """The variables one per line, as the ``env`` builtin prints them."""
        return "".join(f"{entry}\n" for entry in self.to_entries())

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"Environment({self._variables!r})"
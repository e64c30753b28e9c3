"""The shell's variable table, kept in insertion order."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


def split_assignment(text: str) -> tuple[str, str | None]:
    """Split ``NAME=value`` at the first ``=``.

    Without ``=`` the value is None, meaning the name has no value.
    """
    name, sep, value = text.partition("=")
    return name, (value if sep else None)


class Environment:
    """Ordered mapping of variable names to values (None for no value)."""

    def __init__(self, entries: Iterable[tuple[str, str | None]] = ()) -> None:
        self._vars: dict[str, str | None] = {}
        for name, value in entries:
            self.add(name, value)

    @classmethod
    def from_strings(cls, strings: Iterable[str]) -> Environment:
        """Build from ``NAME=value`` strings such as ``os.environ`` entries."""
        return cls(split_assignment(text) for text in strings)

    def get(self, name: str) -> str | None:
        """Return the value of ``name``, or None if unset or valueless."""
        return self._vars.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def __iter__(self) -> Iterator[tuple[str, str | None]]:
        """Yield ``(name, value)`` pairs in insertion order."""
        return iter(list(self._vars.items()))

    def add(self, name: str, value: str | None) -> None:
        """Append a variable; an existing one of that name is kept."""
        self._vars.setdefault(name, value)

    def replace(self, name: str, value: str | None) -> None:
        """Change the value of an existing variable; unknown names are ignored."""
        if name in self._vars:
            self._vars[name] = value

    def remove(self, name: str) -> None:
        """Delete a variable if it exists."""
        self._vars.pop(name, None)

    def copy(self) -> Environment:
        return Environment(self)

    def sorted_items(self) -> list[tuple[str, str | None]]:
        """Return ``(name, value)`` pairs ordered by name."""
        return sorted(self._vars.items(), key=lambda item: item[0])

    def to_envp(self) -> list[str]:
        """Return ``NAME=value`` strings for every variable that has a value."""
        return [f"{name}={value}" for name, value in self._vars.items() if value is not None]

    def __repr__(self) -> str:
        return f"Environment({list(self._vars.items())!r})"
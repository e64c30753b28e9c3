"""Data types shared by the lexer, the expander and the executor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class TokenType(Enum):
    """Kinds of token produced by the lexer."""

    NONE = auto()
    WORD = auto()
    SEMI = auto()
    GREAT = auto()
    LESS = auto()
    DOUBLE_GREAT = auto()
    PIPE = auto()
    NEWLINE = auto()


@dataclass
class Token:
    """A lexical token with its position in the token stream."""

    index: int
    type: TokenType
    value: str


class RedirectionType(Enum):
    """Kinds of input/output redirection."""

    GREAT = auto()
    DOUBLE_GREAT = auto()
    LESS = auto()


@dataclass
class Redirection:
    """A redirection of a simple command to or from a file."""

    index: int
    type: RedirectionType
    file_name: str | None
    inside_quotes: int = 0


@dataclass
class Argument:
    """A command argument; ``value`` is None when expansion left nothing."""

    value: str | None
    inside_quotes: int = 0


@dataclass
class SimpleCommand:
    """A command name with its arguments and redirections."""

    command: str | None = None
    args: list[Argument] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)
    inside_quotes: int = 0

    def argv(self) -> list[str]:
        """Return the argument vector handed to a program: name first.

        An argument emptied by expansion but written inside double quotes
        becomes an empty string; other empty arguments are left out.
        """
        vector = [self.command if self.command is not None else ""]
        for arg in self.args:
            if arg.value is not None:
                vector.append(arg.value)
            elif arg.inside_quotes == 2:
                vector.append("")
        return vector


@dataclass
class Pipeline:
    """Simple commands joined by pipes."""

    commands: list[SimpleCommand] = field(default_factory=list)

    @property
    def simple_cmd_count(self) -> int:
        return len(self.commands)
"""Expansion of a single word: quotes, backslashes, tilde and parameters."""

from __future__ import annotations

from minishell.environment import Environment

_SPECIAL_PARAMS = "!:#%@-*=/\\"
_VERBATIM_PARAMS = ":%=/!"
_ESCAPABLE_IN_DOUBLE_QUOTES = "$\"\\\n`"
_SHELL_NAME = "minishell"
_PARAMETER_COUNT = "0"
_SHELL_FLAGS = "himBH"


def _is_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def _is_name_char(char: str) -> bool:
    return _is_alnum(char) or char == "_"


def quote_kind(text: str) -> int:
    """Return 1 if the first quote in ``text`` is single, 2 if double, else 0."""
    for char in text:
        if char == "'":
            return 1
        if char == '"':
            return 2
    return 0


def replace_tilde(word: str) -> str:
    """Turn a leading ``~`` (alone or before ``/``) into ``$HOME``."""
    if word == "~" or word.startswith("~/"):
        return "$HOME" + word[1:]
    return word


def env_variable_value(text: str, env: Environment) -> str | None:
    """Look up the variable named after the ``$`` that ``text`` starts with.

    The name runs over letters, digits and underscores. Returns None when
    the variable is unset or has no value.
    """
    if text and _is_alnum(text[0]):
        name = ""
    else:
        end = 1
        while end < len(text) and _is_name_char(text[end]):
            end += 1
        name = text[1:end]
    return env.get(name)


class _WordExpander:
    """Walks a word once, building its expanded form."""

    def __init__(
        self,
        word: str,
        env: Environment,
        exit_status: str,
        last_argument: str | None,
    ) -> None:
        self.word = word
        self.env = env
        self.exit_status = exit_status
        self.last_argument = last_argument
        self.pos = 0
        self.expanded: str | None = None

    def char(self, offset: int = 0) -> str:
        index = self.pos + offset
        if 0 <= index < len(self.word):
            return self.word[index]
        return ""

    def append(self, text: str) -> None:
        self.expanded = (self.expanded or "") + text

    def run(self) -> str | None:
        while self.pos < len(self.word):
            current = self.char()
            if current == "\\":
                self.unquoted_backslashes()
            elif current == "'":
                self.single_quotes()
            elif current == '"':
                self.double_quotes()
            elif current == "$":
                self.dollar(in_double_quotes=False)
            else:
                self.append(current)
                self.pos += 1
        return self.expanded

    def unquoted_backslashes(self) -> None:
        while self.char() == "\\":
            self.append(self.char(1))
            self.pos += 2

    def single_quotes(self) -> None:
        start = self.pos + 1
        close = self.word.find("'", start)
        if close == -1:
            close = len(self.word)
        self.append(self.word[start:close])
        self.pos = close + 1

    def double_quotes(self) -> None:
        outer = self.expanded
        self.expanded = None
        self.pos += 1
        while self.pos < len(self.word) and self.char() != '"':
            current = self.char()
            if current == "\\":
                self.quoted_backslash()
            elif current == "$":
                self.dollar(in_double_quotes=True)
            else:
                self.append(current)
                self.pos += 1
        self.pos += 1
        inner = self.expanded
        self.expanded = outer
        if inner is not None:
            self.append(inner)

    def quoted_backslash(self) -> None:
        following = self.char(1)
        if following and following in _ESCAPABLE_IN_DOUBLE_QUOTES:
            self.append(following)
        else:
            self.append(self.word[self.pos:self.pos + 2])
        self.pos += 2

    def dollar(self, in_double_quotes: bool) -> None:
        if self.char(1) == "$":
            self.append("$$")
            self.pos += 2
            return
        value = env_variable_value(self.word[self.pos:], self.env)
        if value is not None:
            underscore_end = '"' if in_double_quotes else ""
            if (
                self.char(1) == "_"
                and self.char(2) == underscore_end
                and self.last_argument
            ):
                value = self.last_argument
            self.substitute(value)
        elif self.pos == 0 or self.char(-1) != "$":
            if in_double_quotes:
                self.special_param_in_double_quotes()
            else:
                self.special_param()
        else:
            self.skip_after_dollars(in_double_quotes)

    def substitute(self, value: str) -> None:
        self.append(value)
        if self.char() == "$":
            self.pos += 1
        if self.char() == "_":
            self.pos += 1
        else:
            while _is_name_char(self.char()):
                self.pos += 1

    def special_param(self) -> None:
        following = self.char(1)
        if following == '"':
            self.pos += 1
        elif following and (following.isdigit() or following in _SPECIAL_PARAMS):
            self.listed_param(following)
        elif following == "?":
            self.append(self.exit_status)
            self.pos += 2
        elif following:
            self.skip_unknown_variable()
        else:
            self.append("$")
            self.pos += 1

    def special_param_in_double_quotes(self) -> None:
        following = self.char(1)
        if following and (following.isdigit() or following in _SPECIAL_PARAMS):
            self.listed_param(following)
        elif following == "?":
            self.append(self.exit_status)
            self.pos += 2
        elif following and following not in '" ':
            self.skip_unknown_variable()
        else:
            self.append("$")
            self.pos += 1

    def listed_param(self, following: str) -> None:
        if following.isdigit():
            if following == "0":
                self.append(_SHELL_NAME)
            self.pos += 2
        elif following == "\\":
            self.append("$")
            self.pos += 1
        else:
            if following == "#":
                self.append(_PARAMETER_COUNT)
            elif following == "-":
                self.append(_SHELL_FLAGS)
            elif following in _VERBATIM_PARAMS:
                self.append(self.word[self.pos:self.pos + 2])
            self.pos += 2

    def skip_unknown_variable(self) -> None:
        if self.char() == "$":
            self.pos += 1
        while _is_name_char(self.char()):
            self.pos += 1

    def skip_after_dollars(self, in_double_quotes: bool) -> None:
        following = self.char(1)
        at_end = following == '"' if in_double_quotes else following == ""
        if at_end:
            self.append(self.char())
            self.pos += 1
        else:
            while _is_alpha(self.char()) or self.char() == "$":
                self.pos += 1


def expand_word(
    word: str,
    env: Environment,
    exit_status: str | int = "0",
    last_argument: str | None = None,
    redirection: bool = False,
) -> str | None:
    """Expand ``word``: tilde, quotes, backslashes and ``$`` parameters.

    Returns None when nothing is left of the word. For a redirection target
    an empty result is replaced by the word itself, after tilde replacement.
    """
    word = replace_tilde(word)
    expanded = _WordExpander(word, env, str(exit_status), last_argument).run()
    if redirection and not expanded:
        return word
    return expanded
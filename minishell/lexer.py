"""Split a command line into tokens."""

from __future__ import annotations

from minishell.model import Token, TokenType

_BLANKS = " \t"
_OPERATOR_START = "|;><"
_NOT_WORD_START = " \t<>;|"
_UNQUOTED_STOP = "\t '\"\\<>;|"
_WORD_END = "\t ><|;"


def _read_unquoted(line: str, pos: int) -> tuple[str, int]:
    end = pos
    while end < len(line) and line[end] not in _UNQUOTED_STOP:
        end += 1
    return line[pos:end], end


def _read_escaped(line: str, pos: int) -> tuple[str, int]:
    end = min(pos + 2, len(line))
    return line[pos:end], end


def _read_single_quoted(line: str, pos: int) -> tuple[str, int]:
    close = line.find("'", pos + 1)
    if close == -1:
        return line[pos:], len(line)
    return line[pos:close + 1], close + 1


def _preceding_backslashes(line: str, pos: int) -> int:
    count = 0
    k = pos - 1
    while k >= 0 and line[k] == "\\":
        count += 1
        k -= 1
    return count


def _read_double_quoted(line: str, pos: int) -> tuple[str, int]:
    end = pos + 1
    while end < len(line):
        if line[end] == '"' and _preceding_backslashes(line, end) % 2 == 0:
            return line[pos:end + 1], end + 1
        end += 1
    return line[pos:], len(line)


_QUOTED_READERS = {
    "\\": _read_escaped,
    "'": _read_single_quoted,
    '"': _read_double_quoted,
}


def read_word(line: str, start: int) -> tuple[str, int]:
    """Read one word starting at ``start``; return it and the position after it.

    Quotes and backslashes are kept in the word; they are removed later,
    during expansion. A word ends at a blank, or at an operator character
    that is not inside quotes.
    """
    parts: list[str] = []
    pos = start
    while pos < len(line):
        reader = _QUOTED_READERS.get(line[pos])
        if reader is None:
            piece, pos = _read_unquoted(line, pos)
            parts.append(piece)
            if pos >= len(line) or line[pos] in _WORD_END:
                break
        else:
            piece, pos = reader(line, pos)
            parts.append(piece)
            if pos < len(line) and line[pos] in _BLANKS:
                break
    return "".join(parts), pos


def _read_operator(line: str, pos: int) -> tuple[TokenType, str, int]:
    char = line[pos]
    following = line[pos + 1] if pos + 1 < len(line) else ""
    if char == "|":
        return TokenType.PIPE, "||" if following == "|" else "|", pos + 1
    if char == ";":
        return TokenType.SEMI, ";;" if following == ";" else ";", pos + 1
    if char == ">":
        if following == ">":
            return TokenType.DOUBLE_GREAT, ">>", pos + 2
        return TokenType.GREAT, ">", pos + 1
    return TokenType.LESS, "<", pos + 1


def tokenize(line: str) -> list[Token]:
    """Return the tokens of ``line``.

    The list opens with a ``NONE`` token at index 0 and closes with a
    ``NEWLINE`` token; the tokens between are numbered from 1.
    """
    tokens = [Token(0, TokenType.NONE, "NONE")]
    index = 1
    pos = 0
    while pos < len(line):
        while pos < len(line) and line[pos] in _BLANKS:
            pos += 1
        if pos < len(line) and line[pos] in _OPERATOR_START:
            kind, value, pos = _read_operator(line, pos)
            tokens.append(Token(index, kind, value))
            index += 1
        if pos < len(line) and line[pos] not in _NOT_WORD_START:
            word, pos = read_word(line, pos)
            tokens.append(Token(index, TokenType.WORD, word))
            index += 1
    tokens.append(Token(index, TokenType.NEWLINE, "newline"))
    return tokens
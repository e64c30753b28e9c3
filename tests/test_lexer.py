import pytest

from minishell.lexer import read_word, tokenize
from minishell.model import Token, TokenType


def _values(line):
    return [token.value for token in tokenize(line)]


def _middle(line):
    return [(token.type, token.value) for token in tokenize(line)[1:-1]]


def test_empty_line_has_only_sentinels():
    assert tokenize("") == [
        Token(0, TokenType.NONE, "NONE"),
        Token(1, TokenType.NEWLINE, "newline"),
    ]


def test_blank_line_has_only_sentinels():
    assert _values(" \t  ") == ["NONE", "newline"]


def test_simple_words():
    assert _values("echo hello") == ["NONE", "echo", "hello", "newline"]


def test_tabs_separate_words():
    assert _middle("ls\t-l") == [(TokenType.WORD, "ls"), (TokenType.WORD, "-l")]


@pytest.mark.parametrize(
    "line",
    ["echo a | cat > f ; ls >> g < h", "a|b", "x>>y<z", "'q' \"r\" s"],
)
def test_indices_are_consecutive(line):
    tokens = tokenize(line)
    assert [token.index for token in tokens] == list(range(len(tokens)))
    assert tokens[0].type is TokenType.NONE
    assert tokens[-1].type is TokenType.NEWLINE


def test_operators_without_spaces():
    assert _middle("ls>out") == [
        (TokenType.WORD, "ls"),
        (TokenType.GREAT, ">"),
        (TokenType.WORD, "out"),
    ]


def test_double_great():
    assert _middle("echo a >> f") == [
        (TokenType.WORD, "echo"),
        (TokenType.WORD, "a"),
        (TokenType.DOUBLE_GREAT, ">>"),
        (TokenType.WORD, "f"),
    ]


def test_less_and_pipe_and_semi():
    assert [t.type for t in tokenize("a < b | c ; d")[1:-1]] == [
        TokenType.WORD,
        TokenType.LESS,
        TokenType.WORD,
        TokenType.PIPE,
        TokenType.WORD,
        TokenType.SEMI,
        TokenType.WORD,
    ]


def test_double_pipe_yields_two_tokens():
    assert _middle("a || b") == [
        (TokenType.WORD, "a"),
        (TokenType.PIPE, "||"),
        (TokenType.PIPE, "|"),
        (TokenType.WORD, "b"),
    ]


def test_double_semi_yields_two_tokens():
    assert _middle(";;") == [(TokenType.SEMI, ";;"), (TokenType.SEMI, ";")]


def test_double_less_is_two_less_tokens():
    assert _middle("<<") == [(TokenType.LESS, "<"), (TokenType.LESS, "<")]


def test_double_quotes_kept_with_spaces():
    assert _values('echo "a b"') == ["NONE", "echo", '"a b"', "newline"]


def test_single_quotes_kept_with_operators_inside():
    assert _middle("echo 'a | b'") == [
        (TokenType.WORD, "echo"),
        (TokenType.WORD, "'a | b'"),
    ]


def test_escaped_quote_inside_double_quotes():
    line = r'"a\" b"'
    assert _middle(line) == [(TokenType.WORD, line)]


def test_even_backslashes_close_double_quotes():
    assert _middle(r'"a\\" b') == [(TokenType.WORD, r'"a\\"'), (TokenType.WORD, "b")]


def test_backslash_escapes_space():
    assert _middle(r"a\ b") == [(TokenType.WORD, r"a\ b")]


def test_quoted_parts_join_into_one_word():
    line = "ab'cd'\"ef\"gh"
    assert _middle(line) == [(TokenType.WORD, line)]


def test_trailing_backslash():
    assert _middle("a\\") == [(TokenType.WORD, "a\\")]


def test_read_word_returns_end_position():
    assert read_word("abc def", 0) == ("abc", 3)


def test_read_word_from_middle():
    assert read_word("abc def", 4) == ("def", 7)


def test_read_word_stops_at_pipe():
    assert read_word("abc|d", 0) == ("abc", 3)


def test_read_word_stops_at_operator_after_quotes():
    assert read_word('"x">f', 0) == ('"x"', 3)


def test_read_word_unclosed_single_quote_takes_rest():
    assert read_word("'abc", 0) == ("'abc", 4)


def test_read_word_unclosed_double_quote_takes_rest():
    assert read_word('"ab c', 0) == ('"ab c', 5)


@pytest.mark.parametrize("words", [["a"], ["ls", "-la", "/tmp"], ["x1", "y_2", "z-3", "w.4"]])
def test_plain_words_round_trip(words):
    assert _values(" ".join(words))[1:-1] == words
    assert _values("\t".join(words))[1:-1] == words
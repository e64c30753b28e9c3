from minishell.environment import Environment
from minishell.expansion import (
    expand_pipeline,
    expand_simple_command,
    last_argument_or_command,
)
from minishell.model import (
    Argument,
    Pipeline,
    Redirection,
    RedirectionType,
    SimpleCommand,
)


def _env(**values):
    return Environment(values.items())


def _values(command):
    return [arg.value for arg in command.args]


def test_variable_in_argument_is_replaced():
    env = _env(HOME="/home/user")
    cmd = SimpleCommand("echo", [Argument("$HOME")])
    expand_simple_command(cmd, env)
    assert _values(cmd) == ["/home/user"]


def test_unquoted_expansion_is_split_into_fields():
    env = _env(X="a b  c")
    cmd = SimpleCommand("echo", [Argument("$X"), Argument("z")])
    expand_simple_command(cmd, env)
    assert _values(cmd) == ["a", "b", "c", "z"]
    assert all(arg.inside_quotes == 0 for arg in cmd.args)


def test_double_quoted_expansion_is_not_split():
    env = _env(X="a b")
    cmd = SimpleCommand("echo", [Argument('"$X"')])
    expand_simple_command(cmd, env)
    assert _values(cmd) == ["a b"]
    assert cmd.args[0].inside_quotes == 2


def test_quoted_spaces_survive():
    cmd = SimpleCommand("echo", [Argument("'a b'")])
    expand_simple_command(cmd, _env())
    assert _values(cmd) == ["a b"]
    assert cmd.args[0].inside_quotes == 1


def test_tabs_in_arguments_become_spaces():
    cmd = SimpleCommand("echo", [Argument("'a\tb'")])
    expand_simple_command(cmd, _env())
    assert _values(cmd) == ["a b"]


def test_empty_unquoted_argument_is_dropped():
    cmd = SimpleCommand("echo", [Argument("$NOPE"), Argument("x")])
    expand_simple_command(cmd, _env())
    assert _values(cmd) == ["x"]


def test_empty_double_quoted_argument_is_kept():
    cmd = SimpleCommand("echo", [Argument('""'), Argument("x")])
    expand_simple_command(cmd, _env())
    assert cmd.argv() == ["echo", "", "x"]


def test_command_name_is_split_into_arguments():
    env = _env(CMD="ls -l")
    cmd = SimpleCommand("$CMD", [Argument("dir")])
    expand_simple_command(cmd, env)
    assert cmd.command == "ls"
    assert _values(cmd) == ["-l", "dir"]


def test_vanished_command_takes_first_argument():
    cmd = SimpleCommand("$NOPE", [Argument("echo"), Argument("hi")])
    expand_simple_command(cmd, _env())
    assert cmd.command == "echo"
    assert _values(cmd) == ["hi"]


def test_quoted_empty_command_is_not_replaced():
    cmd = SimpleCommand('""', [Argument("echo")])
    expand_simple_command(cmd, _env())
    assert cmd.command is None
    assert _values(cmd) == ["echo"]


def test_exit_status_and_last_argument():
    cmd = SimpleCommand("echo", [Argument("$?"), Argument("$_")])
    expand_simple_command(cmd, _env(_="old"), exit_status=42, last_argument="prev")
    assert _values(cmd) == ["42", "prev"]


def test_unquoted_redirection_keeps_word_when_empty():
    redirection = Redirection(1, RedirectionType.GREAT, "$NOPE")
    cmd = SimpleCommand("echo", [], [redirection])
    expand_simple_command(cmd, _env())
    assert cmd.redirections[0].file_name == "$NOPE"


def test_quoted_redirection_may_become_empty():
    redirection = Redirection(1, RedirectionType.GREAT, '"$NOPE"')
    cmd = SimpleCommand("echo", [], [redirection])
    expand_simple_command(cmd, _env())
    assert cmd.redirections[0].file_name is None
    assert cmd.redirections[0].inside_quotes == 2


def test_redirection_tilde_uses_home():
    redirection = Redirection(1, RedirectionType.LESS, "~/in")
    cmd = SimpleCommand("cat", [], [redirection])
    expand_simple_command(cmd, _env(HOME="/home/user"))
    assert cmd.redirections[0].file_name == "/home/user/in"


def test_expand_pipeline_expands_every_command():
    env = _env(A="one", B="two")
    pipeline = Pipeline(
        [SimpleCommand("echo", [Argument("$A")]), SimpleCommand("cat", [Argument("$B")])]
    )
    result = expand_pipeline(pipeline, env)
    assert result is pipeline
    assert [_values(cmd) for cmd in pipeline.commands] == [["one"], ["two"]]


def test_last_argument_of_multi_command_pipeline_is_none():
    pipeline = Pipeline([SimpleCommand("ls"), SimpleCommand("cat")])
    assert last_argument_or_command(pipeline) is None


def test_last_argument_without_args_is_command():
    assert last_argument_or_command(Pipeline([SimpleCommand("ls")])) == "ls"


def test_last_argument_is_last_arg():
    pipeline = Pipeline([SimpleCommand("echo", [Argument("a"), Argument("b")])])
    assert last_argument_or_command(pipeline) == "b"


def test_last_argument_falls_back_to_command():
    pipeline = Pipeline([SimpleCommand("echo", [Argument(None, 2)])])
    assert last_argument_or_command(pipeline) == "echo"


def test_last_argument_of_export_is_name():
    pipeline = Pipeline([SimpleCommand("export", [Argument("A=1")])])
    assert last_argument_or_command(pipeline) == "A"


def test_last_argument_of_export_with_leading_equals():
    pipeline = Pipeline([SimpleCommand("export", [Argument("=x")])])
    assert last_argument_or_command(pipeline) == "=x"


def test_last_argument_of_export_only_equals():
    pipeline = Pipeline([SimpleCommand("export", [Argument("==")])])
    assert last_argument_or_command(pipeline) == "="
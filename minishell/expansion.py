"""Expansion of parsed commands: words, field splitting and empty commands."""

from __future__ import annotations

from minishell.environment import Environment
from minishell.model import Argument, Pipeline, SimpleCommand
from minishell.words import expand_word, quote_kind


def _protect_spaces(text: str) -> str:
    """Hide literal spaces as tabs so that field splitting leaves them alone."""
    return text.replace(" ", "\t")


def _restore_spaces(text: str | None) -> str | None:
    return None if text is None else text.replace("\t", " ")


def _fields(text: str) -> list[str]:
    return [piece for piece in text.split(" ") if piece]


def _needs_splitting(before: str, after: str | None, inside_quotes: int) -> bool:
    """Split only unquoted words whose ``$`` expansion brought in spaces."""
    return (
        inside_quotes == 0
        and bool(after)
        and after != before
        and " " in after
        and "$" in before
    )


def _expand_arguments(
    command: SimpleCommand,
    env: Environment,
    exit_status: str,
    last_argument: str | None,
) -> None:
    expanded_args: list[Argument] = []
    for arg in command.args:
        if arg.value is None:
            expanded_args.append(arg)
            continue
        before = arg.value
        protected = _protect_spaces(before)
        arg.inside_quotes = quote_kind(protected)
        arg.value = expand_word(protected, env, exit_status, last_argument)
        if _needs_splitting(before, arg.value, arg.inside_quotes):
            fields = _fields(arg.value or "")
            if fields:
                expanded_args.extend(Argument(field) for field in fields)
            else:
                expanded_args.append(Argument(None))
        else:
            expanded_args.append(arg)
    command.args = expanded_args


def _expand_command_name(
    command: SimpleCommand,
    env: Environment,
    exit_status: str,
    last_argument: str | None,
) -> None:
    before = command.command or ""
    protected = _protect_spaces(before)
    command.inside_quotes = quote_kind(protected)
    command.command = expand_word(protected, env, exit_status, last_argument)
    if _needs_splitting(before, command.command, command.inside_quotes):
        fields = _fields(command.command or "")
        command.command = fields[0] if fields else None
        command.args = [Argument(field) for field in fields[1:]] + command.args


def _expand_redirections(
    command: SimpleCommand,
    env: Environment,
    exit_status: str,
    last_argument: str | None,
) -> None:
    for redirection in command.redirections:
        if redirection.file_name is None:
            continue
        redirection.inside_quotes = quote_kind(redirection.file_name)
        redirection.file_name = expand_word(
            redirection.file_name,
            env,
            exit_status,
            last_argument,
            redirection=redirection.inside_quotes == 0,
        )


def _drop_empty_arguments(command: SimpleCommand) -> None:
    """Remove unquoted arguments that expanded to nothing."""
    command.args = [
        arg for arg in command.args if arg.inside_quotes != 0 or arg.value is not None
    ]


def _promote_first_argument(command: SimpleCommand) -> None:
    """When the command name vanished, the first argument takes its place."""
    if command.args:
        first = command.args.pop(0)
        command.command = first.value
        command.inside_quotes = first.inside_quotes


def expand_simple_command(
    command: SimpleCommand,
    env: Environment,
    exit_status: str | int = "0",
    last_argument: str | None = None,
) -> SimpleCommand:
    """Expand the arguments, name and redirections of ``command`` in place.

    ``exit_status`` is substituted for ``$?`` and ``last_argument`` for
    ``$_``. Returns the same command for convenience.
    """
    status = str(exit_status)
    _expand_arguments(command, env, status, last_argument)
    if command.command is not None:
        _expand_command_name(command, env, status, last_argument)
    _expand_redirections(command, env, status, last_argument)
    _drop_empty_arguments(command)
    if command.command is None and command.inside_quotes == 0:
        _promote_first_argument(command)
    command.command = _restore_spaces(command.command)
    for arg in command.args:
        arg.value = _restore_spaces(arg.value)
    return command


def expand_pipeline(
    pipeline: Pipeline,
    env: Environment,
    exit_status: str | int = "0",
    last_argument: str | None = None,
) -> Pipeline:
    """Expand every simple command of ``pipeline`` in place and return it."""
    for command in pipeline.commands:
        expand_simple_command(command, env, exit_status, last_argument)
    return pipeline


def _export_last_argument(value: str) -> str:
    """The name part of an ``export`` assignment, as ``$_`` remembers it."""
    pieces = [piece for piece in value.split("=") if piece]
    if not pieces:
        return "="
    if value.startswith("="):
        return value
    return pieces[0]


def last_argument_or_command(pipeline: Pipeline) -> str | None:
    """Return what ``$_`` holds after running ``pipeline``.

    Pipelines of several commands leave nothing. Otherwise it is the last
    argument, or the command name when there are no arguments; for
    ``export`` only the name of the last assignment is kept.
    """
    if len(pipeline.commands) != 1:
        return None
    command = pipeline.commands[0]
    if not command.args:
        return command.command
    last = command.args[-1]
    if command.command == "export" and last.value is not None:
        return _export_last_argument(last.value)
    if last.value is not None:
        return last.value
    return command.command
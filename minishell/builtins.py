"""Commands the shell runs itself: echo, cd, pwd, env, export, unset, exit."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

from minishell.environment import Environment, split_assignment
from minishell.model import Argument, SimpleCommand

_LONG_MAX = 2**63 - 1


class ShellExit(Exception):
    """Raised by ``exit``: the shell should stop with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status % 256


def _out(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def report_error(prefix: str | None, message: str, status: int) -> int:
    """Print ``minishell: <prefix><message>`` on stderr and return ``status``."""
    sys.stderr.write(f"minishell: {prefix or ''}{message}\n")
    sys.stderr.flush()
    return status


def _only_n(text: str) -> bool:
    return all(char == "n" for char in text)


def echo(args: Sequence[Argument]) -> int:
    """Print the arguments separated by spaces; ``-n`` drops the newline."""
    args = list(args)
    if not args:
        _out("\n")
        return 0
    newline = True
    start = 0
    while start < len(args):
        value = args[start].value
        if value is None or not value.startswith("-n"):
            break
        newline = False
        if not _only_n(value[1:]):
            break
        start += 1
    _out(" ".join(arg.value or "" for arg in args[start:]))
    if newline:
        _out("\n")
    return 0


def _change_dir(env: Environment, target: str) -> int:
    if "PWD" not in env:
        env.add("PWD", "")
    if "OLDPWD" not in env:
        env.add("OLDPWD", "")
    try:
        os.chdir(target)
    except OSError as exc:
        return report_error("cd: ", f"{target}: {exc.strerror}", 1)
    try:
        cwd: str | None = os.getcwd()
    except OSError as exc:
        cwd = None
        report_error(
            "cd: error retrieving current directory: getcwd: "
            "cannot access parent directories: ",
            str(exc.strerror),
            1,
        )
    old_pwd = env.get("PWD")
    env.replace("OLDPWD", old_pwd)
    if cwd is None:
        cwd = f"{old_pwd or ''}/{target}"
    env.replace("PWD", cwd)
    return 0


def cd(args: Sequence[Argument], env: Environment) -> int:
    """Change directory to the argument, ``$HOME`` when none, ``$OLDPWD`` for ``-``."""
    args = list(args)
    if not args:
        home = env.get("HOME")
        if home is None:
            return report_error("cd:", " HOME not set", 1)
        target = home
    elif len(args) > 1:
        return report_error("cd:", " too many arguments", 1)
    elif args[0].value == "-":
        old = env.get("OLDPWD")
        if old is None:
            return report_error("cd:", " OLDPWD not set", 1)
        _out(old + "\n")
        target = old
    else:
        target = args[0].value or ""
    return _change_dir(env, target)


def pwd(env: Environment) -> int:
    """Print the working directory, falling back on ``$PWD`` if it is gone."""
    try:
        _out(os.getcwd() + "\n")
    except OSError:
        current = env.get("PWD")
        if current is not None:
            _out(current + "\n")
    return 0


def print_env(env: Environment) -> int:
    """Print ``NAME=value`` for every variable that has a value."""
    for name, value in env:
        if value is not None:
            _out(f"{name}={value}\n")
    return 0


def _is_identifier_start(value: str) -> bool:
    return bool(value) and ((value[0].isascii() and value[0].isalpha()) or value[0] == "_")


def _print_export(env: Environment) -> None:
    for name, value in env.sorted_items():
        if value is None:
            _out(f"declare -x {name}\n")
        else:
            _out(f'declare -x {name}="{value}"\n')


def _check_export_args(args: Sequence[Argument]) -> int:
    status = 0
    for arg in args:
        if arg.value is None:
            status = report_error("export:", " `': not a valid identifier", 1)
        elif not _is_identifier_start(arg.value):
            status = report_error("export:", f" `{arg.value}': not a valid identifier", 1)
    return status


def _add_variable(env: Environment, text: str) -> None:
    name, value = split_assignment(text)
    append = name.endswith("+")
    if append:
        name = name[:-1]
    if name in env:
        if append and value is not None:
            value = (env.get(name) or "") + value
        if value is not None:
            env.replace(name, value)
    else:
        env.add(name, value)


def export(args: Sequence[Argument], env: Environment) -> int:
    """Set variables from ``NAME=value`` / ``NAME+=value``; list them when no args."""
    args = list(args)
    if not args:
        _print_export(env)
    status = _check_export_args(args)
    for arg in args:
        if arg.value is not None and _is_identifier_start(arg.value):
            _add_variable(env, arg.value)
    return status


def unset(args: Sequence[Argument], env: Environment) -> int:
    """Remove the named variables."""
    status = 0
    for arg in args:
        if arg.value is None:
            status = report_error("`'", ": not a valid identifier", 1)
        else:
            env.remove(arg.value)
    return status


def _numeric_required(text: str) -> ShellExit:
    return ShellExit(report_error("exit: ", f"{text}: numeric argument required", 255))


def _exit_status(text: str) -> int:
    digits = text[1:] if text.startswith("-") else text
    if not all(char in "0123456789" for char in digits):
        raise _numeric_required(text)
    number = int(digits) if digits else 0
    if number > _LONG_MAX:
        raise _numeric_required(text)
    return -number if text.startswith("-") else number


def exit_shell(args: Sequence[Argument], in_fork: bool = False) -> int:
    """Stop the shell by raising :class:`ShellExit`.

    With more than one argument nothing stops and 1 is returned.
    """
    args = list(args)
    if not in_fork:
        _out("exit\n")
    if not args:
        raise ShellExit(0)
    status = _exit_status(args[0].value or "")
    if len(args) > 1:
        return report_error("exit", ": too many arguments", 1)
    raise ShellExit(status)


def run_builtin(command: SimpleCommand, env: Environment, in_fork: bool = False) -> int | None:
    """Run ``command`` if it names a builtin and return its status, else None.

    Names are recognised in all lower case or all upper case.
    """
    name = command.command
    if name is None or name not in (name.lower(), name.upper()):
        return None
    key = name.lower()
    if key == "echo":
        return echo(command.args)
    if key == "cd":
        return cd(command.args, env)
    if key == "pwd":
        return pwd(env)
    if key == "env":
        return print_env(env)
    if key == "export":
        return export(command.args, env)
    if key == "unset":
        return unset(command.args, env)
    if key == "exit":
        return exit_shell(command.args, in_fork)
    return None
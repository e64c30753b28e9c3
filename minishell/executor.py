"""Running expanded pipelines: redirections, PATH lookup, pipes and programs."""

from __future__ import annotations

import os
import signal
import stat
import subprocess
import sys
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import NoReturn

from minishell.builtins import ShellExit, report_error, run_builtin
from minishell.environment import Environment
from minishell.model import Pipeline, Redirection, RedirectionType, SimpleCommand

_STD_FDS = (0, 1, 2)
_FILE_MODE = 0o644
_OPEN_MODES = {
    RedirectionType.GREAT: (os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 1),
    RedirectionType.DOUBLE_GREAT: (os.O_WRONLY | os.O_CREAT | os.O_APPEND, 1),
    RedirectionType.LESS: (os.O_RDONLY, 0),
}


def _flush_std() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass


def _bind_sys_streams() -> None:
    """Point ``sys.stdout`` and ``sys.stderr`` straight at descriptors 1 and 2."""
    sys.stdout = open(1, "w", closefd=False)
    sys.stderr = open(2, "w", closefd=False)


@contextmanager
def saved_std_streams() -> Iterator[None]:
    """Keep copies of descriptors 0, 1 and 2 and put them back on exit.

    While active, ``sys.stdout`` and ``sys.stderr`` write to descriptors 1
    and 2, so builtin output follows any redirection made meanwhile.
    """
    _flush_std()
    saved = [os.dup(fd) for fd in _STD_FDS]
    old_stdout, old_stderr = sys.stdout, sys.stderr
    _bind_sys_streams()
    try:
        yield
    finally:
        _flush_std()
        for stream in (sys.stdout, sys.stderr):
            try:
                stream.close()
            except (OSError, ValueError):
                pass
        sys.stdout, sys.stderr = old_stdout, old_stderr
        for fd, copy in zip(_STD_FDS, saved):
            os.dup2(copy, fd)
            os.close(copy)


def _file_error(name: str) -> int:
    try:
        mode = os.stat(name).st_mode
    except OSError:
        pass
    else:
        if stat.S_ISDIR(mode):
            return report_error(name, ": Is a directory", 1)
        if not mode & stat.S_IXUSR:
            return report_error(name, ": Permission denied", 1)
    return report_error(name, ": No such file or directory", 1)


def apply_redirections(redirections: Iterable[Redirection]) -> int:
    """Open each file in turn and attach it to stdin or stdout.

    Stops at the first file that cannot be opened, reports it and returns 1;
    returns 0 when all succeed.
    """
    for redirection in redirections:
        flags, target = _OPEN_MODES[redirection.type]
        name = redirection.file_name or ""
        try:
            fd = os.open(name, flags, _FILE_MODE)
        except OSError:
            return _file_error(name)
        _flush_std()
        if fd != target:
            os.dup2(fd, target)
            os.close(fd)
    return 0


def find_executable(name: str, env: Environment) -> str | None:
    """Return the first ``dir/name`` along ``$PATH`` that is an executable file."""
    for directory in (env.get("PATH") or "").split(":"):
        if not directory:
            continue
        candidate = f"{directory}/{name}"
        try:
            mode = os.stat(candidate).st_mode
        except OSError:
            continue
        if stat.S_ISREG(mode) and mode & stat.S_IXUSR:
            return candidate
    return None


def _spawn(path: str, command: SimpleCommand, env: Environment) -> int:
    _flush_std()
    argv = [path, *command.argv()[1:]]
    variables = {name: value for name, value in env if value is not None}
    try:
        completed = subprocess.run(
            argv, executable=os.path.abspath(path), env=variables, check=False
        )
    except OSError as exc:
        return report_error(path, f": {exc.strerror}", exc.errno or 1) & 0xFF
    code = completed.returncode
    if code < 0:
        signum = -code
        if signum == signal.SIGQUIT:
            sys.stdout.write("Quit: 3\n")
            sys.stdout.flush()
        return 128 + signum
    return code


def _run_file(path: str, command: SimpleCommand, env: Environment) -> int:
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return report_error(path, ": No such file or directory", 127)
    if stat.S_ISDIR(mode):
        return report_error(path, ": Is a directory", 126)
    if not mode & stat.S_IXUSR:
        return report_error(path, ": Permission denied", 126)
    return _spawn(path, command, env)


def run_command(command: SimpleCommand, env: Environment, in_fork: bool = False) -> int:
    """Run a builtin or a program and return its exit status.

    Names holding ``/`` or starting with ``.`` are run as paths, as are all
    names when ``PATH`` is unset; others are looked up along ``$PATH``.
    """
    name = command.command
    if name is None:
        return 0
    status = run_builtin(command, env, in_fork)
    if status is not None:
        return status
    if "/" in name or name.startswith(".") or "PATH" not in env:
        return _run_file(name, command, env)
    path = find_executable(name, env)
    if path is None:
        return report_error(name, ": command not found", 127)
    return _spawn(path, command, env)


def _run_child(
    command: SimpleCommand,
    env: Environment,
    position: int,
    pipes: list[tuple[int, int]],
) -> NoReturn:
    status = 1
    try:
        _bind_sys_streams()
        try:
            if position < len(pipes):
                os.dup2(pipes[position][1], 1)
            if position > 0:
                os.dup2(pipes[position - 1][0], 0)
        except OSError:
            status = report_error("dup2", ": couldn't clone the fd", 1)
            raise
        for read_end, write_end in pipes:
            os.close(read_end)
            os.close(write_end)
        if command.redirections and apply_redirections(command.redirections):
            status = 1
        else:
            try:
                status = run_command(command, env, in_fork=True)
            except ShellExit as exc:
                status = exc.status
    except BaseException:
        pass
    finally:
        _flush_std()
        os._exit(status & 0xFF)


def run_pipeline(pipeline: Pipeline, env: Environment) -> int:
    """Run every command in its own process, joined by pipes.

    Returns the exit status of the last command.
    """
    commands = pipeline.commands
    if not commands:
        return 0
    pipes: list[tuple[int, int]] = []
    try:
        for _ in commands[:-1]:
            pipes.append(os.pipe())
    except OSError:
        for read_end, write_end in pipes:
            os.close(read_end)
            os.close(write_end)
        return report_error("pipe", ": couldn't create pipe", 1)
    pids: list[int] = []
    fork_error: int | None = None
    try:
        for position, command in enumerate(commands):
            _flush_std()
            try:
                pid = os.fork()
            except OSError as exc:
                fork_error = report_error("fork", ": couldn't fork properly", exc.errno or 1)
                break
            if pid == 0:
                _run_child(command, env, position, pipes)
            pids.append(pid)
    finally:
        for read_end, write_end in pipes:
            os.close(read_end)
            os.close(write_end)
    status = 0
    for pid in pids:
        _, wait_status = os.waitpid(pid, 0)
        status = os.WEXITSTATUS(wait_status)
    return fork_error if fork_error is not None else status


def execute(pipeline: Pipeline, env: Environment) -> int:
    """Run an expanded pipeline and return its exit status.

    The redirections of the first command are applied in the shell itself;
    the standard descriptors are restored afterwards, also when ``exit``
    raises :class:`ShellExit`.
    """
    if not pipeline.commands:
        return 0
    first = pipeline.commands[0]
    with saved_std_streams():
        if first.redirections and apply_redirections(first.redirections):
            return 1
        if first.command is None and not first.redirections:
            return report_error("", ": command not found", 127)
        if len(pipeline.commands) > 1:
            return run_pipeline(pipeline, env)
        return run_command(first, env)
# minishell

A small shell engine as a Python library. It turns a command line into
tokens, expands words the way a POSIX-like shell does, and runs commands,
with builtins, redirections and pipes.

## Modules

- `minishell.lexer`: `tokenize(line)` returns a list of `Token`s. The list
  opens with a `NONE` token and closes with a `NEWLINE` token; between them
  are `WORD` tokens and the operators `|`, `;`, `>`, `>>` and `<`. Quotes and
  backslashes stay inside words. `read_word(line, start)` reads a single word.
- `minishell.words`: `expand_word(word, env, exit_status, last_argument,
  redirection)` handles `~`, backslashes, single and double quotes, `$NAME`,
  `$?`, `$_`, `$0` and a few other special parameters. It returns `None` when
  nothing is left of the word. Also `quote_kind`, `replace_tilde` and
  `env_variable_value`.
- `minishell.expansion`: `expand_simple_command` and `expand_pipeline` expand
  the command name, arguments and redirection targets in place. They split
  unquoted `$` expansions that bring in spaces, drop arguments that expanded
  to nothing, and let the first argument stand in for a vanished command name.
  `last_argument_or_command(pipeline)` gives the value `$_` should hold
  afterwards.
- `minishell.model`: the data types `TokenType`, `Token`, `RedirectionType`,
  `Redirection`, `Argument`, `SimpleCommand` (with `argv()`) and `Pipeline`.
- `minishell.environment`: `Environment` is an insertion-ordered variable
  table with `get`, `add`, `replace`, `remove`, `copy`, `sorted_items` and
  `to_envp`. You can build one from `NAME=value` strings with
  `Environment.from_strings`. `split_assignment` splits such a string.
- `minishell.builtins`: `echo`, `cd`, `pwd`, `print_env`, `export`, `unset`
  and `exit_shell`. `run_builtin` dispatches on a lower-case or upper-case
  name and returns `None` for anything that is not a builtin. `exit_shell`
  raises `ShellExit`, whose `status` is the exit code. `report_error` prints
  `minishell: <prefix><message>` on standard error.
- `minishell.executor`: `execute(pipeline, env)` applies the first command's
  redirections, runs a builtin in place or a program found with
  `find_executable` along `$PATH`, and connects several commands with pipes
  through `run_pipeline`. `apply_redirections`, `run_command` and the
  `saved_std_streams` context manager are available on their own as well.

## Example

```python
import os

from minishell.environment import Environment
from minishell.executor import execute
from minishell.expansion import expand_pipeline
from minishell.lexer import tokenize
from minishell.model import Argument, Pipeline, SimpleCommand
from minishell.words import expand_word

env = Environment.from_strings(f"{k}={v}" for k, v in os.environ.items())

for token in tokenize('echo "$HOME" | wc -c > out.txt'):
    print(token.type, token.value)

print(expand_word("'$HOME' is \"$HOME\"", env, "0", None, False))

pipeline = Pipeline([SimpleCommand("echo", [Argument('"$USER"'), Argument("$?")])])
expand_pipeline(pipeline, env, exit_status=0)
status = execute(pipeline, env)
```

Builtins and the executor return the status a shell would use. For example,
a failed `cd` returns 1, a command that cannot be found returns 127, and a
program killed by a signal returns 128 plus the signal number.

## What it does not do

The package has no parser that turns the token list into `Pipeline` objects;
you build `SimpleCommand` and `Pipeline` values yourself. It has no
interactive prompt, line editing or history, and no command-line program to
start a shell session. It requires a POSIX system, because pipelines use
`os.fork`.

## Requirements and tests

The package needs Python 3.10 or newer and uses only the standard library.
The tests use pytest, which you can install through the `test` extra.
"""A small shell engine: lexing, word expansion, builtins and command execution."""

__version__ = "0.1.0"

__all__ = ["builtins", "environment", "executor", "expansion", "lexer", "model", "words"]
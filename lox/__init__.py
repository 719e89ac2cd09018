"""
Lox language pipeline: lexer, recursive-descent parser and tree-walking
interpreter.

Typical use goes through `Session`, which wires the stages together and keeps
globals alive between runs:

    from lox import Session
    result = Session().run('print "hi";')
"""

import logging

from .diagnostics import Diagnostic, Diagnostics, LoxRuntimeError
from .environment import Environment
from .interp import Interpreter
from .lexer import scan
from .parser import parse
from .session import RunResult, Session

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Diagnostic",
    "Diagnostics",
    "Environment",
    "Interpreter",
    "LoxRuntimeError",
    "RunResult",
    "Session",
    "parse",
    "scan",
]

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from . import ast
from .diagnostics import Diagnostics
from .interp import Interpreter
from .lexer import scan
from .parser import parse
from .token import Token

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STATIC_ERROR = 65
EXIT_RUNTIME_ERROR = 70


@dataclass(frozen=True)
class RunResult:
    had_static_error: bool
    had_runtime_error: bool

    @property
    def exit_code(self) -> int:
        if self.had_static_error:
            return EXIT_STATIC_ERROR
        if self.had_runtime_error:
            return EXIT_RUNTIME_ERROR
        return EXIT_OK


class Session:
    """
    Runs successive source blobs against one interpreter.

    Globals accumulate across `run` calls, while the error flags are cleared at
    the start of each run so a failed line does not poison the next one.
    """

    def __init__(self, stdout=None, diagnostics: Optional[Diagnostics] = None) -> None:
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.interpreter = Interpreter(stdout=stdout, diagnostics=self.diagnostics)

    def scan_source(self, source: str) -> List[Token]:
        self.diagnostics.reset()
        return scan(source, self.diagnostics)

    def parse_source(self, source: str) -> List[ast.Stmt]:
        self.diagnostics.reset()
        return parse(scan(source, self.diagnostics), self.diagnostics)

    def run(self, source: str) -> RunResult:
        statements = self.parse_source(source)
        if self.diagnostics.had_static_error:
            logger.debug("skipping execution after %d static errors", len(self.diagnostics.static_errors))
        else:
            logger.debug("executing %d statements", len(statements))
            self.interpreter.interpret(statements)
        return self.result()

    def result(self) -> RunResult:
        return RunResult(
            had_static_error=self.diagnostics.had_static_error,
            had_runtime_error=self.diagnostics.had_runtime_error,
        )

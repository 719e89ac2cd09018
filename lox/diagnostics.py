"""
Static and runtime error records for one run of the pipeline.

A `Diagnostics` value is created by the driver and handed to the lexer, the
parser and the interpreter. They append to it instead of printing, and the
driver decides afterwards whether execution may proceed and which exit code
to surface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .token import Token, TokenKind

# Reported when source nests deeper than the Python stack allows.
TOO_DEEP = "Too much nesting."


class LoxRuntimeError(Exception):
    """Evaluation failure attributed to the token that caused it."""

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(message)
        self.token = token
        self.message = message


@dataclass(frozen=True)
class Diagnostic:
    kind: str  # "static" or "runtime"
    line: int
    message: str
    where: str = ""
    token: Optional[Token] = None

    def render(self) -> str:
        if self.kind == "runtime":
            return f"{self.message}\n[line {self.line}]"
        return f"[line {self.line}] Error{self.where}: {self.message}"

    def __str__(self) -> str:
        return self.render()


@dataclass
class Diagnostics:
    static_errors: List[Diagnostic] = field(default_factory=list)
    runtime_error: Optional[Diagnostic] = None

    @property
    def had_static_error(self) -> bool:
        return bool(self.static_errors)

    @property
    def had_runtime_error(self) -> bool:
        return self.runtime_error is not None

    def error(self, line: int, message: str) -> Diagnostic:
        """Record a lexical error, which has no token to point at."""
        diag = Diagnostic(kind="static", line=line, message=message)
        self.static_errors.append(diag)
        return diag

    def token_error(self, token: Token, message: str) -> Diagnostic:
        if token.kind is TokenKind.EOF:
            where = " at end"
        else:
            where = f" at '{token.lexeme}'"
        diag = Diagnostic(kind="static", line=token.line, message=message, where=where, token=token)
        self.static_errors.append(diag)
        return diag

    def runtime(self, err: LoxRuntimeError) -> Diagnostic:
        diag = Diagnostic(kind="runtime", line=err.token.line, message=err.message, token=err.token)
        self.runtime_error = diag
        return diag

    def reset(self) -> None:
        """Clear both flags; globals held elsewhere are untouched."""
        self.static_errors = []
        self.runtime_error = None

    def messages(self) -> List[str]:
        out = [diag.render() for diag in self.static_errors]
        if self.runtime_error is not None:
            out.append(self.runtime_error.render())
        return out

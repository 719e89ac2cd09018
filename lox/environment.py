from __future__ import annotations

from typing import Dict, Optional

from .diagnostics import LoxRuntimeError
from .token import Token


class Environment:
    def __init__(self, enclosing: Optional[Environment] = None) -> None:
        self.enclosing = enclosing
        self.values: Dict[str, object] = {}

    def define(self, name: str, value: object) -> None:
        # Redeclaration in the same scope simply rebinds.
        self.values[name] = value

    def assign(self, name: Token, value: object) -> None:
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return
        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def get(self, name: Token) -> object:
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __repr__(self) -> str:
        depth = 0
        scope = self.enclosing
        while scope is not None:
            depth += 1
            scope = scope.enclosing
        return f"Environment(depth={depth}, names={sorted(self.values)})"

from __future__ import annotations

from typing import Iterable, Sequence, Union

from . import ast
from .runtime import stringify

Node = Union[ast.Expr, ast.Stmt]


class AstPrinter:
    """
    Render AST nodes in a fully parenthesized prefix form.

        1 + 2 * 3          ->  (+ 1 (* 2 3))
        -(a)               ->  (- (group a))
        f(x, "y")          ->  (call f x "y")
        var a = 1;         ->  (var a 1)
        while (c) print c; ->  (while c (print c))

    The output carries no precedence information, so `lox.reader` can rebuild
    the exact tree from it.
    """

    def print(self, node: Node) -> str:
        if isinstance(node, ast.Stmt):
            return self._stmt(node)
        return self._expr(node)

    def print_program(self, statements: Sequence[ast.Stmt]) -> str:
        return "\n".join(self._stmt(stmt) for stmt in statements)

    def _expr(self, expr: ast.Expr) -> str:
        if isinstance(expr, ast.Literal):
            if isinstance(expr.value, str):
                return f'"{expr.value}"'
            return stringify(expr.value)
        if isinstance(expr, ast.Grouping):
            return self._parenthesize("group", [expr.expression])
        if isinstance(expr, ast.Unary):
            return self._parenthesize(expr.operator.lexeme, [expr.right])
        if isinstance(expr, (ast.Binary, ast.Logical)):
            return self._parenthesize(expr.operator.lexeme, [expr.left, expr.right])
        if isinstance(expr, ast.Variable):
            return expr.name.lexeme
        if isinstance(expr, ast.Assign):
            return f"(= {expr.name.lexeme} {self._expr(expr.value)})"
        if isinstance(expr, ast.Call):
            return self._parenthesize("call", [expr.callee, *expr.arguments])
        raise RuntimeError(f"Unsupported expression {expr}")

    def _stmt(self, stmt: ast.Stmt) -> str:
        if isinstance(stmt, ast.Expression):
            return self._parenthesize(";", [stmt.expression])
        if isinstance(stmt, ast.Print):
            return self._parenthesize("print", [stmt.expression])
        if isinstance(stmt, ast.Var):
            if stmt.initializer is None:
                return f"(var {stmt.name.lexeme})"
            return f"(var {stmt.name.lexeme} {self._expr(stmt.initializer)})"
        if isinstance(stmt, ast.Block):
            return self._parenthesize("block", stmt.statements)
        if isinstance(stmt, ast.If):
            parts = [stmt.condition, stmt.then_branch]
            if stmt.else_branch is not None:
                parts.append(stmt.else_branch)
            return self._parenthesize("if", parts)
        if isinstance(stmt, ast.While):
            return self._parenthesize("while", [stmt.condition, stmt.body])
        raise RuntimeError(f"Unsupported statement {stmt}")

    def _parenthesize(self, name: str, nodes: Iterable[Node]) -> str:
        parts = [name]
        parts.extend(self.print(node) for node in nodes)
        return "(" + " ".join(parts) + ")"

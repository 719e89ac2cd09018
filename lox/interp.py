from __future__ import annotations

import logging
import sys
from typing import List, Mapping, Optional, Sequence

from . import ast
from .diagnostics import TOO_DEEP, Diagnostics, LoxRuntimeError
from .environment import Environment
from .runtime import BUILTINS, BuiltinFunction, LoxCallable, divide, is_equal, is_number, is_truthy, stringify
from .token import Token, TokenKind

logger = logging.getLogger(__name__)


class Interpreter:
    def __init__(
        self,
        stdout=None,
        diagnostics: Optional[Diagnostics] = None,
        builtins: Optional[Mapping[str, BuiltinFunction]] = None,
    ) -> None:
        self.stdout = stdout or sys.stdout
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.builtins = builtins if builtins is not None else BUILTINS
        self.globals = Environment()
        self.environment = self.globals
        self._register_builtins()

    def _register_builtins(self) -> None:
        for name, builtin in self.builtins.items():
            self.globals.define(name, builtin)

    def interpret(self, statements: Sequence[ast.Stmt], environment: Optional[Environment] = None) -> bool:
        """
        Execute `statements` in order against `environment` (globals by default).

        Returns False when a runtime error stopped execution; the error itself is
        recorded on `self.diagnostics`.
        """
        previous = self.environment
        self.environment = environment if environment is not None else self.globals
        try:
            for stmt in statements:
                self._exec_stmt(stmt)
        except LoxRuntimeError as err:
            logger.debug("runtime error at line %d: %s", err.token.line, err.message)
            self.diagnostics.runtime(err)
            return False
        finally:
            self.environment = previous
        return True

    def evaluate(self, expr: ast.Expr) -> object:
        return self._eval_expr(expr)

    def execute_block(self, statements: List[ast.Stmt], env: Environment) -> None:
        previous = self.environment
        self.environment = env
        try:
            for stmt in statements:
                self._exec_stmt(stmt)
        finally:
            self.environment = previous

    def _exec_stmt(self, stmt: ast.Stmt) -> None:
        if isinstance(stmt, ast.Expression):
            self._eval_expr(stmt.expression)
            return
        if isinstance(stmt, ast.Print):
            value = self._eval_expr(stmt.expression)
            self.stdout.write(stringify(value) + "\n")
            return
        if isinstance(stmt, ast.Var):
            value = None
            if stmt.initializer is not None:
                value = self._eval_expr(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)
            return
        if isinstance(stmt, ast.Block):
            self.execute_block(stmt.statements, Environment(enclosing=self.environment))
            return
        if isinstance(stmt, ast.If):
            if is_truthy(self._eval_expr(stmt.condition)):
                self._exec_stmt(stmt.then_branch)
            elif stmt.else_branch is not None:
                self._exec_stmt(stmt.else_branch)
            return
        if isinstance(stmt, ast.While):
            while is_truthy(self._eval_expr(stmt.condition)):
                self._exec_stmt(stmt.body)
            return
        raise RuntimeError(f"Unsupported statement {stmt}")

    def _eval_expr(self, expr: ast.Expr) -> object:
        if isinstance(expr, ast.Literal):
            return expr.value
        if isinstance(expr, ast.Grouping):
            return self._eval_expr(expr.expression)
        if isinstance(expr, ast.Variable):
            return self.environment.get(expr.name)
        if isinstance(expr, ast.Assign):
            value = self._eval_nested(expr.name, expr.value)
            self.environment.assign(expr.name, value)
            return value
        if isinstance(expr, ast.Logical):
            left = self._eval_nested(expr.operator, expr.left)
            if expr.operator.kind is TokenKind.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self._eval_nested(expr.operator, expr.right)
        if isinstance(expr, ast.Unary):
            return self._eval_unary(expr)
        if isinstance(expr, ast.Binary):
            return self._eval_binary(expr)
        if isinstance(expr, ast.Call):
            return self._eval_call(expr)
        raise RuntimeError(f"Unsupported expression {expr}")

    def _eval_nested(self, token: Token, expr: ast.Expr) -> object:
        try:
            return self._eval_expr(expr)
        except RecursionError:
            raise LoxRuntimeError(token, TOO_DEEP) from None

    def _eval_unary(self, expr: ast.Unary) -> object:
        right = self._eval_nested(expr.operator, expr.right)
        kind = expr.operator.kind
        if kind is TokenKind.BANG:
            return not is_truthy(right)
        if kind is TokenKind.MINUS:
            _check_number_operand(expr.operator, right)
            return -right
        raise RuntimeError(f"Unknown unary operator {expr.operator.lexeme}")

    def _eval_binary(self, expr: ast.Binary) -> object:
        left = self._eval_nested(expr.operator, expr.left)
        right = self._eval_nested(expr.operator, expr.right)
        op = expr.operator
        kind = op.kind

        if kind is TokenKind.EQUAL_EQUAL:
            return is_equal(left, right)
        if kind is TokenKind.BANG_EQUAL:
            return not is_equal(left, right)
        if kind is TokenKind.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(op, "Operands must be two numbers or two strings.")

        _check_number_operands(op, left, right)
        if kind is TokenKind.MINUS:
            return left - right
        if kind is TokenKind.STAR:
            return left * right
        if kind is TokenKind.SLASH:
            return divide(left, right)
        if kind is TokenKind.GREATER:
            return left > right
        if kind is TokenKind.GREATER_EQUAL:
            return left >= right
        if kind is TokenKind.LESS:
            return left < right
        if kind is TokenKind.LESS_EQUAL:
            return left <= right
        raise RuntimeError(f"Unsupported operator {op.lexeme}")

    def _eval_call(self, expr: ast.Call) -> object:
        callee = self._eval_nested(expr.paren, expr.callee)
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")

        arguments = [self._eval_nested(expr.paren, arg) for arg in expr.arguments]
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(
                expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}."
            )
        return callee.call(self, arguments)


def _check_number_operand(operator: Token, operand: object) -> None:
    if is_number(operand):
        return
    raise LoxRuntimeError(operator, "Operand must be a number.")


def _check_number_operands(operator: Token, left: object, right: object) -> None:
    if is_number(left) and is_number(right):
        return
    raise LoxRuntimeError(operator, "Operands must be numbers.")

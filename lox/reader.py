"""
Read the prefix form written by `AstPrinter` back into AST nodes.

The surface syntax is a plain S-expression language parsed with lark; the
mapping from list heads to node types lives here. Rebuilt tokens use the same
kinds the lexer would produce and the line lark reports, so a single-line
program round-trips to an equal tree:

    read_expr(AstPrinter().print(expr)) == expr
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from lark import Lark, Token as LarkToken, Tree, UnexpectedInput

from . import ast
from .token import KEYWORDS, OPERATORS, Token, TokenKind

_GRAMMAR_PATH = Path(__file__).with_name("sexpr.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
    _GRAMMAR_SRC,
    parser="lalr",
    lexer="basic",
    start="start",
    propagate_positions=True,
    maybe_placeholders=False,
)

_LITERALS = {"nil": None, "true": True, "false": False}
_UNARY = frozenset({"!", "-"})
_BINARY = frozenset({"+", "-", "*", "/", "==", "!=", "<", "<=", ">", ">="})
_LOGICAL = frozenset({"and", "or"})


class ReaderError(ValueError):
    def __init__(self, message: str, line: int = 0) -> None:
        super().__init__(message)
        self.line = line


def read_program(text: str) -> List[ast.Stmt]:
    return [_build_stmt(node) for node in _parse(text).children]


def read_expr(text: str) -> ast.Expr:
    data = _parse(text).children
    if len(data) != 1:
        raise ReaderError(f"expected exactly one expression, got {len(data)}")
    return _build_expr(data[0])


def _parse(text: str) -> Tree:
    try:
        return _PARSER.parse(text)
    except UnexpectedInput as exc:
        raise ReaderError(f"malformed s-expression: {exc}", getattr(exc, "line", 0)) from exc


def _line(node: object) -> int:
    if isinstance(node, LarkToken):
        return node.line or 1
    if isinstance(node, Tree) and not node.meta.empty:
        return node.meta.line
    return 1


def _symbol_token(lexeme: str, line: int) -> Token:
    if lexeme in OPERATORS:
        return Token(OPERATORS[lexeme], lexeme, None, line)
    return Token(KEYWORDS.get(lexeme, TokenKind.IDENTIFIER), lexeme, None, line)


def _name_token(node: object) -> Token:
    if not isinstance(node, LarkToken) or node.type != "SYMBOL":
        raise ReaderError(f"expected a name, got {node!r}", _line(node))
    if node.value in KEYWORDS or node.value in OPERATORS:
        raise ReaderError(f"'{node.value}' is not a valid name", _line(node))
    return Token(TokenKind.IDENTIFIER, node.value, None, _line(node))


def _split(node: Tree):
    if not node.children:
        raise ReaderError("empty list", _line(node))
    head, *args = node.children
    if not isinstance(head, LarkToken) or head.type != "SYMBOL":
        raise ReaderError(f"list head must be a symbol, got {head!r}", _line(node))
    return head, args


def _expect_arity(head: LarkToken, args: list, *counts: int) -> None:
    if len(args) not in counts:
        allowed = " or ".join(str(c) for c in counts)
        raise ReaderError(f"'{head.value}' takes {allowed} operands, got {len(args)}", _line(head))


def _build_expr(node: object) -> ast.Expr:
    if isinstance(node, LarkToken):
        if node.type == "NUMBER":
            return ast.Literal(float(node.value))
        if node.type == "STRING":
            return ast.Literal(node.value[1:-1])
        if node.value in _LITERALS:
            return ast.Literal(_LITERALS[node.value])
        return ast.Variable(_name_token(node))

    head, args = _split(node)
    op = head.value
    line = _line(head)

    if op == "group":
        _expect_arity(head, args, 1)
        return ast.Grouping(_build_expr(args[0]))
    if op == "=":
        _expect_arity(head, args, 2)
        return ast.Assign(_name_token(args[0]), _build_expr(args[1]))
    if op == "call":
        if not args:
            raise ReaderError("'call' needs a callee", line)
        paren = Token(TokenKind.RIGHT_PAREN, ")", None, line)
        return ast.Call(_build_expr(args[0]), paren, [_build_expr(arg) for arg in args[1:]])
    if op in _LOGICAL:
        _expect_arity(head, args, 2)
        return ast.Logical(_build_expr(args[0]), _symbol_token(op, line), _build_expr(args[1]))
    if op in _UNARY and len(args) == 1:
        return ast.Unary(_symbol_token(op, line), _build_expr(args[0]))
    if op in _BINARY:
        _expect_arity(head, args, 2)
        return ast.Binary(_build_expr(args[0]), _symbol_token(op, line), _build_expr(args[1]))
    raise ReaderError(f"unknown expression form '{op}'", line)


def _build_stmt(node: object) -> ast.Stmt:
    if not isinstance(node, Tree):
        raise ReaderError(f"expected a statement form, got {node!r}", _line(node))

    head, args = _split(node)
    op = head.value

    if op == ";":
        _expect_arity(head, args, 1)
        return ast.Expression(_build_expr(args[0]))
    if op == "print":
        _expect_arity(head, args, 1)
        return ast.Print(_build_expr(args[0]))
    if op == "var":
        _expect_arity(head, args, 1, 2)
        initializer = _build_expr(args[1]) if len(args) == 2 else None
        return ast.Var(_name_token(args[0]), initializer)
    if op == "block":
        return ast.Block([_build_stmt(arg) for arg in args])
    if op == "if":
        _expect_arity(head, args, 2, 3)
        else_branch = _build_stmt(args[2]) if len(args) == 3 else None
        return ast.If(_build_expr(args[0]), _build_stmt(args[1]), else_branch)
    if op == "while":
        _expect_arity(head, args, 2)
        return ast.While(_build_expr(args[0]), _build_stmt(args[1]))
    raise ReaderError(f"unknown statement form '{op}'", _line(head))

"""
Prefix printer and its lark-based reader.

Expressions parsed from single-line source must survive print -> read with an
identical tree, tokens included.
"""

from __future__ import annotations

import pytest

from lox import ast
from lox.diagnostics import Diagnostics
from lox.lexer import scan
from lox.parser import Parser, parse
from lox.printer import AstPrinter
from lox.reader import ReaderError, read_expr, read_program
from lox.token import Token, TokenKind


def _parse_expr(source: str) -> ast.Expr:
    diags = Diagnostics()
    expr = Parser(scan(source, diags), diags).parse_expression()
    assert not diags.had_static_error, diags.messages()
    return expr


def test_prints_book_example():
    expr = ast.Binary(
        ast.Unary(Token(TokenKind.MINUS, "-", None, 1), ast.Literal(123.0)),
        Token(TokenKind.STAR, "*", None, 1),
        ast.Grouping(ast.Literal(45.67)),
    )
    assert AstPrinter().print(expr) == "(* (- 123) (group 45.67))"


def test_prints_literals():
    printer = AstPrinter()
    assert printer.print(ast.Literal(None)) == "nil"
    assert printer.print(ast.Literal(True)) == "true"
    assert printer.print(ast.Literal(False)) == "false"
    assert printer.print(ast.Literal("a b")) == '"a b"'
    assert printer.print(ast.Literal(2.0)) == "2"


@pytest.mark.parametrize(
    "source",
    [
        "1 + 2 * 3",
        "(1 + 2) * 3",
        "-a - -b",
        "!(x == nil) != false",
        'greeting = "hello" + " " + name',
        "a = b = c or d and e",
        "f(1, g(2), (3))()",
        "0.5 >= 1.25 / 4",
        "1000000000000000000000000 < 2",
    ],
)
def test_print_then_read_is_identity(source):
    expr = _parse_expr(source)
    printed = AstPrinter().print(expr)
    rebuilt = read_expr(printed)
    assert rebuilt == expr
    assert AstPrinter().print(rebuilt) == printed


def test_program_round_trip():
    source = "var i; for (i = 0; i < 2; i = i + 1) { if (i == 1) print i; else print -i; } while (true) x;"
    statements = parse(scan(source))
    printed = AstPrinter().print_program(statements)
    assert len(printed.splitlines()) == 3
    assert AstPrinter().print_program(read_program(printed)) == printed


def test_reader_rebuilds_lexer_tokens():
    expr = read_expr("(and (call clock) (< x 1))")
    assert isinstance(expr, ast.Logical)
    assert expr.operator == Token(TokenKind.AND, "and", None, 1)
    assert expr.left.paren == Token(TokenKind.RIGHT_PAREN, ")", None, 1)
    assert expr.right.left == ast.Variable(Token(TokenKind.IDENTIFIER, "x", None, 1))


def test_reader_keeps_line_numbers():
    statements = read_program("(print 1)\n(var a\n  2)")
    assert statements[1].name.line == 2


@pytest.mark.parametrize(
    "text",
    [
        "(+ 1",
        "()",
        "(frobnicate 1 2)",
        "(+ 1 2 3)",
        "(= 1 2)",
        "(group)",
        "1 2",
    ],
)
def test_reader_rejects_malformed_expressions(text):
    with pytest.raises(ReaderError):
        read_expr(text)


def test_reader_rejects_expression_where_statement_expected():
    with pytest.raises(ReaderError):
        read_program("(+ 1 2)")
    with pytest.raises(ReaderError):
        read_program("(var print 1)")


def test_reader_keeps_booleans_apart_from_numbers():
    assert read_expr("true").value is True
    assert isinstance(read_expr("1").value, float)
    assert read_expr("(== true 1)").left.value is True

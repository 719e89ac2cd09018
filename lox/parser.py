"""
Recursive-descent parser producing `lox.ast` statements from a token list.

Grammar, lowest precedence first:

    program     -> declaration* EOF
    declaration -> varDecl | statement
    varDecl     -> "var" IDENTIFIER ( "=" expression )? ";"
    statement   -> exprStmt | forStmt | ifStmt | printStmt | whileStmt | block
    expression  -> assignment
    assignment  -> IDENTIFIER "=" assignment | logic_or
    logic_or    -> logic_and ( "or" logic_and )*
    logic_and   -> equality ( "and" equality )*
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | call
    call        -> primary ( "(" arguments? ")" )*
    primary     -> "true" | "false" | "nil" | NUMBER | STRING
                 | IDENTIFIER | "(" expression ")"

Syntax errors are recorded on the shared `Diagnostics` and never abort the
whole parse: a failing declaration is dropped and the parser resynchronizes at
the next statement boundary.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from . import ast
from .diagnostics import TOO_DEEP, Diagnostics
from .token import Token, TokenKind

logger = logging.getLogger(__name__)

MAX_ARGUMENTS = 255

_STATEMENT_STARTS = frozenset(
    {
        TokenKind.CLASS,
        TokenKind.FUN,
        TokenKind.VAR,
        TokenKind.FOR,
        TokenKind.IF,
        TokenKind.WHILE,
        TokenKind.PRINT,
        TokenKind.RETURN,
    }
)


class ParseError(Exception):
    pass


class Parser:
    def __init__(self, tokens: List[Token], diagnostics: Optional[Diagnostics] = None) -> None:
        self.tokens = tokens
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._current = 0

    def parse(self) -> List[ast.Stmt]:
        statements: List[ast.Stmt] = []
        while not self._at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_expression(self) -> Optional[ast.Expr]:
        """Parse a lone expression, as used by tooling; None on a syntax error."""
        try:
            return self._expression()
        except ParseError:
            return None
        except RecursionError:
            self._error(self._peek(), TOO_DEEP)
            return None

    # Statements

    def _declaration(self) -> Optional[ast.Stmt]:
        try:
            if self._match(TokenKind.VAR):
                return self._var_declaration()
            return self._statement()
        except ParseError:
            self._synchronize()
            return None
        except RecursionError:
            self._error(self._peek(), TOO_DEEP)
            self._synchronize()
            return None

    def _var_declaration(self) -> ast.Stmt:
        name = self._consume(TokenKind.IDENTIFIER, "Expect variable name.")
        initializer = self._expression() if self._match(TokenKind.EQUAL) else None
        self._consume(TokenKind.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name, initializer)

    def _statement(self) -> ast.Stmt:
        if self._match(TokenKind.FOR):
            return self._for_statement()
        if self._match(TokenKind.IF):
            return self._if_statement()
        if self._match(TokenKind.PRINT):
            return self._print_statement()
        if self._match(TokenKind.WHILE):
            return self._while_statement()
        if self._match(TokenKind.LEFT_BRACE):
            return ast.Block(self._block())
        return self._expression_statement()

    def _for_statement(self) -> ast.Stmt:
        self._consume(TokenKind.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Optional[ast.Stmt]
        if self._match(TokenKind.SEMICOLON):
            initializer = None
        elif self._match(TokenKind.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()

        condition = None if self._check(TokenKind.SEMICOLON) else self._expression()
        self._consume(TokenKind.SEMICOLON, "Expect ';' after loop condition.")

        increment = None if self._check(TokenKind.RIGHT_PAREN) else self._expression()
        self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._statement()
        if increment is not None:
            body = ast.Block([body, ast.Expression(increment)])
        if condition is None:
            condition = ast.Literal(True)
        body = ast.While(condition, body)
        if initializer is not None:
            body = ast.Block([initializer, body])
        return body

    def _if_statement(self) -> ast.Stmt:
        self._consume(TokenKind.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self._statement()
        else_branch = self._statement() if self._match(TokenKind.ELSE) else None
        return ast.If(condition, then_branch, else_branch)

    def _print_statement(self) -> ast.Stmt:
        value = self._expression()
        self._consume(TokenKind.SEMICOLON, "Expect ';' after value.")
        return ast.Print(value)

    def _while_statement(self) -> ast.Stmt:
        self._consume(TokenKind.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after condition.")
        return ast.While(condition, self._statement())

    def _expression_statement(self) -> ast.Stmt:
        expr = self._expression()
        self._consume(TokenKind.SEMICOLON, "Expect ';' after expression.")
        return ast.Expression(expr)

    def _block(self) -> List[ast.Stmt]:
        statements: List[ast.Stmt] = []
        while not self._check(TokenKind.RIGHT_BRACE) and not self._at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        self._consume(TokenKind.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    # Expressions

    def _expression(self) -> ast.Expr:
        return self._assignment()

    def _assignment(self) -> ast.Expr:
        expr = self._or()

        if self._match(TokenKind.EQUAL):
            equals = self._previous()
            value = self._assignment()
            if isinstance(expr, ast.Variable):
                return ast.Assign(expr.name, value)
            # reported, not raised
            self._error(equals, "Invalid assignment target.")

        return expr

    def _or(self) -> ast.Expr:
        expr = self._and()
        while self._match(TokenKind.OR):
            operator = self._previous()
            expr = ast.Logical(expr, operator, self._and())
        return expr

    def _and(self) -> ast.Expr:
        expr = self._equality()
        while self._match(TokenKind.AND):
            operator = self._previous()
            expr = ast.Logical(expr, operator, self._equality())
        return expr

    def _equality(self) -> ast.Expr:
        expr = self._comparison()
        while self._match(TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL):
            operator = self._previous()
            expr = ast.Binary(expr, operator, self._comparison())
        return expr

    def _comparison(self) -> ast.Expr:
        expr = self._term()
        while self._match(TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS, TokenKind.LESS_EQUAL):
            operator = self._previous()
            expr = ast.Binary(expr, operator, self._term())
        return expr

    def _term(self) -> ast.Expr:
        expr = self._factor()
        while self._match(TokenKind.MINUS, TokenKind.PLUS):
            operator = self._previous()
            expr = ast.Binary(expr, operator, self._factor())
        return expr

    def _factor(self) -> ast.Expr:
        expr = self._unary()
        while self._match(TokenKind.SLASH, TokenKind.STAR):
            operator = self._previous()
            expr = ast.Binary(expr, operator, self._unary())
        return expr

    def _unary(self) -> ast.Expr:
        if self._match(TokenKind.BANG, TokenKind.MINUS):
            operator = self._previous()
            return ast.Unary(operator, self._unary())
        return self._call()

    def _call(self) -> ast.Expr:
        expr = self._primary()
        while self._match(TokenKind.LEFT_PAREN):
            expr = self._finish_call(expr)
        return expr

    def _finish_call(self, callee: ast.Expr) -> ast.Expr:
        arguments: List[ast.Expr] = []
        if not self._check(TokenKind.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self._error(self._peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self._expression())
                if not self._match(TokenKind.COMMA):
                    break
        paren = self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after arguments.")
        return ast.Call(callee, paren, arguments)

    def _primary(self) -> ast.Expr:
        if self._match(TokenKind.FALSE):
            return ast.Literal(False)
        if self._match(TokenKind.TRUE):
            return ast.Literal(True)
        if self._match(TokenKind.NIL):
            return ast.Literal(None)
        if self._match(TokenKind.NUMBER, TokenKind.STRING):
            return ast.Literal(self._previous().literal)
        if self._match(TokenKind.IDENTIFIER):
            return ast.Variable(self._previous())
        if self._match(TokenKind.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)
        raise self._error(self._peek(), "Expect expression.")

    # Token cursor

    def _match(self, *kinds: TokenKind) -> bool:
        for kind in kinds:
            if self._check(kind):
                self._advance()
                return True
        return False

    def _consume(self, kind: TokenKind, message: str) -> Token:
        if self._check(kind):
            return self._advance()
        raise self._error(self._peek(), message)

    def _check(self, kind: TokenKind) -> bool:
        if self._at_end():
            return False
        return self._peek().kind is kind

    def _advance(self) -> Token:
        if not self._at_end():
            self._current += 1
        return self._previous()

    def _at_end(self) -> bool:
        return self._peek().kind is TokenKind.EOF

    def _peek(self) -> Token:
        return self.tokens[self._current]

    def _previous(self) -> Token:
        return self.tokens[self._current - 1]

    def _error(self, token: Token, message: str) -> ParseError:
        self.diagnostics.token_error(token, message)
        return ParseError(message)

    def _synchronize(self) -> None:
        self._advance()
        while not self._at_end():
            if self._previous().kind is TokenKind.SEMICOLON:
                break
            if self._peek().kind in _STATEMENT_STARTS:
                break
            self._advance()
        logger.debug("resynchronized at line %d before %r", self._peek().line, self._peek().lexeme)


def parse(tokens: List[Token], diagnostics: Optional[Diagnostics] = None) -> List[ast.Stmt]:
    return Parser(tokens, diagnostics).parse()

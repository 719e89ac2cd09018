from __future__ import annotations

import logging
from typing import List, Optional

from .diagnostics import Diagnostics
from .token import KEYWORDS, LiteralValue, Token, TokenKind

logger = logging.getLogger(__name__)

_SINGLE = {
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    "{": TokenKind.LEFT_BRACE,
    "}": TokenKind.RIGHT_BRACE,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "-": TokenKind.MINUS,
    "+": TokenKind.PLUS,
    ";": TokenKind.SEMICOLON,
    "*": TokenKind.STAR,
}

# char -> (kind when followed by '=', kind otherwise)
_PAIRED = {
    "!": (TokenKind.BANG_EQUAL, TokenKind.BANG),
    "=": (TokenKind.EQUAL_EQUAL, TokenKind.EQUAL),
    "<": (TokenKind.LESS_EQUAL, TokenKind.LESS),
    ">": (TokenKind.GREATER_EQUAL, TokenKind.GREATER),
}


def _is_alpha(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


class Lexer:
    def __init__(self, source: str, diagnostics: Optional[Diagnostics] = None) -> None:
        self.source = source
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.tokens: List[Token] = []
        self._start = 0
        self._current = 0
        self._line = 1

    def scan_tokens(self) -> List[Token]:
        while not self._at_end():
            self._start = self._current
            self._scan_token()
        self.tokens.append(Token(TokenKind.EOF, "", None, self._line))
        logger.debug("scanned %d tokens over %d lines", len(self.tokens), self._line)
        return self.tokens

    def _scan_token(self) -> None:
        char = self._advance()
        if char in _SINGLE:
            self._add_token(_SINGLE[char])
            return
        if char in _PAIRED:
            with_equal, alone = _PAIRED[char]
            self._add_token(with_equal if self._match("=") else alone)
            return
        if char == "/":
            if self._match("/"):
                while self._peek() != "\n" and not self._at_end():
                    self._advance()
            else:
                self._add_token(TokenKind.SLASH)
            return
        if char in (" ", "\r", "\t"):
            return
        if char == "\n":
            self._line += 1
            return
        if char == '"':
            self._string()
            return
        if _is_digit(char):
            self._number()
            return
        if _is_alpha(char):
            self._identifier()
            return
        self.diagnostics.error(self._line, "Unexpected character.")

    def _string(self) -> None:
        while self._peek() != '"' and not self._at_end():
            if self._peek() == "\n":
                self._line += 1
            self._advance()

        if self._at_end():
            self.diagnostics.error(self._line, "Unterminated string.")
            return

        self._advance()  # closing quote
        self._add_token(TokenKind.STRING, self.source[self._start + 1 : self._current - 1])

    def _number(self) -> None:
        while _is_digit(self._peek()):
            self._advance()

        if self._peek() == "." and _is_digit(self._peek_next()):
            self._advance()
            while _is_digit(self._peek()):
                self._advance()

        self._add_token(TokenKind.NUMBER, float(self.source[self._start : self._current]))

    def _identifier(self) -> None:
        while _is_alpha(self._peek()) or _is_digit(self._peek()):
            self._advance()
        text = self.source[self._start : self._current]
        self._add_token(KEYWORDS.get(text, TokenKind.IDENTIFIER))

    def _match(self, expected: str) -> bool:
        if self._at_end() or self.source[self._current] != expected:
            return False
        self._current += 1
        return True

    def _peek(self) -> str:
        if self._at_end():
            return "\0"
        return self.source[self._current]

    def _peek_next(self) -> str:
        if self._current + 1 >= len(self.source):
            return "\0"
        return self.source[self._current + 1]

    def _advance(self) -> str:
        char = self.source[self._current]
        self._current += 1
        return char

    def _at_end(self) -> bool:
        return self._current >= len(self.source)

    def _add_token(self, kind: TokenKind, literal: LiteralValue = None) -> None:
        text = self.source[self._start : self._current]
        self.tokens.append(Token(kind, text, literal, self._line))


def scan(source: str, diagnostics: Optional[Diagnostics] = None) -> List[Token]:
    return Lexer(source, diagnostics).scan_tokens()

from __future__ import annotations

import pytest

from lox.diagnostics import LoxRuntimeError
from lox.environment import Environment
from lox.token import Token, TokenKind


def _name(lexeme: str, line: int = 1) -> Token:
    return Token(TokenKind.IDENTIFIER, lexeme, None, line)


def test_define_then_get():
    env = Environment()
    env.define("a", 1.0)
    assert env.get(_name("a")) == 1.0


def test_define_overwrites_in_same_scope():
    env = Environment()
    env.define("a", 1.0)
    env.define("a", "two")
    assert env.get(_name("a")) == "two"


def test_get_walks_outward_and_inner_shadows():
    outer = Environment()
    outer.define("a", "outer")
    outer.define("b", "outer-b")
    inner = Environment(enclosing=outer)
    inner.define("a", "inner")
    assert inner.get(_name("a")) == "inner"
    assert inner.get(_name("b")) == "outer-b"
    assert outer.get(_name("a")) == "outer"


def test_get_undefined_raises_with_token():
    env = Environment(enclosing=Environment())
    token = _name("missing", line=7)
    with pytest.raises(LoxRuntimeError) as excinfo:
        env.get(token)
    assert excinfo.value.token is token
    assert excinfo.value.message == "Undefined variable 'missing'."
    assert "missing" not in env


def test_assign_updates_innermost_defining_scope():
    globals_ = Environment()
    globals_.define("a", 1.0)
    middle = Environment(enclosing=globals_)
    middle.define("a", 2.0)
    inner = Environment(enclosing=middle)

    inner.assign(_name("a"), 3.0)

    assert "a" not in inner
    assert middle.get(_name("a")) == 3.0
    assert globals_.get(_name("a")) == 1.0


def test_assign_never_creates_binding():
    globals_ = Environment()
    inner = Environment(enclosing=globals_)
    with pytest.raises(LoxRuntimeError) as excinfo:
        inner.assign(_name("x"), 1.0)
    assert excinfo.value.message == "Undefined variable 'x'."
    assert "x" not in inner
    assert "x" not in globals_


def test_nil_is_a_real_binding():
    env = Environment()
    env.define("a", None)
    assert "a" in env
    assert env.get(_name("a")) is None
    env.assign(_name("a"), False)
    assert env.get(_name("a")) is False


def test_repr_reports_depth():
    inner = Environment(enclosing=Environment(enclosing=Environment()))
    inner.define("z", 1.0)
    assert repr(inner) == "Environment(depth=2, names=['z'])"

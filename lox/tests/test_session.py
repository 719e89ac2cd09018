from __future__ import annotations

import io

from lox.session import RunResult, Session


def _session():
    out = io.StringIO()
    return Session(stdout=out), out


def test_successful_run():
    session, out = _session()
    result = session.run('print "ok";')
    assert result == RunResult(had_static_error=False, had_runtime_error=False)
    assert result.exit_code == 0
    assert out.getvalue() == "ok\n"


def test_static_error_prevents_execution():
    session, out = _session()
    result = session.run('print "before"; print ;')
    assert result.had_static_error
    assert not result.had_runtime_error
    assert result.exit_code == 65
    assert out.getvalue() == ""


def test_lexical_error_also_prevents_execution():
    session, out = _session()
    result = session.run('print 1; @')
    assert result.exit_code == 65
    assert session.diagnostics.messages() == ["[line 1] Error: Unexpected character."]
    assert out.getvalue() == ""


def test_runtime_error_exit_code():
    session, out = _session()
    result = session.run("print 1;\nprint nope;")
    assert result.exit_code == 70
    assert out.getvalue() == "1\n"
    assert session.diagnostics.messages() == ["Undefined variable 'nope'.\n[line 2]"]


def test_globals_survive_and_flags_reset_between_runs():
    session, out = _session()
    assert session.run("var a = 1;").exit_code == 0
    assert session.run("print a +;").exit_code == 65
    assert session.run("print b;").exit_code == 70
    result = session.run("a = a + 1; print a;")
    assert result.exit_code == 0
    assert session.diagnostics.messages() == []
    assert out.getvalue() == "2\n"


def test_declarations_before_runtime_error_persist():
    session, out = _session()
    session.run('var kept = 1; { var lost = 2; print -"x"; }')
    session.run("print kept;")
    assert session.run("print lost;").had_runtime_error
    assert out.getvalue() == "1\n"


def test_scan_and_parse_stages_are_exposed():
    session, _ = _session()
    tokens = session.scan_source("var x = 1;")
    assert [t.lexeme for t in tokens] == ["var", "x", "=", "1", ";", ""]
    statements = session.parse_source("var x = 1; print x;")
    assert len(statements) == 2
    assert session.result().exit_code == 0


def test_deep_nesting_is_a_static_error():
    session, out = _session()
    result = session.run("print " + "(" * 200 + "1" + ")" * 200 + ";")
    assert result.exit_code == 65
    assert session.diagnostics.messages()[0].endswith("Error at '(': Too much nesting.")
    assert out.getvalue() == ""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from lox.cli import Shell, main
from lox.session import Session


def _write(tmp_path: Path, source: str) -> str:
    path = tmp_path / "main.lox"
    path.write_text(source)
    return str(path)


def test_runs_script(tmp_path: Path, capsys):
    script = _write(tmp_path, "var a = 1;\n{ var a = 2; print a; }\nprint a;\n")
    assert main([script]) == 0
    captured = capsys.readouterr()
    assert captured.out == "2\n1\n"
    assert captured.err == ""


def test_static_errors_go_to_stderr_with_exit_65(tmp_path: Path, capsys):
    script = _write(tmp_path, "print 1;\nprint ;\nvar = 2;\n")
    assert main([script]) == 65
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.splitlines() == [
        "[line 2] Error at ';': Expect expression.",
        "[line 3] Error at '=': Expect variable name.",
    ]


def test_runtime_error_exit_70(tmp_path: Path, capsys):
    script = _write(tmp_path, 'print "a";\nprint "a" - 1;\n')
    assert main([script]) == 70
    captured = capsys.readouterr()
    assert captured.out == "a\n"
    assert captured.err == "Operands must be numbers.\n[line 2]\n"


def test_missing_script(tmp_path: Path, capsys):
    assert main([str(tmp_path / "absent.lox")]) == 66
    assert "unable to read source" in capsys.readouterr().err


def test_token_dump(tmp_path: Path, capsys):
    script = _write(tmp_path, "print 1;")
    assert main([script, "--tokens"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "PRINT print nil",
        "NUMBER 1 1.0",
        "SEMICOLON ; nil",
        "EOF  nil",
    ]


def test_ast_dump(tmp_path: Path, capsys):
    script = _write(tmp_path, "for (var i = 0; i < 2; i = i + 1) print i;")
    assert main([script, "--ast"]) == 0
    assert capsys.readouterr().out == "(block (var i 0) (while (< i 2) (block (print i) (; (= i (+ i 1))))))\n"


def test_dump_flags_are_exclusive(tmp_path: Path):
    script = _write(tmp_path, "print 1;")
    with pytest.raises(SystemExit):
        main([script, "--tokens", "--ast"])


def test_shell_keeps_globals_between_lines(capsys):
    out = io.StringIO()
    shell = Shell(Session(stdout=out), stdin=io.StringIO("var a = 1;\nprint a +;\n\nprint a + 1;\n"), stdout=out)
    shell.use_rawinput = False
    shell.cmdloop()
    assert out.getvalue().replace("> ", "") == "2\n\n"
    assert capsys.readouterr().err == "[line 1] Error at ';': Expect expression.\n"


def test_shell_does_not_treat_lox_as_commands():
    out = io.StringIO()
    shell = Shell(Session(stdout=out), stdin=io.StringIO("var help = 3;\nprint help;\n"), stdout=out)
    shell.use_rawinput = False
    shell.cmdloop()
    assert "3\n" in out.getvalue()

from __future__ import annotations

import argparse
import cmd
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .printer import AstPrinter
from .session import EXIT_OK, Session

EXIT_NO_INPUT = 66


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="lox", description="Lox tree-walking interpreter")
    p.add_argument("script", nargs="?", type=Path, help="Path to a .lox file (omit for an interactive prompt)")
    dump = p.add_mutually_exclusive_group()
    dump.add_argument("--tokens", action="store_true", help="Print the token stream instead of running")
    dump.add_argument("--ast", action="store_true", help="Print the parsed program in prefix form instead of running")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr")
    return p


def _report(session: Session) -> None:
    for message in session.diagnostics.messages():
        print(message, file=sys.stderr)


def run_source(session: Session, source: str, dump_tokens: bool = False, dump_ast: bool = False) -> int:
    if dump_tokens:
        for token in session.scan_source(source):
            print(token, file=session.interpreter.stdout)
    elif dump_ast:
        statements = session.parse_source(source)
        if not session.diagnostics.had_static_error:
            print(AstPrinter().print_program(statements), file=session.interpreter.stdout)
    else:
        session.run(source)
    _report(session)
    return session.result().exit_code


class Shell(cmd.Cmd):
    """Line-at-a-time prompt; every line is a complete program run against shared globals."""

    prompt = "> "

    def __init__(self, session: Session, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.session = session

    def onecmd(self, line: str) -> bool:
        # Lox source is never a shell command, so skip cmd's do_* dispatch.
        if line == "EOF":
            return self.do_EOF(line)
        if not line.strip():
            return self.emptyline()
        self.default(line)
        return False

    def default(self, line: str) -> None:
        self.session.run(line)
        _report(self.session)

    def emptyline(self) -> bool:
        """Do not repeat previous line on empty input."""
        return False

    def do_EOF(self, arg: str) -> bool:
        self.stdout.write("\n")
        return True


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    session = Session()
    if args.script is None:
        Shell(session).cmdloop()
        return EXIT_OK

    try:
        source = args.script.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"error: unable to read source: {exc}", file=sys.stderr)
        return EXIT_NO_INPUT

    return run_source(session, source, dump_tokens=args.tokens, dump_ast=args.ast)

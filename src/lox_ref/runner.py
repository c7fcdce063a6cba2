from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .errors import ErrorReporter
from .lexer_rd import tokenize
from .parser_rd import Parser
from .printer import render
from .tree import Expr
from .utils import dump_tokens_enabled

# sysexits.h
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66

USAGE = "Usage: lox [--tokens] [script]"

def run(src: str, reporter: ErrorReporter, dump_tokens: Optional[bool]=None, out: Optional[TextIO]=None) -> Optional[Expr]:
    """Lex and parse *src*, printing the rendered tree on success.

    The reporter is checked after each stage; a lexical error stops the
    pipeline before parsing.
    """
    out = out if out is not None else sys.stdout
    if dump_tokens is None:
        dump_tokens = dump_tokens_enabled()

    tokens = tokenize(src, reporter)

    if dump_tokens:
        for tok in tokens:
            print(tok, file=out)

    if reporter.had_error:
        return None

    expr = Parser(tokens, reporter).parse()
    if expr is None:
        return None

    print(render(expr), file=out)
    return expr

def run_file(path: str, dump_tokens: Optional[bool]=None, out: Optional[TextIO]=None, err: Optional[TextIO]=None) -> int:
    """Run a whole script once and return the process exit status."""
    err = err if err is not None else sys.stderr

    try:
        source = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Could not read '{path}': {exc.strerror or exc}", file=err)
        return EX_NOINPUT

    reporter = ErrorReporter(err)
    run(source, reporter, dump_tokens=dump_tokens, out=out)

    if reporter.had_error:
        return EX_DATAERR

    return 0

def main(argv: Optional[List[str]]=None) -> None:
    args = sys.argv[1:] if argv is None else argv
    dump_tokens: Optional[bool] = None
    paths: List[str] = []

    for token in args:
        if token == "--tokens":
            dump_tokens = True
            continue

        paths.append(token)

    if len(paths) > 1:
        print(USAGE, file=sys.stderr)
        raise SystemExit(EX_USAGE)

    if paths:
        status = run_file(paths[0], dump_tokens=dump_tokens)
        if status:
            raise SystemExit(status)
        return

    from .repl import repl
    repl(dump_tokens=dump_tokens)

if __name__ == "__main__":
    main()

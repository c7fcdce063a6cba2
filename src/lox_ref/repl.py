"""Interactive REPL for Lox, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from typing import Iterable, Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .errors import ErrorReporter
from .repl_highlight import LoxLexer
from .runner import run
from .utils import dump_tokens_enabled, set_dump_tokens

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/tokens": ("Toggle printing of scanned tokens", "[on|off]"),
}

PROMPT = "> "


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display=f"{cmd} {hint}".rstrip(),
                    display_meta=desc,
                )


def _handle_slash(line: str, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/tokens":
        if arg.lower() in ("on", "1", "true", "yes"):
            set_dump_tokens(True)
        elif arg.lower() in ("off", "0", "false", "no"):
            set_dump_tokens(False)
        elif arg == "":
            # Toggle.
            set_dump_tokens(not dump_tokens_enabled())
        else:
            print("Usage: /tokens [on|off]", file=err)
            return True

        state = "on" if dump_tokens_enabled() else "off"
        print(f"Token dump: {state}", file=out)
        return True

    print(f"Unknown command: {cmd}", file=err)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def run_line(text: str, reporter: ErrorReporter, dump_tokens: Optional[bool] = None, out: Optional[TextIO] = None) -> None:
    """Run one REPL line; the error state never outlives the line."""
    try:
        run(text, reporter, dump_tokens=dump_tokens, out=out)
    finally:
        reporter.reset()


def run_lines(lines: Iterable[str], reporter: ErrorReporter, dump_tokens: Optional[bool] = None, out: Optional[TextIO] = None) -> None:
    """Non-interactive loop used when stdin is not a terminal."""
    for raw in lines:
        text = _normalize(raw.rstrip("\n"))
        if not text.strip():
            continue

        if _handle_slash(text, out=out):
            continue

        run_line(text, reporter, dump_tokens=dump_tokens, out=out)


def repl(dump_tokens: Optional[bool] = None) -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    reporter = ErrorReporter(sys.stderr)

    if dump_tokens:
        set_dump_tokens(True)

    if not sys.stdin.isatty():
        run_lines(sys.stdin, reporter)
        return

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=LoxLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )

    print("lox repl — Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(PROMPT)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        # Slash command?
        if _handle_slash(text):
            continue

        run_line(text, reporter)

"""Interactive console host, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
import traceback
from typing import Iterable, List

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.shortcuts import clear

from .shell import Shell
from .types import Line, Severity
from .utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the shell, dropping user bindings", ""),
}

SEVERITY_STYLE = {
    Severity.ERROR: "ansired",
    Severity.WARNING: "ansiyellow",
    Severity.HIGHLIGHT: "bold ansiblue",
    Severity.NORMAL: "",
}


class _Exit(Exception):
    """Raised by the `exit` command to leave the loop."""


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def show(lines: Iterable[Line]) -> None:
    for line in lines:
        style = SEVERITY_STYLE.get(line.severity, "")
        print_formatted_text(FormattedText([(style, line.text)]))


def _new_shell(math: bool) -> Shell:
    shell = Shell(math=math)

    def exit_shell() -> None:
        raise _Exit()

    shell.bind("exit", exit_shell, (), usage="leaves the console")
    shell.eval("alias quit exit")
    return shell


def _handle_slash(line: str, shell_box: List[Shell], math: bool) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ[DEBUG_PY_TRACE_ENV] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop(DEBUG_PY_TRACE_ENV, None)
        elif arg == "":
            if debug_py_trace_enabled():
                os.environ.pop(DEBUG_PY_TRACE_ENV, None)
            else:
                os.environ[DEBUG_PY_TRACE_ENV] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        shell_box[0].dispose()
        shell_box[0] = _new_shell(math)
        print("Shell reset.")
        return True

    known = ", ".join(_SLASH_CMDS)
    print(f"Unknown command: {cmd} (known: {known})", file=sys.stderr)
    return True


def repl(math: bool = True) -> None:
    """Read a line, evaluate it, drain the output; until `exit` or Ctrl-D."""
    shell_box: List[Shell] = [_new_shell(math)]
    session: PromptSession[str] = PromptSession()

    print("liquid console - `help` lists commands, `exit` or Ctrl-D leaves")

    while True:
        try:
            text = session.prompt("> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if _handle_slash(text, shell_box, math):
            continue

        shell = shell_box[0]

        try:
            shell.eval(text)
        except _Exit:
            show(shell.drain())
            break
        except Exception as exc:
            show(shell.drain())
            print(f"Error: {exc}", file=sys.stderr)
            if debug_py_trace_enabled():
                traceback.print_exc()
            continue

        show(shell.drain())

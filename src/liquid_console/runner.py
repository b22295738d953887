from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Tuple

from .lexer import tokenize
from .shell import Shell
from .types import Line, Severity, UnexpectedEOFError
from .utils import debug_py_trace_enabled

USAGE = "usage: liquid-console [--no-math] [--debug] [-c CODE | PATH | -]"

def _chunks(source: str) -> Iterator[str]:
    """
    Group physical lines into evaluable chunks.

    A line that leaves a quote, paren or brace open is joined with the
    following lines until the scope closes (the tokenizer skips the newlines).
    Whatever is still open at the end is yielded as-is so it reports its EOF.
    """
    pending: List[str] = []

    for line in source.splitlines():
        if not pending and not line.strip():
            continue

        pending.append(line)
        try:
            tokenize("\n".join(pending))
        except UnexpectedEOFError:
            continue

        yield "\n".join(pending)
        pending = []

    if pending:
        yield "\n".join(pending)

def run(source: str, math: bool = True, shell: Optional[Shell] = None) -> Tuple[bool, List[Line]]:
    """
    Evaluate `source` one chunk at a time and return (ok, drained lines).

    A chunk is one line, or several when a block spans lines. Every chunk
    runs even if an earlier one failed; `ok` is False if any did.
    """
    shell = shell or Shell(math=math)
    ok = True

    for chunk in _chunks(source):
        ok = shell.eval(chunk) and ok

    return ok, shell.drain()

def write_lines(lines: Iterable[Line], out: TextIO = sys.stdout, err: TextIO = sys.stderr) -> None:
    for line in lines:
        stream = err if line.severity in (Severity.ERROR, Severity.WARNING) else out
        print(line.text, file=stream)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        return sys.stdin.read()

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def main(argv: Optional[List[str]] = None) -> int:
    math = True
    code = None
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--no-math":
            math = False
            continue

        if token == "--debug":
            logging.basicConfig(level=logging.DEBUG)
            continue

        if token == "-c":
            try:
                code = next(it)
            except StopIteration:
                raise SystemExit("-c flag requires a command string") from None
            continue

        if token in ("-h", "--help"):
            print(USAGE)
            return 0

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}\n{USAGE}")

    if code is None and arg is None and sys.stdin.isatty():
        from .repl import repl
        repl(math=math)
        return 0

    source = code if code is not None else _load_source(arg)
    shell = Shell(math=math)

    try:
        ok, lines = run(source, shell=shell)
    except Exception as exc:
        write_lines(shell.drain())
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            traceback.print_exc()
        return 1

    write_lines(lines)
    return 0 if ok else 1

if __name__ == "__main__":
    sys.exit(main())

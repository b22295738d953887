from __future__ import annotations

from typing import List, Optional

import pytest

from liquid_console import Line, Param, Severity, Shell
from tests.support.harness import error_line, run_shell


def _host_shell() -> Shell:
    shell = Shell(math=True)

    def need(a: int) -> int:
        return a

    def maybe(a: Optional[int]) -> str:
        return "none" if a is None else f"got {a}"

    shell.bind("need", need)
    shell.bind("maybe", maybe)
    return shell


SCENARIOS = [
    pytest.param("nosuch 1", ["undefined local 'nosuch'"], id="undefined-local"),
    pytest.param("need", ["(need) parameter #0 (int) is not optional"], id="required-arg"),
    pytest.param("need abc", ["(need) 'abc' cannot be converted to int"], id="arg-type"),
    pytest.param('print "unterminated', ["expected '\"' before EOF"], id="eof-quote"),
    pytest.param("print (need 1", ["expected ')' before EOF"], id="eof-paren"),
    pytest.param("if 1 {print x", ["expected '}' before EOF"], id="eof-brace"),
    pytest.param("print (let x)", ["expected a return value"], id="void-return"),
    pytest.param("print ()", ["expected a return value"], id="empty-subeval"),
    pytest.param("print (nosuch)", ["undefined local 'nosuch'"], id="nested-error-reported-once"),
    pytest.param(
        "print ((nosuch))",
        ["undefined local 'nosuch'"],
        id="deeply-nested-error-reported-once",
    ),
]


@pytest.mark.parametrize("source, messages", SCENARIOS)
def test_errors_emit_one_line_and_fail(source: str, messages: List[str]) -> None:
    outcome = run_shell(source, shell=_host_shell())

    assert not outcome.ok
    assert outcome.lines == [error_line(m) for m in messages]


def test_failure_aborts_remaining_statements() -> None:
    outcome = run_shell("print 1; nosuch; print 2")

    assert not outcome.ok
    assert outcome.lines == [Line("1"), error_line("undefined local 'nosuch'")]


def test_unterminated_scope_dispatches_nothing() -> None:
    shell = Shell()
    calls: List[str] = []
    shell.bind("record", lambda *args: calls.append("called"), ())

    outcome = run_shell('record "unterminated', shell=shell)

    assert not outcome.ok
    assert calls == []
    assert len(outcome.lines) == 1


def test_int_truncates_float_text() -> None:
    assert run_shell("print (need 2.7)", shell=_host_shell()).texts == ["2"]


def test_nullable_parameter_accepts_absence() -> None:
    shell = _host_shell()

    assert run_shell("maybe", shell=shell).texts == ["none"]
    assert run_shell("maybe 3", shell=shell).texts == ["got 3"]


def test_no_stack_frame_outside_dispatch() -> None:
    shell = Shell()

    assert shell.arg(0) is None
    assert shell.join_args() == ""
    assert shell.arg_count == 0
    assert shell.drain() == [error_line("cannot get argument outside of a command method.")] * 3


def test_unsupported_parameter_type_is_named() -> None:
    class Foo:
        pass

    shell = Shell()

    assert not shell.bind("takes_foo", lambda x: None, (Param(Foo, "x"),))
    assert shell.lookup("takes_foo") is None
    assert shell.drain() == [error_line("unsupported parameter type Foo")]


def test_invalidated_binding_is_removed() -> None:
    shell = Shell()
    alive = [True]

    class Target:
        def ping(self) -> str:
            return "pong"

    shell.bind("ping", Target().ping, liveness=lambda: alive[0])
    assert run_shell("ping", shell=shell).texts == ["pong"]

    alive[0] = False
    outcome = run_shell("ping", shell=shell)

    assert not outcome.ok
    assert outcome.lines == [error_line("(ping) the target 'Target' has been destroyed")]
    assert shell.lookup("ping") is None

    assert run_shell("ping", shell=shell).lines == [error_line("undefined local 'ping'")]


def test_host_exception_propagates_and_pops_frame() -> None:
    shell = Shell()

    def boom() -> None:
        raise RuntimeError("boom")

    shell.bind("boom", boom)

    with pytest.raises(RuntimeError):
        shell.eval("print (boom)")

    assert shell.callstack == []


def test_pop_return_errors() -> None:
    shell = Shell()

    assert shell.pop_return() is None
    assert shell.drain() == [error_line("expected a return value")]

    shell.print("abc")
    assert shell.pop_return(int) is None
    assert shell.drain() == [error_line("'abc' cannot be converted to int")]

    shell.print(5)
    assert shell.pop_return(int) == 5
    assert shell.drain() == []


def test_array_argument_subeval_failure_reported_once() -> None:
    shell = Shell()
    shell.bind("take", lambda: shell.arg(0, List[float]), ())

    outcome = run_shell("take ((nosuch), 2)", shell=shell)

    assert outcome.lines == [error_line("undefined local 'nosuch'")]


def test_pop_return_subeval_failure_reported_once() -> None:
    shell = Shell()
    shell.print("(nosuch), 2")

    assert shell.pop_return(List[float]) is None
    assert shell.drain() == [error_line("undefined local 'nosuch'")]


def test_error_lines_use_error_severity() -> None:
    outcome = run_shell("nosuch")

    assert [line.severity for line in outcome.lines] == [Severity.ERROR]

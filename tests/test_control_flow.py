from __future__ import annotations

from typing import List

import pytest

from tests.support.harness import run_shell

SCENARIOS = [
    pytest.param("if (< 1 2) {print yes} {print no}", True, ["yes"], id="if-true-branch"),
    pytest.param("if (> 1 2) {print yes} {print no}", True, ["no"], id="if-false-branch"),
    pytest.param("if 0 {print yes}", True, [], id="if-without-else"),
    pytest.param("if (= a a) {print same}", True, ["same"], id="if-text-equality"),
    pytest.param("if (!= a b) {print differ}", True, ["differ"], id="if-text-inequality"),
    pytest.param("if (not false) {print negated}", True, ["negated"], id="if-not"),
    pytest.param("if maybe {print yes}", False, ["error: (if) 'maybe' cannot be converted to bool"], id="if-bad-condition"),
    pytest.param("if 1 {nosuch}", False, ["error: undefined local 'nosuch'"], id="if-failing-block"),
    pytest.param(
        "if 1 {print a; print b}; print c",
        True,
        ["a", "b", "c"],
        id="if-block-with-statements",
    ),
    pytest.param("for i 0 3 {print :i}", True, ["0", "1", "2"], id="for-range"),
    pytest.param("for i 2 2 {print :i}", True, [], id="for-empty-range"),
    pytest.param(
        "for i 0 2 {for j 0 2 {print :i :j}}",
        True,
        ["0 0", "0 1", "1 0", "1 1"],
        id="for-nested",
    ),
    pytest.param(
        "for i 0 3 {print :i; nosuch}",
        False,
        ["0", "error: undefined local 'nosuch'"],
        id="for-stops-on-failure",
    ),
    pytest.param(
        "for i 0 4 {if (>= :i 2) {print :i}}",
        True,
        ["2", "3"],
        id="for-with-if",
    ),
    pytest.param("print (+ 1 2)", True, ["3"], id="alias-plus"),
    pytest.param("print (- 5 2) (* 2 3) (/ 9 2)", True, ["3 6 4.5"], id="alias-arithmetic"),
    pytest.param("print (<= 2 2) (>= 1 2)", True, ["true false"], id="alias-comparison"),
    pytest.param("print (div 1 0) (div -1 0)", True, ["inf -inf"], id="div-by-zero"),
    pytest.param("print (max 1 2) (min 1 2)", True, ["2 1"], id="min-max"),
    pytest.param("print (floor 2.7) (ceil 2.1)", True, ["2 3"], id="floor-ceil"),
    pytest.param("print (add (mul 2 3) 4)", True, ["10"], id="nested-math"),
    pytest.param(
        "+ a 1",
        False,
        ["error: (add) 'a' cannot be converted to float"],
        id="alias-target-failure-reported-once",
    ),
]


@pytest.mark.parametrize("source, ok, expected", SCENARIOS)
def test_control_flow(source: str, ok: bool, expected: List[str]) -> None:
    outcome = run_shell(source)

    assert outcome.texts == expected
    assert outcome.ok is ok


def test_math_commands_absent_without_extension() -> None:
    outcome = run_shell("print (add 1 2)", math=False)

    assert not outcome.ok
    assert outcome.texts == ["error: undefined local 'add'"]


def test_for_leaves_last_index_bound(shell) -> None:
    assert shell.eval("for n 0 3 {print :n}")
    shell.drain()

    assert run_shell("print :n", shell=shell).texts == ["2"]

"""Built-in commands, registered on every Shell through `install`."""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from .registry import params_from_signature, signature
from .types import BindingKind, EvalAborted, Severity, UndefinedLocalError

if TYPE_CHECKING:
    from .shell import Shell

@dataclass(frozen=True)
class BuiltinSpec:
    name: str
    fn: Callable[..., Any]
    usage: Optional[str] = None
    kind: BindingKind = BindingKind.COMMAND

CORE: List[BuiltinSpec] = []
MATH: List[BuiltinSpec] = []

MATH_ALIASES = """
alias + add; alias - sub; alias * mul; alias / div;
alias < lt; alias <= lte; alias > gt; alias >= gte;
alias = eq; alias != ne
"""

def register_builtin(group: List[BuiltinSpec], name: str, usage: Optional[str] = None,
                     kind: BindingKind = BindingKind.COMMAND):
    def dec(fn: Callable[..., Any]):
        group.append(BuiltinSpec(name=name, fn=fn, usage=usage, kind=kind))
        return fn

    return dec

def install(shell: 'Shell', group: List[BuiltinSpec]) -> None:
    """Bind every builtin in `group`; the first parameter receives the shell."""
    for spec in group:
        params = params_from_signature(spec.fn, skip=1)
        shell.bind(spec.name, functools.partial(spec.fn, shell), params, kind=spec.kind, usage=spec.usage)

def install_math(shell: 'Shell') -> None:
    install(shell, MATH)
    shell.eval(MATH_ALIASES)

# ---------- Core commands ----------

@register_builtin(CORE, "help", "prints usage for a given command")
def std_help(shell, command: Optional[str] = None) -> None:
    if command is None:
        for name in shell.registry.names(listed_only=True):
            shell.print(name)
        return

    binding = shell.lookup(command)
    if binding is None:
        raise UndefinedLocalError(command)

    shell.out(signature(binding), Severity.HIGHLIGHT)
    if binding.usage is not None:
        shell.print(binding.usage)

@register_builtin(CORE, "let", "defines a new variable")
def std_let(shell, variable: str, value: str = "0") -> None:
    cell = [value]

    def set_value(new: str) -> None:
        cell[0] = new

    shell.bind_var(variable, lambda: cell[0], set_value, str)

@register_builtin(CORE, "unlet", "undefines a command or variable")
def std_unlet(shell, local: str) -> None:
    shell.unbind(local)

@register_builtin(CORE, "alias", "gives a command or variable an alias")
def std_alias(shell, alias: str, name: str) -> None:
    target = name.lower()

    def forward() -> None:
        if not shell.eval(f"{target} {shell.join_args()}"):
            raise EvalAborted()

    shell.bind(alias, forward, (), kind=BindingKind.ALIAS)

@register_builtin(CORE, "print", "prints a message to the console")
def std_print(shell) -> None:
    shell.out(shell.join_args())

@register_builtin(CORE, "puts", "prints a message to the console with an optional severity")
def std_puts(shell, value: str, severity: Severity = Severity.NORMAL) -> None:
    shell.out(value, severity)

@register_builtin(CORE, "join", "concatenates strings together")
def std_join(shell) -> str:
    return shell.join_args(0, "")

# ---------- Math and logic extension ----------

@register_builtin(MATH, "if", "evaluates a block when a condition holds, or the optional else block")
def std_if(shell, exp: bool, if_true: str, if_false: Optional[str] = None) -> None:
    block = if_true if exp else if_false
    if block is None:
        return

    if not shell.eval(block):
        raise EvalAborted()

@register_builtin(MATH, "for", "evaluates a block for each index in [min, max)")
def std_for(shell, variable: str, start: int, stop: int, block: str) -> None:
    for i in range(start, stop):
        shell.bind(variable, lambda index=i: index, ())

        if not shell.eval(block):
            raise EvalAborted()

@register_builtin(MATH, "min")
def std_min(_shell, a: float, b: float) -> float:
    return min(a, b)

@register_builtin(MATH, "max")
def std_max(_shell, a: float, b: float) -> float:
    return max(a, b)

@register_builtin(MATH, "floor")
def std_floor(_shell, a: float) -> float:
    return float(math.floor(a))

@register_builtin(MATH, "ceil")
def std_ceil(_shell, a: float) -> float:
    return float(math.ceil(a))

@register_builtin(MATH, "add", kind=BindingKind.HIDDEN)
def std_add(_shell, a: float, b: float) -> float:
    return a + b

@register_builtin(MATH, "sub", kind=BindingKind.HIDDEN)
def std_sub(_shell, a: float, b: float) -> float:
    return a - b

@register_builtin(MATH, "mul", kind=BindingKind.HIDDEN)
def std_mul(_shell, a: float, b: float) -> float:
    return a * b

@register_builtin(MATH, "div", kind=BindingKind.HIDDEN)
def std_div(_shell, a: float, b: float) -> float:
    if b == 0:
        if a == 0 or a != a:
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)

    return a / b

@register_builtin(MATH, "eq", kind=BindingKind.HIDDEN)
def std_eq(_shell, a: str, b: str) -> bool:
    return a == b

@register_builtin(MATH, "ne", kind=BindingKind.HIDDEN)
def std_ne(_shell, a: str, b: str) -> bool:
    return a != b

@register_builtin(MATH, "lt", kind=BindingKind.HIDDEN)
def std_lt(_shell, a: float, b: float) -> bool:
    return a < b

@register_builtin(MATH, "lte", kind=BindingKind.HIDDEN)
def std_lte(_shell, a: float, b: float) -> bool:
    return a <= b

@register_builtin(MATH, "gt", kind=BindingKind.HIDDEN)
def std_gt(_shell, a: float, b: float) -> bool:
    return a > b

@register_builtin(MATH, "gte", kind=BindingKind.HIDDEN)
def std_gte(_shell, a: float, b: float) -> bool:
    return a >= b

@register_builtin(MATH, "not", kind=BindingKind.HIDDEN)
def std_not(_shell, a: bool) -> bool:
    return not a

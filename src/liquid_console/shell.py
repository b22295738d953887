"""
The shell instance: statement evaluator, call stack and host-facing surface.

Every stateful piece (bindings, coercions, call stack, output) lives on one
`Shell`, so independent shells never share state.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple, get_type_hints

from .coerce import CoercionRegistry
from .lexer import next_token
from .output import OutputChannel
from .registry import CommandRegistry, params_from_signature
from .token_types import Tok, TokKind
from .types import (
    Binding, BindingKind, CallFrame, Line, Liveness, Param, ParseFailure, Parser, Severity,
    ArgTypeError, EvalAborted, InvalidatedError, NoStackFrameError, RequiredArgError,
    ReturnTypeError, ShellError, StaticFieldError, UndefinedFieldError, UndefinedLocalError,
    UndefinedMethodError, VoidReturnError,
)
from .utils import format_value, type_name

logger = logging.getLogger(__name__)

_MISSING = object()


class Shell:
    def __init__(self, math: bool = False):
        self.output = OutputChannel()
        self.coercions = CoercionRegistry(resolve=self._resolve_element)
        self.registry = CommandRegistry(self.coercions)
        self.callstack: List[CallFrame] = []
        self.init(math=math)

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def init(self, math: bool = False) -> None:
        """Install the built-in commands (and the math/logic set if asked)."""
        from . import stdlib  # stdlib binds through this module

        stdlib.install(self, stdlib.CORE)
        if math:
            stdlib.install_math(self)

    def dispose(self) -> None:
        """Drop every binding, pending line and frame."""
        self.registry.clear()
        self.output.clear()
        self.callstack.clear()

    def __enter__(self) -> "Shell":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    # ========================================================================
    # Registration
    # ========================================================================

    def bind(
        self,
        name: str,
        fn: Callable[..., Any],
        params: Optional[Sequence[Param]] = None,
        kind: BindingKind = BindingKind.COMMAND,
        usage: Optional[str] = None,
        liveness: Optional[Liveness] = None,
    ) -> bool:
        """
        Register `fn` under `name` (case-insensitive).

        With `params=None` the descriptors come from the callable's own
        signature. Returns False, with an error line, if any parameter type
        has no coercion.
        """
        if params is None:
            params = params_from_signature(fn)

        try:
            self.registry.register(name, fn, params, kind=kind, usage=usage, liveness=liveness)
        except ShellError as exc:
            self.report(exc)
            return False

        return True

    def bind_var(
        self,
        name: str,
        getter: Callable[[], Any],
        setter: Callable[[Any], None],
        type_: Any = str,
        usage: Optional[str] = None,
        hidden: bool = False,
        liveness: Optional[Liveness] = None,
    ) -> bool:
        """Register a read/write pair: `name` prints the value, `name x` sets it."""
        def access(value: Any = _MISSING) -> Any:
            if value is _MISSING:
                return getter()
            setter(value)
            return None

        kind = BindingKind.HIDDEN if hidden else BindingKind.VARIABLE
        param = Param(type=type_, name="value", optional=True, default=_MISSING)

        return self.bind(name, access, (param,), kind=kind, usage=usage, liveness=liveness)

    def bind_field(
        self,
        target: Any,
        field: str,
        name: Optional[str] = None,
        usage: Optional[str] = None,
        hidden: bool = False,
        liveness: Optional[Liveness] = None,
    ) -> bool:
        """Expose an attribute of `target` (an object, or a class for class attributes)."""
        owner = target if isinstance(target, type) else type(target)

        if not hasattr(target, field):
            self.report(UndefinedFieldError(owner.__name__, field))
            return False

        if not isinstance(target, type) and not _is_instance_field(target, field):
            self.report(StaticFieldError(owner.__name__, field))
            return False

        type_ = _field_type(owner, field, getattr(target, field), self.coercions)

        return self.bind_var(
            name or field,
            lambda: getattr(target, field),
            lambda value: setattr(target, field, value),
            type_,
            usage=usage,
            hidden=hidden,
            liveness=liveness,
        )

    def bind_module(self, target: Any, *names: str, hidden: Sequence[str] = ()) -> bool:
        """Bind several named callables of `target` (a module, class or object)."""
        ok = True
        owner = getattr(target, "__name__", type(target).__name__)

        for name in names:
            fn = getattr(target, name, None)

            if fn is None or not callable(fn):
                self.report(UndefinedMethodError(owner, name))
                ok = False
                continue

            kind = BindingKind.HIDDEN if name in hidden else BindingKind.COMMAND
            ok = self.bind(name, fn, kind=kind, usage=inspect.getdoc(fn)) and ok

        return ok

    def unbind(self, name: str) -> bool:
        return self.registry.remove(name)

    def lookup(self, name: str) -> Optional[Binding]:
        return self.registry.lookup(name)

    def register_type(self, type_: Any, parser: Parser) -> None:
        self.coercions.register_type(type_, parser)

    def register_vector(self, type_: type, size: int, minimum: Optional[int] = None) -> None:
        self.coercions.register_vector(type_, size, minimum)

    # ========================================================================
    # Evaluation
    # ========================================================================

    def eval(self, text: str) -> bool:
        """Run every statement in `text`; False once any of them fails."""
        try:
            self._eval(text)
        except EvalAborted:
            return False
        except ShellError as exc:
            self.report(exc)
            return False

        return True

    def _eval(self, text: str) -> None:
        rest = text

        while rest:
            args, rest = self._parse_statement(rest)

            if not args or args[0] == "":
                continue

            self._dispatch(args[0], args[1:])

    def _parse_statement(self, text: str) -> Tuple[List[str], str]:
        args: List[str] = []
        rest = text

        while rest:
            tok = next_token(rest)
            rest = tok.rest

            if not tok.blank:
                args.append(self._resolve(tok))

            if tok.eol:
                break

        return args, rest

    def _resolve(self, tok: Tok) -> str:
        if tok.kind is TokKind.LITERAL:
            return tok.text

        return self._subeval(tok.text)

    def _subeval(self, text: str) -> str:
        before = len(self.output)

        if not self.eval(text):
            raise EvalAborted()

        if len(self.output) <= before:
            raise VoidReturnError()

        return self.output.pop_last().text

    def _resolve_element(self, element: str) -> str:
        """Resolve one array-literal element like a standalone argument."""
        tok = next_token(element)

        if tok.rest.strip():
            raise ParseFailure(element)

        return "" if tok.blank else self._resolve(tok)

    # ========================================================================
    # Dispatch
    # ========================================================================

    def _dispatch(self, name: str, args: List[str]) -> None:
        self.callstack.append(CallFrame(name, args))

        try:
            self._call(name)
        finally:
            self.callstack.pop()

    def _call(self, name: str) -> None:
        binding = self.registry.lookup(name)
        if binding is None:
            raise UndefinedLocalError(name)

        if binding.liveness is not None and not binding.liveness():
            self.registry.remove(name)
            logger.debug("removed invalidated binding '%s'", binding.name)
            raise InvalidatedError(name, binding.target_name())

        values = []
        for index, param in enumerate(binding.params):
            values.append(self._fetch(index, param.type, param.optional, param.default))

        logger.debug("dispatch %s %r", binding.name, self.callstack[-1].arguments)
        result = binding.fn(*values)

        if result is not None:
            self.print(result)

    def current_frame(self) -> CallFrame:
        if not self.callstack:
            raise NoStackFrameError()

        return self.callstack[-1]

    def _fetch(self, index: int, type_: Any, optional: bool, default: Any = None) -> Any:
        frame = self.current_frame()

        if index < 0 or index >= len(frame.arguments):
            if optional:
                return default

            if self.coercions.accepts_absent(type_):
                return None

            raise RequiredArgError(frame.func, index, type_name(type_))

        text = frame.arguments[index]

        try:
            return self.coercions.coerce(type_, text)
        except ValueError:
            raise ArgTypeError(frame.func, text, type_name(type_)) from None

    # ========================================================================
    # Argument access (inside a command)
    # ========================================================================

    @property
    def arg_count(self) -> int:
        try:
            return len(self.current_frame().arguments)
        except ShellError as exc:
            self.report(exc)
            return 0

    def arg(self, index: int, type_: Any = str, optional: bool = False) -> Any:
        """Coerce argument `index` of the running command; None (plus an error line) on failure."""
        try:
            return self._fetch(index, type_, optional)
        except EvalAborted:
            return None
        except ShellError as exc:
            self.report(exc)
            return None

    def join_args(self, start: int = 0, sep: str = " ") -> str:
        try:
            frame = self.current_frame()
        except ShellError as exc:
            self.report(exc)
            return ""

        return sep.join(frame.arguments[start:])

    def pop_return(self, type_: Any = str) -> Any:
        """Take the newest output line as a value of `type_`."""
        line = self.output.pop_last()
        if line is None:
            self.report(VoidReturnError())
            return None

        try:
            return self.coercions.coerce(type_, line.text)
        except ValueError:
            self.report(ReturnTypeError(line.text, type_name(type_)))
            return None
        except EvalAborted:
            return None
        except ShellError as exc:
            self.report(exc)
            return None

    # ========================================================================
    # Output
    # ========================================================================

    def out(self, text: str, severity: Severity = Severity.NORMAL) -> None:
        self.output.emit(text, severity)

    def print(self, value: Any = "") -> None:
        self.out(format_value(value))

    def error(self, value: Any) -> None:
        self.out(format_value(value), Severity.ERROR)

    def warning(self, value: Any) -> None:
        self.out(format_value(value), Severity.WARNING)

    def print_fmt(self, fmt: str, *args: Any) -> None:
        self.out(fmt.format(*args))

    def error_fmt(self, fmt: str, *args: Any) -> None:
        self.out(fmt.format(*args), Severity.ERROR)

    def warning_fmt(self, fmt: str, *args: Any) -> None:
        self.out(fmt.format(*args), Severity.WARNING)

    def report(self, exc: ShellError) -> None:
        logger.debug("shell error: %s", exc.message)
        self.error(str(exc))

    def drain(self) -> List[Line]:
        """Hand every pending line to the host and clear the buffer."""
        return self.output.drain()


def _is_instance_field(target: Any, field: str) -> bool:
    if field in getattr(target, "__dict__", {}):
        return True

    # properties and __slots__ members are per-instance too
    static = inspect.getattr_static(type(target), field, None)
    return hasattr(static, "__set__")


def _field_type(owner: type, field: str, value: Any, coercions: CoercionRegistry) -> Any:
    try:
        hints = get_type_hints(owner)
    except (NameError, TypeError):
        hints = {}

    if field in hints and coercions.supports(hints[field]):
        return hints[field]

    if coercions.supports(type(value)):
        return type(value)

    return str

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Iterator, List, Optional, Tuple

from typing_extensions import Protocol, TypeAlias

# ---------- Output model ----------

class Severity(IntEnum):
    """Line severities. Values double as the terminal colour index."""

    ERROR = 1
    WARNING = 2
    HIGHLIGHT = 4
    NORMAL = 7

@dataclass(frozen=True)
class Line:
    text: str
    severity: Severity = Severity.NORMAL

    def __str__(self) -> str:
        return self.text

# ---------- Fixed-size numeric aggregates ----------

@dataclass(frozen=True)
class Vector2:
    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y))

@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

@dataclass(frozen=True)
class Vector4:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z, self.w))

# ---------- Bindings ----------

class BindingKind(Enum):
    COMMAND = "command"
    VARIABLE = "variable"
    ALIAS = "alias"
    HIDDEN = "hidden"

@dataclass(frozen=True)
class Param:
    """One positional parameter of a binding."""
    type: Any
    name: str = ""
    optional: bool = False
    default: Any = None

class Liveness(Protocol):
    def __call__(self) -> bool: ...

@dataclass
class Binding:
    name: str
    fn: Callable[..., Any]
    params: Tuple[Param, ...] = ()
    kind: BindingKind = BindingKind.COMMAND
    usage: Optional[str] = None
    liveness: Optional[Liveness] = None

    @property
    def listed(self) -> bool:
        return self.kind is BindingKind.COMMAND

    def target_name(self) -> str:
        owner = getattr(self.fn, "__self__", None)
        if owner is not None:
            return type(owner).__name__

        return getattr(self.fn, "__qualname__", type(self.fn).__name__)

@dataclass
class CallFrame:
    func: str
    arguments: List[str] = field(default_factory=list)

Parser: TypeAlias = Callable[[str], Any]

# ---------- Exceptions ----------

class ShellError(Exception):
    """Base class for every recoverable shell failure.

    Subclasses carry a fixed template; constructor args fill it positionally.
    """
    template = "{0}"

    def __init__(self, *args: Any):
        super().__init__(*args)
        self.message = self.template.format(*args)

    def __str__(self) -> str:
        return f"error: {self.message}"

class UnsupportedTypeError(ShellError):
    template = "unsupported parameter type {0}"

class UndefinedLocalError(ShellError):
    template = "undefined local '{0}'"

class UnexpectedEOFError(ShellError):
    template = "expected '{0}' before EOF"

class UndefinedFieldError(ShellError):
    template = "'{0}' has no field named '{1}'"

class UndefinedMethodError(ShellError):
    template = "'{0}' has no method named '{1}'"

class StaticFieldError(ShellError):
    template = "static field '{1}' cannot have a target object '{0}'"

class ArgTypeError(ShellError):
    template = "({0}) '{1}' cannot be converted to {2}"

class RequiredArgError(ShellError):
    template = "({0}) parameter #{1} ({2}) is not optional"

class NoStackFrameError(ShellError):
    template = "cannot get argument outside of a command method."

class ReturnTypeError(ShellError):
    template = "'{0}' cannot be converted to {1}"

class VoidReturnError(ShellError):
    template = "expected a return value"

class InvalidatedError(ShellError):
    template = "({0}) the target '{1}' has been destroyed"

class EvalAborted(ShellError):
    """A nested evaluation failed and has already reported its error."""
    template = "evaluation aborted"

class ParseFailure(ValueError):
    """Raised by a coercion parser that rejects its input text."""

"""Embeddable command shell: bind host callables and values, evaluate one line at a time."""

from .lexer import next_token, split_elements, tokenize
from .registry import params_from_signature
from .shell import Shell
from .token_types import Tok, TokKind
from .types import (
    Binding, BindingKind, CallFrame, Line, Param, ParseFailure, Severity,
    Vector2, Vector3, Vector4,
    ShellError, UnsupportedTypeError, UndefinedLocalError, UnexpectedEOFError,
    UndefinedFieldError, UndefinedMethodError, StaticFieldError, ArgTypeError,
    RequiredArgError, NoStackFrameError, ReturnTypeError, VoidReturnError,
    InvalidatedError,
)

__all__ = [
    "Shell",
    "Binding",
    "BindingKind",
    "CallFrame",
    "Line",
    "Param",
    "ParseFailure",
    "Severity",
    "Tok",
    "TokKind",
    "Vector2",
    "Vector3",
    "Vector4",
    "ShellError",
    "UnsupportedTypeError",
    "UndefinedLocalError",
    "UnexpectedEOFError",
    "UndefinedFieldError",
    "UndefinedMethodError",
    "StaticFieldError",
    "ArgTypeError",
    "RequiredArgError",
    "NoStackFrameError",
    "ReturnTypeError",
    "VoidReturnError",
    "InvalidatedError",
    "next_token",
    "params_from_signature",
    "split_elements",
    "tokenize",
]

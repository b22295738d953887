from __future__ import annotations

import os as _os
from enum import Enum
from typing import Any

DEBUG_PY_TRACE_ENV = "LIQUID_CONSOLE_DEBUG_PY_TRACE"


def debug_py_trace_enabled() -> bool:
    """Whether hosts should print Python tracebacks for failing callables."""
    return _os.environ.get(DEBUG_PY_TRACE_ENV, "").lower() in ("1", "true", "yes", "on")


def type_name(type_: Any) -> str:
    if isinstance(type_, type):
        return type_.__name__

    return str(type_).replace("typing.", "")


def format_number(value: float) -> str:
    if value != value or value in (float("inf"), float("-inf")):
        return str(value)

    return str(int(value)) if float(value).is_integer() else str(value)


def format_value(value: Any) -> str:
    """Render a command result the way it is printed to the output channel."""
    match value:
        case bool():
            return "true" if value else "false"
        case Enum():
            return value.name.lower()
        case int() | float():
            return format_number(value)
        case str():
            return value
        case list() | tuple():
            return ",".join(format_value(v) for v in value)

    if hasattr(value, "__iter__") and hasattr(value, "__dataclass_fields__"):
        return ",".join(format_value(v) for v in value)

    return str(value)

"""Name -> Binding table plus the helper that derives parameter descriptors."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, get_type_hints

from .coerce import CoercionRegistry
from .types import Binding, BindingKind, Liveness, Param, UnsupportedTypeError
from .utils import type_name

logger = logging.getLogger(__name__)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def params_from_signature(fn: Callable[..., Any], skip: int = 0) -> Tuple[Param, ...]:
    """
    Build parameter descriptors from a callable's positional parameters.

    Unannotated parameters are text. A parameter with a default is optional
    and binds that default when the argument is missing. `*args` is ignored:
    variadic commands read their arguments from the call frame.
    """
    try:
        hints = get_type_hints(fn)
    except (NameError, TypeError):
        hints = {}

    params: List[Param] = []
    positional = [p for p in inspect.signature(fn).parameters.values() if p.kind in _POSITIONAL]

    for param in positional[skip:]:
        optional = param.default is not inspect.Parameter.empty
        params.append(Param(
            type=hints.get(param.name, str),
            name=param.name,
            optional=optional,
            default=param.default if optional else None,
        ))

    return tuple(params)


class CommandRegistry:
    """Case-insensitive table of bindings."""

    def __init__(self, coercions: CoercionRegistry):
        self.coercions = coercions
        self._locals: Dict[str, Binding] = {}

    def register(
        self,
        name: str,
        fn: Callable[..., Any],
        params: Sequence[Param] = (),
        kind: BindingKind = BindingKind.COMMAND,
        usage: Optional[str] = None,
        liveness: Optional[Liveness] = None,
    ) -> Binding:
        """Add or replace a binding; raises UnsupportedTypeError and adds nothing."""
        for param in params:
            if not self.coercions.supports(param.type):
                raise UnsupportedTypeError(type_name(param.type))

        key = name.lower()
        binding = Binding(
            name=key,
            fn=fn,
            params=tuple(params),
            kind=kind,
            usage=usage,
            liveness=liveness,
        )
        self._locals[key] = binding
        logger.debug("bound %s '%s' (%d params)", kind.value, key, len(binding.params))

        return binding

    def remove(self, name: str) -> bool:
        removed = self._locals.pop(name.lower(), None)
        if removed is not None:
            logger.debug("unbound '%s'", removed.name)

        return removed is not None

    def lookup(self, name: str) -> Optional[Binding]:
        return self._locals.get(name.lower())

    def clear(self) -> None:
        self._locals.clear()

    def names(self, listed_only: bool = False) -> List[str]:
        return [k for k, b in self._locals.items() if b.listed or not listed_only]

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._locals

    def __iter__(self) -> Iterator[Binding]:
        return iter(list(self._locals.values()))

    def __len__(self) -> int:
        return len(self._locals)


def signature(binding: Binding) -> str:
    """One-line signature used by `help`."""
    parts: List[str] = []

    if binding.kind is BindingKind.VARIABLE:
        parts.append("var")
    elif binding.kind is BindingKind.ALIAS:
        parts.append("alias")

    parts.append(binding.name)

    for param in binding.params:
        piece = f"{type_name(param.type)}:{param.name}"
        if param.optional:
            piece += "?"
        parts.append(piece)

    return " ".join(parts)

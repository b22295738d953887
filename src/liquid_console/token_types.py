"""
Token Types for the console lexer

Shared between the lexer and the shell evaluator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokKind(Enum):
    """How the shell treats a token's text"""

    LITERAL = auto()
    SUBEVAL = auto()


@dataclass(frozen=True)
class Tok:
    """One argument token plus the unconsumed input that follows it"""

    kind: TokKind
    text: str
    rest: str = ""
    eol: bool = False
    blank: bool = False

    def __repr__(self):
        return f"Tok({self.kind.name}, {self.text!r}, eol={self.eol})"


@dataclass
class ScopeState:
    """Nesting state of the token currently being scanned"""

    paren: int = 0
    brace: int = 0
    quote: bool = False

    @property
    def outer(self) -> bool:
        return self.paren == 0 and self.brace == 0 and not self.quote

"""
Lexer for the console shell

Pulls one argument token at a time off the front of the input.

Features:
- Scope tracking for quotes, parenthesised sub-evaluations and braced groups
- `:name` shorthand for a variable read
- `(a, b, c)` array literals (a comma at the first paren level demotes the
  token back to a literal)
- Element splitting for array literals, used by the array coercions
"""

from __future__ import annotations

from typing import Callable, Dict, List

from .token_types import ScopeState, Tok, TokKind
from .types import UnexpectedEOFError

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Scans a single token from the front of `source`.

    Two modes share the same scope rules:
    - statement mode splits on outer spaces and semicolons, strips the
      delimiters of quotes/groups and classifies sub-evaluations
    - element mode splits on outer commas and copies everything verbatim so
      each element can be resolved again later by statement mode
    """

    IGNORED = ('\r', '\n')

    def __init__(self, source: str, elements: bool = False):
        self.source = source
        self.elements = elements
        self.pos = 0
        self.buf: List[str] = []
        self.kind = TokKind.LITERAL
        self.scope = ScopeState()
        self.eol = False
        self.blank = True

        self.handlers: Dict[str, Callable[[str], bool]] = {
            '(': self.scan_open,
            '{': self.scan_open,
            ')': self.scan_close,
            '}': self.scan_close,
            '"': self.scan_quote,
            ':': self.scan_colon,
            ',': self.scan_comma,
            ' ': self.scan_space,
            ';': self.scan_semi,
        }

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan the next token; raise UnexpectedEOFError on an open scope"""
        for self.pos, ch in enumerate(self.source):
            if ch in self.IGNORED:
                continue

            handler = self.handlers.get(ch)
            if handler is None:
                self.append(ch)
                continue

            if handler(ch):
                return self.emit(self.source[self.pos + 1:])

        self.check_eof()
        return self.emit("")

    def emit(self, rest: str) -> Tok:
        return Tok(
            kind=self.kind,
            text=''.join(self.buf),
            rest=rest,
            eol=self.eol or not rest,
            blank=self.blank,
        )

    def check_eof(self):
        if self.scope.quote:
            raise UnexpectedEOFError('"')

        if self.scope.paren > 0:
            raise UnexpectedEOFError(')')

        if self.scope.brace > 0:
            raise UnexpectedEOFError('}')

    # ========================================================================
    # Character Scanners
    # ========================================================================

    def scan_open(self, ch: str) -> bool:
        scope = self.scope
        self.blank = False

        if scope.quote:
            self.append(ch)
            return False

        if ch == '(':
            if scope.brace == 0:
                scope.paren += 1
                if scope.paren == 1 and not self.elements:
                    self.kind = TokKind.SUBEVAL
                    return False
        else:
            if scope.paren == 0:
                scope.brace += 1
                if scope.brace == 1 and not self.elements:
                    return False

        self.append(ch)
        return False

    def scan_close(self, ch: str) -> bool:
        scope = self.scope
        self.blank = False

        if scope.quote:
            self.append(ch)
            return False

        if ch == ')':
            if scope.brace == 0 and scope.paren > 0:
                scope.paren -= 1
                if scope.paren == 0 and not self.elements:
                    return True
        else:
            if scope.paren == 0 and scope.brace > 0:
                scope.brace -= 1
                if scope.brace == 0 and not self.elements:
                    return True

        # unmatched closers at outer scope are plain characters
        self.append(ch)
        return False

    def scan_quote(self, ch: str) -> bool:
        scope = self.scope
        self.blank = False
        scope.quote = not scope.quote

        # Quotes inside a group stay in the text; the group is scanned again
        # when it is evaluated.
        if self.elements or scope.paren > 0 or scope.brace > 0:
            self.append(ch)
            return False

        return not scope.quote

    def scan_colon(self, ch: str) -> bool:
        self.blank = False

        if self.scope.outer and not self.elements:
            self.kind = TokKind.SUBEVAL
            return False

        self.append(ch)
        return False

    def scan_comma(self, ch: str) -> bool:
        scope = self.scope

        if self.elements:
            if scope.outer:
                return True
            self.append(ch)
            return False

        if not scope.quote and scope.brace == 0 and scope.paren == 1:
            self.kind = TokKind.LITERAL

        self.append(ch)
        return False

    def scan_space(self, ch: str) -> bool:
        if self.scope.outer and not self.elements:
            return bool(self.buf)

        self.append(ch)
        return False

    def scan_semi(self, ch: str) -> bool:
        if self.scope.outer and not self.elements:
            self.eol = True
            return True

        self.append(ch)
        return False

    # ========================================================================
    # Utilities
    # ========================================================================

    def append(self, ch: str):
        self.buf.append(ch)
        self.blank = False


def next_token(source: str) -> Tok:
    """Scan one statement-mode token off the front of `source`"""
    return Lexer(source).next_token()


def split_elements(source: str) -> List[str]:
    """Split an array literal body on outer commas, stripping each element"""
    items: List[str] = []
    rest = source

    while rest.strip():
        tok = Lexer(rest, elements=True).next_token()
        items.append(tok.text.strip())
        rest = tok.rest

    return items


def tokenize(source: str) -> List[Tok]:
    """Split `source` into all of its tokens, without evaluating anything"""
    tokens: List[Tok] = []
    rest = source

    while rest:
        tok = next_token(rest)
        if not tok.blank:
            tokens.append(tok)
        rest = tok.rest

    return tokens

"""
seic Lexer (Tokenizer)
======================

Converts source text into a flat sequence of classified tokens. The lexer
has no grammar knowledge: keywords such as ``sei``, ``if`` or ``def`` are
plain words, and every symbol is a one-character token. Multi-character
operators are assembled later by the grammar rules.

Token Categories
----------------
| Kind   | Shape                                  | Example   |
|--------|----------------------------------------|-----------|
| WORD   | ASCII letter, then letters/digits      | abc, x1   |
| NUMBER | digits, optionally '.' and more digits | 42, 3.5   |
| SINGLE | any other non-whitespace character     | + ( ; {   |

A '.' that is not followed by a digit ends the number and becomes its own
SINGLE token. Whitespace separates tokens and is otherwise dropped.

Example Usage
-------------
>>> from seic.lexer import lex
>>> lex("3.5*abc")
[Token(NUMBER, '3.5'), Token(SINGLE, '*'), Token(WORD, 'abc')]
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional
import string

from seic.errors import SourceLocation


# =============================================================================
# Token Definitions
# =============================================================================

class TokenKind(Enum):
    """Lexical classes produced by the lexer."""
    WORD = auto()
    NUMBER = auto()
    SINGLE = auto()


@dataclass(frozen=True)
class Token:
    """
    A single lexical token.

    Tokens compare by kind and text only, so the same program written with
    different spacing produces equal token sequences.

    Attributes:
        kind: The token's lexical class
        text: The exact source text of the token
        location: Where the token starts (diagnostics only)
    """
    kind: TokenKind
    text: str
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r})"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes seic source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    WORD_START = string.ascii_letters
    WORD_CHARS = string.ascii_letters + string.digits

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects in source order
        """
        while not self._at_end():
            char = self._peek()
            if char.isspace():
                self._advance()
                continue

            location = SourceLocation(self.filename, self._line, self._column)
            if char in self.WORD_START:
                yield Token(TokenKind.WORD, self._scan_while(self.WORD_CHARS), location)
            elif char in string.digits:
                yield Token(TokenKind.NUMBER, self._scan_number(), location)
            else:
                yield Token(TokenKind.SINGLE, self._advance(), location)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Return the character at current position + offset, or ''."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line/column."""
        char = self.source[self._pos]
        self._pos += 1
        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return char

    def _scan_while(self, allowed: str) -> str:
        start = self._pos
        while not self._at_end() and self._peek() in allowed:
            self._advance()
        return self.source[start:self._pos]

    def _scan_number(self) -> str:
        """Scan digits with an optional fractional part."""
        text = self._scan_while(string.digits)
        # '.' only belongs to the number when a digit follows it
        if self._peek() == "." and self._peek(1) != "" and self._peek(1) in string.digits:
            self._advance()
            text += "." + self._scan_while(string.digits)
        return text


# =============================================================================
# Convenience Functions
# =============================================================================

def lex(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize source text into a list of tokens."""
    return list(Lexer(source, filename).tokenize())

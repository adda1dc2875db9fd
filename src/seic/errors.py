"""
seic Error Hierarchy
====================

This module defines the exception hierarchy for the seic compiler.
All exceptions inherit from SeiError, allowing callers to catch every
compiler failure with a single except clause.

Exception Hierarchy
-------------------
SeiError (base)
├── SeiSyntaxError - malformed source text
│   ├── UnmatchedBracketError - opening bracket without its partner
│   └── UnexpectedTokenError - token left over after all rule sweeps
└── RuleContractError - a rule constructor received captures it cannot use

Every failure is fatal to the compile: there is no error recovery and no
partial assembly output.

Error messages follow this format:
    filename:line:column: error: description
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Base Exception Class
# =============================================================================

class SeiError(Exception):
    """
    Base exception for all seic errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location and hint.

        Example output:
            count.sei:3:17: error: unmatched opening bracket '{'
            hint: add a closing '}'
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Syntax Errors
# =============================================================================

class SeiSyntaxError(SeiError):
    """
    Syntax error in source code.

    Raised when the token stream cannot be reduced to a list of program
    lines by bracket grouping and the registered rules.
    """
    pass


class UnmatchedBracketError(SeiSyntaxError):
    """
    An opening bracket whose closing partner never appears.

    Example:
        while(i<10){i sei i+1
    """

    def __init__(
        self,
        bracket: str,
        closing: str,
        location: Optional[SourceLocation] = None,
    ):
        self.bracket = bracket
        super().__init__(
            f"unmatched opening bracket '{bracket}'",
            location=location,
            hint=f"add a closing '{closing}'",
        )


class UnexpectedTokenError(SeiSyntaxError):
    """
    A token that no rule consumed and that is neither a separator nor a name.

    Example:
        x sei 1 +
    """

    def __init__(self, found: str, location: Optional[SourceLocation] = None):
        self.found = found
        super().__init__(f"unexpected token '{found}'", location=location)


# =============================================================================
# Internal Consistency Errors
# =============================================================================

class RuleContractError(SeiError):
    """
    A rule constructor was handed captures that violate its contract.

    This never signals bad user input: it means a rule's matcher list and
    its constructor disagree (wrong capture count, missing block kind,
    binder placeholder reaching code generation).
    """
    pass

"""
Grammar Rule Engine
===================

A rule is a fixed sequence of matchers plus a constructor. Applying a rule
slides a window of the rule's length over a mixed sequence of raw tokens
and already-built nodes; wherever every matcher accepts its item, the
constructor turns the captured nodes into one new node that replaces the
whole window.

Matchers
--------
| Matcher         | Accepts                             | Captures              |
|-----------------|-------------------------------------|-----------------------|
| Literal(text)   | raw token with exactly this text    | nothing               |
| Name()          | any raw token                       | VariableRef(slot=None)|
| Block(kind)     | CodeBlock of the given kind         | the block             |
| AnyExpression() | any node, or a bare WORD token      | node / VariableRef    |

Matching and capturing are separate steps: captures are only built once
the whole window has matched, so a window that fails half-way never binds
a name in the frame.

Sweeps
------
``Rule.apply`` scans with a cursor that moves forward only, rewriting each
matching window as it goes. After a rewrite, a rule whose first matcher is
AnyExpression tries the same position again, so the new node becomes the
left operand of the next window and ``a-b-c-d`` nests as
``((a-b)-c)-d``. Other rules advance by one. Sweeps repeat until one
completes without a rewrite.

Example:
    >>> plus = Rule("plus", (AnyExpression(), Literal("+"), AnyExpression()), build)
    >>> items = plus.apply(items, frame)
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union
import logging

from seic.ast import BlockKind, CodeBlock, Node, VariableRef
from seic.errors import RuleContractError
from seic.frame import Frame
from seic.lexer import Token, TokenKind

logger = logging.getLogger(__name__)


# A position in the working sequence: either a raw token or a reduced node
Item = Union[Token, Node]

Constructor = Callable[[list[Node], Frame], Node]


# =============================================================================
# Matchers
# =============================================================================

class Matcher:
    """
    Base class for single-item matchers.

    Subclasses implement ``matches`` (pure test) and ``capture`` (build the
    node handed to the rule constructor, or None to capture nothing).
    """

    def matches(self, item: Item) -> bool:
        raise NotImplementedError

    def capture(self, item: Item, frame: Frame) -> Optional[Node]:
        return None


@dataclass(frozen=True)
class Literal(Matcher):
    """Matches a raw token with the given text. Captures nothing."""
    text: str

    def matches(self, item: Item) -> bool:
        return isinstance(item, Token) and item.text == self.text


@dataclass(frozen=True)
class Name(Matcher):
    """
    Matches a raw token and captures it as a binder placeholder.

    Used for positions that introduce or call a name (declared variables,
    function names). The placeholder has no slot; the constructor decides
    where the name is bound. With ``kind`` set, only tokens of that kind
    match; tokens whose text is in ``exclude`` never match.
    """
    kind: Optional[TokenKind] = None
    exclude: frozenset = frozenset()

    def matches(self, item: Item) -> bool:
        if not isinstance(item, Token) or item.text in self.exclude:
            return False
        return self.kind is None or item.kind is self.kind

    def capture(self, item: Item, frame: Frame) -> Optional[Node]:
        return VariableRef(item.text)


@dataclass(frozen=True)
class Block(Matcher):
    """Matches a CodeBlock of the given kind."""
    kind: BlockKind

    def matches(self, item: Item) -> bool:
        return isinstance(item, CodeBlock) and item.kind is self.kind

    def capture(self, item: Item, frame: Frame) -> Optional[Node]:
        return item


@dataclass(frozen=True)
class AnyExpression(Matcher):
    """Matches any node, or a bare word which becomes a variable reference."""

    def matches(self, item: Item) -> bool:
        if isinstance(item, Token):
            return item.kind is TokenKind.WORD
        return True

    def capture(self, item: Item, frame: Frame) -> Optional[Node]:
        if isinstance(item, Token):
            return VariableRef(item.text, frame.get_slot(item.text))
        return item


# =============================================================================
# Rules
# =============================================================================

@dataclass(frozen=True)
class Rule:
    """
    A declarative grammar rule.

    Attributes:
        name: Short description used in debug logging
        matchers: Matchers applied to consecutive items
        constructor: Builds the replacement node from the captures
    """
    name: str
    matchers: tuple[Matcher, ...]
    constructor: Constructor

    def __post_init__(self):
        # every rewrite must consume a raw token, otherwise sweeps never settle
        if not any(isinstance(m, (Literal, Name)) for m in self.matchers):
            raise RuleContractError(
                f"rule '{self.name}' has no matcher consuming a raw token"
            )

    def match_at(self, items: Sequence[Item], index: int) -> bool:
        """Return True if the window starting at ``index`` matches."""
        if index + len(self.matchers) > len(items):
            return False
        return all(
            matcher.matches(items[index + offset])
            for offset, matcher in enumerate(self.matchers)
        )

    def capture_at(self, items: Sequence[Item], index: int, frame: Frame) -> list[Node]:
        """Build the captures of a matched window, in matcher order."""
        captures = []
        for offset, matcher in enumerate(self.matchers):
            node = matcher.capture(items[index + offset], frame)
            if node is not None:
                captures.append(node)
        return captures

    def sweep(self, items: list[Item], frame: Frame) -> tuple[list[Item], int]:
        """
        One left-to-right pass, rewriting every window that matches.

        A rule opening with AnyExpression retries the same position after a
        rewrite, so the new node is the left operand of the next window.

        Returns:
            The rewritten sequence and the number of rewrites
        """
        items = list(items)
        rewrites = 0
        index = 0
        left_recursive = isinstance(self.matchers[0], AnyExpression)
        while index + len(self.matchers) <= len(items):
            if self.match_at(items, index):
                captures = self.capture_at(items, index, frame)
                node = self.constructor(captures, frame)
                items[index:index + len(self.matchers)] = [node]
                rewrites += 1
                if left_recursive:
                    continue
            index += 1
        return items, rewrites

    def apply(self, items: list[Item], frame: Frame) -> list[Item]:
        """Sweep repeatedly until no window matches."""
        total = 0
        while True:
            items, rewrites = self.sweep(items, frame)
            if rewrites == 0:
                break
            total += rewrites
        if total:
            logger.debug("rule %s: %d rewrite(s)", self.name, total)
        return items

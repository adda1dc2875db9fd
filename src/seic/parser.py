"""
seic Parser
===========

Drives the rule engine over a token stream and produces a Program.

Parsing Pipeline
----------------
For every nesting level the parser runs the same steps:

1. **Curly grouping**: every ``{ ... }`` span is replaced by a CodeBlock
   whose interior was parsed recursively in a pushed frame. Just before a
   block is pushed, each ``<word> sei`` pair at bracket depth 0 that
   precedes it binds the word in the current frame, in textual order, and
   so does each name in the parameter list of a preceding
   ``def name(params)`` header. Block interiors are parsed before the
   statements around them, so without this hoisting a block would
   allocate its own slot for a variable declared just before it.
2. **Round grouping**: every ``( ... )`` span is replaced by a CodeBlock
   parsed in the current frame.
3. **Rule sweeps**: each rule is applied, in registration order, until it
   no longer matches.
4. **Line resolution**: leftover words become variable references,
   separators are dropped, anything else is an unexpected token.

At the top level the lines are wrapped in a curly CodeBlock and paired
with the root frame.

Usage
-----
>>> from seic.parser import parse_source
>>> program = parse_source("i sei 0;while(i<10){i sei i+1;print(i)}")
>>> [line.display_name for line in program.lines]
['var decl', 'while']
"""

from typing import Optional, Sequence
import logging

from seic.ast import BlockKind, CodeBlock, Node, NumberLiteral, Program, VariableRef
from seic.errors import UnexpectedTokenError, UnmatchedBracketError
from seic.frame import Frame
from seic.lexer import Token, TokenKind, lex
from seic.patterns import Item, Rule
from seic.rules import default_rules

logger = logging.getLogger(__name__)


DEFAULT_SEPARATORS = (";", ",")


# =============================================================================
# Bracket Matching
# =============================================================================

def find_matching_bracket(
    items: Sequence[Item],
    brackets: tuple[str, str],
    start: int,
) -> int:
    """
    Find the index of the bracket closing the one at ``start``.

    Only brackets of the same pair change the nesting depth.

    Args:
        items: Working sequence
        brackets: (open, close) pair
        start: Index of the opening bracket

    Returns:
        Index of the matching closing bracket

    Raises:
        UnmatchedBracketError: If the sequence ends before depth returns to 0
    """
    open_text, close_text = brackets
    opening = items[start]
    if not (isinstance(opening, Token) and opening.text == open_text):
        raise ValueError(f"no '{open_text}' at index {start}")

    depth = 0
    for index in range(start, len(items)):
        item = items[index]
        if not isinstance(item, Token):
            continue
        if item.text == open_text:
            depth += 1
        elif item.text == close_text:
            depth -= 1
            if depth == 0:
                return index

    raise UnmatchedBracketError(open_text, close_text, opening.location)


def convert_numbers(tokens: Sequence[Token]) -> list[Item]:
    """Replace NUMBER tokens with NumberLiteral nodes."""
    return [
        NumberLiteral(token.text) if token.kind is TokenKind.NUMBER else token
        for token in tokens
    ]


def _text_at(items: Sequence[Item], index: int) -> Optional[str]:
    """Text of the raw token at ``index``, or None."""
    if index < len(items) and isinstance(items[index], Token):
        return items[index].text
    return None


def _parameter_names(items: Sequence[Item], start: int) -> list[str]:
    """Words from ``start`` up to the closing ')' of a parameter list."""
    names = []
    for item in items[start:]:
        if not isinstance(item, Token) or item.text == ")":
            break
        if item.kind is TokenKind.WORD:
            names.append(item.text)
    return names


# =============================================================================
# Parser Class
# =============================================================================

class Parser:
    """
    Rule-driven parser for seic source.

    Attributes:
        rules: Grammar rules in evaluation-priority order
        filename: Source filename for error messages
        separators: Tokens dropped between lines
        hoist: Bind each level's declarations before parsing its nested blocks
        declaration_keyword: Keyword whose preceding word is hoisted
        function_keyword: Keyword whose parameter list is hoisted
    """

    def __init__(
        self,
        rules: Optional[Sequence[Rule]] = None,
        filename: str = "<input>",
        separators: Sequence[str] = DEFAULT_SEPARATORS,
        hoist: bool = True,
        declaration_keyword: str = "sei",
        function_keyword: str = "def",
    ):
        if rules is None:
            rules = default_rules()
        self.rules = list(rules)
        self.filename = filename
        self.separators = tuple(separators)
        self.hoist = hoist
        self.declaration_keyword = declaration_keyword
        self.function_keyword = function_keyword

    def parse(self, source: str) -> Program:
        """Lex and parse source text."""
        return self.parse_tokens(lex(source, self.filename))

    def parse_tokens(self, tokens: Sequence[Token]) -> Program:
        """
        Parse a token sequence into a Program.

        Each call owns a fresh root frame; nothing is shared between parses.
        """
        frame = Frame()
        lines = self.parse_items(convert_numbers(tokens), frame)
        block = CodeBlock(BlockKind.CURLY, tuple(lines), frame)
        logger.debug("parsed %d line(s), %d slot(s)", len(lines), frame.slot_count)
        return Program(block, frame)

    def parse_items(self, items: list[Item], frame: Frame) -> list[Node]:
        """Run the full pipeline on one nesting level."""
        items = self.group(items, BlockKind.CURLY, frame)
        items = self.group(items, BlockKind.ROUND, frame)
        for rule in self.rules:
            items = rule.apply(items, frame)
        return self.resolve_lines(items, frame)

    # =========================================================================
    # Pipeline Steps
    # =========================================================================

    def hoist_declarations(self, items: Sequence[Item], frame: Frame) -> None:
        """
        Bind the names declared in ``items`` before a nested block is parsed.

        Covers each ``<word> sei`` pair and the parameter list of each
        ``def name(params)`` header at depth 0, in textual order. Only the
        items before the block are passed in, so a later declaration never
        captures a name used inside the block. Binding is idempotent.
        """
        if not self.hoist:
            return
        depth = 0
        for index, item in enumerate(items):
            if not isinstance(item, Token):
                continue
            if item.text in ("(", "{"):
                depth += 1
            elif item.text in (")", "}"):
                depth -= 1
            elif depth != 0 or item.kind is not TokenKind.WORD:
                continue
            elif _text_at(items, index + 1) == self.declaration_keyword:
                frame.get_slot(item.text)
            elif item.text == self.function_keyword and _text_at(items, index + 2) == "(":
                for name in _parameter_names(items, index + 3):
                    frame.get_slot(name)

    def group(self, items: list[Item], kind: BlockKind, frame: Frame) -> list[Item]:
        """
        Replace every bracketed span of ``kind`` with a parsed CodeBlock.

        Curly interiors are parsed in a pushed frame that the block keeps;
        round interiors share ``frame``.
        """
        open_text, _ = kind.brackets
        items = list(items)
        index = 0
        while index < len(items):
            item = items[index]
            if isinstance(item, Token) and item.text == open_text:
                end = find_matching_bracket(items, kind.brackets, index)
                if kind is BlockKind.CURLY:
                    self.hoist_declarations(items[:index], frame)
                    inner = frame.push()
                    lines = self.parse_items(items[index + 1:end], inner)
                    block = CodeBlock(kind, tuple(lines), inner)
                else:
                    lines = self.parse_items(items[index + 1:end], frame)
                    block = CodeBlock(kind, tuple(lines))
                items[index:end + 1] = [block]
            index += 1
        return items

    def resolve_lines(self, items: Sequence[Item], frame: Frame) -> list[Node]:
        """Turn the reduced sequence into program lines."""
        lines: list[Node] = []
        for item in items:
            if not isinstance(item, Token):
                lines.append(item)
            elif item.text in self.separators:
                continue
            elif item.kind is TokenKind.WORD:
                lines.append(VariableRef(item.text, frame.get_slot(item.text)))
            else:
                raise UnexpectedTokenError(item.text, item.location)
        return lines


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(
    source: str,
    rules: Optional[Sequence[Rule]] = None,
    filename: str = "<input>",
) -> Program:
    """Parse source text with the given (or default) rules."""
    return Parser(rules, filename).parse(source)

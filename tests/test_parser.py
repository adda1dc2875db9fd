"""
Parser Test Suite
=================

Tests for bracket grouping, declaration hoisting, line resolution and
the complete parse of small programs.

Test Organization
-----------------
- TestBracketMatching: balanced-depth scanning
- TestGrouping: CodeBlock construction and idempotence
- TestPrograms: end-to-end parses of statements
- TestFunctions: declarations, calls and forward references
- TestParseErrors: fatal syntax conditions
"""

import logging

import pytest
from seic.ast import (
    BinaryOp,
    BlockKind,
    CodeBlock,
    DeclaredFunction,
    FunctionCall,
    FunctionDecl,
    IfBlock,
    NumberLiteral,
    UnknownFunction,
    VarDecl,
    VariableRef,
    WhileBlock,
)
from seic.errors import SeiSyntaxError, UnexpectedTokenError, UnmatchedBracketError
from seic.frame import Frame
from seic.lexer import lex
from seic.parser import Parser, convert_numbers, find_matching_bracket, parse_source
from seic.rules import PRINT


COUNT_PROGRAM = "i sei 0;while(i<10){i sei i+1;print(i)}"


# =============================================================================
# Bracket Matching Tests
# =============================================================================

class TestBracketMatching:
    """Test find_matching_bracket."""

    def test_simple_pair(self):
        items = lex("(a)")
        assert find_matching_bracket(items, ("(", ")"), 0) == 2

    def test_nested_pairs(self):
        items = lex("(a(b)c)d")
        assert find_matching_bracket(items, ("(", ")"), 0) == 6
        assert find_matching_bracket(items, ("(", ")"), 2) == 4

    def test_other_pairs_ignored(self):
        """Only brackets of the same pair change the depth."""
        items = lex("({)}")
        assert find_matching_bracket(items, ("(", ")"), 0) == 2

    def test_unmatched(self):
        items = lex("{a{b}")
        with pytest.raises(UnmatchedBracketError):
            find_matching_bracket(items, ("{", "}"), 0)

    def test_start_must_be_opening(self):
        with pytest.raises(ValueError):
            find_matching_bracket(lex("a(b)"), ("(", ")"), 0)


# =============================================================================
# Grouping Tests
# =============================================================================

class TestGrouping:
    """Test Parser.group."""

    def test_round_block_replaces_span(self):
        parser = Parser()
        items = parser.group(convert_numbers(lex("x(1)y")), BlockKind.ROUND, Frame())
        assert len(items) == 3
        assert items[1] == CodeBlock(BlockKind.ROUND, (NumberLiteral("1"),))

    def test_curly_block_keeps_pushed_frame(self):
        parser = Parser()
        root = Frame()
        items = parser.group(lex("{a}"), BlockKind.CURLY, root)
        block = items[0]
        assert block.kind is BlockKind.CURLY
        assert block.frame is not root
        assert block.frame.state is root.state
        assert root.lookup("a") is None

    def test_round_block_shares_frame(self):
        parser = Parser()
        root = Frame()
        parser.group(lex("(a)"), BlockKind.ROUND, root)
        assert root.lookup("a") == 0

    def test_grouping_is_idempotent(self):
        parser = Parser()
        frame = Frame()
        once = parser.group(convert_numbers(lex("if(x){y sei 1}")), BlockKind.CURLY, frame)
        twice = parser.group(once, BlockKind.CURLY, frame)
        assert twice == once

    def test_empty_block(self):
        program = parse_source("while(1){}")
        assert program.lines[0].body == CodeBlock(BlockKind.CURLY, ())


# =============================================================================
# Program Tests
# =============================================================================

class TestPrograms:
    """End-to-end parses of statements."""

    def test_count_program_lines(self):
        program = parse_source(COUNT_PROGRAM)
        assert [line.display_name for line in program.lines] == ["var decl", "while"]
        assert isinstance(program.lines[0], VarDecl)
        assert isinstance(program.lines[1], WhileBlock)

    def test_count_program_single_slot(self):
        """The loop body updates the same slot the declaration set."""
        program = parse_source(COUNT_PROGRAM)
        decl, loop = program.lines
        assert decl == VarDecl("i", 0, NumberLiteral("0"))

        body_decl, call = loop.body.lines
        assert body_decl.slot == 0
        assert body_decl.value.left == VariableRef("i", 0)
        assert call == FunctionCall(PRINT, (VariableRef("i", 0),))
        assert program.frame.slot_count == 1

    def test_hoisting_disabled(self):
        """Without hoisting the loop body binds its own slot first."""
        program = Parser(hoist=False).parse(COUNT_PROGRAM)
        decl, loop = program.lines
        assert loop.body.lines[0].slot != decl.slot

    def test_root_block(self):
        program = parse_source("x sei 1")
        assert program.block.kind is BlockKind.CURLY
        assert program.block.frame is program.frame

    def test_empty_source(self):
        program = parse_source("")
        assert program.lines == ()
        assert program.frame.slot_count == 0

    def test_if_block(self):
        program = parse_source("x sei 1;if(x<2){print(x)}")
        branch = program.lines[1]
        assert isinstance(branch, IfBlock)
        assert branch.condition.kind is BlockKind.ROUND
        assert isinstance(branch.condition.lines[0], BinaryOp)
        assert branch.body.kind is BlockKind.CURLY

    def test_separators_dropped(self):
        program = parse_source("a sei 1;;b sei 2,")
        assert [line.name for line in program.lines] == ["a", "b"]

    def test_bare_word_line(self):
        assert parse_source("x").lines == (VariableRef("x", 0),)

    def test_later_declaration_not_hoisted_into_block(self):
        """An outer declaration after a block does not capture its names."""
        program = parse_source("if(1){x sei 1};x sei 2")
        branch, outer = program.lines
        assert branch.body.lines[0].slot != outer.slot

    def test_earlier_declaration_shared_with_block(self):
        program = parse_source("x sei 2;if(1){x sei 1}")
        outer, branch = program.lines
        assert branch.body.lines[0].slot == outer.slot

    def test_sibling_blocks_distinct_slots(self):
        program = parse_source("if(1){t sei 1};if(1){t sei 2}")
        first, second = program.lines
        assert first.body.lines[0].slot != second.body.lines[0].slot

    def test_parses_are_independent(self):
        parser = Parser()
        first = parser.parse("a sei 1;b sei 2")
        second = parser.parse("c sei 3")
        assert first.frame.slot_count == 2
        assert second.lines[0].slot == 0


# =============================================================================
# Function Tests
# =============================================================================

class TestFunctions:
    """Declarations, calls and forward references."""

    def test_declaration_and_call(self):
        program = parse_source("def show(a){print(a)};show(5)")
        decl, call = program.lines
        assert isinstance(decl, FunctionDecl)
        assert decl.name == "show"
        assert decl.param_names == ("a",)
        assert decl.body.lines[0] == FunctionCall(PRINT, (VariableRef("a", decl.param_slots[0]),))
        assert call == FunctionCall(DeclaredFunction("show", 1), (NumberLiteral("5"),))

    def test_parameters_visible_in_nested_blocks(self):
        program = parse_source("def f(n){k sei 0;while(k<n){k sei k+1}}")
        decl = program.lines[0]
        (n_slot,) = decl.param_slots
        k_decl, loop = decl.body.lines
        condition = loop.condition.lines[0]
        assert condition.left == VariableRef("k", k_decl.slot)
        assert condition.right == VariableRef("n", n_slot)
        assert loop.body.lines[0].slot == k_decl.slot

    def test_function_owns_frame(self):
        program = parse_source("def f(a){print(a)}")
        decl = program.lines[0]
        assert decl.frame is not decl.body.frame
        assert decl.frame.lookup("a") == decl.param_slots[0]

    def test_forward_reference(self):
        program = parse_source("def a(){b(1)};def b(n){print(n)}")
        call = program.lines[0].body.lines[0]
        assert call.callee == UnknownFunction("b")

    def test_multiple_arguments(self):
        program = parse_source("def add(x,y){print(x+y)};add(1,2)")
        decl, call = program.lines
        assert decl.param_names == ("x", "y")
        assert len(set(decl.param_slots)) == 2
        assert call.args == (NumberLiteral("1"), NumberLiteral("2"))

    def test_arity_mismatch_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="seic.rules"):
            program = parse_source("def f(a){print(a)};f(1,2)")
        assert "call to 'f' passes 2 argument(s), declared with 1" in caplog.text
        assert program.lines[1].callee == DeclaredFunction("f", 1)

    def test_call_as_declaration_value(self):
        program = parse_source("def f(a){a};x sei f(2)")
        decl = program.lines[1]
        assert isinstance(decl, VarDecl)
        assert decl.value == FunctionCall(DeclaredFunction("f", 1), (NumberLiteral("2"),))

    def test_call_as_builtin_argument(self):
        program = parse_source("def f(a){a};print(f(2)+1)")
        call = program.lines[1]
        assert call.callee == PRINT
        (argument,) = call.args
        assert isinstance(argument, BinaryOp)
        assert isinstance(argument.left, FunctionCall)
        assert argument.left.callee.name == "f"

    @pytest.mark.parametrize("source, count", [("print()", 0), ("print(1,2)", 2)])
    def test_builtin_arity_warns(self, caplog, source, count):
        with caplog.at_level(logging.WARNING, logger="seic.rules"):
            parse_source(source)
        assert f"call to 'print' passes {count} argument(s), takes 1" in caplog.text

    def test_non_name_parameter(self):
        with pytest.raises(SeiSyntaxError):
            parse_source("def f(1){print(1)}")


# =============================================================================
# Parse Error Tests
# =============================================================================

class TestParseErrors:
    """Malformed input is fatal."""

    def test_unmatched_curly(self):
        with pytest.raises(UnmatchedBracketError) as exc_info:
            parse_source("while(i<10){i sei i+1", filename="count.sei")
        error = exc_info.value
        assert error.bracket == "{"
        assert error.location.line == 1
        assert error.location.column == 12
        assert "count.sei:1:12: error: unmatched opening bracket '{'" in str(error)
        assert "hint: add a closing '}'" in str(error)

    def test_unmatched_round(self):
        with pytest.raises(UnmatchedBracketError) as exc_info:
            parse_source("print(1")
        assert exc_info.value.bracket == "("

    def test_stray_closing_bracket(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("x sei 1}")
        assert exc_info.value.found == "}"

    def test_dangling_operator(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("x sei 1 +")
        assert "unexpected token '+'" in str(exc_info.value)

    def test_errors_share_base(self):
        with pytest.raises(SeiSyntaxError):
            parse_source("{")

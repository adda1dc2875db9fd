"""
AST Test Suite
==============

Tests for node display names, the visitor dispatch and the AST printer.
"""

import pytest
from seic.ast import (
    ASTPrinter,
    ASTVisitor,
    BinaryOp,
    BlockKind,
    BuiltinFunction,
    CodeBlock,
    FunctionCall,
    FunctionDecl,
    IfBlock,
    NumberLiteral,
    Operator,
    UnknownFunction,
    VarDecl,
    VariableRef,
    WhileBlock,
    as_block,
    children,
)
from seic.parser import parse_source


PLUS = Operator("+", "add $t0, $t0, $t1")


# =============================================================================
# Display Name Tests
# =============================================================================

class TestDisplayNames:
    """Every node reports a stable short name."""

    @pytest.mark.parametrize("node, name", [
        (NumberLiteral("4"), "number"),
        (VariableRef("count", 0), "count"),
        (BinaryOp(NumberLiteral("1"), NumberLiteral("2"), PLUS), "+"),
        (IfBlock(), "if"),
        (WhileBlock(), "while"),
        (VarDecl("x", 0, NumberLiteral("1")), "var decl"),
        (FunctionDecl("show"), "show"),
        (FunctionCall(UnknownFunction("g")), "func"),
        (CodeBlock(BlockKind.ROUND), "round"),
        (CodeBlock(BlockKind.CURLY), "curly"),
    ])
    def test_display_name(self, node, name):
        assert node.display_name == name

    def test_as_block(self):
        block = CodeBlock(BlockKind.ROUND)
        assert as_block(block) is block
        assert as_block(NumberLiteral("1")) is None

    def test_brackets(self):
        assert BlockKind.ROUND.brackets == ("(", ")")
        assert BlockKind.CURLY.brackets == ("{", "}")

    def test_nodes_are_frozen(self):
        node = NumberLiteral("1")
        with pytest.raises(AttributeError):
            node.value = "2"


# =============================================================================
# Visitor Tests
# =============================================================================

class TestVisitor:
    """Test ASTVisitor dispatch and child traversal."""

    def test_generic_visit_reaches_leaves(self):
        class NumberCollector(ASTVisitor):
            def __init__(self):
                self.values = []

            def visit_NumberLiteral(self, node):
                self.values.append(node.value)

        program = parse_source("x sei 1+2;while(x<3){print(4)}")
        collector = NumberCollector()
        collector.visit(program.block)
        assert collector.values == ["1", "2", "3", "4"]

    def test_children_order(self):
        left, right = NumberLiteral("1"), NumberLiteral("2")
        assert children(BinaryOp(left, right, PLUS)) == [left, right]
        assert children(NumberLiteral("1")) == []

    def test_call_children_are_args(self):
        call = FunctionCall(BuiltinFunction("print", 1), (NumberLiteral("5"),))
        assert children(call) == [NumberLiteral("5")]


# =============================================================================
# Printer Tests
# =============================================================================

class TestPrinter:
    """Test the indented tree dump."""

    def test_print_program(self):
        program = parse_source("i sei 0;while(i<10){i sei i+1;print(i)}")
        text = ASTPrinter().print(program.block)
        assert text.splitlines() == [
            "Block curly",
            "  VarDecl i [slot 0]",
            "    Number 0",
            "  While",
            "    Block round",
            "      BinaryOp <",
            "        Var i [slot 0]",
            "        Number 10",
            "    Block curly",
            "      VarDecl i [slot 0]",
            "        BinaryOp +",
            "          Var i [slot 0]",
            "          Number 1",
            "      Call print (BuiltinFunction)",
            "        Var i [slot 0]",
        ]

    def test_print_function(self):
        program = parse_source("def f(x){print(x)}")
        text = ASTPrinter().print(program.lines[0])
        assert text.splitlines()[0] == "Function f(x [slot 0])"

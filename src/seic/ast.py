"""
seic Abstract Syntax Tree (AST) Definitions
===========================================

This module defines the closed set of node types built by the grammar
rules. Every node can report a display name; code generation lives in
``seic.codegen`` and dispatches on the node class.

Node Hierarchy
--------------
Node (base)
├── NumberLiteral - immediate numeric value
├── VariableRef - read of a variable slot
├── BinaryOp - operator applied to two operands
├── IfBlock - conditional body
├── WhileBlock - loop with re-evaluated condition
├── VarDecl - ``name sei value``
├── FunctionDecl - ``def name(params){body}``
├── FunctionCall - call to a builtin, declared or unknown function
└── CodeBlock - bracket-delimited group of lines, round or curly

Design Notes
------------
- Nodes are frozen dataclasses; the tree is never mutated after a rule
  constructor returns.
- Each node owns its children. A node is inserted exactly once, replacing
  the span it was built from, so the tree cannot contain cycles.
- Callee descriptors (BuiltinFunction, DeclaredFunction, UnknownFunction)
  are values, not nodes: a call never points at the FunctionDecl node.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from seic.frame import Frame


# =============================================================================
# Node Base Class
# =============================================================================

@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""

    @property
    def display_name(self) -> str:
        """Stable short name used by matchers and debug output."""
        raise NotImplementedError


class BlockKind(Enum):
    """Delimiter family of a CodeBlock."""
    ROUND = "round"     # ( ) argument and grouping lists
    CURLY = "curly"     # { } statement bodies

    @property
    def brackets(self) -> tuple[str, str]:
        return ("(", ")") if self is BlockKind.ROUND else ("{", "}")


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberLiteral(Node):
    """Numeric literal, kept as its source text."""
    value: str = "0"

    @property
    def display_name(self) -> str:
        return "number"


@dataclass(frozen=True)
class VariableRef(Node):
    """
    Reference to a variable slot.

    Attributes:
        name: Variable name
        slot: Bound slot index; None for a binder placeholder that a rule
              constructor has not resolved yet
    """
    name: str = ""
    slot: Optional[int] = None

    @property
    def display_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class Operator:
    """
    A binary operator definition supplied at rule registration.

    Attributes:
        symbol: Source symbol, e.g. "+" or "=="
        instructions: Assembly combining $t1 (left) and $t0 (right) into $t0
    """
    symbol: str
    instructions: str


@dataclass(frozen=True)
class BinaryOp(Node):
    """Binary operator application."""
    left: Node = None
    right: Node = None
    operator: Operator = None

    @property
    def display_name(self) -> str:
        return self.operator.symbol


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class IfBlock(Node):
    """
    Conditional block: ``if(condition){body}``.

    Attributes:
        condition: Round block evaluating the condition
        body: Curly block executed when the condition is non-zero
    """
    condition: Node = None
    body: Node = None

    @property
    def display_name(self) -> str:
        return "if"


@dataclass(frozen=True)
class WhileBlock(Node):
    """Loop block: ``while(condition){body}``."""
    condition: Node = None
    body: Node = None

    @property
    def display_name(self) -> str:
        return "while"


@dataclass(frozen=True)
class VarDecl(Node):
    """
    Variable declaration / assignment: ``name sei value``.

    Attributes:
        name: Declared name
        slot: Slot the value is stored into
        value: Initializer expression
    """
    name: str = ""
    slot: int = 0
    value: Node = None

    @property
    def display_name(self) -> str:
        return "var decl"


@dataclass(frozen=True)
class FunctionDecl(Node):
    """
    Function declaration: ``def name(params){body}``.

    The function owns a private copy of the frame its body was parsed in;
    parameters are bound in that copy.

    Attributes:
        name: Function name, also its assembly label
        param_names: Formal parameter names in declaration order
        param_slots: Slot of each formal parameter
        body: Curly block of the function body
        frame: The function's own frame
    """
    name: str = ""
    param_names: tuple[str, ...] = ()
    param_slots: tuple[int, ...] = ()
    body: Node = None
    frame: Frame = field(default=None, compare=False, repr=False)

    @property
    def display_name(self) -> str:
        return self.name


# =============================================================================
# Calls
# =============================================================================

@dataclass(frozen=True)
class BuiltinFunction:
    """A callee implemented by a system call that pops one argument."""
    name: str
    syscall: int


@dataclass(frozen=True)
class DeclaredFunction:
    """A callee declared earlier in the same program."""
    name: str
    arity: int


@dataclass(frozen=True)
class UnknownFunction:
    """A callee not declared when the call was parsed; bound by label name."""
    name: str


Callee = Union[BuiltinFunction, DeclaredFunction, UnknownFunction]


@dataclass(frozen=True)
class FunctionCall(Node):
    """Call of ``callee`` with argument expressions evaluated in order."""
    callee: Callee = None
    args: tuple[Node, ...] = ()

    @property
    def display_name(self) -> str:
        return "func"


# =============================================================================
# Code Blocks and Program
# =============================================================================

@dataclass(frozen=True)
class CodeBlock(Node):
    """
    A bracket-delimited group of lines.

    Attributes:
        kind: ROUND for ( ), CURLY for { }
        lines: Parsed lines in source order
        frame: Frame the lines were parsed in (curly blocks only)
    """
    kind: BlockKind = BlockKind.CURLY
    lines: tuple[Node, ...] = ()
    frame: Optional[Frame] = field(default=None, compare=False, repr=False)

    @property
    def display_name(self) -> str:
        return self.kind.value


def as_block(node: Node) -> Optional[CodeBlock]:
    """Return ``node`` as a CodeBlock, or None if it is not one."""
    return node if isinstance(node, CodeBlock) else None


@dataclass
class Program:
    """
    A parsed translation unit.

    Attributes:
        block: Root curly block holding the program lines
        frame: Root frame, owner of the program's slot reservation
    """
    block: CodeBlock
    frame: Frame

    @property
    def lines(self) -> tuple[Node, ...]:
        return self.block.lines


# =============================================================================
# AST Visitor
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Dispatches ``visit(node)`` to ``visit_<ClassName>``; nodes without a
    specific method go to ``generic_visit``.

    Usage:
        class MyVisitor(ASTVisitor):
            def visit_IfBlock(self, node):
                ...

        MyVisitor().visit(program.block)
    """

    def visit(self, node: Node):
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Node) -> None:
        """Visit all child nodes."""
        for child in children(node):
            self.visit(child)


def children(node: Node) -> list[Node]:
    """Return the direct child nodes of ``node`` in source order."""
    if isinstance(node, BinaryOp):
        return [node.left, node.right]
    if isinstance(node, (IfBlock, WhileBlock)):
        return [node.condition, node.body]
    if isinstance(node, VarDecl):
        return [node.value]
    if isinstance(node, FunctionDecl):
        return [node.body]
    if isinstance(node, FunctionCall):
        return list(node.args)
    if isinstance(node, CodeBlock):
        return list(node.lines)
    return []


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program.block))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: Node) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        self.output.append(f"{'  ' * self.indent_level}{text}")

    def _nested(self, node: Node) -> None:
        self.indent_level += 1
        self.visit(node)
        self.indent_level -= 1

    def visit_NumberLiteral(self, node: NumberLiteral):
        self._emit(f"Number {node.value}")

    def visit_VariableRef(self, node: VariableRef):
        self._emit(f"Var {node.name} [slot {node.slot}]")

    def visit_BinaryOp(self, node: BinaryOp):
        self._emit(f"BinaryOp {node.operator.symbol}")
        self._nested(node.left)
        self._nested(node.right)

    def visit_IfBlock(self, node: IfBlock):
        self._emit("If")
        self._nested(node.condition)
        self._nested(node.body)

    def visit_WhileBlock(self, node: WhileBlock):
        self._emit("While")
        self._nested(node.condition)
        self._nested(node.body)

    def visit_VarDecl(self, node: VarDecl):
        self._emit(f"VarDecl {node.name} [slot {node.slot}]")
        self._nested(node.value)

    def visit_FunctionDecl(self, node: FunctionDecl):
        params = ", ".join(
            f"{name} [slot {slot}]" for name, slot in zip(node.param_names, node.param_slots)
        )
        self._emit(f"Function {node.name}({params})")
        self._nested(node.body)

    def visit_FunctionCall(self, node: FunctionCall):
        self._emit(f"Call {node.callee.name} ({type(node.callee).__name__})")
        for arg in node.args:
            self._nested(arg)

    def visit_CodeBlock(self, node: CodeBlock):
        self._emit(f"Block {node.kind.value}")
        for line in node.lines:
            self._nested(line)

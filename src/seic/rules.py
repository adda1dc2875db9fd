"""
Grammar Rule Set
================

Builders for the rules that make up the language. Each builder returns a
``Rule`` whose constructor checks the captures it receives; a mismatch
between a rule's matchers and its constructor raises RuleContractError.

Rule order is precedence: rules are swept in registration order, so
operators registered first bind tighter.

Default Rule Order
------------------
1. Function declaration: ``def name(params){body}``
2. Builtin calls: ``print(expr)``
3. Named calls: ``name(args)`` (declared or forward-referenced)
4. Binary operators: * / + - < > ==
5. Variable declaration: ``name sei expr``
6. Conditional: ``if(cond){body}``
7. Loop: ``while(cond){body}``

Calls reduce first, so a call is an operand like any other expression:
``x sei f(2)+1``.

Usage:
    >>> rules = default_rules()
    >>> rules = default_rules(operators=DEFAULT_OPERATORS[:3])
"""

from typing import Iterable, Sequence
import logging

from seic.ast import (
    BinaryOp,
    BlockKind,
    BuiltinFunction,
    CodeBlock,
    DeclaredFunction,
    FunctionCall,
    FunctionDecl,
    IfBlock,
    Node,
    Operator,
    UnknownFunction,
    VarDecl,
    VariableRef,
    WhileBlock,
)
from seic.errors import RuleContractError, SeiSyntaxError
from seic.frame import Frame
from seic.lexer import TokenKind
from seic.patterns import AnyExpression, Block, Literal, Name, Rule

logger = logging.getLogger(__name__)


# =============================================================================
# Builtins and Operators
# =============================================================================

PRINT = BuiltinFunction("print", syscall=1)
PRINT_CHAR = BuiltinFunction("printchar", syscall=11)

BUILTINS: dict[str, BuiltinFunction] = {
    PRINT.name: PRINT,
    PRINT_CHAR.name: PRINT_CHAR,
}

# Words that open a construct and can never name a callee
KEYWORDS = ("sei", "if", "while", "def")

# Instructions combine $t1 (left) and $t0 (right) into $t0
DEFAULT_OPERATORS: tuple[Operator, ...] = (
    Operator("*", "mult $t0, $t1\nmflo $t0"),
    Operator("/", "div $t1, $t0\nmflo $t0"),
    Operator("+", "add $t0, $t0, $t1"),
    Operator("-", "sub $t0, $t1, $t0"),
    Operator("<", "slt $t0, $t1, $t0"),
    Operator(">", "slt $t0, $t0, $t1"),
    Operator("==", "seq $t0, $t1, $t0"),
)


# =============================================================================
# Constructor Preconditions
# =============================================================================

def _expect(captures: Sequence[Node], count: int, rule: str) -> None:
    if len(captures) != count:
        raise RuleContractError(
            f"rule '{rule}' expected {count} capture(s), got {len(captures)}"
        )


def _expect_block(node: Node, kind: BlockKind, rule: str) -> CodeBlock:
    if not isinstance(node, CodeBlock) or node.kind is not kind:
        raise RuleContractError(
            f"rule '{rule}' expected a {kind.value} block, got '{node.display_name}'"
        )
    return node


def _expect_name(node: Node, rule: str) -> str:
    if not isinstance(node, VariableRef):
        raise RuleContractError(
            f"rule '{rule}' expected a name, got '{node.display_name}'"
        )
    return node.name


# =============================================================================
# Rule Builders
# =============================================================================

def binary_operator(symbol: str, instructions: str) -> Rule:
    """
    Build ``expr <symbol> expr``.

    Multi-character symbols match as consecutive single-character tokens.
    """
    operator = Operator(symbol, instructions)
    rule_name = f"operator {symbol}"

    def construct(captures: list[Node], frame: Frame) -> Node:
        _expect(captures, 2, rule_name)
        left, right = captures
        return BinaryOp(left, right, operator)

    matchers = (AnyExpression(), *(Literal(c) for c in symbol), AnyExpression())
    return Rule(rule_name, matchers, construct)


def variable_declaration(keyword: str = "sei") -> Rule:
    """Build ``name sei expr``; the name is bound in the current frame."""
    rule_name = f"declaration {keyword}"

    def construct(captures: list[Node], frame: Frame) -> Node:
        _expect(captures, 2, rule_name)
        target, value = captures
        name = _expect_name(target, rule_name)
        return VarDecl(name, frame.get_slot(name), value)

    return Rule(rule_name, (Name(), Literal(keyword), AnyExpression()), construct)


def conditional(keyword: str = "if") -> Rule:
    """Build ``if(cond){body}``."""

    def construct(captures: list[Node], frame: Frame) -> Node:
        _expect(captures, 2, keyword)
        condition = _expect_block(captures[0], BlockKind.ROUND, keyword)
        body = _expect_block(captures[1], BlockKind.CURLY, keyword)
        return IfBlock(condition, body)

    matchers = (Literal(keyword), Block(BlockKind.ROUND), Block(BlockKind.CURLY))
    return Rule(keyword, matchers, construct)


def loop(keyword: str = "while") -> Rule:
    """Build ``while(cond){body}``."""

    def construct(captures: list[Node], frame: Frame) -> Node:
        _expect(captures, 2, keyword)
        condition = _expect_block(captures[0], BlockKind.ROUND, keyword)
        body = _expect_block(captures[1], BlockKind.CURLY, keyword)
        return WhileBlock(condition, body)

    matchers = (Literal(keyword), Block(BlockKind.ROUND), Block(BlockKind.CURLY))
    return Rule(keyword, matchers, construct)


def function_declaration(keyword: str = "def") -> Rule:
    """
    Build ``def name(params){body}``.

    The function takes its own copy of the frame its body was parsed in and
    binds the parameters there, then records its signature so later calls
    resolve to it.
    """
    rule_name = f"function {keyword}"

    def construct(captures: list[Node], frame: Frame) -> Node:
        _expect(captures, 3, rule_name)
        name = _expect_name(captures[0], rule_name)
        params = _expect_block(captures[1], BlockKind.ROUND, rule_name)
        body = _expect_block(captures[2], BlockKind.CURLY, rule_name)
        if body.frame is None:
            raise RuleContractError(f"function '{name}' body was parsed without a frame")

        own_frame = body.frame.copy()
        param_names = []
        for param in params.lines:
            if not isinstance(param, VariableRef):
                raise SeiSyntaxError(
                    f"parameter of function '{name}' must be a name, got '{param.display_name}'"
                )
            param_names.append(param.name)
        param_slots = tuple(own_frame.get_slot(p) for p in param_names)

        frame.declare_function(name, len(param_names))
        return FunctionDecl(name, tuple(param_names), param_slots, body, own_frame)

    matchers = (
        Literal(keyword),
        Name(TokenKind.WORD),
        Block(BlockKind.ROUND),
        Block(BlockKind.CURLY),
    )
    return Rule(rule_name, matchers, construct)


def builtin_call(builtin: BuiltinFunction) -> Rule:
    """Build ``<builtin>(args)``; a builtin consumes exactly one argument."""
    rule_name = f"builtin {builtin.name}"

    def construct(captures: list[Node], frame: Frame) -> Node:
        _expect(captures, 1, rule_name)
        args = _expect_block(captures[0], BlockKind.ROUND, rule_name)
        if len(args.lines) != 1:
            logger.warning(
                "call to '%s' passes %d argument(s), takes 1",
                builtin.name, len(args.lines),
            )
        return FunctionCall(builtin, args.lines)

    return Rule(rule_name, (Literal(builtin.name), Block(BlockKind.ROUND)), construct)


def named_call(keywords: Iterable[str] = KEYWORDS) -> Rule:
    """
    Build ``name(args)`` for user functions.

    A name not declared yet becomes an UnknownFunction and is called by
    label, so forward references compile. Keywords are never callees.
    """
    rule_name = "call"

    def construct(captures: list[Node], frame: Frame) -> Node:
        _expect(captures, 2, rule_name)
        name = _expect_name(captures[0], rule_name)
        args = _expect_block(captures[1], BlockKind.ROUND, rule_name)

        arity = frame.lookup_function(name)
        if arity is None:
            return FunctionCall(UnknownFunction(name), args.lines)
        if arity != len(args.lines):
            logger.warning(
                "call to '%s' passes %d argument(s), declared with %d",
                name, len(args.lines), arity,
            )
        return FunctionCall(DeclaredFunction(name, arity), args.lines)

    callee = Name(TokenKind.WORD, exclude=frozenset(keywords))
    return Rule(rule_name, (callee, Block(BlockKind.ROUND)), construct)


# =============================================================================
# Default Rule Set
# =============================================================================

def default_rules(
    builtins: Iterable[BuiltinFunction] = (PRINT,),
    operators: Iterable[Operator] = DEFAULT_OPERATORS,
) -> list[Rule]:
    """
    Return the standard rule list in evaluation-priority order.

    Args:
        builtins: Builtin callees to recognise before user calls
        operators: Binary operators, tightest first
    """
    rules = [function_declaration()]
    rules += [builtin_call(builtin) for builtin in builtins]
    rules.append(named_call())
    rules += [binary_operator(op.symbol, op.instructions) for op in operators]
    rules += [
        variable_declaration(),
        conditional(),
        loop(),
    ]
    return rules

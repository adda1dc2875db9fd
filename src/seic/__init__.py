"""
seic - Pattern-Rule Compiler for a Small Imperative Language
============================================================

This package compiles a small imperative language (arithmetic, ``sei``
variable declarations, ``if``, ``while``, ``def`` functions and calls) into
assembly for a MIPS-like stack machine.

The grammar is not hard-coded: it is an ordered list of declarative rules,
each a sequence of matchers plus a constructor, that progressively rewrite
the token stream into an expression tree.

Pipeline
--------
    Source → Lexer → Bracket grouping → Rule sweeps → AST → Code Generator

Usage
-----
>>> from seic import compile_sei
>>> print(compile_sei("i sei 0;while(i<10){i sei i+1;print(i)}"))

Language Summary
----------------
- Declaration / assignment: ``x sei 1+2``
- Conditional: ``if(x<3){print(x)}``
- Loop: ``while(x<10){x sei x+1}``
- Functions: ``def show(a){print(a)}; show(5)``
- Statements are separated by ``;``, arguments by ``,``
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Imports
# =============================================================================

from seic.compiler import SeiCompiler, CompilerOptions, CompilerResult, compile_sei
from seic.errors import (
    SeiError,
    SeiSyntaxError,
    UnmatchedBracketError,
    UnexpectedTokenError,
    RuleContractError,
    SourceLocation,
)
from seic.lexer import Lexer, Token, TokenKind, lex
from seic.frame import Frame, ParseState
from seic.patterns import Rule, Literal, Name, Block, AnyExpression
from seic.parser import Parser, parse_source
from seic.codegen import CodeGenerator
from seic.rules import default_rules, PRINT
from seic.ast import (
    BlockKind,
    CodeBlock,
    NumberLiteral,
    VariableRef,
    BinaryOp,
    IfBlock,
    WhileBlock,
    VarDecl,
    FunctionDecl,
    FunctionCall,
    Program,
    ASTPrinter,
)

__all__ = [
    # Version
    "__version__",
    # Main API
    "SeiCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_sei",
    # Errors
    "SeiError",
    "SeiSyntaxError",
    "UnmatchedBracketError",
    "UnexpectedTokenError",
    "RuleContractError",
    "SourceLocation",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    "lex",
    # Frames
    "Frame",
    "ParseState",
    # Rule engine
    "Rule",
    "Literal",
    "Name",
    "Block",
    "AnyExpression",
    "default_rules",
    "PRINT",
    # Parser
    "Parser",
    "parse_source",
    # Code Generator
    "CodeGenerator",
    # AST Nodes
    "BlockKind",
    "CodeBlock",
    "NumberLiteral",
    "VariableRef",
    "BinaryOp",
    "IfBlock",
    "WhileBlock",
    "VarDecl",
    "FunctionDecl",
    "FunctionCall",
    "Program",
    "ASTPrinter",
]

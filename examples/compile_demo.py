#!/usr/bin/env python3
"""
seic Compiler Demo
==================

This script demonstrates how to use the seic compiler API to:
1. Compile a source string with default options
2. Inspect the parsed tree
3. Register an extra builtin and a custom operator rule

Usage:
    python examples/compile_demo.py
"""

from pathlib import Path

from seic import ASTPrinter, CodeGenerator, CompilerOptions, Parser, SeiCompiler, compile_sei
from seic.rules import DEFAULT_OPERATORS, PRINT, PRINT_CHAR, default_rules
from seic.ast import Operator


def main():
    # ==========================================================================
    # 1. One-shot compilation
    # ==========================================================================
    print(compile_sei("x sei 1+2;print(x)"))

    # ==========================================================================
    # 2. Compile a file and dump its tree
    # ==========================================================================
    source = Path(__file__).parent / "count.sei"
    result = SeiCompiler().compile_file(str(source))
    print(ASTPrinter().print(result.program.block))
    print(f"{result.token_count} tokens, {result.program.frame.slot_count} slot(s)")

    # ==========================================================================
    # 3. Custom rule set
    # ==========================================================================
    # Rules are swept in order, so a modulo operator registered first binds
    # tighter than every default operator.
    modulo = Operator("%", "div $t1, $t0\nmfhi $t0")
    rules = default_rules(builtins=(PRINT, PRINT_CHAR), operators=(modulo, *DEFAULT_OPERATORS))
    program = Parser(rules).parse("n sei 17%5;printchar(48+n)")
    print(CodeGenerator(emit_comments=False).generate(program))

    # The same builtins through the compiler options
    options = CompilerOptions(builtins=("print", "printchar"), stack_size=256)
    print(SeiCompiler(options).compile_source("printchar(65)").assembly)


if __name__ == "__main__":
    main()

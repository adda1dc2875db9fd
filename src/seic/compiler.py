"""
seic Compiler Main Module
=========================

Orchestrates the complete compilation process:

    Source → Lex → Parse (grouping + rule sweeps) → Generate → Assembly

Usage
-----
Command line:
    $ seic count.sei -o count.asm

Programmatic:
    >>> from seic import compile_sei
    >>> asm = compile_sei("i sei 0;while(i<10){i sei i+1;print(i)}")

Error Handling
--------------
Every failure is fatal: the first SeiError propagates to the caller and no
assembly is produced.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from seic.ast import Program
from seic.codegen import CodeGenerator
from seic.lexer import lex
from seic.parser import Parser
from seic.rules import BUILTINS, default_rules

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        stack_size: Words of operand stack reserved by the preamble
        emit_comments: Interleave '#' comments in the assembly
        hoist_declarations: Bind ``name sei`` declarations of a level before
                            parsing its nested blocks
        builtins: Names of the builtin callees to recognise (see rules.BUILTINS)
    """
    stack_size: int = 1000
    emit_comments: bool = True
    hoist_declarations: bool = True
    builtins: tuple[str, ...] = ("print",)

    def __post_init__(self):
        unknown = [name for name in self.builtins if name not in BUILTINS]
        if unknown:
            raise ValueError(f"unknown builtin(s): {', '.join(unknown)}")
        if self.stack_size <= 0:
            raise ValueError("stack_size must be positive")


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        success: True if compilation succeeded
        assembly: Generated assembly code
        program: Parsed program (root block and frame)
        token_count: Number of tokens lexed
    """
    filename: str = ""
    success: bool = False
    assembly: str = ""
    program: Optional[Program] = None
    token_count: int = 0


class SeiCompiler:
    """
    Compiler for seic source.

    Example:
        compiler = SeiCompiler()
        result = compiler.compile_file("count.sei")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()
        self.rules = default_rules(builtins=[BUILTINS[name] for name in self.options.builtins])

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile source text to assembly.

        Raises:
            SeiError: If compilation fails
        """
        result = CompilerResult(filename=filename)

        tokens = lex(source, filename)
        result.token_count = len(tokens)
        logger.debug("%s: %d token(s)", filename, len(tokens))

        parser = Parser(
            self.rules,
            filename,
            hoist=self.options.hoist_declarations,
        )
        result.program = parser.parse_tokens(tokens)

        generator = CodeGenerator(
            stack_size=self.options.stack_size,
            emit_comments=self.options.emit_comments,
        )
        result.assembly = generator.generate(result.program)
        result.success = True
        return result

    def compile_file(self, filepath: str) -> CompilerResult:
        """
        Compile a source file to assembly.

        Raises:
            SeiError: If compilation fails
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")
        return self.compile_source(path.read_text(encoding="utf-8"), str(filepath))


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_sei(source: str, filename: str = "<input>") -> str:
    """Compile source text with default options and return the assembly."""
    return SeiCompiler().compile_source(source, filename).assembly

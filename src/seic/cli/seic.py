"""
seic - Compiler Command-Line Interface
======================================

Compiles a seic source file to MIPS-like assembly from the terminal.

Usage Examples
--------------
Print assembly to stdout:
    $ seic count.sei

With output file:
    $ seic count.sei -o count.asm

From stdin:
    $ echo "x sei 1+2;print(x)" | seic -

Inspect the front end:
    $ seic --tokens count.sei
    $ seic --ast count.sei
"""

import logging
from pathlib import Path
from typing import Optional

import click

from seic import __version__
from seic.ast import ASTPrinter
from seic.cli.errors import handle_cli_exception
from seic.compiler import CompilerOptions, SeiCompiler
from seic.lexer import lex

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output assembly file (default: stdout)",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit (for debugging)",
)
@click.option(
    "--stack-size",
    type=click.IntRange(min=1),
    default=1000,
    show_default=True,
    help="Words of operand stack reserved by the preamble",
)
@click.option(
    "--no-comments",
    is_flag=True,
    help="Omit '#' comments from the assembly",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging of rule sweeps)",
)
@click.version_option(version=__version__, prog_name="seic")
def main(
    input_file: Path,
    output: Optional[Path],
    ast: bool,
    tokens: bool,
    stack_size: int,
    no_comments: bool,
    verbose: bool,
) -> None:
    """
    Compile seic source code to MIPS-like assembly.

    INPUT_FILE is the source file to compile, or '-' for stdin.

    \b
    Examples:
        seic count.sei               # Assembly on stdout
        seic count.sei -o count.asm  # Specify output file
        seic --ast count.sei         # Dump the parsed tree
        seic -v count.sei            # Debug logging on stderr
    """
    setup_logging(verbose)

    filename = "<stdin>" if str(input_file) == "-" else str(input_file)
    options = CompilerOptions(
        stack_size=stack_size,
        emit_comments=not no_comments,
    )

    try:
        with click.open_file(str(input_file), encoding="utf-8") as stream:
            source = stream.read()

        if tokens:
            for token in lex(source, filename):
                click.echo(f"{token.location}: {token.kind.name} {token.text}")
            return

        result = SeiCompiler(options).compile_source(source, filename)

        if ast:
            click.echo(ASTPrinter().print(result.program.block))
            return

        if output is None:
            click.echo(result.assembly, nl=False)
        else:
            output.write_text(result.assembly, encoding="utf-8")
            logger.info("Compiled %s -> %s", filename, output)

        logger.debug(
            "%d token(s), %d slot(s)",
            result.token_count, result.program.frame.slot_count,
        )

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()

"""
lispwat - Command-Line Interface
================================

Compiles a source file to a WebAssembly text module.

Usage Examples
--------------
Basic compilation (writes hello.wat):
    $ lispwat hello.lisp

With output file:
    $ lispwat hello.lisp -o main.wat

Inspect the front end:
    $ lispwat --tokens hello.lisp
    $ lispwat --ast hello.lisp
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from lispwat import __version__, compile_source, write_module
from lispwat.ast import ASTPrinter
from lispwat.emitter import EmitterOptions
from lispwat.errors import LispwatError
from lispwat.parser import Parser
from lispwat.scanner import Scanner
from lispwat.tokens import format_tokens

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output module file (default: input.wat)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and stop",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the syntax tree and stop",
)
@click.option(
    "--no-newline",
    is_flag=True,
    help="Do not append a newline to printed strings",
)
@click.option(
    "--entry-point",
    default="_start",
    show_default=True,
    help="Export name of the main function",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.version_option(version=__version__, prog_name="lispwat")
def main(
    input_file: Path,
    output: Optional[Path],
    tokens: bool,
    ast: bool,
    no_newline: bool,
    entry_point: str,
    verbose: bool,
) -> None:
    """
    Compile a lispwat program to WebAssembly text.

    INPUT_FILE is the source file to compile. The result can be run with
    any WASI host, for example after assembling it with wat2wasm.

    \b
    Examples:
        lispwat hello.lisp              # Outputs hello.wat
        lispwat hello.lisp -o main.wat  # Specify output file
        lispwat --ast hello.lisp        # Show the syntax tree
    """
    setup_logging(verbose)

    if output is None:
        output = input_file.with_suffix(".wat")

    options = EmitterOptions(
        string_suffix="" if no_newline else "\n",
        entry_point=entry_point,
    )

    try:
        source = input_file.read_text(encoding="utf-8")

        if tokens:
            click.echo(format_tokens(Scanner(source).tokenize()))
            return

        if ast:
            program = Parser(Scanner(source).tokenize()).parse()
            click.echo(ASTPrinter().print(program))
            return

        text = compile_source(source, options)
        write_module(output, text)

        logger.info("wrote %d bytes to %s", len(text), output)
        click.echo(f"Compiled {input_file} -> {output}")

    except LispwatError as e:
        e.with_filename(str(input_file))
        click.echo(str(e), err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

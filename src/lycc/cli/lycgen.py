"""
lycgen - LYC Back End Command-Line Interface
============================================

Turns a finished RPN program into the compilation artifacts.

Usage Examples
--------------
Basic generation:
    $ lycgen program.rpn

All artifacts:
    $ lycgen program.rpn -o final.asm -l intermediate.txt -s symbols.txt

Without block comments, three decimals in printed numbers:
    $ lycgen --no-comments --digits 3 program.rpn

Input Format
------------
One RPN token per line, or an intermediate code listing whose lines read
``[index] token``.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from lycc import __version__
from lycc.artifacts import write_artifacts
from lycc.cli.errors import handle_cli_exception
from lycc.codegen import AsmGenerator, GeneratorOptions
from lycc.rpn import read_rpn_file

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.ERROR
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
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output assembly file (default: input.asm)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the intermediate code listing",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the symbol table",
)
@click.option(
    "--digits",
    type=click.IntRange(1, 6),
    default=2,
    show_default=True,
    help="Decimals printed by WRITE",
)
@click.option(
    "--no-comments",
    is_flag=True,
    help="Do not annotate instructions with their RPN tokens",
)
@click.option(
    "--allow-placeholders",
    is_flag=True,
    help="Do not reject programs with placeholders outside branch destinations",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="lycgen")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    digits: int,
    no_comments: bool,
    allow_placeholders: bool,
    verbose: bool,
) -> None:
    """
    Generate x87 assembly from an RPN program.

    INPUT_FILE holds the finished intermediate code, one token per line.

    \b
    Examples:
        lycgen prog.rpn                      # Outputs prog.asm
        lycgen prog.rpn -o final.asm         # Specify output file
        lycgen prog.rpn -l inter.txt         # Also write the listing
        lycgen prog.rpn -s symbols.txt       # Also write the symbol table
    """
    setup_logging(verbose)

    if output is None:
        output = input_file.with_suffix(".asm")

    options = GeneratorOptions(
        strict_placeholders=not allow_placeholders,
        fraction_digits=digits,
        emit_comments=not no_comments,
    )

    try:
        if verbose:
            click.echo(f"Reading {input_file}...")

        program = read_rpn_file(input_file)
        result = AsmGenerator(options).generate(program)

        # Nothing is written before generation has succeeded.
        artifacts = {output: result.assembly}
        if listing is not None:
            artifacts[listing] = program.listing()
        if symbols is not None:
            artifacts[symbols] = result.symbols.render()
        write_artifacts(artifacts)

        for warning in result.warnings:
            click.echo(warning, err=True)

        if verbose:
            click.echo(f"Tokens: {len(program)}")
            click.echo(f"Jump targets: {len(result.layout.jump_targets)}")
            click.echo(f"Temporaries: {len(result.temporaries)}")

        click.echo(f"Generated {input_file} -> {output}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()

"""
asm16 - Assembler Front End Command-Line Interface
=================================================

This module implements the command-line interface of the asm16 front end.
It lexes and resolves a source file, prints every diagnostic as it is
reported, and can dump the token stream or write the label table.

Usage Examples
--------------
Check a source file:
    $ asm16 hello.asm

Write the label table:
    $ asm16 hello.asm -s hello.sym

Show the token stream:
    $ asm16 --tokens hello.asm

Verbose mode (informational messages and a summary):
    $ asm16 -v hello.asm

Errors only:
    $ asm16 -q hello.asm
"""

from pathlib import Path
from typing import Optional
import logging

import click

from asm16 import __version__
from asm16.assembler import Assembler
from asm16.cli.errors import handle_cli_exception
from asm16.diagnostics import Diagnostic, Severity

# Logger for this module
logger = logging.getLogger(__name__)


def echo_diagnostic(diagnostic: Diagnostic) -> None:
    """Sink printing each diagnostic to stderr as it is reported."""
    click.echo(str(diagnostic), err=True)


def select_verbosity(verbose: bool, quiet: bool, verbosity: Optional[str]) -> Severity:
    """
    Work out the diagnostic verbosity from the command-line flags.

    An explicit --verbosity wins; otherwise -v means LOG, -q means ERROR
    and the default is WARNING.

    Raises:
        click.BadParameter: If -v and -q are both given
    """
    if verbose and quiet:
        raise click.BadParameter("-v/--verbose and -q/--quiet are mutually exclusive")
    if verbosity is not None:
        return Severity.from_name(verbosity)
    if verbose:
        return Severity.LOG
    if quiet:
        return Severity.ERROR
    return Severity.WARNING


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the label table to a symbol file",
)
@click.option(
    "--tokens", "show_tokens",
    is_flag=True,
    help="Print the token stream",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (informational diagnostics and a summary)",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Report errors only",
)
@click.option(
    "--verbosity",
    type=click.Choice(["none", "error", "warning", "log"], case_sensitive=False),
    default=None,
    help="Highest diagnostic level to report. Overrides -v/-q. "
         "Errors fail the run even when not reported.",
)
@click.version_option(version=__version__, prog_name="asm16")
def main(
    input_file: Path,
    symbols: Optional[Path],
    show_tokens: bool,
    verbose: bool,
    quiet: bool,
    verbosity: Optional[str],
) -> None:
    """
    Check an asm16 source file and build its label table.

    INPUT_FILE is the assembly source file (.asm).

    \b
    Examples:
        asm16 hello.asm                # Check for errors
        asm16 hello.asm -s hello.sym   # Write the label table
        asm16 --tokens hello.asm       # Dump the token stream
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )

    try:
        level = select_verbosity(verbose, quiet, verbosity)
    except click.BadParameter as e:
        handle_cli_exception(e)

    logger.debug(f"Diagnostic verbosity: {level.name}")

    asm = Assembler(verbosity=level, sink=echo_diagnostic)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}")

        result = asm.assemble_file(input_file)

        if show_tokens:
            for token in result.tokens:
                click.echo(repr(token))

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            labels = result.labels
            click.echo(
                f"Defined {len(labels)} labels "
                f"({len(labels.program_labels())} program, {len(labels.data_labels())} data, "
                f"{labels.data_size()} bytes of data)"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()

"""
CLI Error Handling
==================

Maps exceptions raised while running the asm16 command onto a message and
an exit code.

| Exception                          | Exit code      |
|------------------------------------|----------------|
| Asm16Error (failed assembly)       | BUILD_ERROR    |
| click.BadParameter                 | INVALID_ARGS   |
| FileNotFoundError, PermissionError | INVALID_ARGS   |
| anything else                      | INTERNAL_ERROR |

Diagnostics of a failed run have normally been printed already while it
ran. When the verbosity suppressed some of them, the message says how many
and how to see them.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from asm16.errors import Asm16Error, AssemblyFailedError


class ExitCode(IntEnum):
    """Exit codes of the asm16 command."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Source has errors
    INVALID_ARGS = 2     # Invalid arguments or unreadable input
    INTERNAL_ERROR = 3   # Unexpected internal error


def exit_code_for(error: Exception) -> ExitCode:
    """Pick the exit code for an exception."""
    if isinstance(error, Asm16Error):
        return ExitCode.BUILD_ERROR
    if isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        return ExitCode.INVALID_ARGS
    return ExitCode.INTERNAL_ERROR


def format_cli_error(error: Exception, error_type: str | None = None) -> str:
    """
    Render an exception for stderr.

    Args:
        error: The exception that was raised
        error_type: Prefix for asm16 errors (e.g. "Assembly")
    """
    if isinstance(error, Asm16Error):
        prefix = f"{error_type} error: " if error_type else "Error: "
        text = f"{prefix}{error}"
        if isinstance(error, AssemblyFailedError) and error.hidden_count:
            text += "\nhint: rerun with '--verbosity error' to list them"
        return text

    if exit_code_for(error) == ExitCode.INVALID_ARGS:
        return f"Error: {error}"

    return f"Internal error: {error}"


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Print an exception and exit with the matching code.

    Args:
        error: The exception that was raised
        verbose: If True, print the traceback of internal errors
        error_type: Prefix for asm16 errors (e.g. "Assembly")

    Raises:
        SystemExit: Always
    """
    code = exit_code_for(error)
    click.echo(format_cli_error(error, error_type), err=True)
    if code == ExitCode.INTERNAL_ERROR and verbose:
        traceback.print_exc()
    sys.exit(code)

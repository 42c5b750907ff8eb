"""
CLI error reporting and exit codes.

Every failure of ``lycgen`` is routed through handle_cli_exception, which
maps the exception class to an exit code and a message prefix.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from lycc.errors import LyccError, RPNFormatError


class ExitCode(IntEnum):
    """Exit codes of the lycgen tool."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Code generation or symbol table error
    INVALID_ARGS = 2     # Invalid arguments, missing or malformed input
    INTERNAL_ERROR = 3   # Unexpected internal error


# First match wins, so RPNFormatError precedes its LyccError base.
# LyccError text already carries its own "error:" marker.
_ERROR_TABLE = (
    (RPNFormatError, ExitCode.INVALID_ARGS, ""),
    (LyccError, ExitCode.BUILD_ERROR, ""),
    (click.BadParameter, ExitCode.INVALID_ARGS, "Error: "),
    (FileNotFoundError, ExitCode.INVALID_ARGS, "Error: "),
    (PermissionError, ExitCode.INVALID_ARGS, "Error: "),
)


def exit_code_for(error: Exception) -> ExitCode:
    """Exit code that handle_cli_exception uses for error."""
    for error_class, code, _ in _ERROR_TABLE:
        if isinstance(error, error_class):
            return code
    return ExitCode.INTERNAL_ERROR


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception on stderr and exit.

    Unexpected exceptions are reported as internal errors; with verbose
    set, their traceback is printed too.
    """
    for error_class, code, prefix in _ERROR_TABLE:
        if isinstance(error, error_class):
            click.echo(f"{prefix}{error}", err=True)
            sys.exit(code)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)

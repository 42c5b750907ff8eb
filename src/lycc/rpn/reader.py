"""
RPN file reader.

Accepts two layouts:

- one token per line (blank lines ignored)
- an intermediate code listing as written by RPNProgram.listing(),
  where each token line reads ``[index] token``

A whole line is one token, so string literals may contain spaces. Only
the exact listing title and separator lines are skipped; a lone ``-`` is
the subtraction operator.
"""

from pathlib import Path
import re

from lycc.errors import RPNFormatError
from lycc.rpn.program import LISTING_RULE, LISTING_TITLE, RPNProgram
from lycc.rpn.tokens import Token

LISTING_LINE = re.compile(r"^\[(\d+)\]\s?(.*)$")


def read_rpn(text: str, filename: str = "<input>") -> RPNProgram:
    """
    Parse RPN text into a program.

    Raises:
        RPNFormatError: If listing indices are out of sequence or a
                        listing line carries no token
    """
    program = RPNProgram()

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line in (LISTING_TITLE, LISTING_RULE):
            continue

        match = LISTING_LINE.match(line)
        if match:
            index = int(match.group(1))
            if index != len(program):
                raise RPNFormatError(
                    f"listing index [{index}] out of sequence, expected [{len(program)}]",
                    lineno,
                    filename,
                )
            line = match.group(2).strip()
            if not line:
                raise RPNFormatError(f"listing index [{index}] has no token", lineno, filename)

        program.append(Token.from_text(line))

    return program


def read_rpn_file(path) -> RPNProgram:
    """Read an RPN program from a file."""
    path = Path(path)
    return read_rpn(path.read_text(encoding="utf-8"), str(path))

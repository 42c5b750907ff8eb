"""
Layout Analyzer (pass 1)
========================

One left-to-right scan of a finished program that collects:

- the jump target set: every index some branch designates, including
  ``len(program)`` for a jump past the last token
- the operand name set: distinct identifiers and numeric literals
- the string literal set: distinct string literal texts

A branch's destination token is consumed by the branch and never counted
as an operand.
"""

import logging

from lycc.codegen.context import Layout
from lycc.errors import InvalidBranchDestinationError
from lycc.rpn.program import RPNProgram
from lycc.rpn.tokens import Token, TokenKind

logger = logging.getLogger(__name__)


def branch_destination(program: RPNProgram, index: int) -> int:
    """
    Return the destination of the branch at index.

    The destination is the token at index + 1. It must be a non-negative
    integer no greater than the program length (the end label).

    Raises:
        InvalidBranchDestinationError: If the destination is missing,
            unresolved, non-numeric or out of range
    """
    position = program.position(index)

    if index + 1 >= len(program):
        raise InvalidBranchDestinationError(
            "branch has no destination token",
            position=position,
            hint="a branch must be followed by the index it jumps to",
        )

    dest_token = program[index + 1]
    if dest_token.kind is TokenKind.PLACEHOLDER:
        raise InvalidBranchDestinationError(
            f"branch destination at [{index + 1}] is an unresolved placeholder",
            position=position,
            hint="backpatch the placeholder before generating code",
        )

    destination = dest_token.as_destination()
    if destination is None:
        raise InvalidBranchDestinationError(
            f"branch destination '{dest_token.text}' is not a valid index",
            position=position,
        )

    if destination > len(program):
        raise InvalidBranchDestinationError(
            f"branch destination {destination} is beyond the end of the "
            f"program ({len(program)} tokens)",
            position=position,
        )

    return destination


def analyze_layout(program: RPNProgram) -> Layout:
    """
    Scan the program once and collect targets, operands and strings.

    Raises:
        InvalidBranchDestinationError: For any malformed branch destination
    """
    targets: set[int] = set()
    operands: dict[tuple[TokenKind, str], Token] = {}
    strings: dict[str, None] = {}

    i = 0
    while i < len(program):
        token = program[i]

        if token.kind is TokenKind.BRANCH:
            targets.add(branch_destination(program, i))
            i += 2
            continue

        if token.kind is TokenKind.STRING:
            strings.setdefault(token.text, None)
        elif token.kind in (TokenKind.IDENTIFIER, TokenKind.NUMBER):
            operands.setdefault((token.kind, token.text), token)

        i += 1

    layout = Layout(
        jump_targets=frozenset(targets),
        operands=list(operands.values()),
        strings=list(strings),
    )
    logger.debug(
        "Layout: %d jump targets, %d operands, %d strings",
        len(layout.jump_targets), len(layout.operands), len(layout.strings),
    )
    return layout

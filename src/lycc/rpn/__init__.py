"""
Intermediate Representation
===========================

Tokens and the append/backpatch RPN program that every code generation
pass reads.

>>> from lycc.rpn import RPNProgram
>>> program = RPNProgram.from_texts(["3", "4", "+"])
>>> print(program.listing())
"""

from lycc.rpn.tokens import (
    Token,
    TokenKind,
    ArithmeticOp,
    BranchKind,
    PLACEHOLDER_TEXT,
)
from lycc.rpn.program import RPNProgram
from lycc.rpn.reader import read_rpn, read_rpn_file

__all__ = [
    "Token",
    "TokenKind",
    "ArithmeticOp",
    "BranchKind",
    "PLACEHOLDER_TEXT",
    "RPNProgram",
    "read_rpn",
    "read_rpn_file",
]

"""
Temporary Discoverer (pass 2)
=============================

The target requires every temporary to be declared in the data segment
before the code that uses it, so this pass replays the evaluation of the
program on a symbolic stack and records which temporaries the code
emitter will allocate, and in which order.

Stack Effects
-------------
| Token          | Pops                          | Pushes      |
|----------------|-------------------------------|-------------|
| + * /          | 2 (or what is available)      | temporary   |
| -              | 2, or 1 when only 1 available | temporary   |
| NEG            | 1                             | temporary   |
| := CMP         | 2 (skipped if fewer)          | -           |
| WRITE READ     | 1 if available                | -           |
| BLE ... BI     | - (destination skipped)       | -           |
| operands       | -                             | operand     |

Malformed programs are not diagnosed here; the emitter reports them.
"""

import logging

from lycc.codegen.naming import temporary_label
from lycc.rpn.program import RPNProgram
from lycc.rpn.tokens import TokenKind

logger = logging.getLogger(__name__)

_OPERAND = object()


def discover_temporaries(program: RPNProgram) -> list[str]:
    """
    Dry-run the program and return the temporary labels it will need.

    Labels are numbered from 1 in the order they are produced.
    """
    stack: list[object] = []
    temporaries: list[str] = []

    i = 0
    while i < len(program):
        token = program[i]
        kind = token.kind

        if kind is TokenKind.ARITHMETIC:
            # Binary when two values are available, otherwise the single
            # remaining value is consumed (unary minus fallback).
            arity = 2 if len(stack) >= 2 else 1
            del stack[-arity:]
            temp = temporary_label(len(temporaries) + 1)
            temporaries.append(temp)
            stack.append(temp)
        elif kind is TokenKind.NEGATE:
            del stack[-1:]
            temp = temporary_label(len(temporaries) + 1)
            temporaries.append(temp)
            stack.append(temp)
        elif kind in (TokenKind.ASSIGN, TokenKind.COMPARE):
            if len(stack) >= 2:
                del stack[-2:]
        elif kind is TokenKind.BRANCH:
            i += 2
            continue
        elif kind in (TokenKind.WRITE, TokenKind.READ):
            del stack[-1:]
        elif token.is_operand():
            stack.append(_OPERAND)

        i += 1

    logger.debug("Discovered %d temporaries", len(temporaries))
    return temporaries

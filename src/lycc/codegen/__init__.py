"""
Code Generation
===============

Three passes over a finished RPN program:

1. layout      - jump targets, operands, string literals
2. temporaries - dry run that names every temporary in allocation order
3. emitter     - data segment and x87 instructions

>>> from lycc.codegen import generate_asm
>>> from lycc.rpn import RPNProgram
>>> print(generate_asm(RPNProgram.from_texts(['"hola"', "WRITE"])))
"""

from lycc.codegen.context import GenerationContext, GeneratorOptions, Layout
from lycc.codegen.layout import analyze_layout, branch_destination
from lycc.codegen.temporaries import discover_temporaries
from lycc.codegen.emitter import CodeEmitter, OperandRef
from lycc.codegen.generator import AsmGenerator, GenerationResult, generate_asm
from lycc.codegen.naming import normalize_number

__all__ = [
    "GenerationContext",
    "GeneratorOptions",
    "Layout",
    "analyze_layout",
    "branch_destination",
    "discover_temporaries",
    "CodeEmitter",
    "OperandRef",
    "AsmGenerator",
    "GenerationResult",
    "generate_asm",
    "normalize_number",
]

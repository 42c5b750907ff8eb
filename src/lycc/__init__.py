"""
LYC Compiler Back End
=====================

This package implements the back half of the LYC teaching compiler: it
turns the finished intermediate representation produced by the parser
(a flat reverse-Polish token sequence) into

- an intermediate code listing,
- an x87 floating-point assembly program for DOS, and
- the compilation's symbol table listing.

Pipeline
--------
    parser → RPNProgram (append / backpatch)
           → Layout Analyzer → Temporary Discoverer → Code Emitter
           → assembly text + symbol table updates

Usage
-----
>>> from lycc import RPNProgram, AsmGenerator
>>> program = RPNProgram()
>>> program.append("x"); program.append("0"); program.append("CMP")
>>> program.append("BLE")
>>> hole = program.append("_PLHDR")
>>> program.append('"positive"'); program.append("WRITE")
>>> program.backpatch(hole, program.next_index)
>>> print(AsmGenerator().generate(program).assembly)

Or from the command line:
    $ lycgen program.rpn -o final.asm -l intermediate.txt -s symbols.txt
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from lycc.errors import (
    LyccError,
    RPNPosition,
    RPNError,
    RPNFormatError,
    BackpatchRangeError,
    CodeGenError,
    StackUnderflowError,
    InvalidBranchDestinationError,
    UnresolvedPlaceholderError,
    UnmappedBranchKindError,
    TemporaryMismatchError,
    LabelCollisionError,
    SymbolTableError,
    DuplicateDeclarationError,
    WarningCollector,
)
from lycc.rpn import (
    Token,
    TokenKind,
    ArithmeticOp,
    BranchKind,
    RPNProgram,
    read_rpn,
    read_rpn_file,
)
from lycc.symbols import SymbolTable, SymbolType, SymbolEntry
from lycc.codegen import (
    AsmGenerator,
    GenerationResult,
    GeneratorOptions,
    generate_asm,
)

__all__ = [
    "__version__",
    # Errors
    "LyccError",
    "RPNPosition",
    "RPNError",
    "RPNFormatError",
    "BackpatchRangeError",
    "CodeGenError",
    "StackUnderflowError",
    "InvalidBranchDestinationError",
    "UnresolvedPlaceholderError",
    "UnmappedBranchKindError",
    "TemporaryMismatchError",
    "LabelCollisionError",
    "SymbolTableError",
    "DuplicateDeclarationError",
    "WarningCollector",
    # Intermediate representation
    "Token",
    "TokenKind",
    "ArithmeticOp",
    "BranchKind",
    "RPNProgram",
    "read_rpn",
    "read_rpn_file",
    # Symbol table
    "SymbolTable",
    "SymbolType",
    "SymbolEntry",
    # Code generation
    "AsmGenerator",
    "GenerationResult",
    "GeneratorOptions",
    "generate_asm",
]

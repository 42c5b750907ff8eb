"""
Per-run generation state.

A GenerationContext is built fresh for every generate() call and carries
everything the three passes accumulate: the layout found by pass 1, the
temporaries found by pass 2, and the output and counters of pass 3.
Nothing survives from one run to the next.
"""

from dataclasses import dataclass, field
from typing import Optional

from lycc.errors import WarningCollector
from lycc.rpn.program import RPNProgram
from lycc.rpn.tokens import Token
from lycc.symbols import SymbolTable


@dataclass
class GeneratorOptions:
    """
    Code generator configuration.

    Attributes:
        strict_placeholders: Refuse programs that still hold placeholders
                             before any pass runs.
        fraction_digits: Fixed number of decimals printed by WRITE (1-6).
        emit_comments: Annotate each instruction block with its RPN token.
        max_string_length: String literals longer than this are reported.
    """
    strict_placeholders: bool = True
    fraction_digits: int = 2
    emit_comments: bool = True
    max_string_length: int = 256

    def __post_init__(self):
        if not 1 <= self.fraction_digits <= 6:
            raise ValueError(f"fraction_digits must be between 1 and 6, got {self.fraction_digits}")


@dataclass
class Layout:
    """
    Result of the layout pass.

    Attributes:
        jump_targets: RPN indices that receive a label
        operands: Distinct identifier and number tokens, first-seen order
        strings: Distinct string literal texts (quoted), first-seen order
    """
    jump_targets: frozenset[int] = frozenset()
    operands: list[Token] = field(default_factory=list)
    strings: list[str] = field(default_factory=list)


@dataclass
class GenerationContext:
    """
    State of one generation run.

    Attributes:
        program: The finished RPN program being translated
        options: Generator configuration
        symbols: Symbol table receiving constants and temporaries
        warnings: Non-fatal diagnostics for this run
        layout: Filled in by the layout pass
        temporaries: Temporary labels predicted by discovery, in order
        temp_counter: Temporaries allocated so far by emission
        lines: Assembly output
        string_labels: Literal content -> data label
        string_slots: Variables that were assigned a string address
        defined_labels: Target labels written so far
        referenced_labels: Target labels used by jumps
        needs_runtime: A numeric WRITE requires the print routines
    """
    program: RPNProgram
    options: GeneratorOptions = field(default_factory=GeneratorOptions)
    symbols: SymbolTable = field(default_factory=SymbolTable)
    warnings: WarningCollector = field(default_factory=WarningCollector)

    layout: Optional[Layout] = None
    temporaries: list[str] = field(default_factory=list)

    temp_counter: int = 0
    lines: list[str] = field(default_factory=list)
    string_labels: dict[str, str] = field(default_factory=dict)
    string_slots: set[str] = field(default_factory=set)
    defined_labels: set[str] = field(default_factory=set)
    referenced_labels: set[str] = field(default_factory=set)
    needs_runtime: bool = False

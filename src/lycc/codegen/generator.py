"""
Assembly Generator
==================

Runs the three code generation passes over a finished RPN program:

    RPN program → Layout Analyzer → Temporary Discoverer → Code Emitter → assembly

The passes must run in this order: discovery needs nothing from layout,
but emission needs both the jump targets and string set from layout and
the temporaries from discovery to declare the data segment.

Each call to generate() builds a fresh GenerationContext, so one
AsmGenerator can translate any number of unrelated programs.

Usage
-----
>>> from lycc.rpn import RPNProgram
>>> from lycc.codegen import AsmGenerator
>>> program = RPNProgram.from_texts(["3", "4", "+", "x", ":="])
>>> result = AsmGenerator().generate(program)
>>> print(result.assembly)
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from lycc.codegen.context import GenerationContext, GeneratorOptions, Layout
from lycc.codegen.emitter import CodeEmitter, OperandRef
from lycc.codegen.layout import analyze_layout
from lycc.codegen.temporaries import discover_temporaries
from lycc.errors import UnresolvedPlaceholderError
from lycc.rpn.program import RPNProgram
from lycc.symbols import SymbolTable

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """
    Result of one generation run.

    Attributes:
        assembly: Complete assembly source
        layout: Jump targets, operands and strings found by pass 1
        temporaries: Temporary labels, in allocation order
        symbols: Symbol table updated with constants and temporaries
        warnings: Non-fatal diagnostics
        final_stack: Evaluation stack left after the last token
    """
    assembly: str
    layout: Layout
    temporaries: list[str]
    symbols: SymbolTable
    warnings: list[str] = field(default_factory=list)
    final_stack: tuple[OperandRef, ...] = ()


class AsmGenerator:
    """
    Translates finished RPN programs to x87 assembly.

    Example:
        gen = AsmGenerator(GeneratorOptions(fraction_digits=3))
        result = gen.generate(program)
        Path("final.asm").write_text(result.assembly)

    Attributes:
        options: Generator configuration
    """

    def __init__(self, options: Optional[GeneratorOptions] = None):
        self.options = options or GeneratorOptions()

    def generate(self, program: RPNProgram, symbols: Optional[SymbolTable] = None) -> GenerationResult:
        """
        Generate assembly for a program.

        Args:
            program: Finished RPN program
            symbols: Symbol table to update (a new one if None)

        Returns:
            GenerationResult with the assembly text

        Raises:
            CodeGenError: If the program cannot be translated; no
                          output is produced in that case
        """
        ctx = GenerationContext(
            program=program,
            options=self.options,
            symbols=symbols if symbols is not None else SymbolTable(),
        )

        if self.options.strict_placeholders:
            pending = program.placeholders()
            if pending:
                raise UnresolvedPlaceholderError(pending)

        ctx.layout = analyze_layout(program)
        ctx.temporaries = discover_temporaries(program)

        emitter = CodeEmitter(ctx)
        assembly = emitter.emit()

        logger.debug(
            "Generated %d lines for %d tokens (%d temporaries, %d labels)",
            len(ctx.lines), len(program), len(ctx.temporaries), len(ctx.defined_labels),
        )

        return GenerationResult(
            assembly=assembly,
            layout=ctx.layout,
            temporaries=list(ctx.temporaries),
            symbols=ctx.symbols,
            warnings=list(program.warnings.warnings) + list(ctx.warnings.warnings),
            final_stack=emitter.stack,
        )


def generate_asm(program: RPNProgram, options: Optional[GeneratorOptions] = None) -> str:
    """
    Generate assembly for a program with default settings.

    Convenience wrapper around AsmGenerator.generate().
    """
    return AsmGenerator(options).generate(program).assembly

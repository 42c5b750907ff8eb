"""
Code Emitter (pass 3)
=====================

Final scan of the program. Operands are pushed onto a virtual evaluation
stack of operand references; every operator pops its operands from that
stack and emits x87 code against them. Results of arithmetic are stored
in the temporaries predicted by the discovery pass.

Generated Code
--------------
| RPN                | Assembly                                   |
|--------------------|--------------------------------------------|
| a b +              | FLD a / FLD b / FADD / FSTP @Tn            |
| a -  (one operand) | FLD a / FCHS / FSTP @Tn                    |
| src dst :=         | FLD src / FSTP dst                         |
| "s" dst :=         | MOV AX, OFFSET s / MOV WORD PTR dst, AX    |
| a b CMP            | FLD a / FCOMP b / FSTSW AX / SAHF          |
| BLT 12             | JB L12                                     |
| a WRITE            | FLD a / CALL PRINT_FLOAT / newline         |
| "s" WRITE          | MOV DX, OFFSET s / MOV AH, 09h / INT 21h   |

Every index that is a jump target gets an ``L<index>:`` label before
its code, including the index just past the last token.

The output is assembled in memory; nothing is written unless the whole
program translates.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from lycc.codegen import x86
from lycc.codegen.context import GenerationContext
from lycc.codegen.layout import branch_destination
from lycc.codegen.naming import (
    constant_label,
    is_integer_literal,
    normalize_number,
    string_label,
    temporary_label,
    variable_label,
)
from lycc.errors import (
    CodeGenError,
    LabelCollisionError,
    RPNPosition,
    StackUnderflowError,
    TemporaryMismatchError,
)
from lycc.rpn.tokens import ArithmeticOp, Token, TokenKind
from lycc.symbols import SymbolType

logger = logging.getLogger(__name__)

FPU_OPERATIONS = {
    ArithmeticOp.ADD: "FADD",
    ArithmeticOp.SUB: "FSUB",
    ArithmeticOp.MUL: "FMUL",
    ArithmeticOp.DIV: "FDIV",
}


@dataclass(frozen=True)
class OperandRef:
    """A value on the evaluation stack: its data label and whether it is a string."""
    label: str
    is_string: bool = False


class CodeEmitter:
    """
    Emits the assembly program for a context prepared by passes 1 and 2.

    Example:
        ctx = GenerationContext(program)
        ctx.layout = analyze_layout(program)
        ctx.temporaries = discover_temporaries(program)
        asm = CodeEmitter(ctx).emit()
    """

    def __init__(self, ctx: GenerationContext):
        if ctx.layout is None:
            raise CodeGenError("layout pass has not run")
        self._ctx = ctx
        self._layout = ctx.layout
        self._stack: list[OperandRef] = []
        self._code: list[str] = []

    @property
    def stack(self) -> tuple[OperandRef, ...]:
        """Evaluation stack left after emit()."""
        return tuple(self._stack)

    def emit(self) -> str:
        """
        Translate the program and return the assembly text.

        Raises:
            StackUnderflowError: An operator lacks operands
            InvalidBranchDestinationError: A branch destination is unusable
            UnmappedBranchKindError: A branch kind has no jump instruction
            TemporaryMismatchError: Emission disagrees with discovery
            LabelCollisionError: Two operands sanitize to one data label
        """
        self._intern_strings()
        self._emit_code()
        self._check_labels()

        lines = self._ctx.lines
        lines.clear()
        lines.extend(self._header())
        lines.extend(self._data_section())
        lines.append("")
        lines.extend(self._code)
        return "\n".join(lines) + "\n"

    # =========================================================================
    # Output Helpers
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        self._code.append(line)

    def _emit_comment(self, comment: str) -> None:
        self._emit(f"; {comment}")

    def _emit_label(self, label: str) -> None:
        self._emit(f"{label}:")

    def _emit_instruction(self, mnemonic: str, operand: str = "") -> None:
        self._emit(x86.instruction(mnemonic, operand))

    def _warn(self, message: str, position: Optional[RPNPosition] = None) -> None:
        self._ctx.warnings.add(message, position)
        if position is not None:
            logger.warning("%s: %s", position, message)
        else:
            logger.warning("%s", message)

    # =========================================================================
    # Header and Data Section
    # =========================================================================

    def _header(self) -> list[str]:
        lines = [
            "; " + "=" * 70,
            "; LYC generated assembly (x87 FPU, DOS)",
            "; " + "=" * 70,
            "",
        ]
        lines.extend(x86.HEADER)
        lines.append("")
        return lines

    def _intern_strings(self) -> None:
        """Give each distinct string literal one label."""
        max_length = self._ctx.options.max_string_length
        for raw in self._layout.strings:
            content = raw[1:-1]
            self._ctx.string_labels[raw] = string_label(content)
            if len(content) > max_length:
                self._warn(f"string literal longer than {max_length} characters: {raw[:20]}...")
            if x86.STRING_TERMINATOR in content:
                self._warn(
                    f"string literal {raw} contains '{x86.STRING_TERMINATOR}'; "
                    "output stops at its first occurrence"
                )

    def _data_section(self) -> list[str]:
        """
        Declare operands, temporaries and strings, registering each symbol.

        Raises:
            LabelCollisionError: Two different operands share a label
        """
        ctx = self._ctx
        symbols = ctx.symbols
        owners: dict[str, tuple[str, str]] = {}
        lines = [x86.DATA_SECTION]

        # Constants are owned by their normalized value, so 5 and 5.0 share
        # one declaration while an identifier never shares with a constant.
        def declare(label: str, width: str, value: str, owner: tuple[str, str]) -> None:
            previous = owners.get(label)
            if previous is not None:
                if previous != owner:
                    raise LabelCollisionError(label, previous[1], owner[1])
                return
            owners[label] = owner
            lines.append(x86.data_line(label, width, value))

        for token in self._layout.operands:
            if token.kind is TokenKind.NUMBER:
                label = constant_label(token.text)
                value = normalize_number(token.text)
                declare(label, x86.FLOAT_WIDTH, value, ("constant", value))
                sym_type = SymbolType.INTEGER if is_integer_literal(token.text) else SymbolType.FLOAT
                symbols.upsert(label, sym_type, token.text)
            else:
                declare(variable_label(token.text), x86.FLOAT_WIDTH, "0.0", ("variable", token.text))
                symbols.upsert(token.text)

        for temp in ctx.temporaries:
            declare(temp, x86.FLOAT_WIDTH, "0.0", ("temporary", temp))
            symbols.upsert(temp)

        for raw, label in ctx.string_labels.items():
            payload = raw[1:-1].replace('"', '""')
            declare(label, x86.BYTE_WIDTH, f'"{payload}{x86.STRING_TERMINATOR}"', ("string", raw))
            symbols.upsert(label, SymbolType.STRING, raw)

        if ctx.needs_runtime:
            for label, width, value in x86.runtime_data(ctx.options.fraction_digits):
                declare(label, width, value, ("runtime", label))

        declare(x86.NEWLINE_LABEL, x86.BYTE_WIDTH, x86.NEWLINE_VALUE, ("runtime", "newline buffer"))
        return lines

    # =========================================================================
    # Code Section
    # =========================================================================

    def _emit_code(self) -> None:
        program = self._ctx.program

        self._emit(x86.CODE_SECTION)
        self._emit_label(x86.ENTRY_LABEL)
        for mnemonic, operand in x86.ENTRY:
            self._emit_instruction(mnemonic, operand)
        self._emit()

        i = 0
        while i < len(program):
            self._bind_label(i)
            token = program[i]

            if token.kind is TokenKind.BRANCH:
                self._generate_branch(token, i)
                # The destination slot can itself be a target.
                self._bind_label(i + 1)
                i += 2
                continue

            position = program.position(i)
            if self._ctx.options.emit_comments and not token.is_operand():
                self._emit_comment(str(position))
            self._generate_token(token, position)
            i += 1

        self._bind_label(len(program))
        self._emit()
        for mnemonic, operand in x86.EXIT:
            self._emit_instruction(mnemonic, operand)

        if self._ctx.needs_runtime:
            self._emit()
            self._code.extend(x86.runtime_routines(self._ctx.options.fraction_digits))

        self._emit()
        self._emit(f"END {x86.ENTRY_LABEL}")

    def _bind_label(self, index: int) -> None:
        if index in self._layout.jump_targets:
            label = x86.target_label(index)
            if label not in self._ctx.defined_labels:
                self._ctx.defined_labels.add(label)
                self._emit_label(label)

    def _generate_token(self, token: Token, position: RPNPosition) -> None:
        kind = token.kind

        if kind is TokenKind.IDENTIFIER:
            self._stack.append(OperandRef(variable_label(token.text)))
        elif kind is TokenKind.NUMBER:
            self._stack.append(OperandRef(constant_label(token.text)))
        elif kind is TokenKind.STRING:
            self._stack.append(OperandRef(self._ctx.string_labels[token.text], is_string=True))
        elif kind is TokenKind.ARITHMETIC:
            self._generate_arithmetic(token, position)
        elif kind is TokenKind.NEGATE:
            operand = self._pop(token, 1, position)[0]
            self._generate_negation(operand, position)
        elif kind is TokenKind.ASSIGN:
            self._generate_assign(token, position)
        elif kind is TokenKind.COMPARE:
            self._generate_compare(token, position)
        elif kind is TokenKind.WRITE:
            self._generate_write(token, position)
        elif kind is TokenKind.READ:
            target = self._pop(token, 1, position)[0]
            self._emit_comment(f"READ {target.label}: input is provided externally")
        elif kind is TokenKind.PLACEHOLDER:
            self._warn("placeholder outside a branch destination ignored", position)
        else:
            raise CodeGenError(f"unhandled token kind {kind.name}", position=position)

        if self._ctx.options.emit_comments and token.is_operator():
            self._emit()

    def _pop(self, token: Token, count: int, position: RPNPosition) -> list[OperandRef]:
        """Pop count operands, returned in push order."""
        if len(self._stack) < count:
            raise StackUnderflowError(token.text, count, len(self._stack), position)
        popped = self._stack[-count:]
        del self._stack[-count:]
        return popped

    def _new_temporary(self, position: RPNPosition) -> OperandRef:
        """Allocate the next temporary, which discovery must have predicted."""
        ctx = self._ctx
        ctx.temp_counter += 1
        label = temporary_label(ctx.temp_counter)
        expected = (
            ctx.temporaries[ctx.temp_counter - 1]
            if ctx.temp_counter <= len(ctx.temporaries)
            else None
        )
        if expected != label:
            raise TemporaryMismatchError(expected, label, position)
        return OperandRef(label)

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def _generate_arithmetic(self, token: Token, position: RPNPosition) -> None:
        if len(self._stack) < 2 and token.op is ArithmeticOp.SUB and self._stack:
            self._warn("'-' with a single operand treated as unary minus", position)
            self._generate_negation(self._stack.pop(), position)
            return

        lhs, rhs = self._pop(token, 2, position)
        self._emit_instruction("FLD", lhs.label)
        self._emit_instruction("FLD", rhs.label)
        self._emit_instruction(FPU_OPERATIONS[token.op])
        result = self._new_temporary(position)
        self._emit_instruction("FSTP", result.label)
        self._stack.append(result)

    def _generate_negation(self, operand: OperandRef, position: RPNPosition) -> None:
        self._emit_instruction("FLD", operand.label)
        self._emit_instruction("FCHS")
        result = self._new_temporary(position)
        self._emit_instruction("FSTP", result.label)
        self._stack.append(result)

    def _generate_assign(self, token: Token, position: RPNPosition) -> None:
        # The destination was pushed last.
        src, dst = self._pop(token, 2, position)
        if src.is_string:
            self._emit_instruction("MOV", f"AX, OFFSET {src.label}")
            self._emit_instruction("MOV", f"WORD PTR {dst.label}, AX")
            self._ctx.string_slots.add(dst.label)
        else:
            self._emit_instruction("FLD", src.label)
            self._emit_instruction("FSTP", dst.label)

    def _generate_compare(self, token: Token, position: RPNPosition) -> None:
        lhs, rhs = self._pop(token, 2, position)
        self._emit_instruction("FLD", lhs.label)
        self._emit_instruction("FCOMP", rhs.label)
        self._emit_instruction("FSTSW", "AX")
        self._emit_instruction("SAHF")

    def _generate_branch(self, token: Token, index: int) -> None:
        program = self._ctx.program
        position = program.position(index)
        label = x86.target_label(branch_destination(program, index))

        if self._ctx.options.emit_comments:
            self._emit_comment(f"{position} {program[index + 1].text}")
        self._emit_instruction(x86.jump_mnemonic(token.branch, position), label)
        self._ctx.referenced_labels.add(label)
        if self._ctx.options.emit_comments:
            self._emit()

    def _generate_write(self, token: Token, position: RPNPosition) -> None:
        value = self._pop(token, 1, position)[0]

        if value.is_string:
            self._emit_print_string(f"OFFSET {value.label}")
        elif value.label in self._ctx.string_slots:
            self._emit_print_string(f"WORD PTR {value.label}")
        else:
            self._emit_instruction("FLD", value.label)
            self._emit_instruction("CALL", x86.PRINT_FLOAT)
            self._ctx.needs_runtime = True

        self._emit_print_string(f"OFFSET {x86.NEWLINE_LABEL}")

    def _emit_print_string(self, address: str) -> None:
        self._emit_instruction("MOV", f"DX, {address}")
        self._emit_instruction("MOV", "AH, 09h")
        self._emit_instruction("INT", "21h")

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def _check_labels(self) -> None:
        ctx = self._ctx
        for label in sorted(ctx.defined_labels - ctx.referenced_labels):
            ctx.warnings.add(f"label {label} is defined but never referenced")
            logger.warning("label %s is defined but never referenced", label)
        missing = ctx.referenced_labels - ctx.defined_labels
        if missing:
            raise CodeGenError(f"jump to undefined label(s): {', '.join(sorted(missing))}")

"""
x86 / x87 Target Description
============================

Tables and fixed text for the target: a 16-bit DOS program (MASM/TASM
syntax) that evaluates every expression on the x87 floating-point
coprocessor and keeps all values in a flat, statically sized data
segment.

Conventions
-----------
- Numbers and temporaries are 32-bit reals (``dd``).
- Strings are ``db`` bytes terminated by ``$`` and printed with
  INT 21h / AH=09h.
- CMP leaves the FPU status in the CPU flags (FSTSW AX / SAHF), so the
  conditional jumps are the unsigned ones (JB, JA, ...).

Branch Table
------------
| RPN | Condition      | Jump |
|-----|----------------|------|
| BLE | a <= b         | JNA  |
| BGE | a >= b         | JAE  |
| BLT | a <  b         | JB   |
| BGT | a >  b         | JA   |
| BEQ | a == b         | JE   |
| BNE | a != b         | JNE  |
| BI  | always         | JMP  |
"""

from typing import Optional

from lycc.errors import RPNPosition, UnmappedBranchKindError
from lycc.rpn.tokens import BranchKind


# =============================================================================
# Jump Instructions
# =============================================================================

JUMP_INSTRUCTIONS: dict[BranchKind, str] = {
    BranchKind.LE: "JNA",
    BranchKind.GE: "JAE",
    BranchKind.LT: "JB",
    BranchKind.GT: "JA",
    BranchKind.EQ: "JE",
    BranchKind.NE: "JNE",
    BranchKind.ALWAYS: "JMP",
}


def jump_mnemonic(kind: BranchKind, position: Optional[RPNPosition] = None) -> str:
    """
    Return the jump mnemonic for a branch kind.

    Raises:
        UnmappedBranchKindError: If kind has no mnemonic
    """
    mnemonic = JUMP_INSTRUCTIONS.get(kind)
    if mnemonic is None:
        raise UnmappedBranchKindError(kind, position)
    return mnemonic


def target_label(index: int) -> str:
    """Label bound to an RPN index."""
    return f"L{index}"


def instruction(mnemonic: str, operand: str = "") -> str:
    """Format an instruction line."""
    if operand:
        return f"        {mnemonic:<8}{operand}"
    return f"        {mnemonic}"


# =============================================================================
# Program Skeleton
# =============================================================================

HEADER = [
    ".MODEL LARGE",
    ".386",
    ".STACK 200h",
]

DATA_SECTION = ".DATA"
CODE_SECTION = ".CODE"
ENTRY_LABEL = "START"

ENTRY = [
    ("MOV", "AX, @DATA"),
    ("MOV", "DS, AX"),
    ("MOV", "ES, AX"),
    ("FINIT", ""),
]

EXIT = [
    ("MOV", "AX, 4C00h"),
    ("INT", "21h"),
]

FLOAT_WIDTH = "dd"
BYTE_WIDTH = "db"
WORD_WIDTH = "dw"

NEWLINE_LABEL = "_NEWLINE"
STRING_TERMINATOR = "$"
NEWLINE_VALUE = f'0DH,0AH,"{STRING_TERMINATOR}"'

LABEL_COLUMN = 20
WIDTH_COLUMN = 5


def data_line(label: str, width: str, value: str) -> str:
    """Format one data-segment declaration."""
    return f"{label:<{LABEL_COLUMN}} {width:<{WIDTH_COLUMN}} {value}"


# =============================================================================
# Runtime Support
# =============================================================================

PRINT_FLOAT = "PRINT_FLOAT"
PRINT_INT = "PRINT_INT"

# DOS character output: DL = character
_PUT_CHAR = [("MOV", "AH, 02h"), ("INT", "21h")]


def runtime_data(fraction_digits: int) -> list[tuple[str, str, str]]:
    """Data declarations used by the print routines."""
    return [
        ("@INT_PART", FLOAT_WIDTH, "0"),
        ("@FRAC_PART", FLOAT_WIDTH, "0"),
        ("@FRAC_SCALE", FLOAT_WIDTH, f"{10 ** fraction_digits}.0"),
        ("@CW_TRUNC", WORD_WIDTH, "0F7Fh"),
        ("@CW_DEFAULT", WORD_WIDTH, "037Fh"),
    ]


def _procedure(name: str, description: str, body: list) -> list[str]:
    lines = [
        "; " + "-" * 60,
        f"; {name}: {description}",
        "; " + "-" * 60,
        f"{name} PROC NEAR",
    ]
    for item in body:
        if isinstance(item, str):
            lines.append(f"{item}:")
        else:
            lines.append(instruction(*item))
    lines.append(f"{name} ENDP")
    return lines


def runtime_routines(fraction_digits: int) -> list[str]:
    """
    Return the PRINT_FLOAT and PRINT_INT procedures.

    PRINT_FLOAT prints and pops ST(0) as ``[-]<int>.<frac>`` with
    fraction_digits fixed digits, truncating toward zero. PRINT_INT
    prints the signed value in EAX by repeated division by ten.
    """
    print_float = [
        ("FTST", ""),
        ("FSTSW", "AX"),
        ("SAHF", ""),
        ("JAE", "@PF_POSITIVE"),
        ("MOV", "DL, '-'"),
        *_PUT_CHAR,
        ("FABS", ""),
        "@PF_POSITIVE",
        ("FLDCW", "@CW_TRUNC"),
        ("FLD", "ST(0)"),
        ("FISTP", "@INT_PART"),
        ("FILD", "@INT_PART"),
        ("FSUB", ""),
        ("FMUL", "@FRAC_SCALE"),
        ("FISTP", "@FRAC_PART"),
        ("FLDCW", "@CW_DEFAULT"),
        ("MOV", "EAX, @INT_PART"),
        ("CALL", PRINT_INT),
        ("MOV", "DL, '.'"),
        *_PUT_CHAR,
        # fixed-width fraction: split exactly fraction_digits digits
        ("MOV", "EAX, @FRAC_PART"),
        ("MOV", f"CX, {fraction_digits}"),
        ("MOV", "EBX, 10"),
        "@PF_SPLIT",
        ("XOR", "EDX, EDX"),
        ("DIV", "EBX"),
        ("PUSH", "DX"),
        ("LOOP", "@PF_SPLIT"),
        ("MOV", f"CX, {fraction_digits}"),
        "@PF_EMIT",
        ("POP", "DX"),
        ("ADD", "DL, '0'"),
        *_PUT_CHAR,
        ("LOOP", "@PF_EMIT"),
        ("RET", ""),
    ]

    print_int = [
        ("TEST", "EAX, EAX"),
        ("JNS", "@PI_POSITIVE"),
        ("PUSH", "EAX"),
        ("MOV", "DL, '-'"),
        *_PUT_CHAR,
        ("POP", "EAX"),
        ("NEG", "EAX"),
        "@PI_POSITIVE",
        ("XOR", "CX, CX"),
        ("MOV", "EBX, 10"),
        "@PI_SPLIT",
        ("XOR", "EDX, EDX"),
        ("DIV", "EBX"),
        ("PUSH", "DX"),
        ("INC", "CX"),
        ("TEST", "EAX, EAX"),
        ("JNZ", "@PI_SPLIT"),
        "@PI_EMIT",
        ("POP", "DX"),
        ("ADD", "DL, '0'"),
        *_PUT_CHAR,
        ("LOOP", "@PI_EMIT"),
        ("RET", ""),
    ]

    return (
        _procedure(PRINT_FLOAT, "print ST(0) as [-]int.frac and pop it", print_float)
        + [""]
        + _procedure(PRINT_INT, "print the signed integer in EAX", print_int)
    )

"""
LYC Back End Error Hierarchy
============================

This module defines the exception hierarchy for the code generation back
end. All exceptions inherit from LyccError, allowing callers to catch every
back-end failure with a single except clause.

Exception Hierarchy
-------------------
LyccError (base)
├── RPNError (intermediate representation)
│   └── BackpatchRangeError - patch index outside the program
├── RPNFormatError - malformed RPN input file
├── CodeGenError (assembly generation)
│   ├── StackUnderflowError - operator found too few operands
│   ├── InvalidBranchDestinationError - missing/non-numeric/out of range target
│   ├── UnresolvedPlaceholderError - placeholder left in the program
│   ├── UnmappedBranchKindError - branch kind without a jump mnemonic
│   └── TemporaryMismatchError - discovery and emission disagree
└── SymbolTableError
    └── DuplicateDeclarationError - identifier typed twice

Error Message Format
--------------------
Errors that refer to a program position are printed as:

    [12] BLT: error: branch destination '_PLHDR' is not a resolved index
    hint: backpatch the placeholder before generating code

The position is the RPN index and the token text found there.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Position Tracking
# =============================================================================

@dataclass(frozen=True)
class RPNPosition:
    """
    A position in an RPN program, used for error reporting.

    Attributes:
        index: 0-based index into the program
        token: Text of the token found at that index
    """
    index: int
    token: str

    def __str__(self) -> str:
        return f"[{self.index}] {self.token}"


# =============================================================================
# Base Exception
# =============================================================================

class LyccError(Exception):
    """
    Base exception for all back-end errors.

    Attributes:
        message: The error description
        position: Where in the RPN program the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        position: Optional[RPNPosition] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.position = position
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.position is not None:
            parts.append(f"{self.position}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Intermediate Representation Errors
# =============================================================================

class RPNError(LyccError):
    """Error manipulating an RPN program."""
    pass


class BackpatchRangeError(RPNError):
    """
    Backpatch index outside the program.

    There is no token to replace, so the patch cannot be applied.
    """

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(
            f"cannot backpatch index {index}: program has {length} tokens",
            hint="use the index returned by append() for the placeholder",
        )


class RPNFormatError(LyccError):
    """
    Malformed RPN input.

    Raised by the reader when a line cannot be turned into a token.
    """

    def __init__(self, message: str, line: int, filename: str = "<input>"):
        self.line = line
        self.filename = filename
        super().__init__(f"{filename}:{line}: {message}")


# =============================================================================
# Code Generation Errors
# =============================================================================

class CodeGenError(LyccError):
    """
    Error during assembly generation.

    Every CodeGenError aborts the current generation run.
    """
    pass


class StackUnderflowError(CodeGenError):
    """
    An operator found fewer operands than it requires.

    Examples:
        x :=            // assignment with one operand
        5 CMP           // compare with one operand
    """

    def __init__(
        self,
        operator: str,
        required: int,
        available: int,
        position: Optional[RPNPosition] = None,
    ):
        self.operator = operator
        self.required = required
        self.available = available
        word = "operand" if required == 1 else "operands"
        super().__init__(
            f"'{operator}' requires {required} {word}, "
            f"evaluation stack has {available}",
            position=position,
        )


class InvalidBranchDestinationError(CodeGenError):
    """
    A branch is not followed by a usable destination index.

    Raised when the destination token is missing, is not a non-negative
    integer, is still a placeholder, or points beyond the end label.
    """

    def __init__(
        self,
        reason: str,
        position: Optional[RPNPosition] = None,
        hint: Optional[str] = None,
    ):
        self.reason = reason
        super().__init__(reason, position=position, hint=hint)


class UnresolvedPlaceholderError(CodeGenError):
    """
    The program still contains placeholder tokens.

    A program is only ready for generation once every forward jump has
    been backpatched.
    """

    def __init__(self, indices: list[int]):
        self.indices = list(indices)
        shown = ", ".join(str(i) for i in self.indices[:10])
        if len(self.indices) > 10:
            shown += ", ..."
        word = "placeholder" if len(self.indices) == 1 else "placeholders"
        super().__init__(
            f"{len(self.indices)} unresolved {word} at index {shown}",
            hint="every forward branch must be backpatched before generation",
        )


class UnmappedBranchKindError(CodeGenError):
    """A branch kind has no entry in the jump instruction table."""

    def __init__(self, kind: object, position: Optional[RPNPosition] = None):
        self.kind = kind
        super().__init__(
            f"no jump instruction for branch kind {kind!r}",
            position=position,
        )


class TemporaryMismatchError(CodeGenError):
    """
    Emission allocated a temporary that discovery did not predict.

    This is an internal error: the dry run and the final pass walked the
    same program with different stack shapes.
    """

    def __init__(self, expected: Optional[str], actual: str, position: Optional[RPNPosition] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"emitted temporary '{actual}' but discovery predicted "
            f"'{expected if expected is not None else 'nothing'}'",
            position=position,
        )


class LabelCollisionError(CodeGenError):
    """
    Two different operands sanitize to the same data label.

    Examples:
        neg_3_2 and -3.2    // both become _neg_3_2
        x.y and x_y         // both become _x_y
    """

    def __init__(self, label: str, first: str, second: str):
        self.label = label
        self.first = first
        self.second = second
        super().__init__(
            f"'{first}' and '{second}' both map to data label '{label}'",
            hint="rename the identifier so its label is unique",
        )


# =============================================================================
# Symbol Table Errors
# =============================================================================

class SymbolTableError(LyccError):
    """Error updating the symbol table."""
    pass


class DuplicateDeclarationError(SymbolTableError):
    """
    Identifier already carries a type.

    Raised when a second type is assigned to a declared identifier.
    """

    def __init__(self, identifier: str, existing_type: str, new_type: str):
        self.identifier = identifier
        self.existing_type = existing_type
        self.new_type = new_type
        super().__init__(
            f"variable '{identifier}' already declared as {existing_type}",
            hint=f"remove the second declaration as {new_type}",
        )


# =============================================================================
# Warning Collection
# =============================================================================

class WarningCollector:
    """
    Collects non-fatal diagnostics for a single run.

    Example:
        collector = WarningCollector()
        collector.add("label L7 is never referenced")
        print(collector.report())
    """

    def __init__(self) -> None:
        self.warnings: list[str] = []

    def add(self, message: str, position: Optional[RPNPosition] = None) -> None:
        """Add a warning message."""
        if position is not None:
            self.warnings.append(f"{position}: warning: {message}")
        else:
            self.warnings.append(f"warning: {message}")

    def count(self) -> int:
        return len(self.warnings)

    def report(self) -> str:
        return "\n".join(self.warnings)

    def clear(self) -> None:
        self.warnings.clear()

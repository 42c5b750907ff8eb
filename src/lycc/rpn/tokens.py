"""
RPN Token Model
===============

This module defines the closed set of tokens that make up an RPN program.
Every pass of the back end dispatches on TokenKind; token text is only
inspected once, when a token is built from its textual form.

Token Categories
----------------
| Kind        | Text forms                          | Payload        |
|-------------|-------------------------------------|----------------|
| IDENTIFIER  | x, total, my_var                    | -              |
| NUMBER      | 5, 3.14, .99, 99., -3.2             | -              |
| STRING      | "hello"                             | -              |
| ARITHMETIC  | + - * /                             | ArithmeticOp   |
| NEGATE      | NEG                                 | -              |
| ASSIGN      | :=                                  | -              |
| COMPARE     | CMP                                 | -              |
| BRANCH      | BLE BGE BLT BGT BEQ BNE BI          | BranchKind     |
| WRITE       | WRITE                               | -              |
| READ        | READ                                | -              |
| PLACEHOLDER | _PLHDR                              | -              |

Branch Destinations
-------------------
The token that follows a BRANCH is its destination: a NUMBER token
holding a non-negative integer index. Destinations are ordinary NUMBER
tokens in the program; they are told apart from constants purely by
their position after a branch.

Example Usage
-------------
>>> from lycc.rpn.tokens import Token, TokenKind
>>> Token.from_text("BLT").kind
<TokenKind.BRANCH: 'branch'>
>>> Token.from_text("12").as_destination()
12
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import re


# =============================================================================
# Token Kinds
# =============================================================================

class TokenKind(Enum):
    """Classification of RPN tokens."""
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"
    ARITHMETIC = "arithmetic"
    NEGATE = "negate"
    ASSIGN = "assign"
    COMPARE = "compare"
    BRANCH = "branch"
    WRITE = "write"
    READ = "read"
    PLACEHOLDER = "placeholder"


class ArithmeticOp(Enum):
    """Binary arithmetic operators (value is the RPN text)."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


class BranchKind(Enum):
    """
    Branch conditions (value is the RPN mnemonic).

    The conditional kinds test the state left by the preceding CMP;
    ALWAYS is the unconditional jump.
    """
    LE = "BLE"
    GE = "BGE"
    LT = "BLT"
    GT = "BGT"
    EQ = "BEQ"
    NE = "BNE"
    ALWAYS = "BI"


# Fixed text forms
PLACEHOLDER_TEXT = "_PLHDR"
ASSIGN_TEXT = ":="
COMPARE_TEXT = "CMP"
NEGATE_TEXT = "NEG"
WRITE_TEXT = "WRITE"
READ_TEXT = "READ"

NUMBER_PATTERN = re.compile(r"^-?(\d+\.?\d*|\.\d+)$")
INDEX_PATTERN = re.compile(r"^\d+$")

_KEYWORDS: dict[str, TokenKind] = {
    ASSIGN_TEXT: TokenKind.ASSIGN,
    COMPARE_TEXT: TokenKind.COMPARE,
    NEGATE_TEXT: TokenKind.NEGATE,
    WRITE_TEXT: TokenKind.WRITE,
    READ_TEXT: TokenKind.READ,
    PLACEHOLDER_TEXT: TokenKind.PLACEHOLDER,
}

_ARITHMETIC = {op.value: op for op in ArithmeticOp}
_BRANCHES = {kind.value: kind for kind in BranchKind}


# =============================================================================
# Token
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single RPN token.

    Attributes:
        kind: The TokenKind classification
        text: The token's textual form, as shown in listings
        op: Arithmetic operator, for ARITHMETIC tokens
        branch: Branch condition, for BRANCH tokens
    """
    kind: TokenKind
    text: str
    op: Optional[ArithmeticOp] = None
    branch: Optional[BranchKind] = None

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r})"

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_text(cls, text: str) -> "Token":
        """
        Classify a token from its textual form.

        Raises:
            ValueError: If text is empty
        """
        if not text:
            raise ValueError("empty token text")

        if text in _ARITHMETIC:
            return cls(TokenKind.ARITHMETIC, text, op=_ARITHMETIC[text])
        if text in _BRANCHES:
            return cls(TokenKind.BRANCH, text, branch=_BRANCHES[text])
        if text in _KEYWORDS:
            return cls(_KEYWORDS[text], text)
        if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
            return cls(TokenKind.STRING, text)
        if NUMBER_PATTERN.match(text):
            return cls(TokenKind.NUMBER, text)
        return cls(TokenKind.IDENTIFIER, text)

    @classmethod
    def identifier(cls, name: str) -> "Token":
        return cls(TokenKind.IDENTIFIER, name)

    @classmethod
    def number(cls, text: str) -> "Token":
        return cls(TokenKind.NUMBER, text)

    @classmethod
    def string(cls, content: str) -> "Token":
        """Build a string literal token from its unquoted content."""
        return cls(TokenKind.STRING, f'"{content}"')

    @classmethod
    def arithmetic(cls, op: ArithmeticOp) -> "Token":
        return cls(TokenKind.ARITHMETIC, op.value, op=op)

    @classmethod
    def branch_on(cls, kind: BranchKind) -> "Token":
        return cls(TokenKind.BRANCH, kind.value, branch=kind)

    @classmethod
    def destination(cls, index: int) -> "Token":
        """Build the destination token for a branch."""
        if index < 0:
            raise ValueError(f"negative branch destination {index}")
        return cls(TokenKind.NUMBER, str(index))

    @classmethod
    def placeholder(cls) -> "Token":
        return cls(TokenKind.PLACEHOLDER, PLACEHOLDER_TEXT)

    # -------------------------------------------------------------------------
    # Classification helpers
    # -------------------------------------------------------------------------

    def is_operand(self) -> bool:
        """Return True for tokens that are pushed onto the evaluation stack."""
        return self.kind in (TokenKind.IDENTIFIER, TokenKind.NUMBER, TokenKind.STRING)

    def is_operator(self) -> bool:
        """Return True for tokens that consume stack entries."""
        return self.kind in (
            TokenKind.ARITHMETIC,
            TokenKind.NEGATE,
            TokenKind.ASSIGN,
            TokenKind.COMPARE,
            TokenKind.WRITE,
            TokenKind.READ,
        )

    def is_control(self) -> bool:
        """Return True for branches and placeholders."""
        return self.kind in (TokenKind.BRANCH, TokenKind.PLACEHOLDER)

    def as_destination(self) -> Optional[int]:
        """
        Return the branch index this token designates, or None.

        Only NUMBER tokens whose text is a plain non-negative integer
        qualify; "3.0", "-1" and placeholders do not.
        """
        if self.kind is TokenKind.NUMBER and INDEX_PATTERN.match(self.text):
            return int(self.text)
        return None

    @property
    def string_content(self) -> str:
        """Return a string literal's text without its quotes."""
        if self.kind is not TokenKind.STRING:
            raise ValueError(f"{self!r} is not a string literal")
        return self.text[1:-1]


def tokens_from_text(texts) -> list[Token]:
    """Classify a sequence of token texts."""
    return [Token.from_text(t) for t in texts]

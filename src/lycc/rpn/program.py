"""
RPN Program (Intermediate Emitter)
==================================

An RPNProgram is the ordered token sequence produced by the parser's
semantic actions. It only grows: tokens are appended, and the one
mutation allowed afterwards is backpatching a placeholder once a forward
jump target becomes known.

Backpatching
------------
A forward branch is emitted in two steps:

    >>> program = RPNProgram()
    >>> program.append("x"); program.append("0"); program.append("CMP")
    >>> program.append("BLE")
    >>> hole = program.append(Token.placeholder())
    >>> ...                                  # body of the IF
    >>> program.backpatch(hole, len(program))

Patching a slot that does not hold a placeholder, or writing something
other than a destination index into one, is reported as a warning.

Listing Format
--------------
    Intermediate Code (Reverse Polish Notation with Indices)
    --------------------------------------------------------
    [0] x
    [1] 0
    [2] CMP
    ...
    --------------------------------------------------------
"""

from typing import Iterator, Optional, Union
import logging

from lycc.errors import BackpatchRangeError, RPNPosition, WarningCollector
from lycc.rpn.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

LISTING_TITLE = "Intermediate Code (Reverse Polish Notation with Indices)"
LISTING_RULE = "-" * len(LISTING_TITLE)


class RPNProgram:
    """
    Append-only, backpatchable sequence of RPN tokens.

    Attributes:
        warnings: Non-fatal diagnostics raised by backpatch()
    """

    def __init__(self, tokens=None, warnings: Optional[WarningCollector] = None):
        self._tokens: list[Token] = []
        self.warnings = warnings if warnings is not None else WarningCollector()
        for token in tokens or ():
            self.append(token)

    @classmethod
    def from_texts(cls, texts) -> "RPNProgram":
        """Build a program from token texts, e.g. ["3", "4", "+"]."""
        return cls(Token.from_text(t) for t in texts)

    # -------------------------------------------------------------------------
    # Emission
    # -------------------------------------------------------------------------

    def append(self, token: Union[Token, str]) -> int:
        """
        Append a token and return the index it was written at.

        Strings are classified with Token.from_text.
        """
        if isinstance(token, str):
            token = Token.from_text(token)
        index = len(self._tokens)
        self._tokens.append(token)
        return index

    def backpatch(self, index: int, target: Union[Token, int, str]) -> None:
        """
        Replace the placeholder at index.

        Args:
            index: Index returned by append() for the placeholder
            target: Destination index (int), or any token/text

        Raises:
            BackpatchRangeError: If index is outside the program
        """
        if index < 0 or index >= len(self._tokens):
            raise BackpatchRangeError(index, len(self._tokens))

        if isinstance(target, int):
            new_token = Token.destination(target)
        elif isinstance(target, str):
            new_token = Token.from_text(target)
        else:
            new_token = target

        current = self._tokens[index]
        position = RPNPosition(index, current.text)
        if current.kind is not TokenKind.PLACEHOLDER:
            self._warn(f"patching token '{current.text}' which is not a placeholder", position)
        if new_token.as_destination() is None:
            self._warn(f"patched value '{new_token.text}' is not a destination index", position)

        self._tokens[index] = new_token
        logger.debug("Patched index %d => %s", index, new_token.text)

    def _warn(self, message: str, position: RPNPosition) -> None:
        self.warnings.add(message, position)
        logger.warning("%s: %s", position, message)

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    @property
    def next_index(self) -> int:
        """Index the next appended token will receive (a jump target)."""
        return len(self._tokens)

    @property
    def tokens(self) -> tuple[Token, ...]:
        return tuple(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def position(self, index: int) -> RPNPosition:
        """Return an RPNPosition for error reporting."""
        if 0 <= index < len(self._tokens):
            return RPNPosition(index, self._tokens[index].text)
        return RPNPosition(index, "<end>")

    def placeholders(self) -> list[int]:
        """Return the indices that still hold a placeholder."""
        return [i for i, t in enumerate(self._tokens) if t.kind is TokenKind.PLACEHOLDER]

    def is_finished(self) -> bool:
        """A program is finished once no placeholder remains."""
        return not self.placeholders()

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def listing(self) -> str:
        """Render the intermediate code listing."""
        lines = [LISTING_TITLE, LISTING_RULE]
        for i, token in enumerate(self._tokens):
            lines.append(f"[{i}] {token.text}")
        lines.append(LISTING_RULE)
        return "\n".join(lines) + "\n"

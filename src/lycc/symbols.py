"""
Symbol Table
============

Name -> (type, value, length) map shared between the front end and the
code generator. Entries keep their first-registration order, which is
also the order they are printed in.

Registration Contracts
----------------------
| Method                         | Existing name                    |
|--------------------------------|----------------------------------|
| upsert(name)                   | no-op                            |
| upsert(name, type, value)      | no-op (constants, temporaries)   |
| declare_type(name, type)       | DuplicateDeclarationError if the |
|                                | entry already has a type         |
| declare_bulk(names, type)      | sets the type only where absent  |

Length Rules
------------
- Integer/Float: number of digits in the value
- String: number of characters without the surrounding quotes
- otherwise: length of the value text

Table Format
------------
    NAME   | TYPE  | VALUE | LENGTH
    ------ | ----- | ----- | ------
    x      | Float |       |      1
    _3_0   | Int   | 3     |      1
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Union

from lycc.errors import DuplicateDeclarationError


class SymbolType(Enum):
    """Data types recorded in the symbol table (value is the display name)."""
    INTEGER = "Int"
    FLOAT = "Float"
    STRING = "String"

    @classmethod
    def parse(cls, name: Union[str, "SymbolType"]) -> "SymbolType":
        """
        Normalize a type name.

        Accepts int/integer, float and string in any case.

        Raises:
            ValueError: For an unknown type name
        """
        if isinstance(name, SymbolType):
            return name
        key = name.strip().lower()
        if key in ("int", "integer"):
            return cls.INTEGER
        if key == "float":
            return cls.FLOAT
        if key == "string":
            return cls.STRING
        raise ValueError(f"unknown data type '{name}'")


@dataclass
class SymbolEntry:
    """A single symbol table row."""
    name: str
    type: Optional[SymbolType] = None
    value: Optional[str] = None
    length: Optional[int] = None


def compute_length(lexeme: Optional[str], sym_type: Optional[SymbolType]) -> int:
    """Digits for numbers, characters without quotes for strings."""
    if lexeme is None:
        return 0
    if sym_type in (SymbolType.INTEGER, SymbolType.FLOAT):
        return sum(1 for ch in lexeme if ch.isdigit())
    if sym_type is SymbolType.STRING:
        if len(lexeme) >= 2 and lexeme.startswith('"') and lexeme.endswith('"'):
            return len(lexeme) - 2
        return len(lexeme)
    return len(lexeme)


class SymbolTable:
    """
    Upsert-only symbol table.

    Example:
        table = SymbolTable()
        table.declare_bulk(["a", "b"], "Float")
        table.upsert("_5_0", "Int", "5")
        print(table.render())
    """

    def __init__(self) -> None:
        self._entries: dict[str, SymbolEntry] = {}

    def upsert(
        self,
        name: str,
        sym_type: Union[str, SymbolType, None] = None,
        value: Optional[str] = None,
    ) -> SymbolEntry:
        """
        Register name if absent and return its entry.

        With a type, the entry records the value and its computed length.
        Registering an existing name is a no-op.
        """
        entry = self._entries.get(name)
        if entry is not None:
            return entry

        if sym_type is None:
            entry = SymbolEntry(name)
        else:
            parsed = SymbolType.parse(sym_type)
            entry = SymbolEntry(name, parsed, value, compute_length(value, parsed))
        self._entries[name] = entry
        return entry

    def declare_type(self, name: str, sym_type: Union[str, SymbolType]) -> None:
        """
        Assign a type to an identifier.

        Raises:
            DuplicateDeclarationError: If the identifier already has a type
        """
        parsed = SymbolType.parse(sym_type)
        entry = self._entries.get(name)
        if entry is None:
            entry = SymbolEntry(name)
            self._entries[name] = entry
        if entry.type is not None:
            raise DuplicateDeclarationError(name, entry.type.value, parsed.value)
        entry.type = parsed

    def declare_bulk(self, names: Iterable[str], sym_type: Union[str, SymbolType]) -> None:
        """Type every name in names, keeping any type already assigned."""
        parsed = SymbolType.parse(sym_type)
        for name in names:
            if not name:
                continue
            entry = self._entries.get(name)
            if entry is None:
                self._entries[name] = SymbolEntry(name, parsed, "", len(name))
            elif entry.type is None:
                entry.type = parsed

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def get(self, name: str) -> Optional[SymbolEntry]:
        return self._entries.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SymbolEntry]:
        return iter(self._entries.values())

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> str:
        """Render the column-aligned symbol table."""
        rows = [("NAME", "TYPE", "VALUE", "LENGTH")]
        for entry in self._entries.values():
            rows.append((
                entry.name,
                entry.type.value if entry.type is not None else "",
                entry.value if entry.value is not None else "",
                str(entry.length) if entry.length is not None else "",
            ))

        widths = [max(len(row[i]) for row in rows) for i in range(4)]
        sep = " | "

        lines = []
        for idx, row in enumerate(rows):
            lines.append(sep.join([
                row[0].ljust(widths[0]),
                row[1].ljust(widths[1]),
                row[2].ljust(widths[2]),
                row[3].rjust(widths[3]),
            ]))
            if idx == 0:
                lines.append(sep.join("-" * w for w in widths))

        return "\n".join(lines) + "\n"

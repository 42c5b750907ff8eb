# =============================================================================
# test_symbols.py - Symbol Table Tests
# =============================================================================
# Tests for the upsert-only symbol table: registration contracts, type
# normalization, length rules and the column-aligned rendering.
# =============================================================================

import pytest

from lycc.errors import DuplicateDeclarationError
from lycc.symbols import SymbolTable, SymbolType, compute_length


class TestSymbolType:
    """Type name normalization."""

    def test_aliases(self):
        assert SymbolType.parse("int") is SymbolType.INTEGER
        assert SymbolType.parse("Integer") is SymbolType.INTEGER
        assert SymbolType.parse(" FLOAT ") is SymbolType.FLOAT
        assert SymbolType.parse("string") is SymbolType.STRING
        assert SymbolType.parse(SymbolType.FLOAT) is SymbolType.FLOAT

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            SymbolType.parse("double")


class TestLength:
    """Length column rules."""

    def test_numbers_count_digits(self):
        assert compute_length("-3.25", SymbolType.FLOAT) == 3
        assert compute_length("42", SymbolType.INTEGER) == 2

    def test_strings_exclude_quotes(self):
        assert compute_length('"hola"', SymbolType.STRING) == 4
        assert compute_length("hola", SymbolType.STRING) == 4

    def test_untyped_uses_raw_length(self):
        assert compute_length("abc", None) == 3
        assert compute_length(None, None) == 0


class TestRegistration:
    """Upsert and declaration contracts."""

    def test_generic_upsert(self):
        table = SymbolTable()
        entry = table.upsert("@T1")
        assert entry.type is None
        assert entry.value is None
        assert "@T1" in table

    def test_typed_upsert(self):
        table = SymbolTable()
        entry = table.upsert("_5_0", "Int", "5")
        assert entry.type is SymbolType.INTEGER
        assert entry.value == "5"
        assert entry.length == 1

    def test_upsert_is_idempotent(self):
        table = SymbolTable()
        first = table.upsert("_5_0", "Int", "5")
        second = table.upsert("_5_0", "Float", "5.0")
        assert first is second
        assert table.get("_5_0").type is SymbolType.INTEGER
        assert len(table) == 1

    def test_declare_type(self):
        table = SymbolTable()
        table.upsert("x")
        table.declare_type("x", "float")
        assert table.get("x").type is SymbolType.FLOAT

    def test_declare_type_twice_fails(self):
        table = SymbolTable()
        table.declare_type("x", "Float")
        with pytest.raises(DuplicateDeclarationError) as exc_info:
            table.declare_type("x", "Int")
        assert exc_info.value.identifier == "x"

    def test_declare_bulk_keeps_existing_types(self):
        table = SymbolTable()
        table.declare_type("a", "String")
        table.upsert("b")
        table.declare_bulk(["a", "b", "c", ""], "Int")

        assert table.get("a").type is SymbolType.STRING
        assert table.get("b").type is SymbolType.INTEGER
        assert table.get("c").type is SymbolType.INTEGER
        assert table.get("c").length == 1
        assert len(table) == 3

    def test_first_registration_order(self):
        table = SymbolTable()
        for name in ["z", "a", "m"]:
            table.upsert(name)
        table.upsert("a")
        assert [entry.name for entry in table] == ["z", "a", "m"]


class TestRender:
    """Column-aligned table output."""

    def test_render(self):
        table = SymbolTable()
        table.declare_bulk(["a"], "Float")
        table.upsert("_5_0", "Int", "5")

        assert table.render().splitlines() == [
            "NAME | TYPE  | VALUE | LENGTH",
            "---- | ----- | ----- | ------",
            "a    | Float |       |      1",
            "_5_0 | Int   | 5     |      1",
        ]

    def test_render_empty(self):
        lines = SymbolTable().render().splitlines()
        assert lines == ["NAME | TYPE | VALUE | LENGTH", "---- | ---- | ----- | ------"]

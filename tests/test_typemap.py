"""
Tests for TypeMap parsing and resolution.

Covers the accepted entry forms, user-over-builtin precedence and the
immutability of the built-in table.
"""

import pytest

from gqlbind.codegen.core.errors import ConfigError
from gqlbind.codegen.core.typemap import (
    TypeMap,
    TypeMapEntry,
    parse_type_map,
    resolve_type_map,
)
from gqlbind.codegen.languages.python.config import PYTHON_BUILTIN_TYPE_MAP


class TestTypeMapEntry:
    """Test parsing of individual TypeMap entries."""

    def test_dotted_path(self):
        """Test a dotted path splits into module and type name."""
        entry = TypeMapEntry.parse("User", "app.models.User")
        assert entry.type_name == "User"
        assert entry.module == "app.models"
        assert entry.qualified_name == "app.models.User"

    def test_bare_name_is_builtin(self):
        """Test a bare name refers to a builtin."""
        entry = TypeMapEntry.parse("Blob", "bytes")
        assert entry.module == "builtins"
        assert entry.qualified_name == "bytes"

    def test_object_form_with_field_overrides(self):
        """Test the object form carries per-field overrides."""
        entry = TypeMapEntry.parse(
            "User", {"model": "app.models.Account", "fields": {"fullName": "display_name"}}
        )
        assert entry.type_name == "Account"
        assert entry.field_override("fullName") == "display_name"
        assert entry.field_override("id") is None

    def test_existing_entry_passes_through(self):
        """Test an entry instance is returned unchanged."""
        entry = TypeMapEntry("UUID", "uuid")
        assert TypeMapEntry.parse("ID", entry) is entry

    @pytest.mark.parametrize(
        "raw",
        ["", "   ", 42, None, "app..User", "app.models.", "app.1models.User", {"fields": {}}],
    )
    def test_malformed_entries(self, raw):
        """Test malformed entries raise ConfigError."""
        with pytest.raises(ConfigError):
            TypeMapEntry.parse("User", raw)

    def test_override_must_be_identifier(self):
        """Test field overrides must name a native member."""
        with pytest.raises(ConfigError, match="fullName"):
            TypeMapEntry.parse("User", {"model": "app.User", "fields": {"fullName": "full name"}})

    def test_fields_must_be_object(self):
        """Test the fields key must be a mapping."""
        with pytest.raises(ConfigError):
            TypeMapEntry.parse("User", {"model": "app.User", "fields": ["a"]})


class TestTypeMap:
    """Test TypeMap lookups and merging."""

    def setup_method(self):
        """Set up a small map."""
        self.type_map = TypeMap({"Int": TypeMapEntry("int")})

    def test_exists(self):
        """Test key membership."""
        assert self.type_map.exists("Int")
        assert not self.type_map.exists("String")

    def test_with_entries_returns_new_map(self):
        """Test with_entries leaves the original untouched."""
        merged = self.type_map.with_entries({"String": TypeMapEntry("str")})
        assert merged.exists("String")
        assert not self.type_map.exists("String")

    def test_with_entries_keeps_existing_keys(self):
        """Test existing keys are never replaced by merged entries."""
        merged = self.type_map.with_entries({"Int": TypeMapEntry("Decimal", "decimal")})
        assert merged["Int"] == TypeMapEntry("int")

    def test_mapping_protocol(self):
        """Test the map behaves as a read-only mapping."""
        assert list(self.type_map) == ["Int"]
        assert len(self.type_map) == 1
        with pytest.raises(TypeError):
            self.type_map["Float"] = TypeMapEntry("float")


class TestResolveTypeMap:
    """Test merging user entries with the built-in table."""

    def test_builtins_present(self):
        """Test every built-in key is present without user entries."""
        resolved = resolve_type_map(None, PYTHON_BUILTIN_TYPE_MAP)
        for key in PYTHON_BUILTIN_TYPE_MAP:
            assert resolved.exists(key)
        assert resolved["Time"].qualified_name == "datetime.datetime"
        assert resolved["ID"].qualified_name == "str"

    def test_user_entry_wins(self):
        """Test a user entry shadows the built-in of the same key."""
        resolved = resolve_type_map({"ID": "uuid.UUID"}, PYTHON_BUILTIN_TYPE_MAP)
        assert resolved["ID"] == TypeMapEntry("UUID", "uuid")
        assert resolved.exists("Int")

    def test_user_keys_preserved(self):
        """Test user keys absent from the built-ins are kept verbatim."""
        resolved = resolve_type_map({"Date": "datetime.date"}, PYTHON_BUILTIN_TYPE_MAP)
        assert resolved["Date"].qualified_name == "datetime.date"

    def test_builtin_table_is_immutable(self):
        """Test the built-in table cannot be modified in place."""
        with pytest.raises(TypeError):
            PYTHON_BUILTIN_TYPE_MAP["Int"] = TypeMapEntry("float")

    def test_builtin_table_not_changed_by_merge(self):
        """Test merging a user entry does not leak into the built-ins."""
        resolve_type_map({"Int": "numbers.Integral"}, PYTHON_BUILTIN_TYPE_MAP)
        assert PYTHON_BUILTIN_TYPE_MAP["Int"] == TypeMapEntry("int")

    def test_parse_type_map_rejects_non_mapping(self):
        """Test a non-object type map is a ConfigError."""
        with pytest.raises(ConfigError):
            parse_type_map(["User"])

    def test_parse_type_map_keeps_order(self):
        """Test entries keep their declaration order."""
        parsed = parse_type_map({"B": "b.B", "A": "a.A"})
        assert list(parsed) == ["B", "A"]

"""
Tests for schema loading.

Covers declaration order, extension folding, root operation discovery and
the conversion of graphql-core errors into SchemaError.
"""

import pytest

from gqlbind.codegen.core.errors import SchemaError
from gqlbind.codegen.core.schema import TypeKind, TypeRef, load_schema


class TestLoadSchema:
    """Test parsing SDL into a SchemaDocument."""

    def setup_method(self):
        """Set up schema text used by several tests."""
        self.sdl = """
            schema {
              query: Root
            }

            type Root {
              items(limit: Int = 5): [Item!]
            }

            type Item {
              name: String!
            }

            extend type Item {
              price: Float
            }

            enum Color {
              RED
              GREEN
            }
        """

    def test_declaration_order(self):
        """Test types keep the order they are declared in."""
        schema = load_schema(self.sdl)
        assert [t.name for t in schema] == ["Root", "Item", "Color"]

    def test_extension_folded_into_definition(self):
        """Test extension fields are appended to the base type."""
        item = load_schema(self.sdl).get_type("Item")
        assert [f.name for f in item.fields] == ["name", "price"]

    def test_custom_root_name(self):
        """Test schema definitions name the root operation types."""
        schema = load_schema(self.sdl)
        assert schema.query == "Root"
        assert schema.mutation is None
        assert schema.root_operations == {"Root": "query"}
        assert schema.is_root("Root")
        assert not schema.is_root("Item")

    def test_default_roots(self, sample_sdl):
        """Test Query and Mutation are discovered without a schema block."""
        schema = load_schema(sample_sdl)
        assert schema.root_operations == {"Query": "query", "Mutation": "mutation"}

    def test_field_types_and_defaults(self):
        """Test type references and argument defaults are recorded."""
        field = load_schema(self.sdl).get_type("Root").get_field("items")
        assert str(field.type) == "[Item!]"
        assert field.type.named_type == "Item"
        assert field.arguments[0].name == "limit"
        assert field.arguments[0].default_value == "5"

    def test_kinds_and_members(self, sample_sdl):
        """Test kinds, interfaces, union members and enum values."""
        schema = load_schema(sample_sdl)
        assert schema.get_type("Node").kind == TypeKind.INTERFACE
        assert schema.get_type("NewUser").kind == TypeKind.INPUT_OBJECT
        assert schema.get_type("User").interfaces == ["Node"]
        assert schema.get_type("SearchResult").members == ["User"]
        assert [v.name for v in schema.get_type("Status").enum_values] == ["ACTIVE", "INACTIVE"]
        assert [t.name for t in schema.implementations("Node")] == ["User"]

    def test_descriptions(self, sample_sdl):
        """Test type and field descriptions are kept."""
        schema = load_schema(sample_sdl)
        assert schema.get_type("User").description == "A registered user."
        assert schema.get_type("Query").get_field("user").description == "Look up a single user."

    def test_syntax_error_has_location(self):
        """Test a syntax error reports line and column."""
        with pytest.raises(SchemaError) as exc_info:
            load_schema("type Query {\n  name: String\n", "broken.graphql")
        error = exc_info.value
        assert error.line is not None
        assert error.source_name == "broken.graphql"
        assert "broken.graphql:" in str(error)

    def test_unknown_type_rejected(self):
        """Test references to undeclared types fail at load time."""
        with pytest.raises(SchemaError):
            load_schema("type Query { thing: Missing }")

    def test_raw_text_kept(self):
        """Test the document carries its source text."""
        assert load_schema(self.sdl).source == self.sdl


class TestTypeRef:
    """Test type reference helpers."""

    def test_str(self):
        """Test references print in SDL notation."""
        ref = TypeRef(non_null=True, of_type=TypeRef(name="User", non_null=True))
        assert str(ref) == "[User!]!"
        assert ref.is_list
        assert ref.named_type == "User"

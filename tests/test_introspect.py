"""
Tests for member discovery on user classes.
"""

import sys
import textwrap
from dataclasses import dataclass

from gqlbind.codegen.core.typemap import TypeMapEntry
from gqlbind.codegen.core.types import Member, MemberKind
from gqlbind.codegen.languages.python.introspect import (
    class_members,
    lookup_members,
    positional_arity,
)


@dataclass
class Account:
    id: str
    email: str = ""

    @property
    def display_name(self) -> str:
        return self.email

    def friends(self, first):
        return []

    def search(self, text, limit=10):
        return []

    @staticmethod
    def kinds(filter):
        return []

    @classmethod
    def count(cls):
        return 0


class Admin(Account):
    level: int


class TestClassMembers:
    """Test members found on a class."""

    def setup_method(self):
        """Introspect the sample classes."""
        self.members = class_members(Account)

    def test_annotated_attributes(self):
        """Test annotations count as attributes."""
        assert self.members["id"] == Member("id", MemberKind.ATTRIBUTE, 0)
        assert self.members["email"].kind == MemberKind.ATTRIBUTE

    def test_property(self):
        """Test properties are attributes."""
        assert self.members["display_name"] == Member("display_name", MemberKind.ATTRIBUTE, 0)

    def test_method_arity(self):
        """Test method arity excludes self and counts defaults."""
        assert self.members["friends"] == Member("friends", MemberKind.METHOD, 1)
        assert self.members["search"].arity == 2

    def test_static_and_class_methods(self):
        """Test static and class methods count only caller-supplied parameters."""
        assert self.members["kinds"] == Member("kinds", MemberKind.METHOD, 1)
        assert self.members["count"] == Member("count", MemberKind.METHOD, 0)

    def test_dunder_names_excluded(self):
        """Test special names are never offered as members."""
        assert not any(name.startswith("__") for name in self.members)

    def test_inherited_members(self):
        """Test annotations and methods of base classes are included."""
        members = class_members(Admin)
        assert members["level"].kind == MemberKind.ATTRIBUTE
        assert members["id"].kind == MemberKind.ATTRIBUTE
        assert members["friends"].arity == 1


class TestPositionalArity:
    """Test positional parameter counting."""

    def test_keyword_only_not_counted(self):
        """Test keyword-only and variadic parameters are ignored."""

        def f(self, a, *args, b=1, **kwargs):
            pass

        assert positional_arity(f, bound=False) == 1
        assert positional_arity(f, bound=True) == 2

    def test_uninspectable(self):
        """Test callables without a signature report None."""
        assert positional_arity(object(), bound=True) is None


class TestLookupMembers:
    """Test importing and introspecting TypeMap entries."""

    def test_stdlib_class(self):
        """Test a class from an importable module is introspected."""
        members = lookup_members(TypeMapEntry("Fraction", "fractions"))
        assert members["numerator"].kind == MemberKind.ATTRIBUTE
        assert members["limit_denominator"] == Member(
            "limit_denominator", MemberKind.METHOD, 1
        )

    def test_module_on_path(self, tmp_path, monkeypatch):
        """Test a user module found on sys.path is introspected."""
        (tmp_path / "shop_models.py").write_text(
            textwrap.dedent(
                """
                class Product:
                    sku: str

                    def price(self, currency):
                        return 0
                """
            )
        )
        monkeypatch.syspath_prepend(str(tmp_path))
        monkeypatch.delitem(sys.modules, "shop_models", raising=False)
        members = lookup_members(TypeMapEntry("Product", "shop_models"))
        assert members == {
            "sku": Member("sku", MemberKind.ATTRIBUTE, 0),
            "price": Member("price", MemberKind.METHOD, 1),
        }

    def test_builtin(self):
        """Test builtins have nothing to introspect."""
        assert lookup_members(TypeMapEntry("str")) == {}

    def test_missing_module(self):
        """Test an unimportable module reports None."""
        assert lookup_members(TypeMapEntry("Thing", "gqlbind_no_such_module")) is None

    def test_not_a_class(self):
        """Test a non-class attribute reports None."""
        assert lookup_members(TypeMapEntry("pi", "math")) is None
        assert lookup_members(TypeMapEntry("Missing", "math")) is None

"""
Tests for cross-checking the exec plan against the model source.
"""

import pytest

from gqlbind.codegen.core.binding import (
    BindingKind,
    EnumBinding,
    ExecPlan,
    FieldBinding,
    ObjectBinding,
)
from gqlbind.codegen.core.errors import ValidationError
from gqlbind.codegen.core.typemap import TypeMapEntry
from gqlbind.codegen.core.types import EnumType, Member, MemberKind, ScalarType, StructType
from gqlbind.codegen.core.validator import declared_members, validate

MODEL_SOURCE = '''
from dataclasses import dataclass
from enum import Enum


@dataclass(kw_only=True)
class User:
    """A user."""

    id: str
    first_name: str | None = None


class Status(str, Enum):
    ACTIVE = "ACTIVE"
'''


def no_lookup(entry):
    return {}


def user_object(*fields, generated=True, entry=None):
    owner = StructType("User", "models_gen") if generated else StructType("Account", "app")
    return ObjectBinding(
        name="User",
        owner=owner,
        entry=entry,
        generated=generated,
        resolver_name="UserResolver",
        root_method="user",
        local_name="user_resolver",
        fields=list(fields),
    )


def attribute(name, py_name):
    return FieldBinding(name=name, py_name=py_name, kind=BindingKind.ATTRIBUTE, type=ScalarType("str"))


def make_plan(*objects, enums=()):
    return ExecPlan(
        module="generated",
        package="app",
        schema_source="",
        objects=list(objects),
        enums=list(enums),
    )


class TestDeclaredMembers:
    """Test reading class bodies from source."""

    def test_classes_and_members(self):
        """Test annotated and assigned names are collected per class."""
        assert declared_members(MODEL_SOURCE) == {
            "User": {"id", "first_name"},
            "Status": {"ACTIVE"},
        }


class TestValidate:
    """Test validation of direct binds."""

    def test_matching_generated_owner(self):
        """Test attributes declared by the model class pass."""
        plan = make_plan(user_object(attribute("id", "id"), attribute("firstName", "first_name")))
        validate(plan, MODEL_SOURCE, no_lookup)

    def test_missing_attribute(self):
        """Test a bind to an undeclared attribute names type and field."""
        plan = make_plan(user_object(attribute("email", "email")))
        with pytest.raises(ValidationError) as exc_info:
            validate(plan, MODEL_SOURCE, no_lookup)
        assert exc_info.value.type_name == "User"
        assert exc_info.value.field_name == "email"

    def test_missing_class(self):
        """Test a generated owner must exist in the model source."""
        plan = make_plan(user_object(attribute("id", "id")))
        with pytest.raises(ValidationError, match="missing from the model module"):
            validate(plan, "x = 1\n", no_lookup)

    def test_unparseable_model_source(self):
        """Test model source that does not parse is reported."""
        plan = make_plan(user_object(attribute("id", "id")))
        with pytest.raises(ValidationError, match="does not parse"):
            validate(plan, "class User(:\n", no_lookup)

    def test_resolvers_not_checked(self):
        """Test resolver stubs need nothing from the owner."""
        resolver = FieldBinding(
            name="friends", py_name="friends", kind=BindingKind.RESOLVER, type=ScalarType("str")
        )
        validate(make_plan(user_object(resolver)), "x = 1\n", no_lookup)

    def test_user_owner_arity(self):
        """Test user-bound members are looked up again and arity compared."""
        entry = TypeMapEntry("Account", "app")
        method = FieldBinding(
            name="friends",
            py_name="friends",
            kind=BindingKind.METHOD,
            type=ScalarType("str"),
            arity=1,
        )
        plan = make_plan(user_object(method, generated=False, entry=entry))

        validate(plan, None, lambda e: {"friends": Member("friends", MemberKind.METHOD, 1)})
        with pytest.raises(ValidationError, match="expected arity 1, found arity 2"):
            validate(plan, None, lambda e: {"friends": Member("friends", MemberKind.METHOD, 2)})
        with pytest.raises(ValidationError, match="found missing"):
            validate(plan, None, lambda e: {})
        with pytest.raises(ValidationError, match="can no longer be introspected"):
            validate(plan, None, lambda e: None)

    def test_enum_members(self):
        """Test generated enum bindings must name declared members."""
        good = EnumBinding(
            name="Status",
            native=EnumType("Status", "models_gen"),
            generated=True,
            values=[("ACTIVE", "ACTIVE")],
        )
        validate(make_plan(enums=[good]), MODEL_SOURCE, no_lookup)

        bad = EnumBinding(
            name="Status",
            native=EnumType("Status", "models_gen"),
            generated=True,
            values=[("INACTIVE", "INACTIVE")],
        )
        with pytest.raises(ValidationError) as exc_info:
            validate(make_plan(enums=[bad]), MODEL_SOURCE, no_lookup)
        assert exc_info.value.field_name == "INACTIVE"

    def test_user_enums_not_checked(self):
        """Test enums bound to user types are left to the user."""
        user_enum = EnumBinding(
            name="Status",
            native=EnumType("Status", "app.enums"),
            generated=False,
            values=[("ANY", "ANY")],
        )
        validate(make_plan(enums=[user_enum]), None, no_lookup)

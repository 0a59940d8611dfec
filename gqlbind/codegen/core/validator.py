"""
Cross-check of the two generated artifacts.

Every direct bind recorded in the exec plan assumes a member exists on the
owning native type. Generated owners are checked against the model source
that is about to be written; user-bound owners are introspected again.
"""

import ast
from typing import Dict, Optional, Set

from ...logging_config import get_logger
from .binding import BindingKind, ExecPlan, MemberLookup
from .errors import ValidationError

logger = get_logger(__name__)


def declared_members(source: str) -> Dict[str, Set[str]]:
    """
    Map each top-level class in ``source`` to the names its body declares.

    Annotated attributes and plain assignments both count, so dataclass
    fields and enum members are covered.
    """
    tree = ast.parse(source)
    classes: Dict[str, Set[str]] = {}
    for node in tree.body:
        if not isinstance(node, ast.ClassDef):
            continue
        names = classes.setdefault(node.name, set())
        for statement in node.body:
            if isinstance(statement, ast.AnnAssign) and isinstance(statement.target, ast.Name):
                names.add(statement.target.id)
            elif isinstance(statement, ast.Assign):
                names.update(t.id for t in statement.targets if isinstance(t, ast.Name))
    return classes


def validate(
    exec_plan: ExecPlan,
    model_source: Optional[str],
    member_lookup: MemberLookup,
):
    """
    Re-walk every direct bind and confirm the member still matches.

    Raises:
        ValidationError: naming the type and field that disagree
    """
    classes: Dict[str, Set[str]] = {}
    if model_source is not None:
        try:
            classes = declared_members(model_source)
        except SyntaxError as e:
            raise ValidationError(
                f"model source does not parse: line {e.lineno}: {e.msg}", type_name="<models>"
            ) from e

    checked = 0
    for obj in exec_plan.objects:
        direct = [f for f in obj.fields if f.is_direct]
        if not direct:
            continue

        if obj.generated:
            declared = classes.get(obj.owner.name)
            if declared is None:
                raise ValidationError(
                    f"class {obj.owner.name} is missing from the model module",
                    type_name=obj.name,
                )
            for binding in direct:
                if binding.kind != BindingKind.ATTRIBUTE or binding.py_name not in declared:
                    raise ValidationError(
                        f"{obj.owner.name} declares no attribute {binding.py_name!r}",
                        type_name=obj.name,
                        field_name=binding.name,
                    )
                checked += 1
            continue

        members = member_lookup(obj.entry)
        if members is None:
            raise ValidationError(
                f"{obj.entry.qualified_name} can no longer be introspected",
                type_name=obj.name,
            )
        for binding in direct:
            member = members.get(binding.py_name)
            if member is None or member.arity != binding.arity:
                found = "missing" if member is None else f"arity {member.arity}"
                raise ValidationError(
                    f"{obj.entry.qualified_name}.{binding.py_name} expected arity "
                    f"{binding.arity}, found {found}",
                    type_name=obj.name,
                    field_name=binding.name,
                )
            checked += 1

    for enum in exec_plan.enums:
        if not enum.generated:
            continue
        declared = classes.get(enum.native.name, set())
        for value, member in enum.values:
            if member not in declared:
                raise ValidationError(
                    f"enum {enum.native.name} has no member {member!r}",
                    type_name=enum.name,
                    field_name=value,
                )

    logger.debug("Validated %d direct bindings", checked)

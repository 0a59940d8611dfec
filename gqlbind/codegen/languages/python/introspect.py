"""
Member discovery for user-bound Python types.

A TypeMap entry names a class by module and attribute. The module is
imported and the class inspected for the attributes, properties and methods
the exec plan can bind fields to directly.
"""

import importlib
import inspect
from typing import Dict, Optional

from ....logging_config import get_logger
from ...core.typemap import TypeMapEntry
from ...core.types import Member, MemberKind

logger = get_logger(__name__)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def positional_arity(func, bound: bool) -> Optional[int]:
    """Positional parameters of ``func``, minus ``self`` unless already bound."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    count = sum(1 for p in signature.parameters.values() if p.kind in _POSITIONAL)
    return count if bound else max(count - 1, 0)


def class_members(cls: type) -> Dict[str, Member]:
    """Public members of ``cls``: annotated attributes, properties and methods."""
    members: Dict[str, Member] = {}

    for klass in reversed(inspect.getmro(cls)):
        try:
            annotations = inspect.get_annotations(klass)
        except NameError as e:
            logger.debug("Unresolved annotation on %s: %s", klass.__qualname__, e)
            continue
        for name in annotations:
            if not name.startswith("__"):
                members[name] = Member(name, MemberKind.ATTRIBUTE, 0)

    for name in dir(cls):
        if name.startswith("__"):
            continue
        raw = inspect.getattr_static(cls, name)
        if isinstance(raw, property):
            members[name] = Member(name, MemberKind.ATTRIBUTE, 0)
        elif isinstance(raw, (staticmethod, classmethod)):
            arity = positional_arity(getattr(cls, name), bound=True)
            if arity is not None:
                members[name] = Member(name, MemberKind.METHOD, arity)
        elif inspect.isfunction(raw):
            arity = positional_arity(raw, bound=False)
            if arity is not None:
                members[name] = Member(name, MemberKind.METHOD, arity)
        elif name not in members:
            members[name] = Member(name, MemberKind.ATTRIBUTE, 0)

    return members


def lookup_members(entry: TypeMapEntry) -> Optional[Dict[str, Member]]:
    """
    Import the module of ``entry`` and list the members of its class.

    Returns None if the module cannot be imported or does not define the class.
    """
    if entry.module == "builtins":
        return {}
    try:
        module = importlib.import_module(entry.module)
    except ImportError as e:
        logger.debug("Cannot import %s: %s", entry.module, e)
        return None

    cls = getattr(module, entry.type_name, None)
    if not inspect.isclass(cls):
        logger.debug("%s is not a class", entry.qualified_name)
        return None
    return class_members(cls)

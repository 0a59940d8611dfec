"""
Python code generator module.

Generates dataclass models and a graphql-core binding module from a schema.
"""

from .generator import PythonGenerator, create_python_generator
from .naming import PythonNaming
from .config import PYTHON_BUILTIN_TYPE_MAP, PythonConfig
from .introspect import lookup_members

__all__ = [
    # Generator
    "PythonGenerator",
    "create_python_generator",
    # Naming
    "PythonNaming",
    # Configuration
    "PythonConfig",
    "PYTHON_BUILTIN_TYPE_MAP",
    # Introspection
    "lookup_members",
]

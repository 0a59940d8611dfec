"""Syntax checking for generated Python source."""

import ast

from ...core.errors import FormatError


def check_syntax(source: str, filename: str = "<generated>"):
    """
    Raises:
        FormatError: ``source`` is not valid Python
    """
    try:
        ast.parse(source, filename=filename)
    except SyntaxError as e:
        raise FormatError(f"{filename}:{e.lineno}: {e.msg}") from e

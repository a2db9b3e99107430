"""Semantic versions with configurable comparison operators."""

from .compare import compare, compare_pre_release, intersects, satisfies
from .models import Version
from .parser import is_valid, parse, parse_dependency_token
from .syntax import DEFAULT_SYNTAX, OperatorRole, OperatorSyntax

__all__ = [
    "DEFAULT_SYNTAX",
    "OperatorRole",
    "OperatorSyntax",
    "Version",
    "compare",
    "compare_pre_release",
    "intersects",
    "is_valid",
    "parse",
    "parse_dependency_token",
    "satisfies",
]

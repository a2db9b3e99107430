"""Operator syntax configuration for version constraints."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Pattern

# Version grammar following the optional operator token. The leading "v" is a
# common tag convention and carries no meaning.
_IDENTIFIERS = r"[0-9A-Za-z]+(?:[.\-][0-9A-Za-z]+)*"
SEMVER_PATTERN = (
    r"v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    rf"(?:-(?P<pre_release>{_IDENTIFIERS}))?"
    rf"(?:\+(?P<build_metadata>{_IDENTIFIERS}))?"
)


class OperatorRole(Enum):
    """Logical comparison roles an operator symbol can be bound to."""
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"


@dataclass(frozen=True)
class OperatorSyntax:
    """Symbols for the four operator roles plus the regex fragment matching them.

    The fragment is anchored to the start of a version string and combined
    with the version grammar when the syntax is built, so an invalid fragment
    raises ``re.error`` here rather than on every parse.
    """
    gt: str = ">"
    gte: str = ">="
    lt: str = "<"
    lte: str = "<="
    pattern: str = r"[>|<]+=?"
    regex: Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        fragment = self.pattern
        if fragment.startswith("^"):
            fragment = fragment[1:]
        if fragment.endswith("$") and not fragment.endswith("\\$"):
            fragment = fragment[:-1]
        object.__setattr__(
            self, "regex", re.compile(rf"^(?P<operator>{fragment})?{SEMVER_PATTERN}$")
        )

    def symbol(self, role: OperatorRole) -> str:
        """Return the symbol bound to role."""
        return {
            OperatorRole.GT: self.gt,
            OperatorRole.GTE: self.gte,
            OperatorRole.LT: self.lt,
            OperatorRole.LTE: self.lte,
        }[role]

    def role_of(self, symbol: str) -> Optional[OperatorRole]:
        """Return the role bound to symbol, or None for "" and unknown symbols."""
        if not symbol:
            return None
        for role in (OperatorRole.GTE, OperatorRole.GT, OperatorRole.LTE, OperatorRole.LT):
            if self.symbol(role) == symbol:
                return role
        return None


DEFAULT_SYNTAX = OperatorSyntax()

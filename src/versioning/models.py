"""Data models for versioning and constraint evaluation."""

from dataclasses import dataclass, field, replace

from .compare import compare, satisfies
from .syntax import DEFAULT_SYNTAX, OperatorRole, OperatorSyntax


@dataclass(frozen=True)
class Version:
    """A semantic version with an optional comparison operator.

    A Version carrying an operator acts as a constraint; see satisfied_by().
    The syntax it was parsed with decides which role its operator plays and
    is not part of equality.
    """
    major: int = 0
    minor: int = 0
    patch: int = 0
    pre_release: str = ""
    build_metadata: str = ""
    operator: str = ""
    syntax: OperatorSyntax = field(default=DEFAULT_SYNTAX, repr=False, compare=False)

    def __str__(self) -> str:
        """Canonical form v{major}.{minor}.{patch}[-pre][+build], without operator."""
        s = f"v{self.major}.{self.minor}.{self.patch}"
        if self.pre_release:
            s += f"-{self.pre_release}"
        if self.build_metadata:
            s += f"+{self.build_metadata}"
        return s

    def constraint_string(self) -> str:
        """Canonical form with the operator reattached."""
        return f"{self.operator}{self}"

    @property
    def role(self):
        """OperatorRole of the operator, or None for exact match."""
        return self.syntax.role_of(self.operator)

    def base(self) -> "Version":
        """Return this version without its operator."""
        return replace(self, operator="")

    def with_role(self, role: OperatorRole) -> "Version":
        """Return this version with the syntax's symbol for role as operator."""
        return replace(self, operator=self.syntax.symbol(role))

    def satisfied_by(self, candidate: "Version") -> bool:
        return satisfies(self, candidate)

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) < 0

    def __le__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) <= 0

    def __gt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) > 0

    def __ge__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) >= 0

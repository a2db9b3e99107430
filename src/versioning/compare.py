"""Version ordering and constraint evaluation.

compare() is the single ordering used by constraint checks and by the
resolver's conflict detection. Build metadata never takes part in it.
"""

import re
from typing import TYPE_CHECKING, List

from .syntax import OperatorRole

if TYPE_CHECKING:  # pragma: no cover
    from .models import Version

_PRE_RELEASE_SPLIT = re.compile(r"[.\-]")


def _sign(a, b) -> int:
    return (a > b) - (a < b)


def _identifiers(pre_release: str) -> List[str]:
    return [part for part in _PRE_RELEASE_SPLIT.split(pre_release) if part]


def compare_pre_release(a: str, b: str) -> int:
    """Order two pre-release strings.

    A missing pre-release outranks any pre-release. Otherwise identifiers are
    compared position by position as plain strings, the shorter sequence being
    padded with empty identifiers.
    """
    if not a and not b:
        return 0
    if not a:
        return 1
    if not b:
        return -1

    left = _identifiers(a)
    right = _identifiers(b)
    width = max(len(left), len(right))
    left += [""] * (width - len(left))
    right += [""] * (width - len(right))

    for x, y in zip(left, right):
        if x != y:
            return _sign(x, y)
    return 0


def compare(a: "Version", b: "Version") -> int:
    """Return 1, 0 or -1 as a is greater than, equal to or less than b."""
    for x, y in ((a.major, b.major), (a.minor, b.minor), (a.patch, b.patch)):
        if x != y:
            return _sign(x, y)
    return compare_pre_release(a.pre_release, b.pre_release)


def satisfies(constraint: "Version", candidate: "Version") -> bool:
    """Test candidate against the operator carried by constraint.

    Only the constraint's operator is consulted; an empty or unrecognized
    operator requires an exact match.
    """
    i = compare(constraint, candidate)
    role = constraint.syntax.role_of(constraint.operator)

    if role is OperatorRole.GTE:
        return i <= 0
    if role is OperatorRole.GT:
        return i < 0
    if role is OperatorRole.LTE:
        return i >= 0
    if role is OperatorRole.LT:
        return i > 0
    return i == 0


def _bounds(c: "Version"):
    """Return (lower, lower_inclusive, upper, upper_inclusive); None is unbounded."""
    role = c.syntax.role_of(c.operator)
    if role is OperatorRole.GTE:
        return c, True, None, False
    if role is OperatorRole.GT:
        return c, False, None, False
    if role is OperatorRole.LTE:
        return None, False, c, True
    if role is OperatorRole.LT:
        return None, False, c, False
    return c, True, c, True


def _tighter(a, a_in: bool, b, b_in: bool, sign: int):
    """Pick the tighter of two bounds; sign 1 keeps the greater, -1 the lesser."""
    if a is None:
        return b, b_in
    if b is None:
        return a, a_in
    i = compare(a, b) * sign
    if i > 0:
        return a, a_in
    if i < 0:
        return b, b_in
    return a, a_in and b_in


def intersects(a: "Version", b: "Version") -> bool:
    """Return True when some version can satisfy both constraints a and b.

    Each constraint is read as an interval over compare() ordering; the
    ordering is treated as dense, so ">v1.0.0" and "<v1.0.1" overlap.
    """
    a_lo, a_lo_in, a_hi, a_hi_in = _bounds(a)
    b_lo, b_lo_in, b_hi, b_hi_in = _bounds(b)
    lo, lo_in = _tighter(a_lo, a_lo_in, b_lo, b_lo_in, 1)
    hi, hi_in = _tighter(a_hi, a_hi_in, b_hi, b_hi_in, -1)

    if lo is None or hi is None:
        return True
    i = compare(lo, hi)
    if i == 0:
        return lo_in and hi_in
    return i < 0

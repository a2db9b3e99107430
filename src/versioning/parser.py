"""Version and dependency-token parsing utilities."""

from typing import Optional, Tuple

from .models import Version
from .syntax import DEFAULT_SYNTAX, OperatorSyntax

_UINT16_MAX = 0xFFFF


def _uint16(digits: str) -> int:
    """Parse a digit run as an unsigned 16-bit value; out of range gives 0."""
    try:
        value = int(digits)
    except (TypeError, ValueError):
        return 0
    return value if value <= _UINT16_MAX else 0


def parse(text: Optional[str], syntax: OperatorSyntax = DEFAULT_SYNTAX) -> Version:
    """Parse a version string, optionally prefixed by an operator.

    Strings that are not valid versions degrade to the zero version (v0.0.0,
    no operator) instead of raising. Use is_valid() when "invalid" must be
    told apart from an explicit v0.0.0.
    """
    if not text:
        return Version(syntax=syntax)
    m = syntax.regex.match(text.strip())
    if not m:
        return Version(syntax=syntax)
    return Version(
        major=_uint16(m.group("major")),
        minor=_uint16(m.group("minor")),
        patch=_uint16(m.group("patch")),
        pre_release=m.group("pre_release") or "",
        build_metadata=m.group("build_metadata") or "",
        operator=m.group("operator") or "",
        syntax=syntax,
    )


def is_valid(text: Optional[str], syntax: OperatorSyntax = DEFAULT_SYNTAX) -> bool:
    """Return True when text matches the version grammar under syntax."""
    if not text:
        return False
    return syntax.regex.match(text.strip()) is not None


def tokenize_rightmost_colon(s: str) -> Tuple[str, Optional[str]]:
    """Return (identifier, spec or None) using the rightmost-colon rule."""
    s = s.strip()
    if ':' not in s:
        return s, None
    parts = s.rsplit(':', 1)
    identifier = parts[0].strip()
    spec_part = parts[1].strip() if len(parts) > 1 else ''
    spec = spec_part if spec_part else None
    return identifier, spec


def parse_dependency_token(token: str) -> Tuple[str, Optional[str]]:
    """Split a CLI token such as ``owner/mod:>=v1.2.0`` into repo and constraint.

    A missing constraint or the literal "latest" yields None.
    """
    repo, spec = tokenize_rightmost_colon(token)
    if spec is not None and spec.lower() == "latest":
        spec = None
    return repo, spec

"""Tests for configurable operator syntax."""

import re

import pytest

from versioning import DEFAULT_SYNTAX, OperatorRole, OperatorSyntax, is_valid, parse, satisfies

PLUS_MINUS = OperatorSyntax(gt="+", gte="+=", lt="-", lte="-=", pattern=r"[\+|-]+=?")


class TestOperatorSyntax:
    """Test operator symbol binding and regex construction."""

    def test_default_symbols(self):
        """Test the default syntax binds the usual comparison symbols."""
        assert DEFAULT_SYNTAX.symbol(OperatorRole.GT) == ">"
        assert DEFAULT_SYNTAX.symbol(OperatorRole.GTE) == ">="
        assert DEFAULT_SYNTAX.symbol(OperatorRole.LT) == "<"
        assert DEFAULT_SYNTAX.symbol(OperatorRole.LTE) == "<="

    def test_role_of(self):
        """Test symbols map back to roles; empty and unknown map to None."""
        assert DEFAULT_SYNTAX.role_of(">=") is OperatorRole.GTE
        assert DEFAULT_SYNTAX.role_of("<") is OperatorRole.LT
        assert DEFAULT_SYNTAX.role_of("") is None
        assert DEFAULT_SYNTAX.role_of("~") is None

    def test_default_pattern_accepts_operator_runs(self):
        """Test a run like >> is matched by the default syntax and reads as exact match."""
        v = parse(">>v1.0.0")

        assert is_valid(">>v1.0.0")
        assert v.operator == ">>"
        assert v.role is None
        assert satisfies(v, parse("v1.0.0"))
        assert not satisfies(v, parse("v1.0.1"))

    def test_invalid_pattern_raises_at_construction(self):
        """Test a broken regex fragment fails when the syntax is built."""
        with pytest.raises(re.error):
            OperatorSyntax(pattern="[>")

    def test_anchors_in_fragment_are_tolerated(self):
        """Test ^ and $ around the fragment do not break matching."""
        syntax = OperatorSyntax(pattern=r"^[><]=?$")

        assert parse(">=v1.0.0", syntax).operator == ">="

    def test_syntax_is_immutable(self):
        """Test the syntax cannot be mutated in place."""
        with pytest.raises(AttributeError):
            DEFAULT_SYNTAX.gt = "+"  # type: ignore[misc]


class TestCustomSyntax:
    """Test evaluation under a non-default operator syntax."""

    @pytest.mark.parametrize("text,role", [
        ("+v1.0.0", OperatorRole.GT),
        ("+=v1.0.0", OperatorRole.GTE),
        ("-v1.0.0", OperatorRole.LT),
        ("-=v1.0.0", OperatorRole.LTE),
    ])
    def test_parses_custom_operators(self, text, role):
        """Test each custom symbol parses to its role."""
        v = parse(text, PLUS_MINUS)

        assert v.role is role
        assert str(v) == "v1.0.0"

    @pytest.mark.parametrize("custom,default", [
        ("+=v1.0.0", ">=v1.0.0"),
        ("+v1.0.0", ">v1.0.0"),
        ("-=v1.0.0", "<=v1.0.0"),
        ("-v1.0.0", "<v1.0.0"),
        ("v1.0.0", "v1.0.0"),
    ])
    def test_evaluates_like_defaults(self, custom, default):
        """Test custom constraints agree with their default-syntax twins."""
        for candidate in ("v0.9.9", "v1.0.0", "v1.0.1"):
            assert satisfies(parse(custom, PLUS_MINUS), parse(candidate)) == \
                satisfies(parse(default), parse(candidate))

    def test_default_symbols_rejected(self):
        """Test default symbols are not valid under a custom syntax."""
        assert not is_valid(">=v1.0.0", PLUS_MINUS)
        assert str(parse(">=v1.0.0", PLUS_MINUS)) == "v0.0.0"

    def test_matched_but_unbound_symbol_means_exact(self):
        """Test an operator matched by the pattern but bound to no role is exact match."""
        v = parse("+-v1.0.0", PLUS_MINUS)

        assert v.operator == "+-"
        assert v.role is None
        assert satisfies(v, parse("v1.0.0"))
        assert not satisfies(v, parse("v1.0.1"))

"""Tests for version ordering and constraint evaluation."""

import itertools

import pytest

from versioning import compare, compare_pre_release, intersects, parse, satisfies

ORDERED = [
    "v0.0.1",
    "v0.1.0",
    "v1.0.0-alpha",
    "v1.0.0-alpha.1",
    "v1.0.0-alpha.beta",
    "v1.0.0-beta",
    "v1.0.0",
    "v1.0.1",
    "v1.2.0",
    "v2.0.0",
]


class TestCompare:
    """Test the total order over versions."""

    @pytest.mark.parametrize("text", ORDERED)
    def test_reflexive(self, text):
        """Test every version compares equal to itself."""
        v = parse(text)
        assert compare(v, v) == 0

    def test_antisymmetric(self):
        """Test swapping the arguments negates the result."""
        for a, b in itertools.product(ORDERED, repeat=2):
            assert compare(parse(a), parse(b)) == -compare(parse(b), parse(a))

    def test_transitive(self):
        """Test ordering holds across every chain of three."""
        for a, b, c in itertools.combinations(ORDERED, 3):
            va, vb, vc = parse(a), parse(b), parse(c)
            assert compare(va, vb) == -1
            assert compare(vb, vc) == -1
            assert compare(va, vc) == -1

    def test_numeric_fields_compare_as_integers(self):
        """Test 10 sorts after 9."""
        assert compare(parse("v1.10.0"), parse("v1.9.0")) == 1

    def test_release_outranks_pre_release(self):
        """Test v1.0.0-alpha < v1.0.0."""
        assert compare(parse("v1.0.0-alpha"), parse("v1.0.0")) == -1
        assert compare(parse("v1.0.0"), parse("v1.0.0-alpha")) == 1

    def test_build_metadata_ignored(self):
        """Test build metadata never affects ordering."""
        assert compare(parse("v1.0.0+build"), parse("v1.0.0")) == 0
        assert compare(parse("v1.0.0+a"), parse("v1.0.0+b")) == 0

    def test_operator_ignored(self):
        """Test the operator takes no part in ordering."""
        assert compare(parse(">=v1.0.0"), parse("<v1.0.0")) == 0

    def test_rich_comparisons(self):
        """Test Version sorts by compare()."""
        versions = [parse(t) for t in reversed(ORDERED)]
        assert [str(v) for v in sorted(versions)] == ORDERED
        assert parse("v1.0.0") > parse("v1.0.0-rc.1")
        assert parse("v1.0.0+x") >= parse("v1.0.0")


class TestComparePreRelease:
    """Test pre-release identifier ordering."""

    def test_both_empty(self):
        """Test no pre-release on either side is equal."""
        assert compare_pre_release("", "") == 0

    def test_identifiers_compare_as_strings(self):
        """Test identifiers are not numeric-aware."""
        assert compare_pre_release("rc.10", "rc.9") == -1

    def test_shorter_sequence_padded(self):
        """Test a missing identifier sorts before any present one."""
        assert compare_pre_release("alpha", "alpha.1") == -1

    def test_dot_and_hyphen_both_split(self):
        """Test . and - delimit identifiers alike."""
        assert compare_pre_release("beta-2", "beta.2") == 0


class TestSatisfies:
    """Test constraint evaluation."""

    @pytest.mark.parametrize("constraint,candidate,expected", [
        (">=v1.0.0", "v1.0.0", True),
        (">=v1.0.0", "v0.9.9", False),
        (">=v1.0.0", "v1.0.1", True),
        (">v1.0.0", "v1.0.0", False),
        (">v1.0.0", "v1.0.1", True),
        ("<=v1.0.0", "v1.0.0", True),
        ("<=v1.0.0", "v1.0.1", False),
        ("<v1.0.0", "v1.0.0", False),
        ("<v1.0.0", "v1.0.0-rc.1", True),
        ("v1.0.0", "v1.0.0", True),
        ("v1.0.0", "v1.0.1", False),
        ("v1.0.0", "v1.0.0+build", True),
    ])
    def test_operator_semantics(self, constraint, candidate, expected):
        """Test each operator role against a candidate."""
        assert satisfies(parse(constraint), parse(candidate)) is expected

    def test_candidate_operator_ignored(self):
        """Test only the constraint's operator governs the check."""
        assert satisfies(parse(">=v1.0.0"), parse("<v2.0.0"))
        assert not satisfies(parse("v2.0.0"), parse(">=v1.0.0"))

    def test_satisfied_by_method(self):
        """Test Version.satisfied_by delegates to satisfies."""
        assert parse("<v2.0.0").satisfied_by(parse("v1.9.9"))


class TestIntersects:
    """Test whether two constraints can hold at once."""

    @pytest.mark.parametrize("a,b,expected", [
        (">=v1.0.0", ">=v2.0.0", True),
        (">=v1.0.0", "<v1.0.0", False),
        (">=v1.0.0", "<=v1.0.0", True),
        (">v1.0.0", "<=v1.0.0", False),
        (">v1.0.0", "<v1.0.1", True),
        ("v1.0.0", "v2.0.0", False),
        ("v1.0.0", "v1.0.0", True),
        ("v1.5.0", ">=v1.0.0", True),
        ("v0.5.0", ">=v1.0.0", False),
        ("<v1.0.0", "<=v0.1.0", True),
    ])
    def test_intersection(self, a, b, expected):
        """Test interval intersection in both argument orders."""
        assert intersects(parse(a), parse(b)) is expected
        assert intersects(parse(b), parse(a)) is expected

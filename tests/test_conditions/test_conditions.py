"""Tests for the condition expression evaluator."""

import pytest

from tddbuilder.conditions import evaluate, referenced_fields, values_equal
from tddbuilder.model.expression import And, Eq, Has, Neq, Not, Or, Truthy


# ---------------------------------------------------------------------------
# Unanswered fields
# ---------------------------------------------------------------------------


class TestAbsentFields:
    @pytest.mark.parametrize("value", ["cloud", "", 0, None, True, False, []])
    def test_eq_on_absent_field_is_false(self, value):
        assert evaluate(Eq("missing.field", value), {}) is False

    @pytest.mark.parametrize("value", ["cloud", "", 0, None, True, False, []])
    def test_neq_on_absent_field_is_true(self, value):
        assert evaluate(Neq("missing.field", value), {}) is True

    def test_has_on_absent_field_is_false(self):
        assert evaluate(Has("missing.field", "x"), {}) is False

    def test_truthy_on_absent_field_is_false(self):
        assert evaluate(Truthy("missing.field"), {}) is False

    def test_explicit_none_differs_from_absent(self):
        assert evaluate(Eq("a.b", None), {"a.b": None}) is True
        assert evaluate(Eq("a.b", None), {}) is False


# ---------------------------------------------------------------------------
# Comparisons
# ---------------------------------------------------------------------------


class TestComparisons:
    def test_eq_matches(self):
        assert evaluate(Eq("deployment.model", "cloud"), {"deployment.model": "cloud"}) is True

    def test_eq_mismatch(self):
        assert evaluate(Eq("deployment.model", "cloud"), {"deployment.model": "hybrid"}) is False

    def test_neq(self):
        answers = {"deployment.model": "on-premise"}
        assert evaluate(Neq("deployment.model", "cloud"), answers) is True

    def test_booleans_never_equal_numbers(self):
        assert evaluate(Eq("a.b", True), {"a.b": 1}) is False
        assert evaluate(Eq("a.b", 1), {"a.b": True}) is False
        assert evaluate(Eq("a.b", False), {"a.b": 0}) is False

    def test_numbers_compare_by_value(self):
        assert evaluate(Eq("a.b", 2), {"a.b": 2.0}) is True

    def test_has_on_list(self):
        answers = {"privacy.regulations": ["gdpr", "hipaa"]}
        assert evaluate(Has("privacy.regulations", "hipaa"), answers) is True
        assert evaluate(Has("privacy.regulations", "sox"), answers) is False

    def test_has_on_scalar_is_false(self):
        assert evaluate(Has("a.b", "x"), {"a.b": "x"}) is False

    @pytest.mark.parametrize("value, expected", [(True, True), (False, False), ("", False), ([], False), (["x"], True)])
    def test_truthy(self, value, expected):
        assert evaluate(Truthy("a.b"), {"a.b": value}) is expected


# ---------------------------------------------------------------------------
# Logic
# ---------------------------------------------------------------------------


class TestLogic:
    def test_not(self):
        assert evaluate(Not(Eq("a.b", "x")), {"a.b": "x"}) is False

    def test_and_requires_all(self):
        expr = And((Eq("a", 1), Eq("b", 2)))
        assert evaluate(expr, {"a": 1, "b": 2}) is True
        assert evaluate(expr, {"a": 1, "b": 3}) is False

    def test_or_requires_any(self):
        expr = Or((Eq("a", 1), Eq("b", 2)))
        assert evaluate(expr, {"b": 2}) is True
        assert evaluate(expr, {}) is False

    def test_unknown_node_raises(self):
        with pytest.raises(TypeError):
            evaluate("a == b", {})  # type: ignore[arg-type]


class TestHelpers:
    def test_referenced_fields_in_order_without_duplicates(self):
        expr = And((Eq("a", 1), Or((Not(Has("b", "x")), Truthy("a"), Neq("c", 2)))))
        assert referenced_fields(expr) == ["a", "b", "c"]

    def test_values_equal_is_strict_about_booleans(self):
        assert values_equal(True, True) is True
        assert values_equal(True, 1) is False
        assert values_equal("x", "x") is True

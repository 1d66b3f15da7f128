"""
Unit tests for the Condition Evaluator.
"""

import pytest

from service_filters.app.filters.conditions import ConditionEvaluator
from service_filters.app.filters.models import (
    ContextDomain, FilterCondition, OperatorKind, VariablesContext
)


def payload_condition(field, operator, value):
    return FilterCondition(on=ContextDomain.PAYLOAD, field=field, operator=operator, value=value)


class TestConditionEvaluator:
    """Test cases for ConditionEvaluator."""

    @pytest.fixture
    def evaluator(self):
        """Create ConditionEvaluator instance."""
        return ConditionEvaluator()

    @pytest.fixture
    def variables(self):
        """Create variables context."""
        return VariablesContext(
            payload={
                "count": 42,
                "count_text": "42",
                "vip": True,
                "tags": ["a", "b", "c"],
                "title": "Weekly digest",
                "missing_value": None,
                "meta": {"plan": "pro"},
            },
            subscriber={"firstName": "Ada", "age": 36},
        )

    def test_number_equals_string_literal(self, evaluator, variables):
        """Resolved 42 against literal "42" is equal after coercion."""
        assert evaluator.evaluate(variables, payload_condition("count", OperatorKind.EQUAL, "42")) is True

    def test_boolean_equals_true_literal(self, evaluator, variables):
        assert evaluator.evaluate(variables, payload_condition("vip", OperatorKind.EQUAL, "true")) is True
        assert evaluator.evaluate(variables, payload_condition("vip", OperatorKind.EQUAL, "false")) is False

    def test_string_equals_number_literal(self, evaluator, variables):
        assert evaluator.evaluate(variables, payload_condition("count_text", OperatorKind.EQUAL, 42)) is True

    def test_not_equal(self, evaluator, variables):
        assert evaluator.evaluate(variables, payload_condition("count", OperatorKind.NOT_EQUAL, "41")) is True
        assert evaluator.evaluate(variables, payload_condition("count", OperatorKind.NOT_EQUAL, "42")) is False

    @pytest.mark.parametrize("operator,literal,expected", [
        (OperatorKind.LARGER, "41", True),
        (OperatorKind.LARGER, "42", False),
        (OperatorKind.SMALLER, "43", True),
        (OperatorKind.SMALLER, "42", False),
        (OperatorKind.LARGER_EQUAL, "42", True),
        (OperatorKind.LARGER_EQUAL, "43", False),
        (OperatorKind.SMALLER_EQUAL, "42", True),
        (OperatorKind.SMALLER_EQUAL, "41", False),
    ])
    def test_ordering_operators(self, evaluator, variables, operator, literal, expected):
        assert evaluator.evaluate(variables, payload_condition("count", operator, literal)) is expected

    def test_ordering_against_unparseable_literal(self, evaluator, variables):
        """NaN never orders against a number."""
        assert evaluator.evaluate(variables, payload_condition("count", OperatorKind.LARGER, "abc")) is False
        assert evaluator.evaluate(variables, payload_condition("count", OperatorKind.SMALLER_EQUAL, "abc")) is False

    def test_ordering_on_missing_field(self, evaluator, variables):
        assert evaluator.evaluate(variables, payload_condition("nope", OperatorKind.LARGER, "1")) is False

    def test_list_containment(self, evaluator, variables):
        assert evaluator.evaluate(variables, payload_condition("tags", OperatorKind.IN, "b")) is True
        assert evaluator.evaluate(variables, payload_condition("tags", OperatorKind.NOT_IN, "b")) is False
        assert evaluator.evaluate(variables, payload_condition("tags", OperatorKind.IN, "z")) is False
        assert evaluator.evaluate(variables, payload_condition("tags", OperatorKind.NOT_IN, "z")) is True

    def test_string_containment(self, evaluator, variables):
        assert evaluator.evaluate(variables, payload_condition("title", OperatorKind.IN, "digest")) is True
        assert evaluator.evaluate(variables, payload_condition("title", OperatorKind.NOT_IN, "daily")) is True

    def test_containment_on_unsupported_value(self, evaluator, variables):
        """Both IN and NOT_IN are non-matches when containment is unsupported."""
        for field in ("count", "missing_value", "nope", "meta"):
            assert evaluator.evaluate(variables, payload_condition(field, OperatorKind.IN, "x")) is False
            assert evaluator.evaluate(variables, payload_condition(field, OperatorKind.NOT_IN, "x")) is False

    def test_unknown_operator(self, evaluator, variables):
        assert evaluator.evaluate(variables, payload_condition("count", None, "42")) is False

    def test_subscriber_domain(self, evaluator, variables):
        condition = FilterCondition(
            on=ContextDomain.SUBSCRIBER, field="firstName", operator=OperatorKind.EQUAL, value="Ada"
        )
        assert evaluator.evaluate(variables, condition) is True

    def test_dotted_field_is_a_single_key(self, evaluator, variables):
        """"meta.plan" names one key; nested objects are not walked."""
        assert evaluator.evaluate(variables, payload_condition("meta.plan", OperatorKind.EQUAL, "pro")) is False

    def test_unset_literal_matches_zero(self, evaluator):
        variables = VariablesContext(payload={"count": 0})

        assert evaluator.evaluate(variables, payload_condition("count", OperatorKind.EQUAL, None)) is True

    def test_missing_field_equals_missing_literal(self, evaluator, variables):
        """An absent value only equals an absent literal."""
        assert evaluator.evaluate(variables, payload_condition("nope", OperatorKind.EQUAL, None)) is True
        assert evaluator.evaluate(variables, payload_condition("nope", OperatorKind.EQUAL, "x")) is False

    def test_unknown_domain_resolves_nothing(self, evaluator, variables):
        condition = FilterCondition(on=None, field="count", operator=OperatorKind.EQUAL, value="42")
        assert evaluator.evaluate(variables, condition) is False


"""
Condition evaluation for step filters.
"""

from typing import Any, Optional

from shared.logging import get_logger
from .coercion import coerce
from .models import FilterCondition, OperatorKind, VariablesContext

CONTAINER_TYPES = (str, list, tuple, set, frozenset)


class ConditionEvaluator:
    """Applies a condition's operator to a resolved value and its coerced literal."""

    def __init__(self):
        self.logger = get_logger("filters.conditions")

    def evaluate(self, variables: VariablesContext, condition: FilterCondition) -> bool:
        """Evaluate a single condition."""
        resolved = variables.lookup(condition.on, condition.field)
        expected = coerce(resolved, condition.value)
        operator = condition.operator

        if operator == OperatorKind.EQUAL:
            return _strict_equal(resolved, expected)

        elif operator == OperatorKind.NOT_EQUAL:
            return not _strict_equal(resolved, expected)

        elif operator in (OperatorKind.LARGER, OperatorKind.SMALLER,
                          OperatorKind.LARGER_EQUAL, OperatorKind.SMALLER_EQUAL):
            return self._compare(operator, resolved, expected)

        elif operator in (OperatorKind.IN, OperatorKind.NOT_IN):
            contained = self._contains(resolved, expected)
            if contained is None:
                self.logger.warning(
                    "Containment check on unsupported value",
                    field=condition.field,
                    on=condition.on.value if condition.on else None,
                    value_type=type(resolved).__name__
                )
                return False
            return contained if operator == OperatorKind.IN else not contained

        else:
            self.logger.warning("Unknown condition operator", field=condition.field)
            return False

    def _compare(self, operator: OperatorKind, resolved: Any, expected: Any) -> bool:
        try:
            if operator == OperatorKind.LARGER:
                return bool(resolved > expected)
            if operator == OperatorKind.SMALLER:
                return bool(resolved < expected)
            if operator == OperatorKind.LARGER_EQUAL:
                return bool(resolved >= expected)
            return bool(resolved <= expected)
        except (TypeError, ArithmeticError):
            # None, mixed types and Decimal NaN have no ordering
            return False

    def _contains(self, resolved: Any, expected: Any) -> Optional[bool]:
        """Containment of ``expected`` in ``resolved``; None if unsupported."""
        if not isinstance(resolved, CONTAINER_TYPES):
            return None
        try:
            return expected in resolved
        except TypeError:
            return None


def _strict_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return bool(left == right)

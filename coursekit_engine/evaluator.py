"""Condition evaluation for triggers.

Equality is strict: operands must agree in type (``"100"`` is not ``100``,
``True`` is not ``1``). Ordering operators coerce both operands to numbers
and evaluate to False, with a diagnostic, when either side is not numeric.
No condition ever raises.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from coursekit_core.conditions import (
    Comparison,
    ComparisonOp,
    Logical,
    LogicalOp,
    UnknownCondition,
    parse_condition,
)
from coursekit_engine.resolver import ReferenceResolver
from coursekit_engine.run_log import LogCategory, RuntimeLogger

_NAN = float("nan")

# Decimal literals as the web player reads them; no "_" separators, no "inf"
_NUMERIC_STRING = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def to_number(value: Any) -> float:
    """Numeric coercion with the rules course authors expect from the web player.

    None is NaN; booleans are 0/1; blank strings are 0; numeric strings are
    parsed; anything else is NaN.
    """
    if value is None:
        return _NAN
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if not _NUMERIC_STRING.fullmatch(text):
            return _NAN
        return float(text)
    return _NAN


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without type coercion."""
    if _is_number(left) and _is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


class ConditionEvaluator:
    """Evaluates condition trees to booleans."""

    def __init__(
        self,
        resolver: ReferenceResolver,
        diagnostics: Optional[RuntimeLogger] = None,
        max_depth: int = 64,
    ):
        self.resolver = resolver
        self.diagnostics = diagnostics if diagnostics is not None else resolver.diagnostics
        self.max_depth = max_depth

    def evaluate(self, condition: Any) -> bool:
        """Evaluate one condition (model or raw mapping)."""
        return self._evaluate(condition, 0)

    def evaluate_all(self, conditions: Iterable[Any]) -> bool:
        """Implicit AND over ``conditions``; an empty list is True."""
        return all(self._evaluate(condition, 0) for condition in conditions)

    def _evaluate(self, condition: Any, depth: int) -> bool:
        if depth > self.max_depth:
            self.diagnostics.warn(
                LogCategory.CONDITION,
                f"Condition nesting exceeds {self.max_depth} levels; treated as false",
            )
            return False

        try:
            condition = parse_condition(condition)
        except (ValueError, ValidationError) as exc:
            self.diagnostics.warn(
                LogCategory.CONDITION,
                f"Malformed condition treated as false: {exc}",
            )
            return False

        if isinstance(condition, Comparison):
            return self._evaluate_comparison(condition)
        elif isinstance(condition, Logical):
            return self._evaluate_logical(condition, depth)
        elif isinstance(condition, UnknownCondition):
            self.diagnostics.warn(
                LogCategory.CONDITION,
                f"Unknown condition operator: {condition.op}",
                condition.model_dump(),
            )
            return False
        return False

    def _evaluate_comparison(self, condition: Comparison) -> bool:
        left = self.resolver.resolve(condition.left)
        right = self.resolver.resolve(condition.right)

        if condition.op == ComparisonOp.EQUALS:
            return strict_equals(left, right)
        if condition.op == ComparisonOp.NOT_EQUALS:
            return not strict_equals(left, right)

        left_num = to_number(left)
        right_num = to_number(right)
        if math.isnan(left_num) or math.isnan(right_num):
            self.diagnostics.warn(
                LogCategory.CONDITION,
                f"Comparison operands must be numbers ({condition.op.value})",
                {"left": left, "right": right},
            )
            return False

        if condition.op == ComparisonOp.GT:
            return left_num > right_num
        if condition.op == ComparisonOp.GTE:
            return left_num >= right_num
        if condition.op == ComparisonOp.LT:
            return left_num < right_num
        return left_num <= right_num

    def _evaluate_logical(self, condition: Logical, depth: int) -> bool:
        children = condition.conditions
        if condition.op == LogicalOp.AND:
            return all(self._evaluate(child, depth + 1) for child in children)
        if condition.op == LogicalOp.OR:
            return any(self._evaluate(child, depth + 1) for child in children)
        # not: only the first child counts
        if not children:
            return False
        return not self._evaluate(children[0], depth + 1)

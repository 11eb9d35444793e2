"""Condition models for Coursekit triggers.

A condition is a tree built from three variants:

- ``Comparison``: ``equals``/``notEquals``/``gt``/``gte``/``lt``/``lte`` over
  two operands, each a literal or a ``{"ref": path}`` reference.
- ``Logical``: ``and``/``or``/``not`` over nested conditions.
- ``UnknownCondition``: any other operator tag. It is kept rather than
  rejected so the evaluator can report it and fall back to ``False``.

Documents are trees by construction; nothing here follows references
between conditions.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


# ============================================================================
# Operators
# ============================================================================


class ComparisonOp(str, Enum):
    """Binary comparison operators."""
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"


class LogicalOp(str, Enum):
    """Logical combinators over nested conditions."""
    AND = "and"
    OR = "or"
    NOT = "not"


ORDERING_OPS = frozenset({ComparisonOp.GT, ComparisonOp.GTE, ComparisonOp.LT, ComparisonOp.LTE})

_COMPARISON_TAGS = frozenset(op.value for op in ComparisonOp)
_LOGICAL_TAGS = frozenset(op.value for op in LogicalOp)


# ============================================================================
# Variants
# ============================================================================


class Comparison(BaseModel):
    """Compare two resolved operands."""

    op: ComparisonOp
    left: Any = None
    right: Any = None

    model_config = ConfigDict(frozen=True)


class Logical(BaseModel):
    """Combine nested conditions. ``not`` only looks at its first child."""

    op: LogicalOp
    conditions: list["Condition"] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class UnknownCondition(BaseModel):
    """Condition with an operator the evaluator does not know."""

    op: str

    model_config = ConfigDict(frozen=True, extra="allow")


def parse_condition(raw: Any) -> Any:
    """Turn a raw mapping into the matching condition variant.

    Already-parsed variants pass through unchanged.
    """
    if isinstance(raw, (Comparison, Logical, UnknownCondition)):
        return raw
    if not isinstance(raw, dict):
        raise ValueError(f"Condition must be a mapping, got {type(raw).__name__}")

    op = raw.get("op")
    if op in _COMPARISON_TAGS:
        return Comparison.model_validate(raw)
    if op in _LOGICAL_TAGS:
        return Logical.model_validate(raw)
    return UnknownCondition.model_validate({**raw, "op": str(op)})


Condition = Annotated[
    Union[Comparison, Logical, UnknownCondition],
    BeforeValidator(parse_condition),
]

Logical.model_rebuild()

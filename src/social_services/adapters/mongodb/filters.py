"""MongoDB adapter – translate expression trees, sorts and projections to BSON."""
from __future__ import annotations

import re
from typing import Any, Sequence

from social_services.application.pagination import Sort
from social_services.application.query.expression import (
    And,
    Compare,
    Contains,
    Eq,
    Expression,
    Or,
)
from social_services.application.query.handle import Projection

__all__ = ["to_mongo_filter", "to_mongo_projection", "to_mongo_sort"]


def to_mongo_filter(expression: Expression | None) -> dict[str, Any]:
    """Return the MongoDB filter document for *expression* (``{}`` for none)."""
    if expression is None:
        return {}
    if isinstance(expression, Eq):
        return {expression.field: expression.value}
    if isinstance(expression, Compare):
        value = expression.value
        if isinstance(value, tuple):
            value = list(value)
        return {expression.field: {f"${expression.op.value}": value}}
    if isinstance(expression, Contains):
        condition: dict[str, Any] = {"$regex": re.escape(expression.term)}
        if not expression.case_sensitive:
            condition["$options"] = "i"
        return {expression.field: condition}
    if isinstance(expression, And):
        return {"$and": [to_mongo_filter(op) for op in expression.operands]}
    if isinstance(expression, Or):
        return {"$or": [to_mongo_filter(op) for op in expression.operands]}
    raise TypeError(f"Cannot translate {type(expression).__name__} to a MongoDB filter")


def to_mongo_sort(sorts: Sequence[Sort]) -> list[tuple[str, int]]:
    return [(s.field, -1 if s.descending else 1) for s in sorts]


def to_mongo_projection(projection: Projection | None) -> dict[str, int] | None:
    if projection is None or projection.is_empty:
        return None
    spec = {name: 1 for name in projection.include}
    spec.update({name: 0 for name in projection.exclude})
    return spec

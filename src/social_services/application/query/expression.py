"""Application query – immutable filter-expression tree.

Leaves (:class:`Eq`, :class:`Compare`, :class:`Contains`) test one document
field; :class:`And` / :class:`Or` combine them. Trees are built
incrementally by :class:`~social_services.application.query.builder.QueryBuilder`
and handed whole to a storage adapter, which either translates them
(``adapters.mongodb.filters``) or evaluates them with :meth:`Expression.matches`.

Example::

    expr = Eq("status", "active") & (Contains("name", "ann") | Contains("email", "ann"))
    expr.matches({"status": "active", "name": "Joanna"})  # True
"""
from __future__ import annotations

import abc
import dataclasses
from enum import Enum
from typing import Any, Iterable, Mapping

__all__ = [
    "And",
    "Compare",
    "ComparisonOp",
    "Contains",
    "Eq",
    "Expression",
    "MISSING",
    "Or",
    "all_of",
    "any_of",
    "resolve_path",
]


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def resolve_path(document: Mapping[str, Any], path: str) -> Any:
    """Return the value at dotted *path* in *document*, or :data:`MISSING`."""
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return MISSING
        current = current[part]
    return current


class ComparisonOp(str, Enum):
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    NIN = "nin"
    EXISTS = "exists"


class Expression(abc.ABC):
    """Base node – supports ``&`` / ``|`` composition."""

    @abc.abstractmethod
    def matches(self, document: Mapping[str, Any]) -> bool: ...

    def __and__(self, other: "Expression") -> "Expression":
        return And.of(self, other)

    def __or__(self, other: "Expression") -> "Expression":
        return Or.of(self, other)


@dataclasses.dataclass(frozen=True)
class Eq(Expression):
    """``field == value``; an array field matches when it contains *value*."""

    field: str
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:
        actual = resolve_path(document, self.field)
        if actual is MISSING:
            return self.value is None
        if isinstance(actual, list) and not isinstance(self.value, list):
            return self.value in actual
        return actual == self.value


@dataclasses.dataclass(frozen=True)
class Compare(Expression):
    """Operator comparison of one field against *value*."""

    field: str
    op: ComparisonOp
    value: Any

    def matches(self, document: Mapping[str, Any]) -> bool:  # noqa: PLR0911
        actual = resolve_path(document, self.field)
        match self.op:
            case ComparisonOp.EXISTS:
                return (actual is not MISSING) == bool(self.value)
            case ComparisonOp.NE:
                return actual is MISSING or actual != self.value
            case ComparisonOp.IN:
                return _any_value(actual, lambda v: v in self.value)
            case ComparisonOp.NIN:
                return not _any_value(actual, lambda v: v in self.value)
        if actual is MISSING or actual is None:
            return False
        try:
            match self.op:
                case ComparisonOp.GT:
                    return actual > self.value
                case ComparisonOp.GTE:
                    return actual >= self.value
                case ComparisonOp.LT:
                    return actual < self.value
                case ComparisonOp.LTE:
                    return actual <= self.value
        except TypeError:
            # mismatched types never compare, as in the document store
            return False
        return False


@dataclasses.dataclass(frozen=True)
class Contains(Expression):
    """Substring match of *term* inside a text field."""

    field: str
    term: str
    case_sensitive: bool = False

    def matches(self, document: Mapping[str, Any]) -> bool:
        actual = resolve_path(document, self.field)
        if actual is MISSING or actual is None:
            return False
        term = self.term if self.case_sensitive else self.term.casefold()

        def hit(value: Any) -> bool:
            if not isinstance(value, str):
                return False
            text = value if self.case_sensitive else value.casefold()
            return term in text

        return _any_value(actual, hit)


@dataclasses.dataclass(frozen=True)
class And(Expression):
    """Conjunction of operands."""

    operands: tuple[Expression, ...]

    @classmethod
    def of(cls, *operands: Expression) -> "And":
        flat: list[Expression] = []
        for op in operands:
            flat.extend(op.operands if isinstance(op, And) else (op,))
        return cls(tuple(flat))

    def matches(self, document: Mapping[str, Any]) -> bool:
        return all(op.matches(document) for op in self.operands)


@dataclasses.dataclass(frozen=True)
class Or(Expression):
    """Disjunction of operands."""

    operands: tuple[Expression, ...]

    @classmethod
    def of(cls, *operands: Expression) -> "Or":
        flat: list[Expression] = []
        for op in operands:
            flat.extend(op.operands if isinstance(op, Or) else (op,))
        return cls(tuple(flat))

    def matches(self, document: Mapping[str, Any]) -> bool:
        return any(op.matches(document) for op in self.operands)


def all_of(*operands: Expression | None) -> Expression | None:
    """AND together the non-``None`` operands (``None`` when there are none)."""
    present = [op for op in operands if op is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return And.of(*present)


def any_of(operands: Iterable[Expression]) -> Expression | None:
    """OR together *operands* (``None`` when empty)."""
    present = list(operands)
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return Or.of(*present)


def _any_value(actual: Any, predicate: Any) -> bool:
    if actual is MISSING:
        return False
    if isinstance(actual, list):
        return any(predicate(v) for v in actual)
    return bool(predicate(actual))

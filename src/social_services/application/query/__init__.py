"""Application query – the list-query construction engine.

Turns a raw URL query (``searchTerm``, filters, ``sort``, ``page``, ``limit``,
``fields``) into an immutable read against a :class:`QueryableHandle`.
"""
from social_services.application.query.builder import QueryBuilder, QueryDescriptor, QuerySettings
from social_services.application.query.expression import (
    And,
    Compare,
    ComparisonOp,
    Contains,
    Eq,
    Expression,
    Or,
    all_of,
    any_of,
)
from social_services.application.query.handle import Document, Projection, QueryableHandle
from social_services.application.query.in_memory import InMemoryQueryableHandle
from social_services.application.query.params import RESERVED_KEYS, normalize_query, parse_query_string

__all__ = [
    "And",
    "Compare",
    "ComparisonOp",
    "Contains",
    "Document",
    "Eq",
    "Expression",
    "InMemoryQueryableHandle",
    "Or",
    "Projection",
    "QueryBuilder",
    "QueryDescriptor",
    "QuerySettings",
    "QueryableHandle",
    "RESERVED_KEYS",
    "all_of",
    "any_of",
    "normalize_query",
    "parse_query_string",
]

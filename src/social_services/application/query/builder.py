"""Application query – QueryBuilder: raw query parameters → filtered, paged reads.

Usage::

    builder = (
        QueryBuilder(users.query(Eq("role", "user")), raw_query)
        .search(["name", "email"])
        .filter()
        .sort()
        .paginate()
        .fields()
    )
    items = await builder.execute()
    meta = await builder.count_total()

Each refining call validates its part of the raw query immediately and
raises :class:`~social_services.kernel.errors.InvalidQueryError` on bad
input, so a malformed request never reaches the store. Nothing is sent to
the handle until :meth:`QueryBuilder.execute` / :meth:`QueryBuilder.count_total`;
both start from the same base handle and the same filter snapshot.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping, Sequence

from social_services.application.pagination import Page, PageRequest, PaginationMeta, Sort, SortDirection
from social_services.application.query.expression import (
    Compare,
    ComparisonOp,
    Contains,
    Eq,
    Expression,
    all_of,
    any_of,
)
from social_services.application.query.handle import Document, Projection, QueryableHandle
from social_services.application.query.params import (
    FIELDS,
    LIMIT,
    MAX_INT64,
    PAGE,
    RESERVED_KEYS,
    SEARCH_TERM,
    SORT,
    coerce_bool,
    coerce_number,
    normalize_query,
    parse_csv,
    parse_positive_int,
    single_value,
    split_list,
    validate_field_name,
)
from social_services.kernel.errors import InvalidQueryError
from social_services.observability.logging import get_logger

__all__ = ["QueryBuilder", "QueryDescriptor", "QuerySettings"]

logger = get_logger(__name__)

UNLIMITED = "all"

_RANGE_SUFFIXES = {"Min": ComparisonOp.GTE, "Max": ComparisonOp.LTE}
_ORDERED_OPS = {ComparisonOp.GT, ComparisonOp.GTE, ComparisonOp.LT, ComparisonOp.LTE}


@dataclasses.dataclass(frozen=True)
class QuerySettings:
    """Defaults applied when the raw query leaves something out."""

    default_limit: int = 10
    max_limit: int = 1000
    default_sort: str = "-createdAt"
    tiebreak_field: str = "_id"

    def __post_init__(self) -> None:
        if self.default_limit < 1:
            raise ValueError("default_limit must be >= 1")
        if self.max_limit < self.default_limit:
            raise ValueError("max_limit must be >= default_limit")


@dataclasses.dataclass(frozen=True)
class QueryDescriptor:
    """Everything a read needs, fully resolved.

    ``sort`` is empty and ``page_request`` is ``None`` when the corresponding
    builder step was never called.
    """

    filter: Expression | None = None
    sort: tuple[Sort, ...] = ()
    projection: Projection | None = None
    page_request: PageRequest | None = None

    @property
    def skip(self) -> int:
        return self.page_request.skip if self.page_request is not None else 0

    @property
    def limit(self) -> int | None:
        return self.page_request.limit if self.page_request is not None else None

    def apply(self, handle: QueryableHandle) -> QueryableHandle:
        """Refine *handle* with filter, sort, window and projection."""
        if self.filter is not None:
            handle = handle.where(self.filter)
        if self.sort:
            handle = handle.sort_by(self.sort)
        if self.limit is not None:
            handle = handle.skip(self.skip).limit(self.limit)
        if self.projection is not None:
            handle = handle.select(self.projection)
        return handle

    def apply_filter(self, handle: QueryableHandle) -> QueryableHandle:
        """Refine *handle* with the filter only (the count read)."""
        if self.filter is None:
            return handle
        return handle.where(self.filter)


class QueryBuilder:
    """Builds one list read from a scoped handle and a raw query mapping.

    *raw_query* is copied on construction; the caller may reuse or mutate its
    mapping afterwards. The builder itself belongs to a single request.

    *hidden_fields* names document fields (and everything nested under them)
    that clients may not search, filter or sort on.
    """

    def __init__(
        self,
        handle: QueryableHandle,
        raw_query: Mapping[str, Any] | None = None,
        settings: QuerySettings | None = None,
        *,
        hidden_fields: Iterable[str] = (),
    ) -> None:
        self._handle = handle
        self._raw: dict[str, Any] = normalize_query(raw_query or {})
        self._settings = settings or QuerySettings()
        self._hidden = frozenset(hidden_fields)
        self._filter: Expression | None = None
        self._sort: tuple[Sort, ...] = ()
        self._projection: Projection | None = None
        self._page_request: PageRequest | None = None

    @property
    def raw_query(self) -> dict[str, Any]:
        return dict(self._raw)

    # ------------------------------------------------------------------
    # Refining steps
    # ------------------------------------------------------------------

    def search(self, searchable_fields: Sequence[str]) -> "QueryBuilder":
        """Case-insensitive substring match of ``searchTerm`` on any of *searchable_fields*."""
        term = single_value(self._raw, SEARCH_TERM)
        if term is None or not str(term).strip():
            return self
        for field in searchable_fields:
            self._check_field(field, parameter=SEARCH_TERM)
        predicate = any_of(Contains(field, str(term).strip()) for field in searchable_fields)
        self._filter = all_of(self._filter, predicate)
        return self

    def filter(self, range_fields: Iterable[str] = ()) -> "QueryBuilder":
        """Turn every non-reserved key into a predicate.

        ``field=value`` is equality (a repeated key means "any of"),
        ``field[op]=value`` a comparison, and for fields listed in
        *range_fields* ``<field>Min`` / ``<field>Max`` are inclusive bounds.
        """
        ranges = frozenset(range_fields)
        predicates: list[Expression] = []
        for key, value in self._raw.items():
            if key in RESERVED_KEYS:
                continue
            bound = _range_bound(key, ranges)
            if bound is not None:
                field, op = bound
                self._check_field(field, parameter=key)
                predicates.append(_comparison(field, op, value, parameter=key))
                continue
            self._check_field(key, parameter=key)
            if isinstance(value, Mapping):
                if not value:
                    raise InvalidQueryError(f"'{key}' has no operators", parameter=key)
                for op_key, op_value in value.items():
                    predicates.append(_operator_predicate(key, op_key, op_value))
            elif isinstance(value, list):
                predicates.append(Compare(key, ComparisonOp.IN, tuple(value)))
            else:
                predicates.append(Eq(key, value))
        self._filter = all_of(self._filter, *predicates)
        return self

    def sort(self) -> "QueryBuilder":
        """Composite sort from ``sort=a,-b``; falls back to the configured default."""
        tokens = parse_csv(self._raw.get(SORT), parameter=SORT)
        if not tokens:
            tokens = parse_csv(self._settings.default_sort)
        sorts: list[Sort] = []
        seen: set[str] = set()
        for token in tokens:
            criterion = Sort.parse(token)
            self._check_field(criterion.field, parameter=SORT)
            if criterion.field in seen:
                continue
            seen.add(criterion.field)
            sorts.append(criterion)
        self._sort = tuple(sorts)
        return self

    def paginate(self) -> "QueryBuilder":
        self._page_request = self._resolve_page_request()
        return self

    def fields(self) -> "QueryBuilder":
        """Projection from ``fields=name,email`` or ``fields=-password``."""
        tokens = parse_csv(self._raw.get(FIELDS), parameter=FIELDS)
        if not tokens:
            self._projection = None
            return self
        include: list[str] = []
        exclude: list[str] = []
        for token in tokens:
            target = exclude if token.startswith("-") else include
            name = token[1:] if token.startswith("-") else token
            validate_field_name(name, parameter=FIELDS)
            if name not in target:
                target.append(name)
        if include and any(name != "_id" for name in exclude):
            raise InvalidQueryError(
                "'fields' cannot mix included and excluded fields",
                parameter=FIELDS,
            )
        self._projection = Projection(include=tuple(include), exclude=tuple(exclude))
        return self

    def _check_field(self, name: str, *, parameter: str) -> None:
        validate_field_name(name, parameter=parameter)
        if any(name == hidden or name.startswith(hidden + ".") for hidden in self._hidden):
            raise InvalidQueryError(f"'{name}' cannot be used in a query", parameter=parameter)

    # ------------------------------------------------------------------
    # Resolution + execution
    # ------------------------------------------------------------------

    def build(self) -> QueryDescriptor:
        sort = self._sort
        tiebreak = self._settings.tiebreak_field
        if sort and all(s.field != tiebreak for s in sort):
            sort = sort + (Sort(tiebreak, SortDirection.ASC),)
        return QueryDescriptor(
            filter=self._filter,
            sort=sort,
            projection=self._projection,
            page_request=self._page_request,
        )

    async def execute(self) -> list[Document]:
        """Run the page read."""
        descriptor = self.build()
        logger.debug(
            "query.execute",
            filter=repr(descriptor.filter),
            sort=[(s.field, s.direction.value) for s in descriptor.sort],
            skip=descriptor.skip,
            limit=descriptor.limit,
        )
        return await descriptor.apply(self._handle).execute()

    async def count_total(self) -> PaginationMeta:
        """Count everything the filter matches and derive page metadata.

        Sort, window and projection do not affect the count. When
        :meth:`paginate` was not called the page values are still read from
        the raw query so the metadata describes what the client asked for.
        """
        descriptor = self.build()
        total = await descriptor.apply_filter(self._handle).count()
        request = self._page_request or self._resolve_page_request()
        return PaginationMeta.compute(request, total)

    async def fetch(self) -> Page[Document]:
        """Run both reads and return ``Page(items, meta)``."""
        items = await self.execute()
        meta = await self.count_total()
        return Page(items=items, meta=meta)

    def _resolve_page_request(self) -> PageRequest:
        page = parse_positive_int(single_value(self._raw, PAGE), parameter=PAGE, default=1)
        raw_limit = single_value(self._raw, LIMIT)
        if isinstance(raw_limit, str) and raw_limit.strip().lower() == UNLIMITED:
            return PageRequest(page=1, limit=None)
        limit = parse_positive_int(raw_limit, parameter=LIMIT, default=self._settings.default_limit)
        request = PageRequest(page=page, limit=min(limit, self._settings.max_limit))
        if request.skip > MAX_INT64:
            raise InvalidQueryError(f"'{PAGE}' is too large for the page size", parameter=PAGE)
        return request


def _range_bound(key: str, ranges: frozenset[str]) -> tuple[str, ComparisonOp] | None:
    for suffix, op in _RANGE_SUFFIXES.items():
        if key.endswith(suffix) and key[: -len(suffix)] in ranges:
            return key[: -len(suffix)], op
    return None


def _operator_predicate(field: str, op_key: str, value: Any) -> Expression:
    parameter = f"{field}[{op_key}]"
    if op_key == "eq":
        return Eq(field, _scalar(value, parameter))
    try:
        op = ComparisonOp(op_key)
    except ValueError:
        raise InvalidQueryError(
            f"Unsupported operator '{op_key}' for '{field}'",
            parameter=parameter,
        ) from None
    return _comparison(field, op, value, parameter=parameter)


def _comparison(field: str, op: ComparisonOp, value: Any, *, parameter: str) -> Expression:
    validate_field_name(field, parameter=parameter)
    if op in (ComparisonOp.IN, ComparisonOp.NIN):
        if isinstance(value, Mapping):
            raise InvalidQueryError(f"'{parameter}' expects a list of values", parameter=parameter)
        return Compare(field, op, split_list(value))
    scalar = _scalar(value, parameter)
    if op is ComparisonOp.EXISTS:
        return Compare(field, op, coerce_bool(scalar, parameter=parameter))
    if op in _ORDERED_OPS:
        return Compare(field, op, coerce_number(scalar, parameter=parameter))
    return Compare(field, op, scalar)


def _scalar(value: Any, parameter: str) -> Any:
    if isinstance(value, list):
        if len(value) != 1:
            raise InvalidQueryError(f"'{parameter}' expects a single value", parameter=parameter)
        value = value[0]
    if isinstance(value, Mapping):
        raise InvalidQueryError(f"'{parameter}' expects a single value", parameter=parameter)
    return value

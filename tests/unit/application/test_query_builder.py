"""Unit tests for the list-query builder."""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Any

import pytest

from social_services.application.pagination import PaginationMeta, Sort, SortDirection
from social_services.application.query import (
    Compare,
    ComparisonOp,
    Eq,
    InMemoryQueryableHandle,
    Projection,
    QueryBuilder,
    QuerySettings,
    parse_query_string,
)
from social_services.kernel.errors import InvalidQueryError, StorageError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


def _people(n: int = 12) -> list[dict[str, Any]]:
    return [
        {
            "_id": i,
            "name": f"Person {i:02d}",
            "email": f"person{i}@example.com",
            "age": 20 + i,
            "role": "admin" if i % 3 == 0 else "user",
            "createdAt": i,
        }
        for i in range(n)
    ]


@dataclasses.dataclass(frozen=True, eq=False)
class RecordingHandle(InMemoryQueryableHandle):
    """In-memory handle that records which reads were issued."""

    calls: list[str] = dataclasses.field(default_factory=list)

    async def execute(self) -> list[dict[str, Any]]:
        self.calls.append("execute")
        return await super().execute()

    async def count(self) -> int:
        self.calls.append("count")
        return await super().count()


class FailingHandle(InMemoryQueryableHandle):
    async def execute(self) -> list[dict[str, Any]]:
        raise StorageError("find failed", operation="find", collection="people")


def _builder(raw: Any, docs: list[dict[str, Any]] | None = None, **kwargs: Any) -> QueryBuilder:
    if isinstance(raw, str):
        raw = parse_query_string(raw)
    return QueryBuilder(InMemoryQueryableHandle(docs if docs is not None else _people()), raw, **kwargs)


def _ids(items: list[dict[str, Any]]) -> list[Any]:
    return [item["_id"] for item in items]


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


class TestPaginate:
    def test_defaults_when_page_and_limit_absent(self) -> None:
        builder = _builder({}).sort().paginate()
        items = _run(builder.execute())
        meta = _run(builder.count_total())
        assert len(items) == 10
        assert meta == PaginationMeta(page=1, limit=10, total=12, total_pages=2)

    def test_second_page_of_five_over_twelve(self) -> None:
        builder = _builder("page=2&limit=5").sort().paginate()
        descriptor = builder.build()
        assert descriptor.skip == 5
        assert descriptor.limit == 5
        # default sort is newest first
        assert _ids(_run(builder.execute())) == [6, 5, 4, 3, 2]
        assert _run(builder.count_total()).total_pages == 3

    def test_last_partial_page(self) -> None:
        builder = _builder("page=3&limit=5").sort().paginate()
        assert _ids(_run(builder.execute())) == [1, 0]

    def test_limit_all_returns_every_match_regardless_of_page(self) -> None:
        builder = _builder("limit=all&page=4").filter().paginate()
        items = _run(builder.execute())
        meta = _run(builder.count_total())
        assert len(items) == 12
        assert meta == PaginationMeta(page=1, limit=12, total=12, total_pages=1)

    def test_limit_all_is_case_insensitive(self) -> None:
        assert _builder("limit=ALL").paginate().build().limit is None

    def test_limit_all_with_no_matches(self) -> None:
        meta = _run(_builder("limit=all&role=nobody").filter().paginate().count_total())
        assert meta == PaginationMeta(page=1, limit=1, total=0, total_pages=0)

    def test_non_integer_page_rejected(self) -> None:
        with pytest.raises(InvalidQueryError) as info:
            _builder("page=abc").paginate()
        assert info.value.parameter == "page"
        assert info.value.http_status == 400

    def test_non_integer_limit_rejected(self) -> None:
        with pytest.raises(InvalidQueryError):
            _builder("limit=2.5").paginate()

    def test_values_below_one_raised_to_one(self) -> None:
        descriptor = _builder("page=0&limit=-3").paginate().build()
        assert descriptor.page_request is not None
        assert descriptor.page_request.page == 1
        assert descriptor.limit == 1

    def test_limit_capped_at_max_limit(self) -> None:
        assert _builder("limit=5000").paginate().build().limit == 1000

    def test_custom_settings(self) -> None:
        settings = QuerySettings(default_limit=3, max_limit=4, default_sort="name")
        builder = _builder("", settings=settings).paginate().sort()
        assert builder.build().limit == 3
        assert _builder("limit=50", settings=settings).paginate().build().limit == 4

    def test_repeated_page_rejected(self) -> None:
        with pytest.raises(InvalidQueryError):
            _builder("page=1&page=2").paginate()

    def test_count_total_without_paginate_uses_raw_values(self) -> None:
        meta = _run(_builder("page=2&limit=4").count_total())
        assert meta == PaginationMeta(page=2, limit=4, total=12, total_pages=3)

    def test_page_beyond_last_is_empty_with_meta(self) -> None:
        builder = _builder("page=9&limit=5").paginate()
        assert _run(builder.execute()) == []
        assert _run(builder.count_total()).total == 12

    @pytest.mark.parametrize("param", ["page", "limit"])
    def test_overlong_digit_string_rejected(self, param: str) -> None:
        handle = RecordingHandle(_people())
        with pytest.raises(InvalidQueryError) as info:
            QueryBuilder(handle, {param: "9" * 5000}).paginate()
        assert info.value.parameter == param
        assert handle.calls == []

    def test_skip_beyond_int64_rejected(self) -> None:
        with pytest.raises(InvalidQueryError) as info:
            _builder("page=9223372036854775807&limit=10").paginate()
        assert info.value.parameter == "page"

    def test_count_total_rejects_skip_beyond_int64(self) -> None:
        with pytest.raises(InvalidQueryError):
            _run(_builder("page=99999999999999999999").count_total())

    def test_largest_representable_skip(self) -> None:
        descriptor = _builder("page=922337203685477580&limit=10").paginate().build()
        assert descriptor.skip == 9223372036854775790


# ---------------------------------------------------------------------------
# Total invariance
# ---------------------------------------------------------------------------


class TestTotal:
    @pytest.mark.parametrize(
        "query",
        [
            "role=user",
            "role=user&page=2&limit=3",
            "role=user&fields=name&sort=-age",
            "role=user&limit=all",
            "role=user&sort=name,-_id&page=5",
        ],
    )
    def test_total_ignores_window_projection_and_sort(self, query: str) -> None:
        builder = _builder(query).filter().sort().paginate().fields()
        assert _run(builder.count_total()).total == 8

    def test_count_sees_filter_added_after_paginate(self) -> None:
        builder = _builder("role=admin&limit=2").paginate().sort().filter()
        assert _run(builder.count_total()).total == 4

    def test_execute_and_count_read_from_same_base(self) -> None:
        handle = RecordingHandle(_people())
        builder = QueryBuilder(handle, {"role": "admin"}).filter().paginate()
        page = _run(builder.fetch())
        assert sorted(handle.calls) == ["count", "execute"]
        assert page.meta.total == 4
        assert len(page.items) == 4


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------


class TestFilter:
    def test_reserved_keys_never_become_equality(self) -> None:
        raw = {"searchTerm": "", "page": "1", "limit": "5", "sort": "name", "fields": "name"}
        assert _builder(raw).filter().build().filter is None

    def test_plain_key_is_equality(self) -> None:
        builder = _builder("role=admin").filter()
        assert builder.build().filter == Eq("role", "admin")
        assert _ids(_run(builder.execute())) == [0, 3, 6, 9]

    def test_equality_value_not_coerced(self) -> None:
        assert _builder("age=25").filter().build().filter == Eq("age", "25")

    def test_repeated_key_becomes_in(self) -> None:
        builder = _builder("_id=1&_id=2")
        assert builder.filter().build().filter == Compare("_id", ComparisonOp.IN, ("1", "2"))

    def test_comparison_operators_coerce_numbers(self) -> None:
        builder = _builder("age[gte]=25&age[lt]=28").filter()
        assert _ids(_run(builder.execute())) == [5, 6, 7]

    def test_in_accepts_comma_separated(self) -> None:
        builder = _builder("name[in]=Person 01,Person 02").filter()
        assert _ids(_run(builder.execute())) == [1, 2]

    def test_nin(self) -> None:
        builder = _builder({"role": {"nin": "user"}}).filter()
        assert _run(builder.count_total()).total == 4

    def test_ne(self) -> None:
        builder = _builder("role[ne]=user").filter()
        assert _run(builder.count_total()).total == 4

    def test_exists(self) -> None:
        docs = [{"_id": 1, "bio": "x"}, {"_id": 2}]
        assert _ids(_run(_builder("bio[exists]=true", docs).filter().execute())) == [1]
        assert _ids(_run(_builder("bio[exists]=0", docs).filter().execute())) == [2]

    def test_exists_rejects_non_boolean(self) -> None:
        with pytest.raises(InvalidQueryError):
            _builder("bio[exists]=maybe").filter()

    def test_explicit_eq_operator(self) -> None:
        assert _builder("role[eq]=user").filter().build().filter == Eq("role", "user")

    def test_unknown_operator_fails_before_any_read(self) -> None:
        handle = RecordingHandle(_people())
        with pytest.raises(InvalidQueryError) as info:
            QueryBuilder(handle, parse_query_string("age[regex]=.*")).filter()
        assert "regex" in info.value.message
        assert handle.calls == []

    def test_dollar_field_rejected(self) -> None:
        with pytest.raises(InvalidQueryError):
            _builder({"$where": "1"}).filter()

    def test_empty_operator_map_rejected(self) -> None:
        with pytest.raises(InvalidQueryError):
            _builder({"age": {}}).filter()

    def test_range_suffix_keys(self) -> None:
        builder = _builder("ageMin=29&ageMax=30").filter(range_fields=["age"])
        assert _ids(_run(builder.execute())) == [9, 10]

    def test_range_suffix_ignored_for_undeclared_field(self) -> None:
        builder = _builder("ageMin=29").filter()
        assert builder.build().filter == Eq("ageMin", "29")

    def test_dotted_path(self) -> None:
        docs = [{"_id": 1, "profile": {"city": "Lyon"}}, {"_id": 2, "profile": {"city": "Oslo"}}]
        assert _ids(_run(_builder("profile.city=Oslo", docs).filter().execute())) == [2]

    def test_overlong_comparison_number_rejected(self) -> None:
        with pytest.raises(InvalidQueryError) as info:
            _builder("age[gt]=" + "1" * 5000).filter()
        assert info.value.parameter == "age[gt]"

    def test_range_bound_beyond_int64_rejected(self) -> None:
        with pytest.raises(InvalidQueryError):
            _builder("ageMin=" + "9" * 20).filter(range_fields=["age"])


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestSearch:
    def test_case_insensitive_across_fields(self) -> None:
        docs = [
            {"_id": 1, "name": "Alice", "email": "a@x.io"},
            {"_id": 2, "name": "Bob", "email": "ALICE@y.io"},
            {"_id": 3, "name": "Carol", "email": "c@z.io"},
        ]
        builder = _builder("searchTerm=alice", docs).search(["name", "email"])
        assert _ids(_run(builder.execute())) == [1, 2]

    def test_blank_term_is_noop(self) -> None:
        assert _builder("searchTerm=%20%20").search(["name"]).build().filter is None

    def test_term_matched_literally(self) -> None:
        docs = [{"_id": 1, "name": "a.b"}, {"_id": 2, "name": "axb"}]
        assert _ids(_run(_builder("searchTerm=a.b", docs).search(["name"]).execute())) == [1]

    def test_combined_with_filter(self) -> None:
        builder = _builder("searchTerm=person 0&role=admin").search(["name"]).filter()
        assert _ids(_run(builder.execute())) == [0, 3, 6, 9]
        assert _run(builder.count_total()).total == 4


# ---------------------------------------------------------------------------
# Sort
# ---------------------------------------------------------------------------


class TestSort:
    def test_composite_sort(self) -> None:
        docs = [
            {"_id": 1, "a": 1, "b": 1},
            {"_id": 2, "a": 1, "b": 2},
            {"_id": 3, "a": 0, "b": 5},
        ]
        builder = _builder("sort=a,-b", docs).sort()
        assert _ids(_run(builder.execute())) == [3, 2, 1]

    def test_default_sort_and_tiebreak(self) -> None:
        descriptor = _builder({}).sort().build()
        assert descriptor.sort == (
            Sort("createdAt", SortDirection.DESC),
            Sort("_id", SortDirection.ASC),
        )

    def test_blank_segments_skipped(self) -> None:
        descriptor = _builder("sort=name,, ").sort().build()
        assert [s.field for s in descriptor.sort] == ["name", "_id"]

    def test_id_already_present_not_appended(self) -> None:
        descriptor = _builder("sort=-_id").sort().build()
        assert descriptor.sort == (Sort("_id", SortDirection.DESC),)

    def test_ties_broken_by_id(self) -> None:
        docs = [{"_id": 3, "k": 1}, {"_id": 1, "k": 1}, {"_id": 2, "k": 0}]
        assert _ids(_run(_builder("sort=k", docs).sort().execute())) == [2, 1, 3]

    @pytest.mark.parametrize("token", ["-", "$name", "-$name"])
    def test_invalid_sort_fields(self, token: str) -> None:
        with pytest.raises(InvalidQueryError):
            _builder({"sort": token}).sort()

    def test_no_sort_call_leaves_order_alone(self) -> None:
        assert _builder({}).build().sort == ()

    def test_mixed_types_follow_bson_order(self) -> None:
        docs = [
            {"_id": 1, "code": "abc"},
            {"_id": 2, "code": 5},
            {"_id": 3},
            {"_id": 4, "code": True},
            {"_id": 5, "code": None},
            {"_id": 6, "code": 2.5},
        ]
        assert _ids(_run(_builder("sort=code", docs).sort().execute())) == [3, 5, 6, 2, 1, 4]
        assert _ids(_run(_builder("sort=-code", docs).sort().execute())) == [4, 1, 2, 6, 3, 5]


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


class TestFields:
    def test_inclusion_keeps_id(self) -> None:
        builder = _builder("fields=name&name=Person 01").filter().fields()
        assert _run(builder.execute()) == [{"_id": 1, "name": "Person 01"}]

    def test_exclusion(self) -> None:
        builder = _builder("fields=-email,-age&name=Person 01").filter().fields()
        assert _run(builder.execute()) == [
            {"_id": 1, "name": "Person 01", "role": "user", "createdAt": 1}
        ]

    def test_inclusion_without_id(self) -> None:
        builder = _builder("fields=name,-_id&name=Person 01").filter().fields()
        assert _run(builder.execute()) == [{"name": "Person 01"}]

    def test_mixing_rejected(self) -> None:
        with pytest.raises(InvalidQueryError):
            _builder("fields=name,-email").fields()

    def test_absent_means_full_documents(self) -> None:
        assert _builder({}).fields().build().projection is None

    def test_projection_value(self) -> None:
        descriptor = _builder("fields=name,email").fields().build()
        assert descriptor.projection == Projection(include=("name", "email"))


# ---------------------------------------------------------------------------
# Hidden fields
# ---------------------------------------------------------------------------


class TestHiddenFields:
    def _secret_builder(self, raw: Any) -> QueryBuilder:
        docs = [{"_id": 1, "name": "Ann", "password": "hash", "authentication": {"oneTimeCode": "123456"}}]
        return QueryBuilder(
            InMemoryQueryableHandle(docs),
            parse_query_string(raw) if isinstance(raw, str) else raw,
            hidden_fields=["password", "authentication"],
        )

    @pytest.mark.parametrize(
        "raw",
        [
            "password=hash",
            "password[lt]=%242b%24",
            "password[gte]=%242b%24",
            "authentication.oneTimeCode=123456",
            "authentication[exists]=true",
        ],
    )
    def test_filter_on_hidden_field_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidQueryError) as info:
            self._secret_builder(raw).filter()
        assert "cannot be used" in info.value.message

    @pytest.mark.parametrize("token", ["password", "-authentication.oneTimeCode"])
    def test_sort_on_hidden_field_rejected(self, token: str) -> None:
        with pytest.raises(InvalidQueryError) as info:
            self._secret_builder({"sort": token}).sort()
        assert info.value.parameter == "sort"

    def test_search_on_hidden_field_rejected(self) -> None:
        with pytest.raises(InvalidQueryError):
            self._secret_builder("searchTerm=hash").search(["name", "password"])

    def test_similar_names_still_allowed(self) -> None:
        builder = self._secret_builder("passwordHint=x&name=Ann").filter()
        assert _run(builder.count_total()).total == 0

    def test_range_bound_on_hidden_field_rejected(self) -> None:
        with pytest.raises(InvalidQueryError):
            self._secret_builder("passwordMin=a").filter(range_fields=["password"])


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_raw_query_is_copied(self) -> None:
        raw: dict[str, Any] = {"role": "admin", "age": {"gte": "21"}}
        builder = QueryBuilder(InMemoryQueryableHandle(_people()), raw)
        raw["role"] = "user"
        raw["age"]["gte"] = "99"
        assert builder.raw_query == {"role": "admin", "age": {"gte": "21"}}
        assert _run(builder.filter().count_total()).total == 3

    def test_base_handle_not_mutated(self) -> None:
        handle = InMemoryQueryableHandle(_people())
        _run(QueryBuilder(handle, {"role": "admin"}).filter().paginate().fetch())
        assert handle.expression is None
        assert _run(handle.count()) == 12

    def test_scoped_handle_combines_with_filter(self) -> None:
        handle = InMemoryQueryableHandle(_people()).where(Eq("role", "admin"))
        builder = QueryBuilder(handle, {"age[gte]": "26"}).filter()
        assert _ids(_run(builder.execute())) == [6, 9]

    def test_storage_error_propagates(self) -> None:
        builder = QueryBuilder(FailingHandle(_people()), {}).paginate()
        with pytest.raises(StorageError):
            _run(builder.fetch())

    def test_fetch_page_dict(self) -> None:
        body = _run(_builder("limit=2&fields=name&sort=_id").sort().paginate().fields().fetch()).to_dict()
        assert body == {
            "data": [{"_id": 0, "name": "Person 00"}, {"_id": 1, "name": "Person 01"}],
            "meta": {"page": 1, "limit": 2, "total": 12, "totalPages": 6},
        }

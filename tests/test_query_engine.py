"""
List query engine: parsing of raw parameters and execution against the store.
"""
import re

import pytest
from pymongo.errors import OperationFailure

from src.repositories.mongo_repository import MongoRepository
from src.utils.query_engine import (
    MAX_PAGE_LIMIT,
    MAX_SKIP,
    FilterExpr,
    QueryResult,
    build_filter,
    build_search,
    coerce_value,
    parse_filters,
    parse_projection,
    parse_sort,
    run_query,
)


# ==================================
# Parsing
# ==================================
class TestParsing:
    def test_reserved_keys_are_not_filters(self):
        exprs = parse_filters([("select", "title"), ("sort", "-price"), ("page", "2"),
                               ("limit", "5"), ("search", "py"), ("category", "Design")])
        assert exprs == [FilterExpr("category", "eq", "Design")]

    def test_operator_keys(self):
        exprs = parse_filters([("price[gte]", "10"), ("price[lt]", "50.5")])
        assert FilterExpr("price", "gte", 10) in exprs
        assert FilterExpr("price", "lt", 50.5) in exprs
        assert build_filter(exprs) == {"price": {"$gte": 10, "$lt": 50.5}}

    def test_value_coercion(self):
        assert coerce_value("true") is True
        assert coerce_value("False") is False
        assert coerce_value("42") == 42
        assert coerce_value("-3.5") == -3.5
        assert coerce_value("Beginner") == "Beginner"
        assert coerce_value("12abc") == "12abc"

    def test_in_splits_and_accumulates(self):
        exprs = parse_filters([("category[in]", "Design,Marketing"), ("category[in]", "Business")])
        assert exprs == [FilterExpr("category", "in", ["Design", "Marketing", "Business"])]

    def test_repeated_bare_key_becomes_in(self):
        exprs = parse_filters([("experienceLevel", "Beginner"), ("experienceLevel", "Advanced")])
        assert build_filter(exprs) == {"experienceLevel": {"$in": ["Beginner", "Advanced"]}}

    def test_unknown_operator_is_literal(self):
        exprs = parse_filters([("price[regex]", "1")])
        assert build_filter(exprs) == {"price": {"regex": 1}}

    def test_raw_mongo_operators_are_ignored(self):
        assert parse_filters([("$where", "1"), ("price[$ne]", "0")]) == [
            FilterExpr("price[$ne]", "eq", 0)
        ]

    def test_mapping_params(self):
        exprs = parse_filters({"category": ["A", "B"], "isActive": "true"})
        assert build_filter(exprs) == {"category": {"$in": ["A", "B"]}, "isActive": True}

    def test_search_is_escaped_and_case_insensitive(self):
        q = build_search("c++ (intro)", ["title"])
        assert q == {"$or": [{"title": {"$regex": re.escape("c++ (intro)"), "$options": "i"}}]}
        assert re.search(q["$or"][0]["title"]["$regex"], "Learn C++ (Intro)", re.I)

    def test_sort_and_projection(self):
        assert parse_sort("-rating,title") == [("rating", -1), ("title", 1)]
        assert parse_sort(None) == [("createdAt", -1)]
        assert parse_sort(" , ") == [("createdAt", -1)]
        assert parse_projection("title, price") == {"title": 1, "price": 1}
        assert parse_projection("") is None


# ==================================
# QueryResult
# ==================================
class TestQueryResult:
    @pytest.mark.parametrize(
        "page,has_next,has_prev",
        [(1, True, False), (2, True, True), (3, False, True)],
    )
    def test_page_boundaries(self, page, has_next, has_prev):
        result = QueryResult(items=[], page=page, limit=10, total=23)
        assert result.total_pages == 3
        assert result.has_next is has_next
        assert result.has_prev is has_prev
        assert ("next" in result.pagination()) is has_next
        assert ("previous" in result.pagination()) is has_prev

    def test_exact_multiple_has_no_next(self):
        result = QueryResult(items=[], page=2, limit=10, total=20)
        assert not result.has_next
        assert result.pagination() == {"previous": {"page": 1, "limit": 10}}

    def test_response_shapes(self):
        result = QueryResult(items=[{"a": 1}], page=1, limit=10, total=1)
        assert result.to_response() == {
            "success": True, "count": 1, "total": 1, "pagination": {}, "data": [{"a": 1}],
        }
        assert result.to_page_response()["totalPages"] == 1


# ==================================
# Execution
# ==================================
@pytest.fixture
def courses(db):
    repo = MongoRepository("courses")
    for i in range(23):
        repo.create({
            "title": f"Course {i:02d}",
            "category": "Design" if i % 2 else "Programming",
            "price": float(i),
            "isDeleted": i == 22,
        })
    return repo


class TestRunQuery:
    def test_pagination_over_filtered_set(self, courses):
        params = [("category", "Programming"), ("sort", "title"), ("limit", "5"), ("page", "2")]
        result = run_query(courses, params, base_filter={"isDeleted": False})
        # 12 even indexes, one of them (22) deleted
        assert result.total == 11
        assert [c["title"] for c in result.items] == [f"Course {i:02d}" for i in (10, 12, 14, 16, 18)]
        assert result.has_next and result.has_prev

    def test_last_page(self, courses):
        result = run_query(courses, {"limit": "10", "page": "3", "sort": "title"})
        assert result.total == 23
        assert len(result.items) == 3
        assert result.pagination() == {"previous": {"page": 2, "limit": 10}}

    def test_bad_paging_values_fall_back(self, courses):
        result = run_query(courses, {"limit": "abc", "page": "-4"}, default_limit=10)
        assert result.page == 1
        assert result.limit == 10

    def test_search_replaces_field_filters(self, courses):
        params = [("search", "course 1"), ("category", "nothing-matches")]
        result = run_query(courses, params, base_filter={"isDeleted": False})
        assert result.total == 10  # Course 10..19
        assert all(c["title"].startswith("Course 1") for c in result.items)

    def test_base_filter_cannot_be_bypassed(self, courses):
        result = run_query(courses, {"isDeleted": "true"}, base_filter={"isDeleted": False})
        assert result.total == 0

    def test_range_and_projection(self, courses):
        result = run_query(courses, {"price[gte]": "5", "price[lte]": "7", "select": "title", "sort": "price"})
        assert [c["title"] for c in result.items] == ["Course 05", "Course 06", "Course 07"]
        assert "price" not in result.items[0]

    def test_unknown_operator_matches_nothing(self, courses):
        assert run_query(courses, {"price[between]": "3"}).total == 0

    def test_store_error_degrades_to_empty(self, courses, monkeypatch):
        def boom(*args, **kwargs):
            raise OperationFailure("bad filter")

        monkeypatch.setattr(courses, "count", boom)
        result = run_query(courses, {"title": "x"})
        assert result.items == [] and result.total == 0

    def test_huge_limit_and_page_are_clamped(self, courses):
        result = run_query(courses, {"limit": "100000", "page": str(10 ** 30)})
        assert result.limit == MAX_PAGE_LIMIT
        assert (result.page - 1) * result.limit <= MAX_SKIP
        assert result.items == []
        assert not result.has_next

    def test_driver_overflow_degrades_to_empty(self, courses, monkeypatch):
        def overflow(*args, **kwargs):
            raise OverflowError("MongoDB can only handle up to 8-byte ints")

        monkeypatch.setattr(courses, "find", overflow)
        result = run_query(courses, {"page": "5"})
        assert result.items == [] and result.total == 0

    def test_populate_hook(self, courses):
        result = run_query(courses, {"limit": "2"}, populate=lambda rows: [{"n": len(rows)}])
        assert result.items == [{"n": 2}]

"""
Unit tests for the Query -> Elasticsearch DSL translation.
"""

import pytest

from filestore.models import FilterClause, Pageable, Query, SortOrder
from filestore.storage.search.translator import QueryTranslator


@pytest.fixture
def translator():
    return QueryTranslator(index_null_value=True)


def test_empty_or_absent_query_matches_everything(translator):
    assert translator.translate(None) == {"match_all": {}}
    assert translator.translate(Query()) == {"match_all": {}}


@pytest.mark.parametrize(
    "query, expected",
    [
        (Query().equals("age", 30), {"must": [{"term": {"age": 30}}]}),
        (Query().not_equals("age", 30), {"must_not": [{"term": {"age": 30}}]}),
        (Query().contains("title", "hello world"), {"must": [{"match": {"title": "hello world"}}]}),
        (Query().lt("age", 30), {"must": [{"range": {"age": {"lt": 30}}}]}),
        (Query().lte("age", 30), {"must": [{"range": {"age": {"lte": 30}}}]}),
        (Query().gt("age", 30), {"must": [{"range": {"age": {"gt": 30}}}]}),
        (Query().gte("age", 30), {"must": [{"range": {"age": {"gte": 30}}}]}),
        (
            Query().full_text(["title", "summary"], "ipfs"),
            {"must": [{"multi_match": {"query": "ipfs", "fields": ["title", "summary"], "lenient": True}}]},
        ),
    ],
)
def test_operation_predicates(translator, query, expected):
    assert translator.translate(query) == {"bool": expected}


def test_in_is_a_lowercased_non_scoring_filter(translator):
    result = translator.translate(Query().in_("status", ["Active", "PENDING", 3, True]))
    assert result == {"bool": {"filter": [{"terms": {"status": ["active", "pending", "3", "true"]}}]}}


def test_clauses_combine_under_and(translator):
    query = Query().equals("author", "alice").not_equals("status", "draft").in_("tag", ["a"])
    result = translator.translate(query)["bool"]

    assert result["must"] == [{"term": {"author": "alice"}}]
    assert result["must_not"] == [{"term": {"status": "draft"}}]
    assert result["filter"] == [{"terms": {"tag": ["a"]}}]


def test_null_values_use_the_sentinel(translator):
    assert translator.translate(Query().equals("middle", None)) == {"bool": {"must": [{"term": {"middle": "null"}}]}}
    assert translator.translate(Query().equals("middle", "")) == {"bool": {"must": [{"term": {"middle": "null"}}]}}


def test_null_clause_dropped_when_null_indexing_disabled():
    translator = QueryTranslator(index_null_value=False)
    query = Query().equals("middle", None).equals("age", 30)
    assert translator.translate(query) == {"bool": {"must": [{"term": {"age": 30}}]}}


def test_unsupported_operation_is_skipped(translator):
    query = Query(query=[
        FilterClause(names=["age"], operation="between", value=[1, 2]),
        FilterClause(names=["age"], operation="equals", value=30),
    ])
    assert translator.translate(query) == {"bool": {"must": [{"term": {"age": 30}}]}}


def test_malformed_clause_is_dropped(translator):
    # 'in' without a list and 'equals' with a list value cannot be translated
    query = Query().in_("tag", []).equals("age", 30)
    query.filter_clauses[0].value = "not-a-list"
    query.equals("name", ["a", "b"])

    assert translator.translate(query) == {"bool": {"must": [{"term": {"age": 30}}]}}


def test_all_clauses_dropped_matches_everything(translator):
    query = Query(query=[FilterClause(names=["age"], operation="unknown", value=1)])
    assert translator.translate(query) == {"match_all": {}}


def test_search_body_pagination_and_sort(translator):
    pageable = Pageable(page=2, size=10, sort=[SortOrder("age", False), SortOrder("name", True)])
    body = translator.search_body(Query().equals("a", 1), pageable)

    assert body["from"] == 20
    assert body["size"] == 10
    assert body["sort"] == [
        {"age": {"order": "desc", "unmapped_type": "date"}},
        {"name": {"order": "asc", "unmapped_type": "date"}},
    ]


def test_search_body_without_sort(translator):
    body = translator.search_body(None, Pageable(page=0, size=5))
    assert "sort" not in body
    assert body["query"] == {"match_all": {}}


def test_count_body(translator):
    body = translator.count_body(Query().equals("a", 1))
    assert body["size"] == 0
    assert body["track_total_hits"] is True
    assert body["query"] == {"bool": {"must": [{"term": {"a": 1}}]}}

"""
Query translation - Filestore Query model to Elasticsearch Query DSL.

The translation is pure: it only builds request bodies and never talks to the
engine, which keeps the per-operation semantics easy to test.
"""

from typing import Any, Dict, List, Optional

import structlog

from filestore.models import FilterClause, Pageable, Query, QueryOperation
from filestore.storage.search.base import handle_null_value

logger = structlog.get_logger()

# Sort on a field missing from the mapping must not fail the search
UNMAPPED_SORT_TYPE = "date"

_RANGE_OPERATIONS = {
    QueryOperation.LT: "lt",
    QueryOperation.LTE: "lte",
    QueryOperation.GT: "gt",
    QueryOperation.GTE: "gte",
}


class QueryTranslator:
    """Translates a Query (and a Pageable) into Elasticsearch request bodies."""

    def __init__(self, index_null_value: bool = True):
        self.index_null_value = index_null_value

    def translate(self, query: Optional[Query]) -> Dict[str, Any]:
        """
        Build the query part of a search request.

        Clauses are combined with a bool query: `not_equals` goes to must_not,
        `in` to filter (non-scoring), everything else to must. A clause that
        cannot be translated is logged and dropped.
        """
        if query is None or query.is_empty():
            return {"match_all": {}}

        bool_query: Dict[str, List[Dict[str, Any]]] = {"must": [], "must_not": [], "filter": []}

        for clause in query.filter_clauses:
            try:
                translated = self._translate_clause(clause)
            except Exception as e:
                logger.warning("filter_clause_ignored", clause=clause.to_wire(), error=str(e))
                continue
            if translated is None:
                continue
            slot, predicate = translated
            bool_query[slot].append(predicate)

        bool_query = {slot: predicates for slot, predicates in bool_query.items() if predicates}
        if not bool_query:
            return {"match_all": {}}

        logger.debug("query_translated", query=bool_query)
        return {"bool": bool_query}

    def _translate_clause(self, clause: FilterClause) -> Optional[tuple]:
        operation = clause.operation
        if not isinstance(operation, QueryOperation):
            logger.warning("filter_operation_not_supported", operation=operation, clause=clause.to_wire())
            return None

        value = handle_null_value(clause.value, self.index_null_value)

        if operation == QueryOperation.FULL_TEXT:
            return "must", {"multi_match": {"query": _scalar(value), "fields": list(clause.names), "lenient": True}}
        if operation == QueryOperation.EQUALS:
            return "must", {"term": {clause.name: _scalar(value)}}
        if operation == QueryOperation.NOT_EQUALS:
            return "must_not", {"term": {clause.name: _scalar(value)}}
        if operation == QueryOperation.CONTAINS:
            return "must", {"match": {clause.name: _scalar(value)}}
        if operation == QueryOperation.IN:
            if not isinstance(value, (list, tuple, set)):
                raise TypeError(f"'in' expects a list value, got {type(value).__name__}")
            return "filter", {"terms": {clause.name: [str(v).lower() for v in value]}}
        if operation in _RANGE_OPERATIONS:
            return "must", {"range": {clause.name: {_RANGE_OPERATIONS[operation]: _scalar(value)}}}

        logger.warning("filter_operation_not_supported", operation=operation.value, clause=clause.to_wire())
        return None

    def search_body(self, query: Optional[Query], pageable: Pageable) -> Dict[str, Any]:
        """Full search request body: query, offset/size and sort keys."""
        body: Dict[str, Any] = {
            "query": self.translate(query),
            "from": pageable.offset,
            "size": pageable.size,
        }
        if pageable.sort:
            body["sort"] = [
                {
                    order.field: {
                        "order": "asc" if order.ascending else "desc",
                        "unmapped_type": UNMAPPED_SORT_TYPE,
                    }
                }
                for order in pageable.sort
            ]
        return body

    def count_body(self, query: Optional[Query]) -> Dict[str, Any]:
        """Same query with no hits returned; only the total is of interest."""
        return {"query": self.translate(query), "size": 0, "track_total_hits": True}


def _scalar(value: Any) -> Any:
    if value is None:
        raise ValueError("value cannot be null")
    if isinstance(value, (list, tuple, set, dict)):
        raise TypeError(f"expected a scalar value, got {type(value).__name__}")
    return value

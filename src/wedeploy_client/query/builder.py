"""
Query builder for structured request bodies.

Accumulates filter, aggregation, sort and paging clauses and serializes them
into the JSON document the API expects. Only populated keys are emitted, in
the order ``type, filter, sort, aggregation, highlight, limit, offset``.
Within each category clauses keep the order they were added in.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from ..runtime.codec import encode_json
from .aggregation import Aggregation
from .filter import Filter, to_clause

COUNT = "count"
ASC = "asc"
DESC = "desc"


class QueryBuilder:
    """
    Builder for a structured query.

    Example:
        ```python
        query = QueryBuilder().filter("age", ">", 18).sort("name").limit(10)
        query.to_dict()
        # {'filter': [{'age': {'operator': '>', 'value': 18}}],
        #  'sort': [{'name': 'asc'}], 'limit': 10}
        ```
    """

    def __init__(self):
        """Initialize an empty query."""
        self.type: Optional[str] = None
        self.filters: List[Dict[str, Any]] = []
        self.aggregations: List[Dict[str, Any]] = []
        self.sorts: List[Dict[str, str]] = []
        self._highlights: Dict[str, None] = {}
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None

    def filter(self, *args: Any) -> QueryBuilder:
        """
        Add a filter clause (chainable).

        Accepted forms:
            filter(clause)                  prebuilt Filter or mapping
            filter(field)                   field with no operator or value
            filter(field, value)            equality
            filter(field, operator, value)

        Returns:
            Self for chaining
        """
        if len(args) == 1:
            if isinstance(args[0], str):
                clause = Filter.field(args[0]).to_dict()
            else:
                clause = to_clause(args[0])
        elif len(args) == 2:
            clause = Filter.of(args[0], "=", args[1]).to_dict()
        elif len(args) == 3:
            clause = Filter.of(*args).to_dict()
        else:
            raise TypeError(f"filter() takes 1 to 3 arguments ({len(args)} given)")

        self.filters.append(clause)
        return self

    def aggregate(self, *args: Any) -> QueryBuilder:
        """
        Add an aggregation clause (chainable).

        Accepted forms:
            aggregate(clause)                 prebuilt Aggregation or mapping
            aggregate(name, field)            server default operator
            aggregate(name, field, operator)

        Returns:
            Self for chaining
        """
        if len(args) == 1:
            clause = to_clause(args[0])
        elif len(args) in (2, 3):
            clause = Aggregation(*args).to_dict()
        else:
            raise TypeError(f"aggregate() takes 1 to 3 arguments ({len(args)} given)")

        self.aggregations.append(clause)
        return self

    def sort(self, field: str, direction: str = ASC) -> QueryBuilder:
        """Append a sort clause; direction defaults to ascending."""
        self.sorts.append({field: direction})
        return self

    def count(self) -> QueryBuilder:
        """Ask for the number of matching documents instead of the documents."""
        self.type = COUNT
        return self

    def limit(self, limit: int) -> QueryBuilder:
        """Set the maximum number of results. 0 is a valid, explicit limit."""
        if limit < 0:
            raise ValueError("limit must be non-negative")
        self._limit = limit
        return self

    def offset(self, offset: int) -> QueryBuilder:
        """Set the number of results to skip. 0 is a valid, explicit offset."""
        if offset < 0:
            raise ValueError("offset must be non-negative")
        self._offset = offset
        return self

    def highlight(self, field: str) -> QueryBuilder:
        """Highlight matches on a field. Repeated fields are kept once."""
        self._highlights[field] = None
        return self

    @property
    def highlights(self) -> List[str]:
        return list(self._highlights)

    def is_empty(self) -> bool:
        return not self.to_dict()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API-compatible dictionary."""
        result: Dict[str, Any] = {}
        if self.type is not None:
            result["type"] = self.type
        if self.filters:
            result["filter"] = list(self.filters)
        if self.sorts:
            result["sort"] = list(self.sorts)
        if self.aggregations:
            result["aggregation"] = list(self.aggregations)
        if self._highlights:
            result["highlight"] = self.highlights
        if self._limit is not None:
            result["limit"] = self._limit
        if self._offset is not None:
            result["offset"] = self._offset
        return result

    def to_json(self) -> bytes:
        """
        Serialize to the JSON request body.

        Raises:
            EncodingError: If a clause value is not JSON serializable
        """
        return encode_json(self.to_dict())

    def __repr__(self) -> str:
        return f"QueryBuilder({self.to_dict()!r})"


__all__ = ["QueryBuilder", "COUNT", "ASC", "DESC"]

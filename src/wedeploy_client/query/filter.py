"""
Filter clauses for structured queries.

A filter serializes as ``{field: {"operator": op, "value": value}}``.
Filters compose into ``{"and": [...]}``, ``{"or": [...]}`` and
``{"not": {...}}`` documents.

Example:
    ```python
    from wedeploy_client.query import filter as f

    clause = f.gt("age", 18).and_(f.equal("active", True))
    url("https://db.example.com", "people").filter(clause).get()
    ```
"""

from __future__ import annotations
import copy
from typing import Any, Dict


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class Filter:
    """A single filter clause, or a composition of clauses."""

    def __init__(self, body: Dict[str, Any]):
        self._body = body

    @classmethod
    def of(cls, field: str, operator: Any = UNSET, value: Any = UNSET) -> Filter:
        """
        Create a filter for a field.

        Args:
            field: Field name
            operator: Operator; omitted from the clause when not given
            value: Value to compare with; omitted from the clause when not given

        Returns:
            New filter
        """
        body: Dict[str, Any] = {}
        if operator is not UNSET:
            body["operator"] = operator
        if value is not UNSET:
            body["value"] = value
        return cls({field: body})

    @classmethod
    def field(cls, field: str) -> Filter:
        """Filter on a field with no operator or value."""
        return cls.of(field)

    def _compose(self, operator: str, others: tuple) -> Filter:
        if set(self._body) == {operator}:
            clauses = list(self._body[operator])
        else:
            clauses = [self.to_dict()]

        for other in others:
            clauses.append(to_clause(other))

        return Filter({operator: clauses})

    def and_(self, *others: Any) -> Filter:
        """Combine with other filters, all of which must match."""
        return self._compose("and", others)

    def or_(self, *others: Any) -> Filter:
        """Combine with other filters, any of which must match."""
        return self._compose("or", others)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API-compatible dictionary."""
        return copy.deepcopy(self._body)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Filter):
            return self._body == other._body
        return NotImplemented

    def __repr__(self) -> str:
        return f"Filter({self._body!r})"


def to_clause(value: Any) -> Dict[str, Any]:
    """Turn a prebuilt clause (anything with ``to_dict`` or a mapping) into a dict."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return copy.deepcopy(value)
    raise TypeError(f"Expected a prebuilt clause, got {type(value).__name__}")


def equal(field: str, value: Any) -> Filter:
    return Filter.of(field, "=", value)


def not_equal(field: str, value: Any) -> Filter:
    return Filter.of(field, "!=", value)


def gt(field: str, value: Any) -> Filter:
    return Filter.of(field, ">", value)


def gte(field: str, value: Any) -> Filter:
    return Filter.of(field, ">=", value)


def lt(field: str, value: Any) -> Filter:
    return Filter.of(field, "<", value)


def lte(field: str, value: Any) -> Filter:
    return Filter.of(field, "<=", value)


def any_of(field: str, *values: Any) -> Filter:
    """Match documents where the field equals any of the values."""
    return Filter.of(field, "any", list(values))


def none_of(field: str, *values: Any) -> Filter:
    """Match documents where the field equals none of the values."""
    return Filter.of(field, "none", list(values))


def match(field: str, query: str) -> Filter:
    """Full-text match."""
    return Filter.of(field, "match", query)


def phrase(field: str, value: str) -> Filter:
    return Filter.of(field, "phrase", value)


def prefix(field: str, value: str) -> Filter:
    return Filter.of(field, "prefix", value)


def similar(field: str, query: str) -> Filter:
    return Filter.of(field, "similar", query)


def regex(field: str, pattern: str) -> Filter:
    return Filter.of(field, "~", pattern)


def exists(field: str) -> Filter:
    return Filter.of(field, "exists")


def missing(field: str) -> Filter:
    return Filter.of(field, "missing")


def not_(clause: Any) -> Filter:
    """Negate a filter."""
    return Filter({"not": to_clause(clause)})


__all__ = [
    "UNSET",
    "Filter",
    "to_clause",
    "equal",
    "not_equal",
    "gt",
    "gte",
    "lt",
    "lte",
    "any_of",
    "none_of",
    "match",
    "phrase",
    "prefix",
    "similar",
    "regex",
    "exists",
    "missing",
    "not_",
]

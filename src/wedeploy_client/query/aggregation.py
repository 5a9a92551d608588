"""
Aggregation clauses for structured queries.

An aggregation serializes as ``{field: {"operator": op, "name": name}}``,
with an extra ``"value"`` for operators that take a parameter (histogram
interval, terms size).
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from .filter import UNSET


class Aggregation:
    """A single aggregation clause."""

    def __init__(self, name: str, field: str, operator: Optional[str] = None, value: Any = UNSET):
        """
        Initialize an aggregation.

        Args:
            name: Name of the aggregation in the result
            field: Field to aggregate over
            operator: Aggregation operator; left to the server default when None
            value: Operator parameter, if any
        """
        self.name = name
        self.field = field
        self.operator = operator
        self.value = value

    @classmethod
    def of(cls, name: str, field: str, operator: Optional[str] = None, value: Any = UNSET) -> Aggregation:
        return cls(name, field, operator, value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API-compatible dictionary."""
        body: Dict[str, Any] = {}
        if self.operator is not None:
            body["operator"] = self.operator
        body["name"] = self.name
        if self.value is not UNSET:
            body["value"] = self.value
        return {self.field: body}

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Aggregation):
            return self.to_dict() == other.to_dict()
        return NotImplemented

    def __repr__(self) -> str:
        return f"Aggregation({self.to_dict()!r})"


def avg(name: str, field: str) -> Aggregation:
    return Aggregation(name, field, "avg")


def count(name: str, field: str) -> Aggregation:
    return Aggregation(name, field, "count")


def extended_stats(name: str, field: str) -> Aggregation:
    return Aggregation(name, field, "extendedStats")


def histogram(name: str, field: str, interval: Any) -> Aggregation:
    """Bucket values of a field by a fixed interval."""
    return Aggregation(name, field, "histogram", interval)


def max_(name: str, field: str) -> Aggregation:
    return Aggregation(name, field, "max")


def min_(name: str, field: str) -> Aggregation:
    return Aggregation(name, field, "min")


def missing(name: str, field: str) -> Aggregation:
    """Count documents where the field is missing."""
    return Aggregation(name, field, "missing")


def stats(name: str, field: str) -> Aggregation:
    return Aggregation(name, field, "stats")


def sum_(name: str, field: str) -> Aggregation:
    return Aggregation(name, field, "sum")


def terms(name: str, field: str, size: Optional[int] = None) -> Aggregation:
    """Bucket documents by the distinct terms of a field."""
    if size is None:
        return Aggregation(name, field, "terms")
    return Aggregation(name, field, "terms", size)


__all__ = [
    "Aggregation",
    "avg",
    "count",
    "extended_stats",
    "histogram",
    "max_",
    "min_",
    "missing",
    "stats",
    "sum_",
    "terms",
]

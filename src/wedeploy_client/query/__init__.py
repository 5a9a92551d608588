"""Structured query building: the query builder and its clause helpers."""

from .builder import QueryBuilder, COUNT, ASC, DESC
from .filter import Filter
from .aggregation import Aggregation
from . import aggregation, filter

__all__ = [
    "QueryBuilder",
    "COUNT",
    "ASC",
    "DESC",
    "Filter",
    "Aggregation",
    "aggregation",
    "filter",
]

"""
Test filter and aggregation clause helpers.
"""

import pytest

from wedeploy_client.query import aggregation, filter as f
from wedeploy_client.query.aggregation import Aggregation
from wedeploy_client.query.filter import Filter, to_clause


@pytest.mark.parametrize("helper,operator", [
    (f.equal, "="),
    (f.not_equal, "!="),
    (f.gt, ">"),
    (f.gte, ">="),
    (f.lt, "<"),
    (f.lte, "<="),
    (f.match, "match"),
    (f.phrase, "phrase"),
    (f.prefix, "prefix"),
    (f.similar, "similar"),
    (f.regex, "~"),
])
def test_binary_filter_helpers(helper, operator):
    assert helper("field", "v").to_dict() == {"field": {"operator": operator, "value": "v"}}


def test_any_and_none_take_values():
    assert f.any_of("tag", "a", "b").to_dict() == {"tag": {"operator": "any", "value": ["a", "b"]}}
    assert f.none_of("tag", "c").to_dict() == {"tag": {"operator": "none", "value": ["c"]}}


def test_exists_and_missing_have_no_value():
    assert f.exists("email").to_dict() == {"email": {"operator": "exists"}}
    assert f.missing("email").to_dict() == {"email": {"operator": "missing"}}


def test_and_composition_flattens():
    clause = f.gt("age", 18).and_(f.lt("age", 65)).and_({"active": {"operator": "=", "value": True}})

    assert clause.to_dict() == {
        "and": [
            {"age": {"operator": ">", "value": 18}},
            {"age": {"operator": "<", "value": 65}},
            {"active": {"operator": "=", "value": True}},
        ]
    }


def test_or_composition():
    clause = f.equal("a", 1).or_(f.equal("b", 2))

    assert clause.to_dict() == {"or": [{"a": {"operator": "=", "value": 1}},
                                       {"b": {"operator": "=", "value": 2}}]}


def test_not_wraps_clause():
    assert f.not_(f.equal("a", 1)).to_dict() == {"not": {"a": {"operator": "=", "value": 1}}}


def test_to_dict_returns_copy():
    clause = f.any_of("tag", "a")
    clause.to_dict()["tag"]["value"].append("b")

    assert clause.to_dict() == {"tag": {"operator": "any", "value": ["a"]}}


def test_filter_equality():
    assert Filter.of("a", "=", 1) == f.equal("a", 1)
    assert Filter.of("a", "=", 1) != f.equal("a", 2)


def test_to_clause_rejects_unknown_types():
    with pytest.raises(TypeError):
        to_clause("not a clause")


@pytest.mark.parametrize("helper,operator", [
    (aggregation.avg, "avg"),
    (aggregation.count, "count"),
    (aggregation.extended_stats, "extendedStats"),
    (aggregation.max_, "max"),
    (aggregation.min_, "min"),
    (aggregation.missing, "missing"),
    (aggregation.stats, "stats"),
    (aggregation.sum_, "sum"),
])
def test_aggregation_helpers(helper, operator):
    assert helper("out", "field").to_dict() == {"field": {"operator": operator, "name": "out"}}


def test_histogram_and_terms_values():
    assert aggregation.histogram("h", "price", 10).to_dict() == {
        "price": {"operator": "histogram", "name": "h", "value": 10}
    }
    assert aggregation.terms("t", "tag").to_dict() == {"tag": {"operator": "terms", "name": "t"}}
    assert aggregation.terms("t", "tag", 5).to_dict() == {
        "tag": {"operator": "terms", "name": "t", "value": 5}
    }


def test_aggregation_without_operator():
    assert Aggregation("foo", "bah").to_dict() == {"bah": {"name": "foo"}}

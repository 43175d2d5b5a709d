"""Tests for query predicates."""

import dataclasses

import pytest

from taguchimail.exceptions import QueryError
from taguchimail.query import Operator, QueryPredicate, serialize_predicates


class TestQueryPredicate:
    def test_serializes_field_operator_value(self):
        predicate = QueryPredicate("email", "eq", "john@example.org")
        assert predicate.serialize() == "email-eq-john@example.org"
        assert str(predicate) == "email-eq-john@example.org"

    def test_accepts_operator_enum(self):
        predicate = QueryPredicate("id", Operator.GTE, 100)
        assert predicate.operator is Operator.GTE
        assert str(predicate) == "id-gte-100"

    @pytest.mark.parametrize("op", [o.value for o in Operator])
    def test_every_operator_formats(self, op):
        assert str(QueryPredicate("name", op, "x")) == f"name-{op}-x"

    def test_none_value_is_null(self):
        assert str(QueryPredicate("unsubscribed", Operator.IS, None)) == "unsubscribed-is-null"

    def test_unknown_operator_raises(self):
        with pytest.raises(QueryError, match="Unknown query operator"):
            QueryPredicate("email", "equals", "x")

    def test_dashes_are_not_escaped(self):
        predicate = QueryPredicate("date", "gt", "2024-01-31")
        assert str(predicate) == "date-gt-2024-01-31"

    def test_is_immutable(self):
        predicate = QueryPredicate("email", "eq", "a@example.org")
        with pytest.raises(dataclasses.FrozenInstanceError):
            predicate.value = "b@example.org"

    def test_equality(self):
        assert QueryPredicate("id", "eq", 1) == QueryPredicate("id", Operator.EQ, "1")


class TestSerializePredicates:
    def test_none_and_empty(self):
        assert serialize_predicates(None) == []
        assert serialize_predicates([]) == []

    def test_mixed_predicates_and_strings_keep_order(self):
        result = serialize_predicates(
            [QueryPredicate("list_id", "eq", 5), "email-like-%@example.org"]
        )
        assert result == ["list_id-eq-5", "email-like-%@example.org"]

    def test_single_string_is_one_predicate(self):
        assert serialize_predicates("email-eq-x") == ["email-eq-x"]

    def test_single_predicate_is_one_predicate(self):
        assert serialize_predicates(QueryPredicate("id", "gt", 5)) == ["id-gt-5"]

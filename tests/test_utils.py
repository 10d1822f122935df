"""Tests for utility functions."""

from unittest.mock import patch

import pytest

from fluentcriteria.query.criteria import Order
from fluentcriteria.settings import settings
from fluentcriteria.utils import is_block, populate_arguments_for_criteria, to_int

from conftest import Book


class TestIsBlock:
    def test_callables(self):
        assert is_block(lambda c: None)
        assert is_block(print)

    def test_non_blocks(self):
        assert not is_block(None)
        assert not is_block({"max": 1})
        assert not is_block(Book)
        assert not is_block("eq")


class TestToInt:
    @pytest.mark.parametrize(
        "value,expected",
        [(5, 5), ("10", 10), (None, None), ("abc", None), (True, None), (3.0, 3)],
    )
    def test_to_int(self, value, expected):
        assert to_int(value) == expected


class TestPopulateArgumentsForCriteria:
    def test_max_and_offset(self, session):
        query = populate_arguments_for_criteria(session.create_query(Book), {"max": "5", "offset": 2})
        assert query.limit == 5
        assert query.start == 2

    def test_negative_values_ignored(self, session):
        query = populate_arguments_for_criteria(session.create_query(Book), {"max": -1, "offset": -3})
        assert query.limit == -1
        assert query.start == 0

    def test_sort_default_ascending(self, session):
        query = populate_arguments_for_criteria(session.create_query(Book), {"sort": "title"})
        assert query.orders == [Order.asc("title")]

    @pytest.mark.parametrize("order", ["desc", "DESC", "Desc"])
    def test_sort_descending_case_insensitive(self, session, order):
        query = populate_arguments_for_criteria(session.create_query(Book), {"sort": "title", "order": order})
        assert query.orders == [Order.desc("title")]

    def test_order_without_sort_ignored(self, session):
        query = populate_arguments_for_criteria(session.create_query(Book), {"order": "desc"})
        assert query.orders == []

    def test_default_max_results(self, session):
        with patch.object(settings, "DEFAULT_MAX_RESULTS", 2):
            query = populate_arguments_for_criteria(session.create_query(Book), {"offset": 1})
        assert query.limit == 2

    def test_explicit_max_overrides_default(self, session):
        with patch.object(settings, "DEFAULT_MAX_RESULTS", 2):
            query = populate_arguments_for_criteria(session.create_query(Book), {"max": 4})
        assert query.limit == 4

    def test_default_max_applies_to_paginated_list(self, builder):
        with patch.object(settings, "DEFAULT_MAX_RESULTS", 2):
            result = builder.list({"offset": 0}, lambda c: None)
        assert len(result) == 2

"""
Tests for ptcgp_data/parallel_call.py

Tests cover:
- map_limit() ordering, concurrency bound and failure handling
- parse_concurrency() parsing, fallback and capping
"""

import math
import random
from typing import List

import gevent
import pytest

from ptcgp_data.exceptions import InvalidConcurrencyError
from ptcgp_data.parallel_call import map_limit, parse_concurrency


class TestMapLimit:
    """Test suite for map_limit function."""

    @pytest.mark.parametrize("item_count,limit", [(0, 1), (1, 1), (5, 2), (10, 3), (7, 50)])
    def test_results_match_sequential_order(self, item_count: int, limit: int):
        """Results line up with the input whatever order calls finish in."""
        items = list(range(item_count))

        def slow_square(value: int) -> int:
            gevent.sleep(random.uniform(0, 0.005))
            return value * value

        assert map_limit(items, limit, slow_square) == [value * value for value in items]

    @pytest.mark.parametrize("item_count,limit", [(10, 3), (3, 10), (8, 1)])
    def test_never_exceeds_limit(self, item_count: int, limit: int):
        """No more than min(limit, len(items)) calls are outstanding."""
        in_flight = 0
        peak = 0

        def track(value: int) -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            gevent.sleep(0.001 * (value % 3))
            in_flight -= 1
            return value

        map_limit(list(range(item_count)), limit, track)

        assert peak == min(limit, item_count)
        assert in_flight == 0

    def test_free_slot_takes_next_item(self):
        """A worker finishing early picks up the next item instead of idling."""
        started: List[str] = []
        durations = {"slow": 0.05, "fast1": 0.0, "fast2": 0.0, "fast3": 0.0}

        def work(name: str) -> str:
            started.append(name)
            gevent.sleep(durations[name])
            return name

        results = map_limit(["slow", "fast1", "fast2", "fast3"], 2, work)

        assert results == ["slow", "fast1", "fast2", "fast3"]
        assert started == ["slow", "fast1", "fast2", "fast3"]

    def test_empty_items(self):
        calls = []
        assert map_limit([], 4, calls.append) == []
        assert not calls

    @pytest.mark.parametrize("limit", [0, -1, math.nan, math.inf, -math.inf, "4", None, True])
    def test_invalid_limit_raises_before_work(self, limit):
        """Invalid limits are rejected before the function ever runs."""
        calls = []

        with pytest.raises(InvalidConcurrencyError):
            map_limit([1, 2, 3], limit, calls.append)

        assert not calls

    def test_invalid_limit_is_a_value_error(self):
        with pytest.raises(ValueError, match="Invalid concurrency limit"):
            map_limit([], 0, lambda value: value)

    def test_fractional_limit_runs_at_least_one_worker(self):
        assert map_limit([1, 2], 0.5, lambda value: value + 1) == [2, 3]

    def test_first_failure_propagates(self):
        """One failing item fails the whole call."""

        def fail_on_three(value: int) -> int:
            gevent.sleep(0)
            if value == 3:
                raise RuntimeError("boom on 3")
            return value

        with pytest.raises(RuntimeError, match="boom on 3"):
            map_limit(list(range(10)), 4, fail_on_three)

    def test_failure_stops_remaining_work(self):
        """Items not yet started when a call fails are never processed."""
        processed: List[int] = []

        def work(value: int) -> int:
            if value == 0:
                raise KeyError("first item")
            gevent.sleep(0.01)
            processed.append(value)
            return value

        with pytest.raises(KeyError):
            map_limit(list(range(20)), 2, work)

        gevent.sleep(0.05)
        assert len(processed) < 19


class TestParseConcurrency:
    """Test suite for parse_concurrency function."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("5", 5),
            (" 12 ", 12),
            ("+7", 7),
            ("12abc", 12),
            (8, 8),
            (3.9, 3),
            ("100", 100),
        ],
    )
    def test_valid_values(self, value, expected: int):
        assert parse_concurrency(value) == expected

    @pytest.mark.parametrize(
        "value",
        [None, "abc", "", "-1", "0", 0, -1, math.nan, math.inf, 0.5, True, [], {}],
    )
    def test_invalid_values_use_default(self, value):
        assert parse_concurrency(value, default=10) == 10

    def test_custom_default(self):
        assert parse_concurrency("abc", default=3) == 3

    def test_values_above_max_are_capped(self):
        assert parse_concurrency(9999, maximum=100) == 100
        assert parse_concurrency("250") == 100
        assert parse_concurrency("250", maximum=20) == 20

    def test_default_cap_is_one_hundred(self):
        assert parse_concurrency(101) == 100

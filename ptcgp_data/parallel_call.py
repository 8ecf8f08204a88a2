"""
Wrapper around running a function over many items with bounded concurrency
"""

import itertools
import logging
import math
import re
from collections.abc import Callable, Sequence
from typing import Any, List, Optional, TypeVar

import gevent

from . import constants
from .exceptions import InvalidConcurrencyError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


def map_limit(
    items: Sequence[T], limit: Any, function: Callable[[T], R]
) -> List[R]:
    """
    Execute a function over every item, with at most `limit` calls in flight
    :param items: Items to process
    :param limit: Maximum number of concurrent executions
    :param function: Function applied to each item
    :return: Results in the same order as `items`
    """
    worker_count = _validate_limit(limit)

    items = list(items)
    results: List[Optional[R]] = [None] * len(items)
    cursor = itertools.count()

    def worker() -> None:
        # Each worker claims the next unprocessed index until none remain
        while True:
            index = next(cursor)
            if index >= len(items):
                return
            results[index] = function(items[index])

    workers = [gevent.spawn(worker) for _ in range(min(worker_count, len(items)))]
    try:
        gevent.joinall(workers, raise_error=True)
    finally:
        # Stop siblings still running after a failure
        gevent.killall(workers, block=True)

    return results  # type: ignore[return-value]


def _validate_limit(limit: Any) -> int:
    """
    Convert a concurrency limit to a worker count, or fail
    :param limit: Limit passed by the caller
    :return: Number of workers to spawn
    """
    if isinstance(limit, bool) or not isinstance(limit, (int, float)):
        raise InvalidConcurrencyError(f"Invalid concurrency limit: {limit!r}")
    if not math.isfinite(limit) or limit <= 0:
        raise InvalidConcurrencyError(f"Invalid concurrency limit: {limit!r}")
    return max(1, int(limit))


def parse_concurrency(
    value: Any,
    default: int = constants.DEFAULT_CONCURRENCY,
    maximum: int = constants.MAX_CONCURRENCY,
) -> int:
    """
    Parse a concurrency value and enforce sane defaults.
    Values above `maximum` are capped, invalid values fall back to `default`.
    :param value: Raw configuration value (str, number or None)
    :param default: Value to use when `value` is unusable
    :param maximum: Upper bound for the returned value
    :return: Positive concurrency limit
    """
    parsed: Optional[float] = None
    if isinstance(value, str):
        match = _LEADING_INTEGER.match(value)
        if match:
            parsed = int(match.group(1))
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = value

    if parsed is None or not math.isfinite(parsed) or int(parsed) <= 0:
        if value is not None:
            LOGGER.debug(f"Ignoring concurrency value {value!r}, using {default}")
        return default

    return min(int(parsed), maximum)

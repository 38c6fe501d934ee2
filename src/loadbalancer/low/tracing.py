"""
Interface for tracing important events that can be used for extracting performance information

Currently, the export is handled just by logging, assuming to be parsed later. We log at debug
level since this is assumed to be high level tracing
"""

import functools
import logging
import time
from enum import Enum
from typing import Callable, TypeVar

d: dict[str, str] = {}

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


class Microtrace(str, Enum):
    lb_init = "lb_init"
    lb_dispatch = "lb_dispatch"
    lb_rebalance = "lb_rebalance"


class Phases(str, Enum):
    dispatch = "dispatch"
    rebalance = "rebalance"
    report = "report"
    shutdown = "shutdown"


def _labels(labels: dict) -> str:
    return ";".join(f"{k}={v}" for k, v in labels.items())


def label(key: str, value: str) -> None:
    """Makes all subsequent marks contain this KV"""
    global d
    d[key] = value


def mark(labels: dict) -> None:
    at = time.perf_counter_ns()
    global d
    event = _labels({**d, **labels})
    logger.debug(f"{event};{at=}")


def trace(kind: Microtrace, value_ns: int) -> None:
    logger.debug(f"microtrace={kind.value};{value_ns=}")


def timer(f: F, kind: Microtrace) -> F:
    """Wraps `f` so that each invocation traces its duration under `kind`"""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        start = time.perf_counter_ns()
        try:
            return f(*args, **kwargs)
        finally:
            trace(kind, time.perf_counter_ns() - start)

    return wrapper  # type: ignore

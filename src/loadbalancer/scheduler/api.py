import logging
import math
from typing import Any, Iterable, Iterator

from loadbalancer.low.core import BalancerConfig, DispatchRecord, InvalidTaskLoad, Migrated, Node, RebalanceOutcome
from loadbalancer.low.tracing import Microtrace, timer
from loadbalancer.scheduler.core import State
from loadbalancer.scheduler.heap import LoadHeap
from loadbalancer.scheduler.rebalance import evaluate

logger = logging.getLogger(__name__)


def initialize(config: BalancerConfig, topology: Any = None) -> State:
    """Creates all nodes at zero load and a heap holding each of them, inserted in id order"""
    nodes = [Node(id=i, capacity=capacity) for i, capacity in enumerate(config.capacities)]
    heap = LoadHeap(len(nodes))
    for node in nodes:
        heap.insert(node.id, node.current_load)
    logger.debug(f"initialized {len(nodes)} nodes with {config=}")
    return State(
        nodes=nodes,
        heap=heap,
        threshold=config.rebalance_threshold,
        interval=config.rebalance_interval,
        topology=topology,
    )


def _validate_task_load(task_load: Any) -> float:
    try:
        valid = math.isfinite(task_load) and task_load > 0
    except TypeError as e:
        raise InvalidTaskLoad(f"task load must be a number, got {task_load!r}") from e
    if isinstance(task_load, bool) or not valid:
        raise InvalidTaskLoad(f"task load must be positive and finite, got {task_load!r}")
    return float(task_load)


def _rebalance(state: State) -> RebalanceOutcome:
    outcome = timer(evaluate, Microtrace.lb_rebalance)(state.nodes, state.threshold, state.heap)
    if isinstance(outcome, Migrated):
        state.migrations.append(outcome)
    return outcome


def dispatch(state: State, task_load: float) -> DispatchRecord:
    """Assigns the task to the least loaded node. Every `state.interval` dispatches, the
    rebalancing policy is evaluated and its outcome attached to the returned record.

    An invalid load is rejected before any node or heap is touched."""
    load = _validate_task_load(task_load)
    with state.lock:
        entry = state.heap.extract_min()
        node = state.node(entry.node)
        node.current_load += load
        state.heap.insert(node.id, node.current_load)
        state.dispatched += 1
        logger.debug(f"task #{state.dispatched} of {load=:.2f} -> node {node.id}, now at {node.current_load:.2f}")

        record = DispatchRecord(
            sequence=state.dispatched,
            node=node.id,
            task_load=load,
            load=node.current_load,
            capacity=node.capacity,
            utilization=node.utilization(),
        )
        if state.dispatched % state.interval == 0:
            record.rebalance = _rebalance(state)
        return record


def rebalance(state: State) -> RebalanceOutcome:
    """On-demand evaluation of the rebalancing policy, independent of the dispatch interval"""
    with state.lock:
        return _rebalance(state)


def dispatch_all(state: State, task_loads: Iterable[float]) -> Iterator[DispatchRecord]:
    """Pulls one load at a time from `task_loads` and dispatches it. Yields, so that the task
    source may be unbounded"""
    timed = timer(dispatch, Microtrace.lb_dispatch)
    for task_load in task_loads:
        yield timed(state, task_load)

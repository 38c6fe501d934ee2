"""
Corrective rebalancing policy: when the utilization gap between the most and the least loaded
node exceeds a threshold, half of the most loaded node's excess above the mean is moved over
to the least loaded one.

The evaluation is stateless and produces at most one migration per call. Note the migrated
amount is not capacity-aware, the recipient may end up above its own capacity.
"""

import logging
from typing import Sequence

from loadbalancer.low.core import Migrated, Node, NoActionTaken, NoNodes, RebalanceOutcome
from loadbalancer.scheduler.heap import LoadHeap

logger = logging.getLogger(__name__)

MIGRATION_RATIO = 0.5


def average_load(nodes: Sequence[Node]) -> float:
    if not nodes:
        raise NoNodes("cannot average load over no nodes")
    return sum(node.current_load for node in nodes) / len(nodes)


def most_loaded(nodes: Sequence[Node]) -> Node:
    """Node with maximum current load, first occurrence wins ties"""
    if not nodes:
        raise NoNodes("no nodes to choose from")
    rv = nodes[0]
    for node in nodes[1:]:
        if node.current_load > rv.current_load:
            rv = node
    return rv


def least_loaded(nodes: Sequence[Node]) -> Node:
    """Node with minimum current load, first occurrence wins ties"""
    if not nodes:
        raise NoNodes("no nodes to choose from")
    rv = nodes[0]
    for node in nodes[1:]:
        if node.current_load < rv.current_load:
            rv = node
    return rv


def evaluate(nodes: Sequence[Node], threshold: float, heap: LoadHeap) -> RebalanceOutcome:
    """Migrates load from the most to the least loaded node if their utilization differs by more
    than `threshold` percentage points. Mutates both nodes and mirrors them into `heap` before
    returning, so that the heap is never stale relative to `nodes`."""
    avg = average_load(nodes)
    most = most_loaded(nodes)
    least = least_loaded(nodes)
    imbalance = most.utilization() - least.utilization()

    if most.id == least.id or imbalance <= threshold:
        logger.debug(f"no rebalance needed, {imbalance=:.2f} vs {threshold=:.2f}")
        return NoActionTaken(imbalance=imbalance)

    # both must be held before either node is touched
    heap.index_of(most.id)
    heap.index_of(least.id)

    amount = (most.current_load - avg) * MIGRATION_RATIO
    most.current_load -= amount
    least.current_load += amount
    heap.update_load(most.id, most.current_load)
    heap.update_load(least.id, least.current_load)

    logger.info(f"migrated {amount:.2f} from node {most.id} to node {least.id}, {imbalance=:.2f} > {threshold=:.2f}")
    return Migrated(fr=most.id, to=least.id, amount=amount, imbalance_before=imbalance)

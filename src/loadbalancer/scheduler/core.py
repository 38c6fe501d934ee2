import threading
from dataclasses import dataclass, field
from typing import Any

from loadbalancer.low.core import Migrated, Node, NodeId, NodeNotFound
from loadbalancer.scheduler.heap import LoadHeap


@dataclass
class State:
    """Everything a dispatch/rebalance cycle reads and writes. The nodes are authoritative,
    the heap is an index kept in sync with them after every mutation"""

    nodes: list[Node]
    heap: LoadHeap
    threshold: float
    interval: int
    # opaque handle, passed through and never consulted for decisions
    topology: Any = None

    # trackers
    dispatched: int = 0
    migrations: list[Migrated] = field(default_factory=list)

    # guards nodes and heap together, every api call is one critical section
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def node(self, node_id: NodeId) -> Node:
        if not (0 <= node_id < len(self.nodes)):
            raise NodeNotFound(f"{node_id=} outside of 0..{len(self.nodes)-1}")
        return self.nodes[node_id]

    def total_load(self) -> float:
        return sum(node.current_load for node in self.nodes)

    def snapshot(self) -> list[Node]:
        """Copies of the nodes, safe to hand out to reporting"""
        with self.lock:
            return [node.model_copy() for node in self.nodes]

"""
Array-backed binary min-heap of node loads, used to answer "which node is the least loaded"
in logarithmic time.

Holds exactly one entry per node, with a capacity fixed at creation. The heap is a derived
index: callers are responsible for mirroring every change of `Node.current_load` into it via
`update_load` (or extract + insert). There is no reverse pointer from node to heap position,
so `update_load` locates the entry by a linear scan -- the hot path of dispatch only uses
`extract_min` and `insert`, which stay logarithmic.

Ties are not ordered: among entries of equal load, whichever the sift procedures leave at the
root is returned. Concretely, comparisons are strict and the left child is considered before
the right one, so a right child replaces the left one only when strictly smaller.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

from loadbalancer.low.core import CapacityExceeded, Empty, InvalidCapacity, NodeId, NodeNotFound

logger = logging.getLogger(__name__)


@dataclass
class HeapEntry:
    node: NodeId
    load: float


def _parent(i: int) -> int:
    return (i - 1) // 2


class LoadHeap:
    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise InvalidCapacity(f"heap capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.entries: list[HeapEntry] = []

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[HeapEntry]:
        """Entries in array order, which is *not* sorted order"""
        return iter(self.entries)

    def __repr__(self) -> str:
        return f"LoadHeap(capacity={self.capacity}, entries={self.entries})"

    def size(self) -> int:
        return len(self.entries)

    def is_empty(self) -> bool:
        return not self.entries

    def insert(self, node: NodeId, load: float) -> None:
        if len(self.entries) >= self.capacity:
            # NOTE unreachable in correct use, since every node is held exactly once
            raise CapacityExceeded(f"heap of capacity {self.capacity} is full, cannot insert {node=}")
        self.entries.append(HeapEntry(node, load))
        self._sift_up(len(self.entries) - 1)

    def extract_min(self) -> HeapEntry:
        if not self.entries:
            raise Empty("extract_min on an empty heap")
        root = self.entries[0]
        last = self.entries.pop()
        if self.entries:
            self.entries[0] = last
            self._sift_down(0)
        return root

    def update_load(self, node: NodeId, load: float) -> None:
        index = self.index_of(node)
        self.entries[index].load = load
        if index > 0 and load < self.entries[_parent(index)].load:
            self._sift_up(index)
        else:
            self._sift_down(index)

    def loads(self) -> dict[NodeId, float]:
        return {entry.node: entry.load for entry in self.entries}

    def is_valid(self) -> bool:
        """Checks the min-heap property for every non-root entry"""
        return all(
            self.entries[i].load >= self.entries[_parent(i)].load
            for i in range(1, len(self.entries))
        )

    def index_of(self, node: NodeId) -> int:
        """Array position of the entry of `node`, by linear scan"""
        for index, entry in enumerate(self.entries):
            if entry.node == node:
                return index
        raise NodeNotFound(f"{node=} not held in heap")

    def _swap(self, i: int, j: int) -> None:
        self.entries[i], self.entries[j] = self.entries[j], self.entries[i]

    def _sift_up(self, index: int) -> None:
        while index > 0:
            parent = _parent(index)
            if self.entries[index].load < self.entries[parent].load:
                self._swap(index, parent)
                index = parent
            else:
                break

    def _sift_down(self, index: int) -> None:
        size = len(self.entries)
        while True:
            smallest = index
            left = 2 * index + 1
            right = 2 * index + 2
            if left < size and self.entries[left].load < self.entries[smallest].load:
                smallest = left
            if right < size and self.entries[right].load < self.entries[smallest].load:
                smallest = right
            if smallest == index:
                return
            self._swap(index, smallest)
            index = smallest

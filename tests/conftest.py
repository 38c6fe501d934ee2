import pytest

from loadbalancer.low.core import BalancerConfig, Node
from loadbalancer.scheduler.api import initialize
from loadbalancer.scheduler.heap import LoadHeap


@pytest.fixture(scope="function")
def config():
    return BalancerConfig(capacities=[100.0, 100.0, 100.0], rebalance_threshold=20.0, rebalance_interval=5)


@pytest.fixture(scope="function")
def state(config):
    return initialize(config)


@pytest.fixture(scope="function")
def loaded():
    """Builds nodes with given loads, and a heap holding them"""

    def build(loads: list[float], capacities: list[float] | None = None) -> tuple[list[Node], LoadHeap]:
        if capacities is None:
            capacities = [100.0] * len(loads)
        nodes = [
            Node(id=i, capacity=capacity, current_load=load)
            for i, (load, capacity) in enumerate(zip(loads, capacities))
        ]
        heap = LoadHeap(len(nodes))
        for node in nodes:
            heap.insert(node.id, node.current_load)
        return nodes, heap

    return build

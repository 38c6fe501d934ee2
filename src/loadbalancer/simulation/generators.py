"""
Random configuration sources: node capacities, task loads and an informational topology.
All take a numpy Generator so that runs are reproducible given a seed
"""

from typing import Iterator

import numpy as np

from loadbalancer.contextgraph import Topology
from loadbalancer.low.core import BalancerConfig, InvalidEdge, SimulationConfig

MIN_CAPACITY = 80.0
MAX_CAPACITY = 120.0
MIN_TASK_LOAD = 5.0
MAX_TASK_LOAD = 15.0
MAX_NEIGHBOURS = 3


def random_capacities(
    rng: np.random.Generator, count: int, low: float = MIN_CAPACITY, high: float = MAX_CAPACITY
) -> list[float]:
    return [float(e) for e in rng.uniform(low, high, size=count)]


def random_task_loads(
    rng: np.random.Generator, count: int, low: float = MIN_TASK_LOAD, high: float = MAX_TASK_LOAD
) -> list[float]:
    return [float(e) for e in rng.uniform(low, high, size=count)]


def task_stream(
    rng: np.random.Generator, low: float = MIN_TASK_LOAD, high: float = MAX_TASK_LOAD
) -> Iterator[float]:
    """Unbounded task source, producing loads on demand"""
    while True:
        yield float(rng.uniform(low, high))


def random_edges(rng: np.random.Generator, node_count: int) -> list[tuple[int, int]]:
    """Every node attempts 1 to MAX_NEIGHBOURS connections to random destinations; self-edges
    and duplicates are skipped, so a node may end up with fewer"""
    topology = Topology(node_count)
    for src in range(node_count):
        attempts = int(rng.integers(1, MAX_NEIGHBOURS + 1))
        for _ in range(attempts):
            dst = int(rng.integers(0, node_count))
            try:
                topology.add_edge(src, dst)
            except InvalidEdge:
                continue
    return list(topology.edges)


def random_config(
    seed: int | None = None,
    servers: int = 6,
    tasks: int = 30,
    threshold: float = 20.0,
    interval: int = 5,
) -> SimulationConfig:
    rng = np.random.default_rng(seed)
    return SimulationConfig(
        balancer=BalancerConfig(
            capacities=random_capacities(rng, servers),
            rebalance_threshold=threshold,
            rebalance_interval=interval,
        ),
        task_loads=random_task_loads(rng, tasks),
        edges=random_edges(rng, servers),
    )

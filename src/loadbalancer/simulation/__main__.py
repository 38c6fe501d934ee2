"""
Entrypoint for running a load balancing simulation

Example:
```
python -m loadbalancer.simulation random --servers 6 --tasks 30 --threshold 20 --interval 5 --seed 42
python -m loadbalancer.simulation file simulation.json
```
"""

import logging
import logging.config
import sys
from time import perf_counter_ns

import fire

from loadbalancer.config import logging_config
from loadbalancer.contextgraph import Topology
from loadbalancer.controller.impl import run
from loadbalancer.controller.report import Reporter, SimulationReport
from loadbalancer.low.core import SimulationConfig
from loadbalancer.low.tracing import Microtrace, timer
from loadbalancer.scheduler.api import initialize
from loadbalancer.simulation.generators import random_config

logger = logging.getLogger("loadbalancer.simulation")


def simulate(config: SimulationConfig, quiet: bool = False) -> SimulationReport:
    topology = Topology.from_edges(config.balancer.node_count, config.edges)
    state = timer(initialize, Microtrace.lb_init)(config.balancer, topology)
    reporter = Reporter(None if quiet else sys.stdout, config.balancer.rebalance_threshold)
    reporter.send_topology(topology)
    reporter.send_states(state.snapshot())

    start = perf_counter_ns()
    report = run(state, config.task_loads, reporter)
    end = perf_counter_ns()
    logger.info(f"simulation {report.name} took {(end-start)/1e6:.3f}ms")
    return report


def main_random(
    servers: int = 6,
    tasks: int = 30,
    threshold: float = 20.0,
    interval: int = 5,
    seed: int | None = None,
    quiet: bool = False,
) -> None:
    logging.config.dictConfig(logging_config)
    config = random_config(seed, servers, tasks, threshold, interval)
    simulate(config, quiet)


def main_file(path: str, quiet: bool = False) -> None:
    logging.config.dictConfig(logging_config)
    config = SimulationConfig.from_file(path)
    simulate(config, quiet)


if __name__ == "__main__":
    fire.Fire({"random": main_random, "file": main_file})

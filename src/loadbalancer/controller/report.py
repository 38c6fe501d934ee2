"""
Handles reporting of dispatches, rebalances and final statistics. The scheduler only returns
records and outcomes, rendering them is done here
"""

import datetime
import logging
from dataclasses import dataclass, field
from typing import TextIO

import randomname

from loadbalancer.contextgraph import Topology
from loadbalancer.low.core import DispatchRecord, Migrated, Node, NoActionTaken, RebalanceOutcome
from loadbalancer.low.func import assert_never
from loadbalancer.scheduler.rebalance import average_load, least_loaded, most_loaded

logger = logging.getLogger(__name__)


@dataclass
class Statistics:
    average: float
    max_load: float
    min_load: float

    @property
    def difference(self) -> float:
        return self.max_load - self.min_load

    @classmethod
    def of(cls, nodes: list[Node]) -> "Statistics":
        return cls(
            average=average_load(nodes),
            max_load=most_loaded(nodes).current_load,
            min_load=least_loaded(nodes).current_load,
        )


@dataclass
class SimulationReport:
    nodes: list[Node]
    threshold: float
    dispatched: int
    migrations: list[Migrated] = field(default_factory=list)
    name: str = field(default_factory=randomname.get_name)
    created_at: datetime.datetime = field(default_factory=lambda: datetime.datetime.now(datetime.timezone.utc))

    @property
    def statistics(self) -> Statistics:
        return Statistics.of(self.nodes)

    @property
    def well_balanced(self) -> bool:
        # NOTE compares a load difference against a percentage threshold, kept for parity with
        # how runs have always been judged
        return self.statistics.difference < self.threshold

    def __repr__(self) -> str:
        stats = self.statistics
        str = f"============= Simulation Report: {self.name} =============\n"
        str += f"Created at: {self.created_at:%Y-%m-%d %H:%M:%S} UTC\n"
        str += f"Tasks dispatched: {self.dispatched}, migrations: {len(self.migrations)}\n"
        str += render_states(self.nodes)
        str += f"Max Load:        {stats.max_load:.2f}\n"
        str += f"Min Load:        {stats.min_load:.2f}\n"
        str += f"Load Difference: {stats.difference:.2f}\n"
        if self.well_balanced:
            str += "System is WELL-BALANCED\n"
        else:
            str += "System could benefit from further rebalancing\n"
        str += "================================================\n"
        return str


def render_dispatch(record: DispatchRecord) -> str:
    return (
        f"Task {record.sequence:2d} -> Node {record.node} | "
        f"Load: {record.load:6.2f}/{record.capacity:6.2f} ({record.utilization:.1f}%)"
    )


def render_outcome(outcome: RebalanceOutcome, threshold: float) -> str:
    if isinstance(outcome, NoActionTaken):
        return f"No rebalancing needed, imbalance {outcome.imbalance:.2f}% (threshold: {threshold:.2f}%)"
    elif isinstance(outcome, Migrated):
        return (
            f"REBALANCING: imbalance {outcome.imbalance_before:.2f}% (threshold: {threshold:.2f}%), "
            f"migrated {outcome.amount:.2f} load units Node {outcome.fr} -> Node {outcome.to}"
        )
    else:
        assert_never(outcome)


def render_states(nodes: list[Node]) -> str:
    rv = "--- Current Node States ---\n"
    for node in nodes:
        rv += f"Node {node.id}: Load = {node.current_load:6.2f}/{node.capacity:6.2f} ({node.utilization():.1f}%)\n"
    rv += f"Average Load: {average_load(nodes):.2f}\n"
    return rv


def render_topology(topology: Topology) -> str:
    rv = "--- Network Topology ---\n"
    for node in sorted(topology.nodes):
        neighbours = topology.neighbours(node)
        targets = ", ".join(f"{n}" for n in neighbours) if neighbours else "(isolated)"
        rv += f"Node {node} -> {targets}\n"
    return rv


class Reporter:
    def __init__(self, stream: TextIO | None, threshold: float = 0.0) -> None:
        self.stream = stream
        self.threshold = threshold

    def _send(self, text: str) -> None:
        if self.stream is None:
            return
        print(text.rstrip("\n"), file=self.stream)

    def send_dispatch(self, record: DispatchRecord) -> None:
        self._send(render_dispatch(record))
        if record.rebalance is not None:
            self.send_outcome(record.rebalance)

    def send_outcome(self, outcome: RebalanceOutcome) -> None:
        self._send(render_outcome(outcome, self.threshold))

    def send_states(self, nodes: list[Node]) -> None:
        self._send(render_states(nodes))

    def send_topology(self, topology: Topology) -> None:
        self._send(render_topology(topology))

    def shutdown(self, report: SimulationReport) -> None:
        logger.debug(f"reporter shutting down after {report.name}")
        self._send(repr(report))

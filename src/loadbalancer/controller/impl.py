import logging
from typing import Iterable

from loadbalancer.controller.report import Reporter, SimulationReport
from loadbalancer.low.core import DispatchRecord, Node, RebalanceOutcome
from loadbalancer.low.func import maybe_head
from loadbalancer.low.tracing import Microtrace, Phases, label, mark, timer
from loadbalancer.scheduler.api import dispatch, rebalance
from loadbalancer.scheduler.core import State

logger = logging.getLogger(__name__)


class Simulation:
    """Step-driven run over a task source. Each method corresponds to one action a driver
    (a menu, a test, a scheduler tick) may take between dispatches"""

    def __init__(self, state: State, tasks: Iterable[float], reporter: Reporter | None = None) -> None:
        self.state = state
        self.tasks = iter(tasks)
        self.reporter = reporter if reporter is not None else Reporter(None, state.threshold)
        self.done = False

    def assign_next(self) -> DispatchRecord | None:
        """Dispatches the next task, or returns None once the task source is exhausted"""
        if self.done:
            return None
        task_load = maybe_head(self.tasks)
        if task_load is None:
            self.done = True
            return None
        mark({"action": Phases.dispatch})
        record = timer(dispatch, Microtrace.lb_dispatch)(self.state, task_load)
        self.reporter.send_dispatch(record)
        return record

    def assign_remaining(self) -> list[DispatchRecord]:
        rv = []
        while (record := self.assign_next()) is not None:
            rv.append(record)
        logger.debug(f"assigned {len(rv)} remaining tasks")
        return rv

    def rebalance_now(self) -> RebalanceOutcome:
        mark({"action": Phases.rebalance})
        outcome = rebalance(self.state)
        self.reporter.send_outcome(outcome)
        return outcome

    def status(self) -> list[Node]:
        nodes = self.state.snapshot()
        self.reporter.send_states(nodes)
        return nodes

    def finish(self) -> SimulationReport:
        """Stops the run, remaining tasks are left unassigned"""
        mark({"action": Phases.shutdown})
        self.done = True
        with self.state.lock:
            report = SimulationReport(
                nodes=self.state.snapshot(),
                threshold=self.state.threshold,
                dispatched=self.state.dispatched,
                migrations=list(self.state.migrations),
            )
        mark({"action": Phases.report})
        self.reporter.shutdown(report)
        return report


def run(state: State, tasks: Iterable[float], reporter: Reporter | None = None) -> SimulationReport:
    label("run", "batch")
    simulation = Simulation(state, tasks, reporter)
    try:
        simulation.assign_remaining()
    except Exception:
        logger.error("crash in dispatch loop, shutting down")
        raise
    return simulation.finish()

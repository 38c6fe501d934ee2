import numpy as np
import pytest

from loadbalancer.low.core import Migrated, NoActionTaken, NodeNotFound, NoNodes
from loadbalancer.scheduler.heap import LoadHeap
from loadbalancer.scheduler.rebalance import average_load, evaluate, least_loaded, most_loaded


def test_helpers(loaded):
    nodes, _ = loaded([10.0, 30.0, 30.0, 10.0])
    assert average_load(nodes) == 20.0
    assert most_loaded(nodes).id == 1
    assert least_loaded(nodes).id == 0


def test_no_nodes():
    with pytest.raises(NoNodes):
        average_load([])
    with pytest.raises(NoNodes):
        evaluate([], 20.0, LoadHeap(1))


def test_migration(loaded):
    nodes, heap = loaded([80.0, 20.0])
    outcome = evaluate(nodes, 20.0, heap)
    assert isinstance(outcome, Migrated)
    assert (outcome.fr, outcome.to, outcome.amount) == (0, 1, 15.0)
    assert outcome.imbalance_before == pytest.approx(60.0)
    assert [n.current_load for n in nodes] == [65.0, 35.0]
    assert heap.loads() == {0: 65.0, 1: 35.0}
    assert heap.is_valid()
    assert heap.extract_min().node == 1


def test_below_threshold(loaded):
    nodes, heap = loaded([80.0, 20.0])
    outcome = evaluate(nodes, 70.0, heap)
    assert isinstance(outcome, NoActionTaken)
    assert outcome.imbalance == pytest.approx(60.0)
    assert [n.current_load for n in nodes] == [80.0, 20.0]
    assert heap.loads() == {0: 80.0, 1: 20.0}


def test_threshold_is_inclusive(loaded):
    nodes, heap = loaded([75.0, 25.0])
    assert isinstance(evaluate(nodes, 50.0, heap), NoActionTaken)
    assert [n.current_load for n in nodes] == [75.0, 25.0]


@pytest.mark.parametrize(
    "loads",
    [
        [50.0],
        [40.0, 40.0, 40.0],
        [0.0, 0.0],
    ],
)
def test_degenerate_same_node(loaded, loads):
    nodes, heap = loaded(loads)
    outcome = evaluate(nodes, 0.1, heap)
    assert isinstance(outcome, NoActionTaken)
    assert [n.current_load for n in nodes] == loads


def test_second_evaluation_is_noop(loaded):
    nodes, heap = loaded([80.0, 20.0])
    assert isinstance(evaluate(nodes, 40.0, heap), Migrated)
    assert isinstance(evaluate(nodes, 40.0, heap), NoActionTaken)
    assert [n.current_load for n in nodes] == [65.0, 35.0]


def test_repeated_evaluation_converges(loaded):
    nodes, heap = loaded([90.0, 10.0, 30.0, 50.0])
    outcomes = [evaluate(nodes, 20.0, heap) for _ in range(5)]
    assert [type(o) for o in outcomes] == [Migrated, Migrated, Migrated, NoActionTaken, NoActionTaken]
    assert [(o.fr, o.to, o.amount) for o in outcomes[:3]] == [(0, 1, 22.5), (0, 2, 11.25), (0, 1, 5.625)]
    assert [n.current_load for n in nodes] == [50.625, 38.125, 41.25, 50.0]
    assert heap.loads() == {n.id: n.current_load for n in nodes}


def test_heterogeneous_capacities_do_not_oscillate(loaded):
    """The policy picks nodes by load but measures imbalance by utilization. With uneven
    capacities a migration can invert the utilization gap, after which the imbalance is negative
    and no further migration happens"""
    nodes, heap = loaded([100.0, 20.0], capacities=[200.0, 50.0])
    first = evaluate(nodes, 5.0, heap)
    assert isinstance(first, Migrated)
    assert first.amount == 20.0
    assert [n.current_load for n in nodes] == [80.0, 40.0]
    assert nodes[1].utilization() > nodes[0].utilization()

    for _ in range(3):
        outcome = evaluate(nodes, 5.0, heap)
        assert isinstance(outcome, NoActionTaken)
        assert outcome.imbalance < 0
    assert [n.current_load for n in nodes] == [80.0, 40.0]


def test_recipient_may_exceed_capacity(loaded):
    """Migration is not capacity-aware, the least loaded node may be pushed above 100%"""
    nodes, heap = loaded([90.0, 5.0], capacities=[100.0, 10.0])
    outcome = evaluate(nodes, 20.0, heap)
    assert isinstance(outcome, Migrated)
    assert outcome.amount == 21.25
    assert nodes[1].current_load == 26.25
    assert nodes[1].current_load > nodes[1].capacity
    assert nodes[1].utilization() == pytest.approx(262.5)


@pytest.mark.parametrize("seed", range(5))
def test_conservation(loaded, seed):
    rng = np.random.default_rng(seed)
    loads = [float(e) for e in rng.uniform(0, 100, size=8)]
    capacities = [float(e) for e in rng.uniform(80, 120, size=8)]
    nodes, heap = loaded(loads, capacities)
    before = sum(n.current_load for n in nodes)
    for _ in range(10):
        evaluate(nodes, 5.0, heap)
        assert sum(n.current_load for n in nodes) == pytest.approx(before)
        assert all(n.current_load >= 0 for n in nodes)
        assert heap.is_valid()
        assert heap.loads() == {n.id: n.current_load for n in nodes}


def test_node_missing_from_heap_leaves_loads(loaded):
    nodes, _ = loaded([80.0, 20.0])
    heap = LoadHeap(2)
    heap.insert(1, 20.0)
    heap.insert(5, 80.0)
    with pytest.raises(NodeNotFound):
        evaluate(nodes, 20.0, heap)
    assert [n.current_load for n in nodes] == [80.0, 20.0]
    assert heap.loads() == {1: 20.0, 5: 80.0}

"""
Core data structures -- prescribes most of the API
"""

from pathlib import Path

from pydantic import BaseModel, Field, PositiveFloat, model_validator
from typing_extensions import Self

NodeId = int

# Definitions
class Node(BaseModel):
    id: NodeId = Field(ge=0, description="stable identity, index of the node within the balancer")
    capacity: PositiveFloat = Field(description="maximum sustainable load, fixed for the run")
    # NOTE not clamped against capacity -- utilization above 100% is observable, not prevented
    current_load: float = Field(0.0, ge=0, description="authoritative load, mirrored into the heap")

    def utilization(self) -> float:
        """Load as a percentage of capacity"""
        return self.current_load / self.capacity * 100.0


class BalancerConfig(BaseModel):
    capacities: list[PositiveFloat] = Field(
        min_length=1,
        description="capacity per node, node ids are the positions in this list",
    )
    rebalance_threshold: PositiveFloat = Field(
        20.0,
        description="utilization difference in percentage points above which load is migrated",
    )
    rebalance_interval: int = Field(
        5,
        gt=0,
        description="rebalancing is evaluated after every this many dispatches",
    )

    @property
    def node_count(self) -> int:
        return len(self.capacities)


class SimulationConfig(BaseModel):
    balancer: BalancerConfig
    task_loads: list[PositiveFloat] = Field(default_factory=list)
    edges: list[tuple[NodeId, NodeId]] = Field(
        default_factory=list,
        description="informational topology, directed src -> dst",
    )

    @model_validator(mode="after")
    def edges_within_nodes(self) -> Self:
        n = self.balancer.node_count
        seen: set[tuple[NodeId, NodeId]] = set()
        for src, dst in self.edges:
            if not (0 <= src < n and 0 <= dst < n):
                raise ValueError(f"edge {src}->{dst} outside of node range 0..{n-1}")
            if src == dst:
                raise ValueError(f"self-edge {src}->{dst}")
            if (src, dst) in seen:
                raise ValueError(f"duplicate edge {src}->{dst}")
            seen.add((src, dst))
        return self

    @classmethod
    def from_file(cls, path: str | Path) -> Self:
        return cls.model_validate_json(Path(path).read_text())


# Outcomes
class NoActionTaken(BaseModel):
    imbalance: float


class Migrated(BaseModel):
    fr: NodeId
    to: NodeId
    amount: float
    imbalance_before: float


RebalanceOutcome = NoActionTaken | Migrated


class DispatchRecord(BaseModel):
    sequence: int = Field(description="1-based count of dispatches so far, including this one")
    node: NodeId
    task_load: float
    load: float = Field(description="load of the node after the task was added")
    capacity: float
    utilization: float
    rebalance: RebalanceOutcome | None = Field(
        None,
        description="outcome of the rebalance triggered by this dispatch, if it hit the interval boundary",
    )


# Errors
class BalancerError(Exception):
    pass


class InvalidCapacity(BalancerError, ValueError):
    pass


class CapacityExceeded(BalancerError, OverflowError):
    pass


class Empty(BalancerError, IndexError):
    pass


class NodeNotFound(BalancerError, LookupError):
    pass


class NoNodes(BalancerError, ValueError):
    pass


class InvalidTaskLoad(BalancerError, ValueError):
    pass


class InvalidEdge(BalancerError, ValueError):
    pass

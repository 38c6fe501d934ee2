import networkx as nx

from loadbalancer.low.core import InvalidEdge, NodeId


class Topology(nx.DiGraph):
    """Informational network of nodes, directed src -> dst. Carried alongside the balancer
    state for display only, the rebalancing policy never consults it"""

    def __init__(self, node_count: int = 0, **attr):
        super().__init__(**attr)
        self.node_count = node_count
        super().add_nodes_from(range(node_count))

    def add_edge(self, u_of_edge: NodeId, v_of_edge: NodeId, **attr) -> None:
        """Add a connection between two nodes

        Params
        ------
        u_of_edge: NodeId, source node
        v_of_edge: NodeId, destination node

        Raises
        ------
        InvalidEdge if either id is out of range, the edge is a self-edge, or already present
        """
        for node in (u_of_edge, v_of_edge):
            if not (0 <= node < self.node_count):
                raise InvalidEdge(f"node id {node} out of range, valid range: 0-{self.node_count - 1}")
        if u_of_edge == v_of_edge:
            raise InvalidEdge(f"cannot add self-edge {u_of_edge} -> {v_of_edge}")
        if self.has_edge(u_of_edge, v_of_edge):
            raise InvalidEdge(f"edge already exists {u_of_edge} -> {v_of_edge}")
        super().add_edge(u_of_edge, v_of_edge, **attr)

    def neighbours(self, node: NodeId) -> list[NodeId]:
        """Destinations of outgoing edges of `node`"""
        return list(self.successors(node))

    def isolated(self) -> list[NodeId]:
        """Nodes without any outgoing edge"""
        return [node for node in self.nodes if self.out_degree(node) == 0]

    @classmethod
    def from_edges(cls, node_count: int, edges: list[tuple[NodeId, NodeId]]) -> "Topology":
        topology = cls(node_count)
        for src, dst in edges:
            topology.add_edge(src, dst)
        return topology

"""Built-in demo graph."""

from __future__ import annotations

from flowtrace.model.graph import FlowGraph

_NODES = [
    (0, "A", 100, 100),
    (1, "B", 250, 50),
    (2, "C", 400, 100),
    (3, "D", 250, 200),
    (4, "E", 300, 300),
    (5, "F", 150, 300),
]

_EDGES = [
    (0, 0, 1, 16),
    (1, 0, 5, 13),
    (2, 1, 2, 12),
    (3, 1, 3, 10),
    (4, 2, 4, 20),
    (5, 3, 2, 9),
    (6, 3, 4, 14),
    (7, 5, 3, 4),
]


def sample_graph() -> FlowGraph:
    """Six-node demo network with source A (0) and sink E (4).

    Its maximum flow is 20: the cut around ``{A, F}`` lets through at most
    ``A->B`` (16) plus ``F->D`` (4).
    """
    graph = FlowGraph()
    for node_id, label, x, y in _NODES:
        graph.add_node(label=label, x=x, y=y, node_id=node_id)
    for edge_id, src, dst, capacity in _EDGES:
        graph.add_edge(src, dst, capacity=capacity, edge_id=edge_id)
    graph.set_terminals(0, 4)
    return graph

"""NetworkX graph conversion utilities.

Example:
    >>> import networkx as nx
    >>> from flowtrace.nx import from_networkx, to_networkx
    >>>
    >>> G = nx.DiGraph()
    >>> G.add_edge("s", "t", capacity=3)
    >>> graph = from_networkx(G)
    >>> to_networkx(graph).edges[0, 1]["capacity"]
    3
"""

from __future__ import annotations

from typing import Any

import networkx as nx

from flowtrace.model.graph import FlowGraph


def to_networkx(graph: FlowGraph) -> nx.DiGraph:
    """Convert a FlowGraph to a NetworkX DiGraph.

    Node ids are kept; nodes carry ``label``, ``x`` and ``y``. Edges carry
    ``id``, ``capacity`` and ``flow``. Source and sink are stored in the
    graph attributes.

    Args:
        graph: Graph to convert.

    Returns:
        nx.DiGraph with one edge per model edge, added in stored order.
    """
    G = nx.DiGraph(source=graph.source, sink=graph.sink)
    for node in graph.nodes.values():
        G.add_node(node.id, label=node.label, x=node.x, y=node.y)
    for edge in graph.edges:
        G.add_edge(
            edge.src, edge.dst, id=edge.id, capacity=edge.capacity, flow=edge.flow
        )
    return G


def from_networkx(
    G: Any,
    *,
    capacity_attr: str = "capacity",
    default_capacity: int = 1,
) -> FlowGraph:
    """Convert a NetworkX DiGraph to a FlowGraph.

    Nodes are renumbered 0..n-1 in sorted name order (deterministic, so edge
    order and traces are stable). The ``label`` attribute is used when
    present, otherwise ``str(name)``; ``x``/``y`` are copied when present.
    Flows start at zero. ``source``/``sink`` graph attributes are mapped
    through the renumbering when they name existing nodes.

    Args:
        G: NetworkX DiGraph.
        capacity_attr: Edge attribute holding capacity.
        default_capacity: Capacity when the attribute is missing.

    Returns:
        A new FlowGraph.

    Raises:
        TypeError: If G is not a DiGraph (multigraphs and undirected graphs
            do not fit the one-edge-per-ordered-pair model).
        ValueError: If G has no nodes or a capacity is not a positive integer.
    """
    if not isinstance(G, nx.DiGraph) or G.is_multigraph():
        raise TypeError(f"Expected a NetworkX DiGraph, got {type(G).__name__}")
    if G.number_of_nodes() == 0:
        raise ValueError("Graph has no nodes")

    names = _sorted_names(G)
    index = {name: i for i, name in enumerate(names)}

    graph = FlowGraph()
    for name in names:
        data = G.nodes[name]
        graph.add_node(
            label=str(data.get("label", name)),
            x=data.get("x"),
            y=data.get("y"),
            node_id=index[name],
        )

    edges = sorted(G.edges(data=True), key=lambda e: (index[e[0]], index[e[1]]))
    for u, v, data in edges:
        capacity = data.get(capacity_attr, default_capacity)
        if isinstance(capacity, float) and capacity.is_integer():
            capacity = int(capacity)
        graph.add_edge(index[u], index[v], capacity=capacity)

    source = G.graph.get("source")
    sink = G.graph.get("sink")
    if source in index and sink in index:
        graph.set_terminals(index[source], index[sink])
    return graph


def _sorted_names(G: Any) -> list:
    """Node names in natural order, or by ``str`` when they are not comparable."""
    try:
        return sorted(G.nodes())
    except TypeError:
        return sorted(G.nodes(), key=str)

"""Residual-view helpers shared by the traversal and max-flow engines."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from flowtrace.model.graph import Edge
from flowtrace.types.base import NodeId
from flowtrace.types.dto import TraversalResult

#: Signature shared by ``bfs`` and ``dfs``: (edges, source, sink) -> result.
PathFinder = Callable[[Sequence[Edge], NodeId, NodeId], TraversalResult]


def residual_copy(edges: Iterable[Edge]) -> List[Edge]:
    """Copy edges into an engine-private working list, keeping their order."""
    return [replace(edge) for edge in edges]


def open_edges_from(edges: Sequence[Edge], node: NodeId) -> List[Edge]:
    """Edges leaving ``node`` with positive residual capacity, in stored order."""
    return [edge for edge in edges if edge.src == node and edge.flow < edge.capacity]


def find_edge(edges: Sequence[Edge], src: NodeId, dst: NodeId) -> Optional[Edge]:
    """First edge matching the ordered pair ``(src, dst)``."""
    for edge in edges:
        if edge.src == src and edge.dst == dst:
            return edge
    return None


def reconstruct_path(
    parent: Dict[NodeId, NodeId], source: NodeId, sink: NodeId
) -> Tuple[NodeId, ...]:
    """Walk parent pointers back from ``sink`` to ``source``.

    Returns:
        Node ids from source to sink inclusive.
    """
    path = [sink]
    current = sink
    while current != source:
        current = parent[current]
        path.append(current)
    path.reverse()
    return tuple(path)


def path_edges(edges: Sequence[Edge], path: Sequence[NodeId]) -> List[Edge]:
    """Edges along ``path`` in order.

    Raises:
        ValueError: If a hop has no matching edge.
    """
    hops = []
    for src, dst in zip(path, path[1:]):
        edge = find_edge(edges, src, dst)
        if edge is None:
            raise ValueError(f"No edge {src} -> {dst} on path {list(path)}.")
        hops.append(edge)
    return hops


def bottleneck(hops: Sequence[Edge]) -> int:
    """Smallest residual capacity along a list of edges."""
    if not hops:
        raise ValueError("A path needs at least one edge to carry flow.")
    return min(edge.residual for edge in hops)

from __future__ import annotations

from collections import deque
from typing import Dict, List, Sequence

from flowtrace.algorithms.common import open_edges_from, reconstruct_path
from flowtrace.logging import get_logger
from flowtrace.model.graph import Edge
from flowtrace.types.base import NodeId
from flowtrace.types.dto import TraversalResult
from flowtrace.types.steps import EdgeProbeStep, PathFoundStep, Step, VisitStep

LOGGER = get_logger(__name__)


def bfs(edges: Sequence[Edge], source: NodeId, sink: NodeId) -> TraversalResult:
    """
    Breadth-first search for a fewest-edges path over edges with residual capacity.

    Neighbors are taken in the stored order of ``edges``. The search stops as
    soon as ``sink`` is discovered. Ids that are not in the graph are never
    discovered and simply yield an empty path.

    Args:
        edges: Residual view (or the plain edge list).
        source: Start node.
        sink: Target node.

    Returns:
        TraversalResult with the path (empty if unreachable), the trace and
        the parent pointers.
    """
    steps: List[Step] = []
    parent: Dict[NodeId, NodeId] = {}
    visited: List[NodeId] = [source]
    seen = {source}
    queue = deque([source])

    steps.append(VisitStep(source, tuple(visited), parent, tuple(queue)))

    while queue:
        node = queue.popleft()
        for edge in open_edges_from(edges, node):
            neighbor = edge.dst
            if neighbor in seen:
                continue

            steps.append(EdgeProbeStep(node, neighbor))
            seen.add(neighbor)
            visited.append(neighbor)
            queue.append(neighbor)
            parent[neighbor] = node
            steps.append(
                VisitStep(neighbor, tuple(visited), parent, tuple(queue))
            )

            if neighbor == sink:
                path = reconstruct_path(parent, source, sink)
                steps.append(PathFoundStep(path))
                LOGGER.debug("BFS %s -> %s found path %s", source, sink, path)
                return TraversalResult(path, tuple(steps), parent)

    LOGGER.debug(
        "BFS %s -> %s exhausted after visiting %d node(s)", source, sink, len(visited)
    )
    return TraversalResult((), tuple(steps), parent)

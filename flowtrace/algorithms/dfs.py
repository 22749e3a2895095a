from __future__ import annotations

from typing import Dict, Iterator, List, Sequence, Tuple

from flowtrace.algorithms.common import open_edges_from, reconstruct_path
from flowtrace.logging import get_logger
from flowtrace.model.graph import Edge
from flowtrace.types.base import NodeId
from flowtrace.types.dto import TraversalResult
from flowtrace.types.steps import EdgeProbeStep, PathFoundStep, Step, VisitStep

LOGGER = get_logger(__name__)


def dfs(edges: Sequence[Edge], source: NodeId, sink: NodeId) -> TraversalResult:
    """
    Depth-first search for some path over edges with residual capacity.

    Uses an explicit stack but records exactly what the recursive form
    would: a node is marked visited (one ``VisitStep``) on entry, before its
    edges are examined; edges are tried in stored order and the first one
    reaching an unvisited node is probed and descended into. Entering the
    sink ends the search at once, without a visit step for the sink.

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
    visited: List[NodeId] = []
    seen = set()

    def enter(node: NodeId) -> Tuple[NodeId, Iterator[Edge]]:
        seen.add(node)
        visited.append(node)
        steps.append(VisitStep(node, tuple(visited), parent))
        # Candidates are fixed on entry, as a recursive call would see them
        return node, iter(open_edges_from(edges, node))

    found = source == sink
    stack = [] if found else [enter(source)]

    while stack and not found:
        node, candidates = stack[-1]
        for edge in candidates:
            neighbor = edge.dst
            if neighbor in seen:
                continue
            steps.append(EdgeProbeStep(node, neighbor))
            parent[neighbor] = node
            if neighbor == sink:
                found = True
            else:
                stack.append(enter(neighbor))
            break
        else:
            stack.pop()

    if not found:
        LOGGER.debug(
            "DFS %s -> %s exhausted after visiting %d node(s)",
            source,
            sink,
            len(visited),
        )
        return TraversalResult((), tuple(steps), parent)

    path = reconstruct_path(parent, source, sink)
    steps.append(PathFoundStep(path))
    LOGGER.debug("DFS %s -> %s found path %s", source, sink, path)
    return TraversalResult(path, tuple(steps), parent)

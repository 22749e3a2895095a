from __future__ import annotations

from typing import List, Sequence

from flowtrace.algorithms.bfs import bfs
from flowtrace.algorithms.common import (
    PathFinder,
    bottleneck,
    path_edges,
    residual_copy,
)
from flowtrace.algorithms.dfs import dfs
from flowtrace.logging import get_logger
from flowtrace.model.graph import Edge
from flowtrace.types.base import NodeId
from flowtrace.types.dto import AugmentingPath, MaxFlowResult
from flowtrace.types.steps import FlowTotalStep, FlowUpdateStep, Step

LOGGER = get_logger(__name__)


def max_flow(
    edges: Sequence[Edge],
    source: NodeId,
    sink: NodeId,
    path_finder: PathFinder = dfs,
) -> MaxFlowResult:
    """
    Augment flow along paths from ``path_finder`` until none is left.

    Works on one residual copy of ``edges`` that starts from their current
    flows, so a run can resume from flow already on the graph. Each round
    pushes the path's bottleneck onto the forward edges of the path. No
    reverse edges are synthesized: flow already committed can only be routed
    around through antiparallel edges that exist in the graph.

    Args:
        edges: Caller's edges; never modified.
        source: Source node.
        sink: Sink node.
        path_finder: ``bfs`` or ``dfs``.

    Returns:
        MaxFlowResult with the flow added by this run, the concatenated
        trace, the final edge states and the augmenting paths.

    Raises:
        ValueError: If ``source == sink``.
    """
    if source == sink:
        raise ValueError("Source and sink must be different nodes.")

    residual = residual_copy(edges)
    steps: List[Step] = []
    paths: List[AugmentingPath] = []
    total = 0

    while True:
        search = path_finder(residual, source, sink)
        steps.extend(search.steps)
        if not search.path:
            break

        hops = path_edges(residual, search.path)
        path_flow = bottleneck(hops)
        for edge in hops:
            edge.flow += path_flow
            steps.append(FlowUpdateStep(edge.src, edge.dst, edge.flow, path_flow))

        total += path_flow
        steps.append(FlowTotalStep(total))
        paths.append(AugmentingPath(search.path, path_flow))
        LOGGER.debug(
            "Round %d: pushed %d along %s (total %d)",
            len(paths),
            path_flow,
            search.path,
            total,
        )

    LOGGER.debug(
        "Max flow %s -> %s: %d after %d round(s)", source, sink, total, len(paths)
    )
    return MaxFlowResult(
        max_flow=total,
        steps=tuple(steps),
        edges=tuple(residual),
        paths=tuple(paths),
        last_search=search,
    )


def ford_fulkerson(
    edges: Sequence[Edge],
    source: NodeId,
    sink: NodeId,
    path_finder: PathFinder = dfs,
) -> MaxFlowResult:
    """Ford-Fulkerson with the caller's path finder (depth-first by default)."""
    return max_flow(edges, source, sink, path_finder=path_finder)


def edmonds_karp(edges: Sequence[Edge], source: NodeId, sink: NodeId) -> MaxFlowResult:
    """Ford-Fulkerson with breadth-first search as the path finder."""
    return max_flow(edges, source, sink, path_finder=bfs)

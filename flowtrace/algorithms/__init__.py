"""Traversal and max-flow engines that record step traces."""

from flowtrace.algorithms.bfs import bfs
from flowtrace.algorithms.common import PathFinder, reconstruct_path, residual_copy
from flowtrace.algorithms.dfs import dfs
from flowtrace.algorithms.max_flow import edmonds_karp, ford_fulkerson, max_flow

__all__ = [
    "bfs",
    "dfs",
    "max_flow",
    "ford_fulkerson",
    "edmonds_karp",
    "PathFinder",
    "reconstruct_path",
    "residual_copy",
]

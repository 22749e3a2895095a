"""Run orchestration: precondition checks, algorithm dispatch and run serialization.

Usage:
    from flowtrace import Algorithm, Session, sample_graph

    session = Session(sample_graph())
    result = session.run(Algorithm.EDMONDS_KARP)
    player = session.player(tick_ms=500)
    player.play()
"""

from __future__ import annotations

import threading
from typing import Optional, Union

from flowtrace.algorithms.bfs import bfs
from flowtrace.algorithms.dfs import dfs
from flowtrace.algorithms.max_flow import edmonds_karp, ford_fulkerson
from flowtrace.config import PLAYBACK_CONFIG
from flowtrace.logging import get_logger
from flowtrace.model.graph import FlowGraph
from flowtrace.player import Player
from flowtrace.types.base import Algorithm, NodeId
from flowtrace.types.dto import RunResult

LOGGER = get_logger(__name__)


def run_algorithm(
    graph: FlowGraph,
    algorithm: Union[Algorithm, str],
    source: Optional[NodeId] = None,
    sink: Optional[NodeId] = None,
    path_finder: Optional[Algorithm] = None,
) -> RunResult:
    """Validate the graph and run one algorithm on a snapshot of its edges.

    The graph is not modified; flows found by max-flow runs are returned in
    ``RunResult.edges`` and reach the graph only when a player applies the
    trace.

    Args:
        graph: Graph to run on.
        algorithm: Algorithm or its name (``"edmondsKarp"``, ``"dfs"``, ...).
        source: Source override; defaults to ``graph.source``.
        sink: Sink override; defaults to ``graph.sink``.
        path_finder: Traversal used by Ford-Fulkerson (``Algorithm.BFS`` or
            ``Algorithm.DFS``, default DFS). Ignored by the other algorithms.

    Returns:
        RunResult for the player and renderer.

    Raises:
        ValueError: If a run precondition fails or ``path_finder`` is not a
            traversal algorithm.
    """
    if isinstance(algorithm, str):
        algorithm = Algorithm.from_string(algorithm)
    source, sink = graph.validate_for_run(source, sink)
    edges = graph.edges_snapshot()

    LOGGER.info("Running %s from %s to %s", algorithm.key, source, sink)

    if algorithm is Algorithm.BFS or algorithm is Algorithm.DFS:
        search = (bfs if algorithm is Algorithm.BFS else dfs)(edges, source, sink)
        result = RunResult(
            algorithm=algorithm,
            source=source,
            sink=sink,
            steps=search.steps,
            path=search.path,
            parent=search.parent,
        )
        LOGGER.info(
            "%s finished in %d step(s); path %s",
            algorithm.key,
            len(result.steps),
            list(result.path) or "not found",
        )
        return result

    if algorithm is Algorithm.EDMONDS_KARP:
        flow = edmonds_karp(edges, source, sink)
    else:
        if path_finder in (None, Algorithm.DFS):
            finder = dfs
        elif path_finder is Algorithm.BFS:
            finder = bfs
        else:
            raise ValueError(
                f"Path finder must be bfs or dfs, got '{path_finder.key}'."
            )
        flow = ford_fulkerson(edges, source, sink, path_finder=finder)

    last = flow.last_search
    result = RunResult(
        algorithm=algorithm,
        source=source,
        sink=sink,
        steps=flow.steps,
        path=last.path if last is not None else (),
        parent=last.parent if last is not None else {},
        max_flow=flow.max_flow,
        edges=flow.edges,
    )
    LOGGER.info(
        "%s finished in %d step(s) over %d round(s); max flow %d",
        algorithm.key,
        len(result.steps),
        flow.rounds,
        flow.max_flow,
    )
    return result


class Session:
    """One graph, at most one run at a time, and the trace of the last run.

    ``run`` rejects a request that overlaps a run in progress instead of
    queueing it.
    """

    def __init__(self, graph: FlowGraph) -> None:
        self.graph = graph
        self.result: Optional[RunResult] = None
        self._player: Optional[Player] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    def run(
        self,
        algorithm: Union[Algorithm, str],
        source: Optional[NodeId] = None,
        sink: Optional[NodeId] = None,
        path_finder: Optional[Algorithm] = None,
        resume: bool = False,
    ) -> RunResult:
        """Reset the graph and run an algorithm.

        Args:
            algorithm: Algorithm or its name.
            source: Source override; defaults to ``graph.source``.
            sink: Sink override; defaults to ``graph.sink``.
            path_finder: Traversal for Ford-Fulkerson.
            resume: Keep current edge flows instead of zeroing them first.

        Returns:
            The new RunResult, also kept as ``self.result``.

        Raises:
            RuntimeError: If another run is in progress.
            ValueError: If a run precondition fails.
        """
        if not self._lock.acquire(blocking=False):
            raise RuntimeError("An algorithm run is already in progress.")
        try:
            if resume:
                self._discard_trace()
            else:
                self.reset()
            self.result = run_algorithm(
                self.graph, algorithm, source, sink, path_finder=path_finder
            )
            return self.result
        finally:
            self._lock.release()

    def player(self, tick_ms: int = PLAYBACK_CONFIG.default_interval_ms) -> Player:
        """Player over the last run's trace, applying steps to this graph.

        Raises:
            RuntimeError: If nothing has been run yet.
        """
        if self.result is None:
            raise RuntimeError("Run an algorithm before replaying it.")
        if self._player is not None:
            self._player.stop()
        self._player = Player(self.result.steps, self.graph, tick_ms=tick_ms)
        return self._player

    def reset(self) -> None:
        """Stop playback, drop the trace and zero all edge flows."""
        if self._player is not None:
            # Zeroes under the player's lock so no in-flight step lands after it
            self._player.reset()
        self._discard_trace()
        self.graph.reset_flows()

    def _discard_trace(self) -> None:
        if self._player is not None:
            self._player.stop()
            self._player = None
        self.result = None

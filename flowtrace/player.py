"""Step-by-step replay of a trace onto a graph and a display state."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Sequence, Tuple

from flowtrace.config import PLAYBACK_CONFIG
from flowtrace.logging import get_logger
from flowtrace.model.graph import FlowGraph
from flowtrace.types.base import NodeId
from flowtrace.types.steps import (
    EdgeProbeStep,
    FlowTotalStep,
    FlowUpdateStep,
    PathFoundStep,
    Step,
    VisitStep,
)

LOGGER = get_logger(__name__)


@dataclass
class DisplayState:
    """What a renderer shows after the steps applied so far.

    Attributes:
        visited_nodes: Nodes in the order their visit steps were applied.
        current_path: Last path found.
        probed_edge: Edge of the last probe step, as ``(src, dst)``.
        max_flow: Last flow total.
        current_step: Number of steps applied.
    """

    visited_nodes: List[NodeId] = field(default_factory=list)
    current_path: Tuple[NodeId, ...] = ()
    probed_edge: Optional[Tuple[NodeId, NodeId]] = None
    max_flow: int = 0
    current_step: int = 0


class Player:
    """Applies one step per tick.

    ``play`` blocks the calling thread; ``stop`` may be called from any
    other thread and takes effect at the next tick boundary. A step is
    applied under a lock, so ``snapshot`` never sees half of one.

    Args:
        steps: Trace to replay.
        graph: Graph whose edge flows receive the flow updates.
        tick_ms: Delay before each step, in milliseconds.
    """

    def __init__(
        self,
        steps: Sequence[Step],
        graph: FlowGraph,
        tick_ms: int = PLAYBACK_CONFIG.default_interval_ms,
    ) -> None:
        if tick_ms <= 0:
            raise ValueError(f"Tick interval must be positive, got {tick_ms}.")
        self.steps = tuple(steps)
        self.graph = graph
        self.tick_ms = tick_ms
        self.state = DisplayState()
        self._stop = threading.Event()
        self._lock = threading.Lock()

    @property
    def finished(self) -> bool:
        return self.state.current_step >= len(self.steps)

    @property
    def remaining(self) -> int:
        return len(self.steps) - self.state.current_step

    def snapshot(self) -> DisplayState:
        """Copy of the display state."""
        with self._lock:
            return replace(
                self.state, visited_nodes=list(self.state.visited_nodes)
            )

    def step(self) -> Optional[Step]:
        """Apply the next step; return it, or None when the trace is done."""
        with self._lock:
            return self._advance()

    def play(self, on_step: Optional[Callable[[Step], None]] = None) -> int:
        """Apply the remaining steps, waiting one tick before each.

        Args:
            on_step: Called after each applied step.

        Returns:
            Number of steps applied by this call.
        """
        self._stop.clear()
        applied = 0
        while not self.finished:
            # wait() returns True once stop() was called
            stopped = self._stop.wait(self.tick_ms / 1000.0)
            with self._lock:
                # A stop or reset may land between the tick and the lock
                step = None if stopped or self._stop.is_set() else self._advance()
            if step is None:
                LOGGER.debug(
                    "Playback stopped at step %d of %d",
                    self.state.current_step,
                    len(self.steps),
                )
                break
            applied += 1
            if on_step is not None:
                on_step(step)
        return applied

    def stop(self) -> None:
        """Stop playback.

        Once this returns, no step is being applied and ``play`` applies no
        further step.
        """
        self._stop.set()
        with self._lock:
            pass

    def reset(self) -> None:
        """Stop, clear the display state and zero every edge flow."""
        self._stop.set()
        with self._lock:
            self.state = DisplayState()
            self.graph.reset_flows()

    def _advance(self) -> Optional[Step]:
        if self.finished:
            return None
        step = self.steps[self.state.current_step]
        self._apply(step)
        self.state.current_step += 1
        return step

    def _apply(self, step: Step) -> None:
        if isinstance(step, VisitStep):
            self.state.visited_nodes.append(step.node)
        elif isinstance(step, EdgeProbeStep):
            self.state.probed_edge = (step.src, step.dst)
        elif isinstance(step, PathFoundStep):
            self.state.current_path = step.path
        elif isinstance(step, FlowUpdateStep):
            edge = self.graph.find_edge(step.src, step.dst)
            if edge is None:
                LOGGER.warning(
                    "Flow update for missing edge %s -> %s skipped", step.src, step.dst
                )
            else:
                edge.flow = step.flow
        elif isinstance(step, FlowTotalStep):
            self.state.max_flow = step.value

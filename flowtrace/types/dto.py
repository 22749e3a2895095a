"""Result containers returned by the engines and the run layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from flowtrace.types.base import Algorithm, NodeId
from flowtrace.types.steps import Trace

if TYPE_CHECKING:
    from flowtrace.model.graph import Edge


@dataclass(frozen=True)
class TraversalResult:
    """Outcome of a single BFS or DFS search.

    Attributes:
        path: Node ids from source to sink inclusive; empty when the sink
            was not reached.
        steps: Trace recorded during the search.
        parent: Final parent pointers (child -> parent) of discovered nodes.
    """

    path: Tuple[NodeId, ...]
    steps: Trace
    parent: Dict[NodeId, NodeId]

    @property
    def found(self) -> bool:
        return bool(self.path)


@dataclass(frozen=True)
class AugmentingPath:
    """One augmentation round: the path used and the flow pushed along it."""

    path: Tuple[NodeId, ...]
    bottleneck: int


@dataclass(frozen=True)
class MaxFlowResult:
    """Outcome of a Ford-Fulkerson style computation.

    Attributes:
        max_flow: Flow added by this run, summed over all rounds.
        steps: Every round's traversal steps followed by its flow updates
            and flow total, in round order.
        edges: Final state of the residual working copy; new objects, the
            caller's edges are untouched.
        paths: Augmenting paths in round order.
        last_search: The final, unsuccessful traversal.
    """

    max_flow: int
    steps: Trace
    edges: Tuple["Edge", ...] = ()
    paths: Tuple[AugmentingPath, ...] = ()
    last_search: Optional[TraversalResult] = None

    @property
    def rounds(self) -> int:
        return len(self.paths)


@dataclass(frozen=True)
class RunResult:
    """What a run hands to the player and renderer.

    ``max_flow`` is ``None`` for the traversal algorithms. ``path`` and
    ``parent`` come from the traversal (for max-flow runs: the final search).
    """

    algorithm: Algorithm
    source: NodeId
    sink: NodeId
    steps: Trace
    path: Tuple[NodeId, ...] = ()
    parent: Dict[NodeId, NodeId] = field(default_factory=dict)
    max_flow: Optional[int] = None
    edges: Tuple["Edge", ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form used by the CLI results file."""
        data: Dict[str, Any] = {
            "algorithm": self.algorithm.key,
            "source": self.source,
            "sink": self.sink,
            "path": list(self.path),
            "parent": {str(child): par for child, par in self.parent.items()},
            "steps": [step.to_dict() for step in self.steps],
        }
        if self.max_flow is not None:
            data["maxFlow"] = self.max_flow
            data["edges"] = [edge.to_dict() for edge in self.edges]
        return data

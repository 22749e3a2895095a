"""Step records emitted by the traversal and max-flow engines.

A trace is a tuple of steps. Each step is an immutable snapshot: containers
are copied at emission time, so later changes inside an engine never leak
into a step that was already recorded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Mapping, Optional, Sequence, Tuple, Union

from flowtrace.types.base import NodeId, StepKind


@dataclass(frozen=True)
class VisitStep:
    """A node was discovered.

    Attributes:
        node: Discovered node.
        visited: Visited nodes in discovery order, including ``node``.
        parent: Parent pointers (child -> parent) at this instant, held as a
            read-only copy and left out of the hash.
        frontier: BFS queue contents after ``node`` was enqueued; ``None``
            for depth-first search, which has no frontier.
    """

    kind: ClassVar[StepKind] = StepKind.VISIT

    node: NodeId
    visited: Tuple[NodeId, ...]
    parent: Mapping[NodeId, NodeId] = field(default_factory=dict, hash=False)
    frontier: Optional[Tuple[NodeId, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "visited", tuple(self.visited))
        object.__setattr__(self, "parent", MappingProxyType(dict(self.parent)))
        if self.frontier is not None:
            object.__setattr__(self, "frontier", tuple(self.frontier))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.kind.value,
            "node": self.node,
            "visited": list(self.visited),
            "parent": {str(child): par for child, par in self.parent.items()},
        }
        if self.frontier is not None:
            data["queue"] = list(self.frontier)
        return data


@dataclass(frozen=True)
class EdgeProbeStep:
    """An edge is examined as the next traversal move."""

    kind: ClassVar[StepKind] = StepKind.EDGE_PROBE

    src: NodeId
    dst: NodeId

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "from": self.src, "to": self.dst}


@dataclass(frozen=True)
class PathFoundStep:
    """A search reached the sink; ``path`` runs from source to sink inclusive."""

    kind: ClassVar[StepKind] = StepKind.PATH_FOUND

    path: Tuple[NodeId, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "path": list(self.path)}


@dataclass(frozen=True)
class FlowUpdateStep:
    """Flow on ``src -> dst`` became ``flow`` after pushing ``path_flow``."""

    kind: ClassVar[StepKind] = StepKind.FLOW_UPDATE

    src: NodeId
    dst: NodeId
    flow: int
    path_flow: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "from": self.src,
            "to": self.dst,
            "flow": self.flow,
            "pathFlow": self.path_flow,
        }


@dataclass(frozen=True)
class FlowTotalStep:
    """Running total after an augmentation round."""

    kind: ClassVar[StepKind] = StepKind.FLOW_TOTAL

    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "value": self.value}


Step = Union[VisitStep, EdgeProbeStep, PathFoundStep, FlowUpdateStep, FlowTotalStep]
Trace = Tuple[Step, ...]


def step_from_dict(data: Dict[str, Any]) -> Step:
    """Rebuild a step from its ``to_dict`` form.

    Raises:
        ValueError: If the ``type`` field is missing or unknown.
    """
    try:
        kind = StepKind(data.get("type"))
    except ValueError:
        raise ValueError(f"Unknown step type: {data.get('type')!r}") from None

    if kind is StepKind.VISIT:
        queue = data.get("queue")
        return VisitStep(
            node=data["node"],
            visited=tuple(data.get("visited", ())),
            parent={int(k): v for k, v in data.get("parent", {}).items()},
            frontier=tuple(queue) if queue is not None else None,
        )
    if kind is StepKind.EDGE_PROBE:
        return EdgeProbeStep(src=data["from"], dst=data["to"])
    if kind is StepKind.PATH_FOUND:
        return PathFoundStep(path=tuple(data["path"]))
    if kind is StepKind.FLOW_UPDATE:
        return FlowUpdateStep(
            src=data["from"],
            dst=data["to"],
            flow=data["flow"],
            path_flow=data["pathFlow"],
        )
    return FlowTotalStep(value=data["value"])


def check_trace_order(steps: Sequence[Step]) -> None:
    """Check the causal ordering rules of a trace.

    - every ``EdgeProbeStep`` is followed at once by the ``VisitStep`` of
      its target, or by the ``PathFoundStep`` that ends at its target;
    - every ``VisitStep`` after the first one of a search directly follows
      the probe of the edge from its parent;
    - a ``PathFoundStep`` path starts at the first visited node of its search
      and every consecutive pair on it was probed earlier in that search;
    - every ``FlowUpdateStep`` belongs to a round that ends with exactly one
      ``FlowTotalStep`` and follows that round's ``PathFoundStep``;
    - flow totals never decrease.

    Raises:
        ValueError: On the first violation, naming the step index.
    """
    probed: set = set()
    search_start: Optional[NodeId] = None
    path_pending = False
    updates_open = False
    last_total: Optional[int] = None

    for idx, step in enumerate(steps):
        prev = steps[idx - 1] if idx > 0 else None
        if isinstance(step, VisitStep):
            if updates_open:
                raise ValueError(f"step {idx}: visit inside an open flow round")
            if search_start is None:
                search_start = step.node
                continue
            if not isinstance(prev, EdgeProbeStep) or prev.dst != step.node:
                raise ValueError(
                    f"step {idx}: visit of {step.node} does not follow its probe"
                )
            expected = step.parent.get(step.node, prev.src)
            if prev.src != expected:
                raise ValueError(
                    f"step {idx}: visit of {step.node} follows a probe from "
                    f"{prev.src}, not from its parent {expected}"
                )
        elif isinstance(step, EdgeProbeStep):
            nxt = steps[idx + 1] if idx + 1 < len(steps) else None
            leads_to_visit = isinstance(nxt, VisitStep) and nxt.node == step.dst
            ends_path = (
                isinstance(nxt, PathFoundStep)
                and bool(nxt.path)
                and nxt.path[-1] == step.dst
            )
            if not (leads_to_visit or ends_path):
                raise ValueError(
                    f"step {idx}: probe {step.src} -> {step.dst} is not followed "
                    f"by the visit of {step.dst}"
                )
            probed.add((step.src, step.dst))
        elif isinstance(step, PathFoundStep):
            # A one-node path is a search whose start is already the sink
            start = step.path[0] if step.path else None
            if start is None or (
                start != search_start
                and not (search_start is None and len(step.path) == 1)
            ):
                raise ValueError(f"step {idx}: path does not start at the source")
            for hop in zip(step.path, step.path[1:]):
                if hop not in probed:
                    raise ValueError(f"step {idx}: edge {hop} was never probed")
            probed = set()
            search_start = None
            path_pending = True
        elif isinstance(step, FlowUpdateStep):
            if not path_pending:
                raise ValueError(f"step {idx}: flow update without a found path")
            updates_open = True
        elif isinstance(step, FlowTotalStep):
            if not updates_open:
                raise ValueError(f"step {idx}: flow total without flow updates")
            if last_total is not None and step.value < last_total:
                raise ValueError(f"step {idx}: flow total decreased")
            last_total = step.value
            path_pending = False
            updates_open = False

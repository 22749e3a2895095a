"""Capacitated directed graph model: Node, Edge and FlowGraph.

The edge list keeps insertion order. That order decides which neighbor the
traversal engines try first, so every operation here preserves it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from flowtrace.config import EDITOR_CONFIG
from flowtrace.logging import get_logger
from flowtrace.types.base import EdgeId, NodeId

LOGGER = get_logger(__name__)


@dataclass
class Node:
    """A graph node.

    Attributes:
        id (int): Unique, stable, non-negative identifier.
        label (str): Display label; need not be unique.
        x (float): Horizontal position, owned by the renderer.
        y (float): Vertical position, owned by the renderer.
    """

    id: NodeId
    label: str
    x: float = EDITOR_CONFIG.default_x
    y: float = EDITOR_CONFIG.default_y

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "x": self.x, "y": self.y}


@dataclass
class Edge:
    """One directed capacitated edge ``src -> dst``.

    Attributes:
        id (int): Unique identifier.
        src (int): Tail node id.
        dst (int): Head node id.
        capacity (int): Positive capacity.
        flow (int): Current flow, ``0 <= flow <= capacity``.
    """

    id: EdgeId
    src: NodeId
    dst: NodeId
    capacity: int
    flow: int = 0

    @property
    def residual(self) -> int:
        """Remaining capacity, ``capacity - flow``."""
        return self.capacity - self.flow

    @property
    def pair(self) -> Tuple[NodeId, NodeId]:
        return (self.src, self.dst)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "from": self.src,
            "to": self.dst,
            "capacity": self.capacity,
            "flow": self.flow,
        }


def default_label(node_id: NodeId) -> str:
    """Letter label cycling through A-Z by id."""
    return chr(65 + node_id % 26)


@dataclass
class FlowGraph:
    """Editable graph plus the chosen source and sink.

    At most one edge exists per ordered ``(src, dst)`` pair; the
    antiparallel edge ``(dst, src)`` is a separate, real edge.

    Attributes:
        nodes (Dict[int, Node]): Node id -> Node, in insertion order.
        edges (List[Edge]): Edges in stored order.
        source (Optional[int]): Selected source node id.
        sink (Optional[int]): Selected sink node id.
    """

    nodes: Dict[NodeId, Node] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    source: Optional[NodeId] = None
    sink: Optional[NodeId] = None

    #
    # Node management
    #
    def add_node(
        self,
        label: Optional[str] = None,
        x: Optional[float] = None,
        y: Optional[float] = None,
        node_id: Optional[NodeId] = None,
    ) -> Node:
        """Create a node.

        Args:
            label: Display label; defaults to a letter derived from the id.
            x: Horizontal position.
            y: Vertical position.
            node_id: Explicit id (used by importers); defaults to max id + 1.

        Returns:
            The new node.

        Raises:
            ValueError: If ``node_id`` is negative or already used.
        """
        if node_id is None:
            node_id = max(self.nodes) + 1 if self.nodes else 0
        elif node_id < 0:
            raise ValueError(f"Node id must be non-negative, got {node_id}.")
        elif node_id in self.nodes:
            raise ValueError(f"Node '{node_id}' already exists in the graph.")

        node = Node(
            id=node_id,
            label=label or default_label(node_id),
            x=EDITOR_CONFIG.default_x if x is None else x,
            y=EDITOR_CONFIG.default_y if y is None else y,
        )
        self.nodes[node_id] = node
        return node

    def update_node(self, node_id: NodeId, label: Optional[str] = None) -> Node:
        """Relabel a node; an empty label keeps the current one."""
        node = self._get_node(node_id)
        if label:
            node.label = label
        return node

    def move_node(self, node_id: NodeId, x: float, y: float) -> Node:
        node = self._get_node(node_id)
        node.x = x
        node.y = y
        return node

    def remove_node(self, node_id: NodeId) -> None:
        """Remove a node and every edge touching it.

        If the node was the source, the first remaining node becomes the
        source; if it was the sink, the last remaining node becomes the sink.

        Raises:
            ValueError: If the node does not exist.
        """
        self._get_node(node_id)
        del self.nodes[node_id]

        before = len(self.edges)
        self.edges = [e for e in self.edges if node_id not in (e.src, e.dst)]
        LOGGER.debug(
            "Removed node %s and %d incident edge(s)", node_id, before - len(self.edges)
        )

        remaining = list(self.nodes)
        if self.source == node_id:
            self.source = remaining[0] if remaining else None
            LOGGER.info("Source node deleted; source is now %s", self.source)
        if self.sink == node_id:
            self.sink = remaining[-1] if remaining else None
            LOGGER.info("Sink node deleted; sink is now %s", self.sink)

    #
    # Edge management
    #
    def add_edge(
        self,
        src: NodeId,
        dst: NodeId,
        capacity: Optional[int] = None,
        flow: int = 0,
        edge_id: Optional[EdgeId] = None,
    ) -> Edge:
        """Create the edge ``src -> dst``.

        Args:
            src: Tail node id.
            dst: Head node id.
            capacity: Positive integer capacity; defaults to the editor default.
            flow: Initial flow (importers only); must fit the capacity.
            edge_id: Explicit id; defaults to max id + 1.

        Returns:
            The new edge.

        Raises:
            ValueError: On unknown endpoints, a self-loop, a duplicate pair,
                a duplicate id, or an out-of-range capacity or flow.
        """
        if capacity is None:
            capacity = EDITOR_CONFIG.default_capacity
        if src not in self.nodes:
            raise ValueError(f"Source node '{src}' not found in graph.")
        if dst not in self.nodes:
            raise ValueError(f"Target node '{dst}' not found in graph.")
        if src == dst:
            raise ValueError("Source and target nodes cannot be the same.")
        if self.find_edge(src, dst) is not None:
            raise ValueError(f"Edge {src} -> {dst} already exists.")
        _check_capacity(capacity)
        if not 0 <= flow <= capacity:
            raise ValueError(
                f"Flow {flow} on edge {src} -> {dst} is outside [0, {capacity}]."
            )

        if edge_id is None:
            edge_id = max((e.id for e in self.edges), default=-1) + 1
        elif any(e.id == edge_id for e in self.edges):
            raise ValueError(f"Edge id '{edge_id}' already exists in the graph.")

        edge = Edge(id=edge_id, src=src, dst=dst, capacity=capacity, flow=flow)
        self.edges.append(edge)
        return edge

    def update_edge(self, edge_id: EdgeId, capacity: int) -> Edge:
        """Change an edge's capacity; flow is clamped to the new capacity."""
        _check_capacity(capacity)
        edge = self._get_edge(edge_id)
        edge.capacity = capacity
        edge.flow = min(edge.flow, capacity)
        return edge

    def remove_edge(self, edge_id: EdgeId) -> None:
        edge = self._get_edge(edge_id)
        self.edges.remove(edge)

    def find_edge(self, src: NodeId, dst: NodeId) -> Optional[Edge]:
        """Return the edge ``src -> dst`` or None."""
        for edge in self.edges:
            if edge.src == src and edge.dst == dst:
                return edge
        return None

    def has_reverse_edge(self, edge: Edge) -> bool:
        """True when the antiparallel edge ``dst -> src`` exists as well.

        Renderers draw such pairs as curves offset from the straight line.
        """
        return self.find_edge(edge.dst, edge.src) is not None

    #
    # Run support
    #
    def set_terminals(self, source: NodeId, sink: NodeId) -> None:
        """Select source and sink.

        Raises:
            ValueError: If either id is not in the graph.
        """
        self._get_node(source)
        self._get_node(sink)
        self.source = source
        self.sink = sink

    def reset_flows(self) -> None:
        """Zero the flow on every edge."""
        for edge in self.edges:
            edge.flow = 0

    def edges_snapshot(self) -> List[Edge]:
        """Copies of the edges in stored order, safe to hand to an engine."""
        return [replace(edge) for edge in self.edges]

    def validate_for_run(
        self, source: Optional[NodeId] = None, sink: Optional[NodeId] = None
    ) -> Tuple[NodeId, NodeId]:
        """Check the preconditions for running any algorithm.

        Args:
            source: Source override; defaults to ``self.source``.
            sink: Sink override; defaults to ``self.sink``.

        Returns:
            The effective ``(source, sink)`` pair.

        Raises:
            ValueError: With fewer than two nodes, no edges, a missing or
                unknown terminal, or ``source == sink``.
        """
        source = self.source if source is None else source
        sink = self.sink if sink is None else sink

        if len(self.nodes) < 2:
            raise ValueError("Need at least two nodes to run an algorithm.")
        if not self.edges:
            raise ValueError("Need at least one edge to run an algorithm.")
        if source is None or sink is None:
            raise ValueError("Source and sink must both be selected.")
        if source not in self.nodes:
            raise ValueError(f"Source node '{source}' not found in graph.")
        if sink not in self.nodes:
            raise ValueError(f"Sink node '{sink}' not found in graph.")
        if source == sink:
            raise ValueError("Source and sink must be different nodes.")
        return source, sink

    def _get_node(self, node_id: NodeId) -> Node:
        if node_id not in self.nodes:
            raise ValueError(f"Node '{node_id}' does not exist.")
        return self.nodes[node_id]

    def _get_edge(self, edge_id: EdgeId) -> Edge:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        raise ValueError(f"Edge '{edge_id}' does not exist.")


def _check_capacity(capacity: Any) -> None:
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise ValueError(f"Capacity must be a positive integer, got {capacity!r}.")

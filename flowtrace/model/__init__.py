"""Graph model classes."""

from flowtrace.model.graph import Edge, FlowGraph, Node, default_label
from flowtrace.model.samples import sample_graph

__all__ = ["Node", "Edge", "FlowGraph", "default_label", "sample_graph"]

"""Shared graph fixtures.

Edge order matters to every traversal test: it decides which neighbor is
tried first, so each fixture documents the order it adds edges in.
"""

from __future__ import annotations

import pytest

from flowtrace.model.graph import FlowGraph
from flowtrace.model.samples import sample_graph


def build_graph(edges, num_nodes=None, source=None, sink=None) -> FlowGraph:
    """FlowGraph from ``(src, dst, capacity)`` triples, nodes 0..n-1."""
    if num_nodes is None:
        num_nodes = max(max(src, dst) for src, dst, _ in edges) + 1
    g = FlowGraph()
    for _ in range(num_nodes):
        g.add_node()
    for src, dst, capacity in edges:
        g.add_edge(src, dst, capacity=capacity)
    g.source = 0 if source is None else source
    g.sink = num_nodes - 1 if sink is None else sink
    return g


@pytest.fixture
def sample():
    #        16        12
    #   A(0)────►B(1)────►C(2)
    #    │        │  ▲     │
    #  13│      10│  │9    │20
    #    ▼        ▼  │     ▼
    #   F(5)────►D(3)────►E(4)
    #        4         14
    return sample_graph()


@pytest.fixture
def line3():
    # A──5──►B──3──►C
    return build_graph([(0, 1, 5), (1, 2, 3)])


@pytest.fixture
def shortcut():
    # Edge order: A->B, A->D, B->C, C->D.
    # DFS follows A->B first and takes the long way; BFS finds A->D.
    #
    #   A──4──►B──4──►C
    #   │             │
    #   └─────2──►D◄──4┘
    return build_graph([(0, 1, 4), (0, 3, 2), (1, 2, 4), (2, 3, 4)])


@pytest.fixture
def disconnected():
    # A──5──►B    C──5──►D
    return build_graph([(0, 1, 5), (2, 3, 5)])


@pytest.fixture
def antiparallel():
    # A──3──►B──3──►C with a real reverse edge B──2──►A
    return build_graph([(0, 1, 3), (1, 0, 2), (1, 2, 3)])


@pytest.fixture
def make_graph():
    """The ``build_graph`` helper, for tests that need their own topology."""
    return build_graph

"""flowtrace: step-by-step traces of graph traversal and max-flow algorithms.

Runs breadth-first search, depth-first search, Ford-Fulkerson and
Edmonds-Karp over a small directed capacitated graph and records every
decision as a replayable step trace.

Primary API:
    FlowGraph, Node, Edge - editable graph model
    bfs(), dfs(), max_flow(), ford_fulkerson(), edmonds_karp() - engines
    Session, run_algorithm() - validated, serialized runs
    Player - replay a trace one step per tick

Example:
    from flowtrace import Algorithm, Session, sample_graph

    session = Session(sample_graph())
    result = session.run(Algorithm.EDMONDS_KARP)
    print(result.max_flow)
    session.player(tick_ms=200).play()
"""

from __future__ import annotations

from flowtrace import cli, logging
from flowtrace._version import __version__
from flowtrace.algorithms import bfs, dfs, edmonds_karp, ford_fulkerson, max_flow
from flowtrace.io import load_graph, save_graph
from flowtrace.model.graph import Edge, FlowGraph, Node
from flowtrace.model.samples import sample_graph
from flowtrace.nx import from_networkx, to_networkx
from flowtrace.player import DisplayState, Player
from flowtrace.session import Session, run_algorithm
from flowtrace.types.base import Algorithm, StepKind
from flowtrace.types.dto import MaxFlowResult, RunResult, TraversalResult
from flowtrace.types.steps import (
    EdgeProbeStep,
    FlowTotalStep,
    FlowUpdateStep,
    PathFoundStep,
    Step,
    VisitStep,
)

__all__ = [
    # Version
    "__version__",
    # Model
    "FlowGraph",
    "Node",
    "Edge",
    "sample_graph",
    # Engines
    "bfs",
    "dfs",
    "max_flow",
    "ford_fulkerson",
    "edmonds_karp",
    # Runs and replay
    "Session",
    "run_algorithm",
    "Player",
    "DisplayState",
    # Types
    "Algorithm",
    "StepKind",
    "Step",
    "VisitStep",
    "EdgeProbeStep",
    "PathFoundStep",
    "FlowUpdateStep",
    "FlowTotalStep",
    "TraversalResult",
    "MaxFlowResult",
    "RunResult",
    # IO and integrations
    "load_graph",
    "save_graph",
    "from_networkx",
    "to_networkx",
    # Utilities
    "cli",
    "logging",
]

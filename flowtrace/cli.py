"""Command-line interface for flowtrace."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import networkx as nx

from flowtrace.config import PLAYBACK_CONFIG
from flowtrace.io import load_graph
from flowtrace.logging import get_logger, set_global_log_level
from flowtrace.model.graph import FlowGraph
from flowtrace.model.samples import sample_graph
from flowtrace.nx import to_networkx
from flowtrace.session import Session
from flowtrace.types.base import Algorithm
from flowtrace.types.steps import (
    EdgeProbeStep,
    FlowTotalStep,
    FlowUpdateStep,
    PathFoundStep,
    Step,
    VisitStep,
)

logger = get_logger(__name__)


def _format_table(headers: List[str], rows: List[List[Any]], min_width: int = 6) -> str:
    """Format rows as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    all_data = [headers] + [[str(item) for item in row] for row in rows]
    col_widths = [
        max(max(len(str(row[i])) for row in all_data), min_width)
        for i in range(len(headers))
    ]

    def format_row(row_data: List[Any]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    lines.extend(format_row(row) for row in all_data[1:])
    return "\n".join(lines)


def _describe_step(step: Step, graph: FlowGraph) -> str:
    """One console line for a replayed step."""

    def name(node_id: int) -> str:
        node = graph.nodes.get(node_id)
        return f"{node.label}({node_id})" if node is not None else str(node_id)

    if isinstance(step, VisitStep):
        line = f"visit {name(step.node)}"
        if step.frontier is not None:
            line += f"  queue={list(step.frontier)}"
        return line
    if isinstance(step, EdgeProbeStep):
        return f"probe {name(step.src)} -> {name(step.dst)}"
    if isinstance(step, PathFoundStep):
        return "path  " + " -> ".join(name(n) for n in step.path)
    if isinstance(step, FlowUpdateStep):
        return (
            f"flow  {name(step.src)} -> {name(step.dst)} = {step.flow}"
            f"  (+{step.path_flow})"
        )
    if isinstance(step, FlowTotalStep):
        return f"total {step.value}"
    return repr(step)


def _load(path: Optional[Path], keep_flows: bool = False) -> FlowGraph:
    if path is None:
        logger.info("No graph file given; using the built-in sample graph")
        return sample_graph()
    logger.info(f"Loading graph from: {path}")
    return load_graph(path, keep_flows=keep_flows)


def _run_graph(
    path: Optional[Path],
    algorithm: str,
    source: Optional[int],
    sink: Optional[int],
    path_finder: Optional[str],
    results_path: Optional[Path],
    stdout: bool,
    play: bool,
    tick_ms: int,
    keep_flows: bool,
) -> None:
    """Run an algorithm on a graph file and report the outcome.

    Args:
        path: Graph file, or None for the sample graph.
        algorithm: Algorithm name.
        source: Source override.
        sink: Sink override.
        path_finder: Traversal for Ford-Fulkerson.
        results_path: Where to write the results JSON, if anywhere.
        stdout: Print the results JSON.
        play: Replay the trace on the console.
        tick_ms: Replay interval.
        keep_flows: Keep flows from the file and resume from them.
    """
    try:
        graph = _load(path, keep_flows=keep_flows)
        session = Session(graph)
        result = session.run(
            algorithm,
            source=source,
            sink=sink,
            path_finder=Algorithm.from_string(path_finder) if path_finder else None,
            resume=keep_flows,
        )

        if play:
            player = session.player(tick_ms=PLAYBACK_CONFIG.clamp_interval(tick_ms))
            player.play(
                on_step=lambda step: print(
                    f"[{player.state.current_step:>3}] {_describe_step(step, graph)}"
                )
            )

        print(f"Algorithm: {result.algorithm.key}")
        print(f"Source -> sink: {result.source} -> {result.sink}")
        print(f"Steps: {len(result.steps)}")
        if result.max_flow is not None:
            print(f"Max flow: {result.max_flow}")
        else:
            print(f"Path: {list(result.path) if result.path else 'not found'}")

        if results_path is not None or stdout:
            json_str = json.dumps(result.to_dict(), indent=2)
            if results_path is not None:
                results_path.parent.mkdir(parents=True, exist_ok=True)
                results_path.write_text(json_str)
                logger.info(f"Results written to: {results_path}")
                print(f"Results written to: {results_path}")
            if stdout:
                print(json_str)

    except FileNotFoundError:
        logger.error(f"Graph file not found: {path}")
        print(f"ERROR: Graph file not found: {path}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to run algorithm: {type(e).__name__}: {e}")
        print(f"ERROR: Failed to run algorithm: {type(e).__name__}: {e}")
        sys.exit(1)


def _inspect_graph(path: Optional[Path]) -> None:
    """Print node and edge tables, run readiness and reachability."""
    try:
        graph = _load(path)

        print("NODES")
        print(
            _format_table(
                ["ID", "Label", "X", "Y", "Role"],
                [
                    [
                        node.id,
                        node.label,
                        node.x,
                        node.y,
                        "source"
                        if node.id == graph.source
                        else "sink"
                        if node.id == graph.sink
                        else "",
                    ]
                    for node in graph.nodes.values()
                ],
            )
        )
        print("EDGES")
        print(
            _format_table(
                ["ID", "From", "To", "Capacity", "Flow", "Antiparallel"],
                [
                    [
                        edge.id,
                        edge.src,
                        edge.dst,
                        edge.capacity,
                        edge.flow,
                        "yes" if graph.has_reverse_edge(edge) else "",
                    ]
                    for edge in graph.edges
                ],
            )
        )

        try:
            source, sink = graph.validate_for_run()
        except ValueError as e:
            print(f"Not ready to run: {e}")
            return

        reachable = nx.has_path(to_networkx(graph), source, sink)
        print(f"Ready to run: source {source}, sink {sink}")
        print(f"Sink reachable from source: {'yes' if reachable else 'no'}")

    except FileNotFoundError:
        logger.error(f"Graph file not found: {path}")
        print(f"ERROR: Graph file not found: {path}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to inspect graph: {type(e).__name__}: {e}")
        print(f"ERROR: Failed to inspect graph: {type(e).__name__}: {e}")
        sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``flowtrace`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="flowtrace",
        description="Trace graph traversal and max-flow algorithms step by step.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress console logs below WARNING"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run,inspect}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser("run", help="Run an algorithm on a graph")
    run_parser.add_argument(
        "graph",
        type=Path,
        nargs="?",
        default=None,
        help="Graph file (JSON or YAML); the sample graph when omitted",
    )
    run_parser.add_argument(
        "--algorithm",
        "-a",
        default="bfs",
        help="bfs, dfs, fordFulkerson or edmondsKarp (default: bfs)",
    )
    run_parser.add_argument("--source", "-s", type=int, default=None)
    run_parser.add_argument("--sink", "-t", type=int, default=None)
    run_parser.add_argument(
        "--path-finder",
        default=None,
        help="Traversal used by fordFulkerson: bfs or dfs (default: dfs)",
    )
    run_parser.add_argument(
        "--results", "-r", type=Path, default=None, help="Write results JSON here"
    )
    run_parser.add_argument(
        "--stdout", action="store_true", help="Print results JSON to stdout"
    )
    run_parser.add_argument(
        "--play", action="store_true", help="Replay the trace step by step"
    )
    run_parser.add_argument(
        "--tick-ms",
        type=int,
        default=PLAYBACK_CONFIG.default_interval_ms,
        help=(
            f"Replay interval in ms, {PLAYBACK_CONFIG.min_interval_ms}-"
            f"{PLAYBACK_CONFIG.max_interval_ms} (default: "
            f"{PLAYBACK_CONFIG.default_interval_ms})"
        ),
    )
    run_parser.add_argument(
        "--keep-flows",
        action="store_true",
        help="Keep flows stored in the graph file and resume from them",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Show a graph and check it is ready to run"
    )
    inspect_parser.add_argument(
        "graph",
        type=Path,
        nargs="?",
        default=None,
        help="Graph file (JSON or YAML); the sample graph when omitted",
    )

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    if args.command == "run":
        _run_graph(
            path=args.graph,
            algorithm=args.algorithm,
            source=args.source,
            sink=args.sink,
            path_finder=args.path_finder,
            results_path=args.results,
            stdout=args.stdout,
            play=args.play,
            tick_ms=args.tick_ms,
            keep_flows=args.keep_flows,
        )
    elif args.command == "inspect":
        _inspect_graph(args.graph)


if __name__ == "__main__":
    main()

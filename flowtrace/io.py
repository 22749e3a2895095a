"""Import and export of graphs in the node/edge exchange format.

The format is a mapping with a ``nodes`` list of ``{id, label, x, y}`` and an
``edges`` list of ``{id, from, to, capacity, flow}``, plus optional
``source`` and ``sink``. Files may be JSON or YAML. Documents are checked
against the packaged JSON schema ``flowtrace/schemas/graph.json``.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Union

import jsonschema
import yaml

from flowtrace.logging import get_logger
from flowtrace.model.graph import FlowGraph

LOGGER = get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def graph_to_dict(graph: FlowGraph) -> Dict[str, Any]:
    """
    Convert a FlowGraph into its exchange-format dict.

    Args:
        graph: The graph to convert.

    Returns:
        A dict with ``nodes``, ``edges``, ``source`` and ``sink``.
    """
    return {
        "nodes": [node.to_dict() for node in graph.nodes.values()],
        "edges": [edge.to_dict() for edge in graph.edges],
        "source": graph.source,
        "sink": graph.sink,
    }


def graph_from_dict(data: Dict[str, Any], keep_flows: bool = False) -> FlowGraph:
    """
    Build a FlowGraph from an exchange-format dict.

    Imported flows are not trusted: they are zeroed unless ``keep_flows`` is
    set, in which case a later max-flow run resumes from them. Missing edge
    ids are assigned in order. Without explicit terminals the first node
    becomes the source and the last node the sink.

    Args:
        data: Exchange-format mapping.
        keep_flows: Keep the ``flow`` values from the document.

    Returns:
        The reconstructed graph.

    Raises:
        ValueError: On a malformed document or an edge the model rejects.
        jsonschema.ValidationError: If the document violates the schema.
    """
    validate_graph_dict(data)

    graph = FlowGraph()
    for node_obj in data["nodes"]:
        graph.add_node(
            label=node_obj.get("label"),
            x=node_obj.get("x"),
            y=node_obj.get("y"),
            node_id=int(node_obj["id"]),
        )

    for edge_obj in data["edges"]:
        edge_id = edge_obj.get("id")
        graph.add_edge(
            int(edge_obj["from"]),
            int(edge_obj["to"]),
            capacity=int(edge_obj["capacity"]),
            flow=int(edge_obj.get("flow", 0)) if keep_flows else 0,
            edge_id=int(edge_id) if edge_id is not None else None,
        )

    node_ids = list(graph.nodes)
    source = data.get("source")
    sink = data.get("sink")
    if source is None and node_ids:
        source = node_ids[0]
    if sink is None and node_ids:
        sink = node_ids[-1]
    if source is not None and sink is not None:
        graph.set_terminals(source, sink)
    return graph


def validate_graph_dict(data: Any) -> None:
    """Shape checks with readable messages, then JSON schema validation."""
    if not isinstance(data, dict):
        raise ValueError("A graph document must be a mapping at top level.")
    for section in ("nodes", "edges"):
        if section not in data:
            raise ValueError(f"Graph document is missing '{section}'.")
        if not isinstance(data[section], list):
            raise ValueError(f"'{section}' must be a list.")
    for entry in data["edges"]:
        if not isinstance(entry, dict):
            raise ValueError("Each edge must be a mapping with 'from' and 'to'.")
        if "from" not in entry or "to" not in entry:
            raise ValueError("Each edge must include 'from' and 'to'.")

    jsonschema.validate(data, _load_schema())


def _load_schema() -> Dict[str, Any]:
    with (
        resources.files("flowtrace.schemas")
        .joinpath("graph.json")
        .open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


def dumps_graph(graph: FlowGraph, indent: int = 2) -> str:
    return json.dumps(graph_to_dict(graph), indent=indent)


def loads_graph(text: str, keep_flows: bool = False) -> FlowGraph:
    """Parse a graph from JSON or YAML text (YAML is a superset of JSON)."""
    data = yaml.safe_load(text)
    if data is None:
        data = {}
    return graph_from_dict(data, keep_flows=keep_flows)


def save_graph(graph: FlowGraph, path: Union[str, Path]) -> Path:
    """Write a graph to ``path``; ``.yaml``/``.yml`` write YAML, anything else JSON."""
    path = Path(path)
    if path.suffix.lower() in YAML_SUFFIXES:
        text = yaml.safe_dump(graph_to_dict(graph), sort_keys=False)
    else:
        text = dumps_graph(graph)
    path.write_text(text, encoding="utf-8")
    LOGGER.info(
        "Wrote graph with %d node(s) and %d edge(s) to %s",
        len(graph.nodes),
        len(graph.edges),
        path,
    )
    return path


def load_graph(path: Union[str, Path], keep_flows: bool = False) -> FlowGraph:
    """Read a JSON or YAML graph file.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in YAML_SUFFIXES:
        graph = loads_graph(text, keep_flows=keep_flows)
    else:
        graph = graph_from_dict(json.loads(text), keep_flows=keep_flows)
    LOGGER.info(
        "Loaded graph with %d node(s) and %d edge(s) from %s",
        len(graph.nodes),
        len(graph.edges),
        path,
    )
    return graph

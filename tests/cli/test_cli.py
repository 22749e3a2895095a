import json
from pathlib import Path

import pytest

from flowtrace import cli
from flowtrace.io import save_graph
from flowtrace.model.samples import sample_graph


def extract_json_from_stdout(output: str) -> str:
    """Return the first balanced JSON object in stdout that also holds status lines."""
    json_start = output.find("{")
    if json_start == -1:
        return output

    brace_count = 0
    for i in range(json_start, len(output)):
        if output[i] == "{":
            brace_count += 1
        elif output[i] == "}":
            brace_count -= 1
            if brace_count == 0:
                return output[json_start : i + 1]
    return output


@pytest.fixture
def graph_file(tmp_path: Path) -> Path:
    return save_graph(sample_graph(), tmp_path / "sample.json")


def test_run_writes_results_file(tmp_path: Path, graph_file: Path, capsys) -> None:
    results_path = tmp_path / "out" / "res.json"

    cli.main(["run", str(graph_file), "-a", "edmondsKarp", "--results", str(results_path)])

    out = capsys.readouterr().out
    assert "Max flow: 20" in out
    assert f"Results written to: {results_path}" in out
    data = json.loads(results_path.read_text())
    assert data["algorithm"] == "edmondsKarp"
    assert data["maxFlow"] == 20
    assert data["steps"][0] == {
        "type": "visit",
        "node": 0,
        "visited": [0],
        "parent": {},
        "queue": [0],
    }
    assert sum(e["flow"] for e in data["edges"] if e["from"] == 0) == 20


def test_run_stdout_traversal(graph_file: Path, capsys) -> None:
    cli.main(["run", str(graph_file), "--algorithm", "bfs", "--stdout"])

    out = capsys.readouterr().out
    assert "Path: [0, 1, 2, 4]" in out
    payload = json.loads(extract_json_from_stdout(out))
    assert payload["path"] == [0, 1, 2, 4]
    assert len(payload["steps"]) == 12
    assert "maxFlow" not in payload


def test_run_defaults_to_sample_graph(capsys) -> None:
    cli.main(["run", "-a", "dfs"])
    out = capsys.readouterr().out
    assert "Algorithm: dfs" in out
    assert "Source -> sink: 0 -> 4" in out
    assert "Steps: 7" in out


def test_run_terminal_overrides(graph_file: Path, capsys) -> None:
    cli.main(["run", str(graph_file), "-s", "5", "-t", "2"])
    assert "Path: [5, 3, 2]" in capsys.readouterr().out


def test_run_ford_fulkerson_path_finder(graph_file: Path, capsys) -> None:
    cli.main(["run", str(graph_file), "-a", "fordFulkerson", "--path-finder", "bfs"])
    assert "Max flow: 20" in capsys.readouterr().out


def test_run_yaml_with_kept_flows(tmp_path: Path, capsys) -> None:
    graph = sample_graph()
    for src, dst in [(0, 1), (1, 2), (2, 4)]:
        graph.find_edge(src, dst).flow = 12
    path = save_graph(graph, tmp_path / "partial.yaml")

    cli.main(["run", str(path), "-a", "edmondsKarp", "--keep-flows"])
    assert "Max flow: 8" in capsys.readouterr().out


def test_run_play_prints_each_step(tmp_path: Path, capsys) -> None:
    path = tmp_path / "tiny.json"
    path.write_text(
        json.dumps(
            {
                "nodes": [{"id": 0, "label": "S"}, {"id": 1, "label": "T"}],
                "edges": [{"from": 0, "to": 1, "capacity": 2}],
            }
        )
    )

    cli.main(["run", str(path), "--play", "--tick-ms", "100"])

    out = capsys.readouterr().out
    assert "[  1] visit S(0)  queue=[0]" in out
    assert "[  2] probe S(0) -> T(1)" in out
    assert "[  4] path  S(0) -> T(1)" in out


def test_run_missing_file_exits(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["run", str(tmp_path / "absent.json")])
    assert exc_info.value.code == 1
    assert "ERROR: Graph file not found" in capsys.readouterr().out


def test_run_bad_algorithm_exits(graph_file: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["run", str(graph_file), "-a", "dijkstra"])
    assert exc_info.value.code == 1
    assert "ERROR: Failed to run algorithm: ValueError" in capsys.readouterr().out


def test_run_same_terminals_exits(graph_file: Path, capsys) -> None:
    with pytest.raises(SystemExit):
        cli.main(["run", str(graph_file), "-s", "2", "-t", "2"])
    assert "must be different" in capsys.readouterr().out


def test_inspect_sample(capsys) -> None:
    cli.main(["inspect"])
    out = capsys.readouterr().out
    assert "NODES" in out and "EDGES" in out
    assert "Antiparallel" in out
    assert "Ready to run: source 0, sink 4" in out
    assert "Sink reachable from source: yes" in out


def test_inspect_unreachable_and_not_ready(tmp_path: Path, capsys) -> None:
    split = tmp_path / "split.json"
    split.write_text(
        json.dumps(
            {
                "nodes": [{"id": i} for i in range(4)],
                "edges": [{"from": 0, "to": 1, "capacity": 1}, {"from": 2, "to": 3, "capacity": 1}],
            }
        )
    )
    cli.main(["inspect", str(split)])
    assert "Sink reachable from source: no" in capsys.readouterr().out

    lonely = tmp_path / "lonely.json"
    lonely.write_text(json.dumps({"nodes": [{"id": 0}], "edges": []}))
    cli.main(["inspect", str(lonely)])
    assert "Not ready to run: Need at least two nodes" in capsys.readouterr().out


def test_inspect_invalid_document_exits(tmp_path: Path, capsys) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"nodes": [{"id": 0}, {"id": 1}], "edges": [{"from": 0, "to": 1, "capacity": 0}]}))
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["inspect", str(bad)])
    assert exc_info.value.code == 1
    assert "ValidationError" in capsys.readouterr().out


def test_no_arguments_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 0
    assert "usage: flowtrace" in capsys.readouterr().out


def test_format_table() -> None:
    table = cli._format_table(["ID", "Name"], [[1, "alpha"], [22, "b"]])
    lines = table.splitlines()
    assert lines[0].split("|")[0].strip() == "ID"
    assert set(lines[1].strip()) <= {"-", "+"}
    assert len(lines) == 4
    assert cli._format_table(["ID"], []) == ""

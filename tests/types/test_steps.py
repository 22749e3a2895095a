import pytest

from flowtrace.algorithms.bfs import bfs
from flowtrace.algorithms.dfs import dfs
from flowtrace.algorithms.max_flow import edmonds_karp, ford_fulkerson
from flowtrace.types.base import StepKind
from flowtrace.types.steps import (
    EdgeProbeStep,
    FlowTotalStep,
    FlowUpdateStep,
    PathFoundStep,
    VisitStep,
    check_trace_order,
    step_from_dict,
)


def test_visit_to_dict_bfs_and_dfs_forms():
    bfs_step = VisitStep(node=2, visited=(0, 1, 2), parent={1: 0, 2: 1}, frontier=(2,))
    dfs_step = VisitStep(node=2, visited=(0, 2), parent={2: 0})

    assert bfs_step.to_dict() == {
        "type": "visit",
        "node": 2,
        "visited": [0, 1, 2],
        "parent": {"1": 0, "2": 1},
        "queue": [2],
    }
    assert "queue" not in dfs_step.to_dict()


def test_flow_steps_to_dict():
    assert FlowUpdateStep(src=1, dst=2, flow=12, path_flow=12).to_dict() == {
        "type": "flowUpdate",
        "from": 1,
        "to": 2,
        "flow": 12,
        "pathFlow": 12,
    }
    assert FlowTotalStep(value=20).to_dict() == {"type": "flowTotal", "value": 20}
    assert EdgeProbeStep(src=0, dst=1).to_dict() == {"type": "edgeProbe", "from": 0, "to": 1}
    assert PathFoundStep(path=(0, 4)).to_dict() == {"type": "pathFound", "path": [0, 4]}


def test_kind_is_not_a_field():
    step = EdgeProbeStep(0, 1)
    assert step.kind is StepKind.EDGE_PROBE
    assert step == EdgeProbeStep(0, 1)


def test_from_dict_rebuilds_recorded_trace(sample):
    steps = edmonds_karp(sample.edges, 0, 4).steps
    assert tuple(step_from_dict(s.to_dict()) for s in steps) == steps


def test_from_dict_unknown_type():
    with pytest.raises(ValueError, match="Unknown step type"):
        step_from_dict({"type": "teleport"})
    with pytest.raises(ValueError, match="Unknown step type"):
        step_from_dict({})


def test_recorded_traces_are_ordered(sample, shortcut, disconnected, antiparallel):
    for graph in (sample, shortcut, disconnected, antiparallel):
        s, t = graph.source, graph.sink
        check_trace_order(bfs(graph.edges, s, t).steps)
        check_trace_order(dfs(graph.edges, s, t).steps)
        check_trace_order(edmonds_karp(graph.edges, s, t).steps)
        check_trace_order(ford_fulkerson(graph.edges, s, t).steps)


def test_trace_of_search_starting_at_sink_is_ordered(sample):
    check_trace_order(dfs(sample.edges, 2, 2).steps)


_ROUND = [VisitStep(0, (0,)), EdgeProbeStep(0, 1), PathFoundStep((0, 1))]


@pytest.mark.parametrize(
    "steps, message",
    [
        ([VisitStep(0, (0,)), EdgeProbeStep(2, 1), PathFoundStep((2, 1))], "start at"),
        ([VisitStep(0, (0,)), EdgeProbeStep(0, 2), PathFoundStep((0, 1, 2))], "never probed"),
        (
            [
                VisitStep(0, (0,)),
                EdgeProbeStep(0, 1),
                EdgeProbeStep(0, 2),
                VisitStep(2, (0, 2), {2: 0}),
                VisitStep(7, (0, 2, 7), {2: 0, 7: 2}),
                PathFoundStep((0, 1)),
            ],
            "probe 0 -> 1 is not followed",
        ),
        (
            [VisitStep(0, (0,)), EdgeProbeStep(0, 2), VisitStep(1, (0, 1), {1: 0})],
            "probe 0 -> 2 is not followed",
        ),
        ([VisitStep(0, (0,)), VisitStep(3, (0, 3), {3: 0})], "does not follow its probe"),
        (
            [VisitStep(0, (0,)), EdgeProbeStep(0, 3), VisitStep(3, (0, 3), {3: 1})],
            "not from its parent 1",
        ),
        ([VisitStep(0, (0,)), EdgeProbeStep(0, 3)], "probe 0 -> 3 is not followed"),
        ([VisitStep(0, (0,)), EdgeProbeStep(0, 3), PathFoundStep((0, 4))], "not followed"),
        ([FlowUpdateStep(0, 1, 1, 1)], "without a found path"),
        (_ROUND + [FlowTotalStep(1)], "without flow updates"),
        (_ROUND + [FlowUpdateStep(0, 1, 1, 1), VisitStep(0, (0,))], "open flow round"),
        (
            _ROUND
            + [FlowUpdateStep(0, 1, 5, 5), FlowTotalStep(5)]
            + _ROUND
            + [FlowUpdateStep(0, 1, 3, 3), FlowTotalStep(3)],
            "decreased",
        ),
    ],
)
def test_order_violations(steps, message):
    with pytest.raises(ValueError, match=message):
        check_trace_order(steps)


def test_visit_step_is_hashable_and_read_only():
    parent = {1: 0}
    step = VisitStep(node=1, visited=[0, 1], parent=parent, frontier=[1])

    parent[2] = 1
    assert step.parent == {1: 0}
    assert step.visited == (0, 1) and step.frontier == (1,)
    with pytest.raises(TypeError):
        step.parent[5] = 0

    same = VisitStep(node=1, visited=(0, 1), parent={1: 0}, frontier=(1,))
    assert step == same
    assert hash(step) == hash(same)
    assert len({step, same}) == 1

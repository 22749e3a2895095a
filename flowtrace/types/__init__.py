"""Shared enums, step records and result containers."""

from flowtrace.types.base import Algorithm, EdgeId, NodeId, StepKind
from flowtrace.types.dto import AugmentingPath, MaxFlowResult, RunResult, TraversalResult
from flowtrace.types.steps import (
    EdgeProbeStep,
    FlowTotalStep,
    FlowUpdateStep,
    PathFoundStep,
    Step,
    Trace,
    VisitStep,
    check_trace_order,
    step_from_dict,
)

__all__ = [
    "Algorithm",
    "StepKind",
    "NodeId",
    "EdgeId",
    "Step",
    "Trace",
    "VisitStep",
    "EdgeProbeStep",
    "PathFoundStep",
    "FlowUpdateStep",
    "FlowTotalStep",
    "step_from_dict",
    "check_trace_order",
    "TraversalResult",
    "AugmentingPath",
    "MaxFlowResult",
    "RunResult",
]

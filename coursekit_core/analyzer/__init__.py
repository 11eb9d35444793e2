"""Static analysis of course documents (dry runs)."""

from coursekit_core.analyzer.dry_run import (
    DryRunSimulator,
    build_scene_graph,
    dry_run,
    dry_run_report,
    next_scenes,
)
from coursekit_core.analyzer.models import (
    CoverageReport,
    DeadCode,
    DeadTrigger,
    DryRunResult,
    EventActionMapping,
    ExecutionPath,
    ExecutionStep,
    StateMutation,
)
from coursekit_core.analyzer.report import render_report

__all__ = [
    "DryRunSimulator",
    "build_scene_graph",
    "dry_run",
    "dry_run_report",
    "next_scenes",
    "render_report",
    "CoverageReport",
    "DeadCode",
    "DeadTrigger",
    "DryRunResult",
    "EventActionMapping",
    "ExecutionPath",
    "ExecutionStep",
    "StateMutation",
]

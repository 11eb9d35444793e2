"""Coursekit Core - course document model and static analysis.

Models (frozen pydantic):
- Course, Scene, Trigger, EventMatcher, NodeSpec
- Condition variants: Comparison, Logical, UnknownCondition
- Action variants: GotoSceneAction, SetVarAction, IncVarAction, AddScoreAction,
  ToastAction, ModalAction, ResetNodeAction, SequenceAction, ParallelAction,
  DelayAction, UnknownAction
- RuntimeEvent, UIAction

Loading & configuration:
- load_course, parse_course
- RuntimeConfig

Analysis:
- DryRunSimulator, dry_run, dry_run_report

The live interpreter for these documents lives in ``coursekit_engine``.
"""

from .actions import (
    Action,
    ActionType,
    AddScoreAction,
    DelayAction,
    GotoSceneAction,
    IncVarAction,
    ModalAction,
    ParallelAction,
    ResetNodeAction,
    SequenceAction,
    SetVarAction,
    ToastAction,
    UnknownAction,
    parse_action,
)
from .analyzer import DryRunResult, DryRunSimulator, dry_run, dry_run_report
from .conditions import (
    Comparison,
    ComparisonOp,
    Condition,
    Logical,
    LogicalOp,
    UnknownCondition,
    parse_condition,
)
from .config import RuntimeConfig
from .document import Course, CourseGlobals, CourseMeta, EventMatcher, NodeSpec, Scene, Trigger
from .errors import CourseLoadError, CourseNotLoadedError, CoursekitError, SceneNotFoundError
from .events import SCENE_ENTER, RuntimeEvent, UIAction, UIActionKind
from .loader import load_course, parse_course

__version__ = "0.1.0"

__all__ = [
    # Document
    "Course",
    "CourseGlobals",
    "CourseMeta",
    "EventMatcher",
    "NodeSpec",
    "Scene",
    "Trigger",
    # Conditions
    "Comparison",
    "ComparisonOp",
    "Condition",
    "Logical",
    "LogicalOp",
    "UnknownCondition",
    "parse_condition",
    # Actions
    "Action",
    "ActionType",
    "AddScoreAction",
    "DelayAction",
    "GotoSceneAction",
    "IncVarAction",
    "ModalAction",
    "ParallelAction",
    "ResetNodeAction",
    "SequenceAction",
    "SetVarAction",
    "ToastAction",
    "UnknownAction",
    "parse_action",
    # Events
    "SCENE_ENTER",
    "RuntimeEvent",
    "UIAction",
    "UIActionKind",
    # Loading & config
    "load_course",
    "parse_course",
    "RuntimeConfig",
    # Errors
    "CoursekitError",
    "CourseLoadError",
    "CourseNotLoadedError",
    "SceneNotFoundError",
    # Analysis
    "DryRunResult",
    "DryRunSimulator",
    "dry_run",
    "dry_run_report",
]

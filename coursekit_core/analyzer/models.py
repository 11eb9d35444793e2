"""Result models produced by the dry-run analyzer.

Field names are snake_case in Python and camelCase when dumped with
``by_alias=True`` so reports match the document's naming.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ResultModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class StepType(str, Enum):
    SCENE_ENTER = "scene_enter"
    EVENT = "event"
    CONDITION = "condition"
    ACTION = "action"
    SCENE_EXIT = "scene_exit"


# ============================================================================
# Paths
# ============================================================================


class ExecutionStep(_ResultModel):
    type: StepType = StepType.SCENE_ENTER
    scene_id: str
    details: dict[str, Any] = Field(default_factory=dict)
    possible_next_steps: list[str] = Field(default_factory=list)


class ExecutionPath(_ResultModel):
    """One statically possible walk through the scene graph.

    ``is_complete`` marks a walk that ended in a scene with no outgoing
    transition; ``loop_detected`` marks one that came back to a scene already
    on the same walk (``end_scene`` is then the repeated scene).
    """

    id: str
    steps: list[ExecutionStep] = Field(default_factory=list)
    start_scene: str
    end_scene: Optional[str] = None
    is_complete: bool = False
    loop_detected: bool = False

    @property
    def length(self) -> int:
        return len(self.steps)

    @property
    def scene_ids(self) -> list[str]:
        return [step.scene_id for step in self.steps]


# ============================================================================
# Side Products
# ============================================================================


class StateMutation(_ResultModel):
    path: str
    action: str
    scene_id: str
    trigger_index: int


class EventActionMapping(_ResultModel):
    event: str
    target: Optional[str] = None
    scene_id: str
    actions: list[str] = Field(default_factory=list)
    conditions: int = 0


class SceneCoverage(_ResultModel):
    total: int = 0
    reachable: int = 0
    coverage: float = 0.0


class NodeCoverage(_ResultModel):
    total: int = 0
    referenced: int = 0
    coverage: float = 0.0


class TriggerCoverage(_ResultModel):
    total: int = 0
    with_conditions: int = 0
    with_else: int = 0


class ActionCoverage(_ResultModel):
    total: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)


class CoverageReport(_ResultModel):
    """Coverage figures; ``coverage`` fields are percentages (0-100)."""

    scenes: SceneCoverage = Field(default_factory=SceneCoverage)
    nodes: NodeCoverage = Field(default_factory=NodeCoverage)
    triggers: TriggerCoverage = Field(default_factory=TriggerCoverage)
    actions: ActionCoverage = Field(default_factory=ActionCoverage)


class DeadTrigger(_ResultModel):
    scene_id: str
    trigger_index: int

    def __str__(self) -> str:
        return f"{self.scene_id}[{self.trigger_index}]"


class DeadCode(_ResultModel):
    unreachable_scenes: list[str] = Field(default_factory=list)
    unused_nodes: list[str] = Field(default_factory=list)
    dead_triggers: list[DeadTrigger] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.unreachable_scenes or self.unused_nodes or self.dead_triggers)


class Complexity(_ResultModel):
    total_scenes: int = 0
    total_nodes: int = 0
    total_triggers: int = 0
    total_actions: int = 0
    max_path_length: int = 0
    average_path_length: float = 0.0
    branching_factor: float = 0.0


class DryRunResult(_ResultModel):
    """Complete dry-run analysis of one course."""

    paths: list[ExecutionPath] = Field(default_factory=list)
    mutations: list[StateMutation] = Field(default_factory=list)
    event_action_map: list[EventActionMapping] = Field(default_factory=list)
    coverage: CoverageReport = Field(default_factory=CoverageReport)
    dead_code: DeadCode = Field(default_factory=DeadCode)
    complexity: Complexity = Field(default_factory=Complexity)
    unknown_scene_targets: list[str] = Field(default_factory=list)
    truncated: bool = False

    @property
    def complete_paths(self) -> list[ExecutionPath]:
        return [path for path in self.paths if path.is_complete]

    @property
    def loop_paths(self) -> list[ExecutionPath]:
        return [path for path in self.paths if path.loop_detected]

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)

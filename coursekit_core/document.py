"""Course document models for Coursekit.

A course is a graph of scenes. Each scene owns its variables, a list of
opaque UI node descriptors, and an ordered list of ECA triggers.

The models mirror the JSON/YAML document shape field for field (camelCase
aliases, ``if``/``else`` keys) and are frozen once loaded. Structural
validation (unique ids, existing start scene, ...) belongs to the authoring
tool and is assumed to have passed before a document reaches this package.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from coursekit_core.actions import Action
from coursekit_core.conditions import Condition


class _DocumentModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


# ============================================================================
# Triggers
# ============================================================================


class EventMatcher(_DocumentModel):
    """Which events a trigger listens to.

    A matcher with a ``target`` only fires for events carrying that exact target.
    """

    event: str = Field(description="Event type to match")
    target: Optional[str] = Field(default=None, description="Required event target")

    def matches(self, event_type: str, target: Optional[str]) -> bool:
        if self.event != event_type:
            return False
        if self.target and self.target != target:
            return False
        return True


class Trigger(_DocumentModel):
    """One Event-Condition-Action rule."""

    on: EventMatcher
    conditions: Optional[list[Condition]] = Field(default=None, alias="if")
    then: list[Action] = Field(default_factory=list)
    otherwise: Optional[list[Action]] = Field(default=None, alias="else")

    @property
    def has_conditions(self) -> bool:
        return bool(self.conditions)

    @property
    def has_else(self) -> bool:
        return bool(self.otherwise)


# ============================================================================
# Scenes
# ============================================================================


class NodeSpec(_DocumentModel):
    """UI node descriptor. Props are opaque to the runtime."""

    id: str
    type: str = ""
    props: dict[str, Any] = Field(default_factory=dict)


class Scene(_DocumentModel):
    id: str
    vars: dict[str, Any] = Field(default_factory=dict)
    nodes: list[NodeSpec] = Field(default_factory=list)
    triggers: list[Trigger] = Field(default_factory=list)

    @property
    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]


# ============================================================================
# Course
# ============================================================================


class CourseMeta(_DocumentModel):
    id: str
    version: str = "1.0.0"


class CourseGlobals(_DocumentModel):
    vars: dict[str, Any] = Field(default_factory=dict)


class Course(_DocumentModel):
    """Top-level course document.

    Attributes:
        schema_id: Document schema identifier (``schema`` in documents)
        meta: Course id and version
        globals: Session-wide variables seeded at load time
        start_scene_id: Scene entered by ``Runtime.start``
        scenes: Ordered scene list
    """

    schema_id: str = Field(default="vvce.dsl.v1", alias="schema")
    meta: CourseMeta
    globals: CourseGlobals = Field(default_factory=CourseGlobals)
    start_scene_id: str = Field(alias="startSceneId")
    scenes: list[Scene] = Field(default_factory=list)

    def get_scene(self, scene_id: str) -> Optional[Scene]:
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None

    @property
    def scene_ids(self) -> list[str]:
        return [scene.id for scene in self.scenes]

    @classmethod
    def coerce(cls, document: "Course | dict[str, Any]") -> "Course":
        """Accept either a parsed course or its raw mapping."""
        if isinstance(document, cls):
            return document
        return cls.model_validate(document)

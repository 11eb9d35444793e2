"""Action models for Coursekit triggers.

Each action is a frozen pydantic model tagged by its ``action`` field.
``parse_action`` picks the variant from the tag; tags outside the known
vocabulary become ``UnknownAction`` so the executor can report them and
carry on. Presentation-only actions of the authoring tool (animations,
styles, sounds) arrive here as ``UnknownAction`` with their parameters kept
in ``model_extra``.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


class ActionType(str, Enum):
    """Action tags understood by the runtime and the dry-run analyzer."""
    GOTO_SCENE = "gotoScene"
    SET_VAR = "setVar"
    INC_VAR = "incVar"
    ADD_SCORE = "addScore"
    TOAST = "toast"
    MODAL = "modal"
    RESET_NODE = "resetNode"
    SEQUENCE = "sequence"
    PARALLEL = "parallel"
    DELAY = "delay"


SCORE_PATH = "globals.vars.score"


class _ActionBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ============================================================================
# Primitive Actions
# ============================================================================


class GotoSceneAction(_ActionBase):
    action: Literal["gotoScene"] = "gotoScene"
    scene_id: str = Field(alias="sceneId")
    transition: Any = None


class SetVarAction(_ActionBase):
    action: Literal["setVar"] = "setVar"
    path: str
    value: Any = None


class IncVarAction(_ActionBase):
    action: Literal["incVar"] = "incVar"
    path: str
    by: int | float = 1


class AddScoreAction(_ActionBase):
    action: Literal["addScore"] = "addScore"
    value: int | float


class ToastAction(_ActionBase):
    """Short notification; extra keys (duration, variant...) reach the host."""

    action: Literal["toast"] = "toast"
    text: str

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


class ModalAction(_ActionBase):
    """Blocking dialog; extra keys (title, buttons...) reach the host."""

    action: Literal["modal"] = "modal"
    text: str

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


class ResetNodeAction(_ActionBase):
    action: Literal["resetNode"] = "resetNode"
    node_id: str = Field(alias="nodeId")


class DelayAction(_ActionBase):
    """Pacing marker; the core has no timers, so it has no live effect."""

    action: Literal["delay"] = "delay"
    duration: int | float = 0


# ============================================================================
# Composite Actions
# ============================================================================


class SequenceAction(_ActionBase):
    action: Literal["sequence"] = "sequence"
    actions: list["Action"] = Field(default_factory=list)


class ParallelAction(_ActionBase):
    action: Literal["parallel"] = "parallel"
    actions: list["Action"] = Field(default_factory=list)


class UnknownAction(_ActionBase):
    """Action tag outside the known vocabulary."""

    action: str

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    @property
    def params(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


_ACTION_MODELS: dict[str, type[BaseModel]] = {
    ActionType.GOTO_SCENE.value: GotoSceneAction,
    ActionType.SET_VAR.value: SetVarAction,
    ActionType.INC_VAR.value: IncVarAction,
    ActionType.ADD_SCORE.value: AddScoreAction,
    ActionType.TOAST.value: ToastAction,
    ActionType.MODAL.value: ModalAction,
    ActionType.RESET_NODE.value: ResetNodeAction,
    ActionType.DELAY.value: DelayAction,
    ActionType.SEQUENCE.value: SequenceAction,
    ActionType.PARALLEL.value: ParallelAction,
}

_PARSED_TYPES = tuple(_ACTION_MODELS.values()) + (UnknownAction,)


def parse_action(raw: Any) -> Any:
    """Turn a raw mapping into the matching action variant."""
    if isinstance(raw, _PARSED_TYPES):
        return raw
    if not isinstance(raw, dict):
        raise ValueError(f"Action must be a mapping, got {type(raw).__name__}")

    tag = raw.get("action")
    model = _ACTION_MODELS.get(tag) if isinstance(tag, str) else None
    if model is None:
        return UnknownAction.model_validate({**raw, "action": str(tag)})
    return model.model_validate(raw)


Action = Annotated[
    Union[
        GotoSceneAction,
        SetVarAction,
        IncVarAction,
        AddScoreAction,
        ToastAction,
        ModalAction,
        ResetNodeAction,
        DelayAction,
        SequenceAction,
        ParallelAction,
        UnknownAction,
    ],
    BeforeValidator(parse_action),
]

CompositeAction = Union[SequenceAction, ParallelAction]

SequenceAction.model_rebuild()
ParallelAction.model_rebuild()


def iter_actions(actions: list[Any]):
    """Yield every action in ``actions``, descending into composites."""
    for action in actions:
        yield action
        if isinstance(action, (SequenceAction, ParallelAction)):
            yield from iter_actions(action.actions)


def action_tag(action: Any) -> str:
    """Return the ``action`` tag of a parsed action."""
    return str(action.action)


def optional_target(action: Any) -> Optional[str]:
    """Node id an action points at, if any (``nodeId`` or ``target``)."""
    if isinstance(action, ResetNodeAction):
        return action.node_id
    if isinstance(action, UnknownAction):
        params = action.params
        target = params.get("target", params.get("nodeId"))
        return target if isinstance(target, str) else None
    return None

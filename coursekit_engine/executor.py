"""Action execution for Coursekit triggers.

The ActionExecutor is the only component that mutates the Store while a
course is running. Navigation and presentation are delegated to callbacks
injected by the Runtime, so the executor never touches the host directly.
"""

from __future__ import annotations

import copy
import math
from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError

from coursekit_core.actions import (
    SCORE_PATH,
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
from coursekit_core.events import UIAction, UIActionKind
from coursekit_engine.evaluator import to_number
from coursekit_engine.resolver import ReferenceResolver
from coursekit_engine.run_log import LogCategory, RuntimeLogger
from coursekit_engine.store import Store

SceneChangeCallback = Callable[[str], None]
UIActionCallback = Callable[[UIAction], None]


class ActionExecutor:
    """Executes trigger actions in order against the Store and host callbacks."""

    def __init__(
        self,
        store: Store,
        resolver: ReferenceResolver,
        on_scene_change: Optional[SceneChangeCallback] = None,
        on_ui_action: Optional[UIActionCallback] = None,
        diagnostics: Optional[RuntimeLogger] = None,
    ):
        """Initialize the executor.

        Args:
            store: State the actions mutate
            resolver: Resolves ``setVar`` values and toast/modal text
            on_scene_change: Called with the target id of ``gotoScene``
            on_ui_action: Called with a ``UIAction`` for ``toast``/``modal``
            diagnostics: Runtime log for recoverable faults
        """
        self.store = store
        self.resolver = resolver
        self.on_scene_change = on_scene_change
        self.on_ui_action = on_ui_action
        self.diagnostics = diagnostics if diagnostics is not None else resolver.diagnostics

    def execute_all(self, actions: Iterable[Any]) -> None:
        """Run ``actions`` strictly in order; each completes before the next starts."""
        for action in actions:
            self.execute(action)

    def execute(self, action: Any) -> None:
        """Execute a single action (model or raw mapping). Never raises on bad input."""
        try:
            action = parse_action(action)
        except (ValueError, ValidationError) as exc:
            self.diagnostics.warn(LogCategory.ACTION, f"Malformed action skipped: {exc}")
            return

        self.diagnostics.debug(LogCategory.ACTION, f"Executing action: {action.action}")

        if isinstance(action, GotoSceneAction):
            self._execute_goto_scene(action)
        elif isinstance(action, SetVarAction):
            self._execute_set_var(action)
        elif isinstance(action, IncVarAction):
            self._increment(action.path, action.by)
        elif isinstance(action, AddScoreAction):
            self._increment(SCORE_PATH, action.value)
        elif isinstance(action, ToastAction):
            self._emit_ui_action(UIActionKind.TOAST, action)
        elif isinstance(action, ModalAction):
            self._emit_ui_action(UIActionKind.MODAL, action)
        elif isinstance(action, ResetNodeAction):
            self.store.set_node_state(action.node_id, {})
        elif isinstance(action, (SequenceAction, ParallelAction)):
            # No concurrency in the core: parallel children run in declaration order
            self.execute_all(action.actions)
        elif isinstance(action, DelayAction):
            pass
        elif isinstance(action, UnknownAction):
            self.diagnostics.warn(
                LogCategory.ACTION,
                f"Unknown action type: {action.action}",
                action.params,
            )

    def _execute_goto_scene(self, action: GotoSceneAction) -> None:
        if self.on_scene_change is None:
            self.diagnostics.warn(
                LogCategory.SCENE,
                f"gotoScene({action.scene_id}) ignored: no scene-change handler",
            )
            return
        self.on_scene_change(action.scene_id)

    def _execute_set_var(self, action: SetVarAction) -> None:
        value = copy.deepcopy(self.resolver.resolve(action.value))
        self.store.set(action.path, value)
        self.diagnostics.debug(LogCategory.STATE, f"Set {action.path}", {"value": value})

    def _increment(self, path: str, by: int | float) -> None:
        current = self.store.get(path)
        if current is None:
            current = 0
        elif isinstance(current, bool) or not isinstance(current, (int, float)):
            number = to_number(current)
            if math.isnan(number):
                self.diagnostics.warn(
                    LogCategory.STATE,
                    f"Non-numeric value at {path} treated as 0",
                    {"value": current},
                )
                number = 0
            current = number

        value = current + by
        self.store.set(path, value)
        self.diagnostics.debug(LogCategory.STATE, f"Incremented {path} by {by}", {"value": value})

    def _emit_ui_action(self, kind: UIActionKind, action: ToastAction | ModalAction) -> None:
        ui_action = UIAction(
            kind=kind,
            text=self.resolver.interpolate(action.text),
            options=self.resolver.resolve_object(dict(action.model_extra or {})),
        )
        if self.on_ui_action is None:
            self.diagnostics.debug(LogCategory.ACTION, f"No UI handler for {kind.value}: {ui_action.text}")
            return
        self.on_ui_action(ui_action)

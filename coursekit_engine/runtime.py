"""Coursekit Runtime - the orchestrating facade of the engine.

The CourseRuntime:
1. Loads a course document and seeds the session variables
2. Owns the scene lifecycle (enter, reset scene-scoped state, swap triggers)
3. Accepts host events and routes them through the bus to the interpreter
4. Exposes state access, runtime logs and bus observation to the host

Architecture:
- One Store, EventBus and RuntimeLogger per instance; nothing is global,
  so independent runtimes can coexist in one process
- The interpreter is driven by an internal wildcard listener on the bus
- Everything is synchronous: ``emit`` returns after every resulting action,
  including nested scene changes, has completed
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional

from coursekit_core.config import RuntimeConfig
from coursekit_core.document import Course, Scene, Trigger
from coursekit_core.errors import CourseNotLoadedError, SceneNotFoundError
from coursekit_core.events import SCENE_ENTER, RuntimeEvent, UIAction
from coursekit_engine.evaluator import ConditionEvaluator
from coursekit_engine.event_bus import EventBus, EventListener, Unsubscribe
from coursekit_engine.executor import ActionExecutor
from coursekit_engine.interpreter import TriggerInterpreter
from coursekit_engine.resolver import ReferenceResolver
from coursekit_engine.run_log import LogCategory, LogEntry, RuntimeLogger
from coursekit_engine.store import Store


class RuntimePhase(str, Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"
    ACTIVE = "active"


class CourseRuntime:
    """Interprets one course document for one learner session.

    Usage:
        runtime = CourseRuntime(on_ui_action=show_toast)
        runtime.load_course(course)
        runtime.start()
        runtime.emit({"type": "click", "target": "submit"})
    """

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        on_scene_change: Optional[Callable[[str], None]] = None,
        on_state_change: Optional[Callable[[dict[str, Any]], None]] = None,
        on_ui_action: Optional[Callable[[UIAction], None]] = None,
    ):
        """Initialize the runtime.

        Args:
            config: Runtime settings (defaults when omitted)
            on_scene_change: Called with the scene id after every scene entry
            on_state_change: Called with a snapshot of the state after every emit
            on_ui_action: Called with toast/modal requests
        """
        self.config = config or RuntimeConfig()
        self.on_scene_change = on_scene_change
        self.on_state_change = on_state_change

        self.logger = RuntimeLogger(max_logs=self.config.max_logs, debug=self.config.debug)
        self.store = Store()
        self._event_bus = EventBus(diagnostics=self.logger)
        self.resolver = ReferenceResolver(
            self.store,
            diagnostics=self.logger,
            max_depth=self.config.max_resolve_depth,
        )
        self.evaluator = ConditionEvaluator(
            self.resolver,
            diagnostics=self.logger,
            max_depth=self.config.max_condition_depth,
        )
        self.executor = ActionExecutor(
            self.store,
            self.resolver,
            on_scene_change=self.goto_scene,
            on_ui_action=on_ui_action,
            diagnostics=self.logger,
        )
        self.interpreter = TriggerInterpreter(self.evaluator, self.executor, self.logger)

        self.course: Optional[Course] = None
        self.current_scene_id: Optional[str] = None
        self.current_triggers: list[Trigger] = []

        self._install_dispatch()

    def _install_dispatch(self) -> None:
        self._event_bus.on_all(self._dispatch)

    def _dispatch(self, event: RuntimeEvent) -> None:
        self.logger.info(LogCategory.EVENT, f"Event: {event.type}", event.model_dump(mode="json"))
        self.interpreter.handle_event(event, self.current_triggers)

    @property
    def phase(self) -> RuntimePhase:
        if self.course is None:
            return RuntimePhase.UNLOADED
        if self.current_scene_id is None:
            return RuntimePhase.LOADED
        return RuntimePhase.ACTIVE

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load_course(self, document: Course | dict[str, Any]) -> Course:
        """Store the document and seed ``globals.vars`` from its declared globals.

        Scene and node state are left alone.
        """
        course = Course.coerce(document)
        self.logger.info(
            LogCategory.SCENE,
            f"Loading course: {course.meta.id} v{course.meta.version}",
        )
        self.course = course
        for key, value in course.globals.vars.items():
            self.store.set(f"globals.vars.{key}", value)
        return course

    def start(
        self,
        start_scene_id: Optional[str] = None,
        initial_state: Optional[dict[str, Any]] = None,
    ) -> None:
        """Enter the start scene (or ``start_scene_id``), optionally resuming a snapshot.

        Raises:
            CourseNotLoadedError: If no course is loaded
            SceneNotFoundError: If the scene to enter does not exist
        """
        if self.course is None:
            raise CourseNotLoadedError()

        if initial_state:
            self.store.restore(initial_state)

        scene_id = start_scene_id or self.course.start_scene_id
        self.logger.info(LogCategory.SCENE, f"Starting course from scene: {scene_id}")
        self.goto_scene(scene_id)

    def goto_scene(self, scene_id: str) -> None:
        """Make ``scene_id`` the active scene and emit its ``sceneEnter`` event.

        Scene variables and node state are reset and re-seeded only when the
        target differs from the active scene.

        Raises:
            CourseNotLoadedError: If no course is loaded
            SceneNotFoundError: If the course has no such scene
        """
        if self.course is None:
            raise CourseNotLoadedError("No course loaded.")

        scene = self.course.get_scene(scene_id)
        if scene is None:
            self.logger.error(LogCategory.SCENE, f"Scene not found: {scene_id}")
            raise SceneNotFoundError(scene_id)

        self.logger.info(LogCategory.SCENE, f"Entering scene: {scene_id}")
        previous_scene_id = self.current_scene_id
        self.current_scene_id = scene_id

        if previous_scene_id != scene_id:
            self.store.reset_scene_state()
            for key, value in scene.vars.items():
                self.store.set(f"scene.vars.{key}", value)
        else:
            self.logger.debug(
                LogCategory.SCENE,
                f"Re-entering active scene {scene_id}; scene state kept",
            )

        self.current_triggers = list(scene.triggers)
        self.interpreter.set_triggers(self.current_triggers)

        if self.on_scene_change is not None:
            self.on_scene_change(scene_id)

        self.emit(RuntimeEvent(type=SCENE_ENTER, target=scene_id))

    def reset(self) -> None:
        """Drop the course, all state, logs and host listeners."""
        self.logger.info(LogCategory.SCENE, "Resetting runtime")
        self._event_bus.clear()
        self._install_dispatch()
        self.store.reset()
        self.course = None
        self.current_scene_id = None
        self.current_triggers = []
        self.logger.clear()

    def destroy(self) -> None:
        self.reset()
        self.logger.info(LogCategory.SCENE, "Runtime destroyed")

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def emit(self, event: RuntimeEvent | dict[str, Any]) -> None:
        """Dispatch a host event, then report the resulting state."""
        self._event_bus.emit(RuntimeEvent.coerce(event))
        if self.on_state_change is not None:
            self.on_state_change(self.store.clone())

    def on(self, event_type: str, listener: EventListener) -> Unsubscribe:
        """Observe events of one type flowing through the runtime."""
        return self._event_bus.on(event_type, listener)

    def on_all(self, listener: EventListener) -> Unsubscribe:
        """Observe every event flowing through the runtime."""
        return self._event_bus.on_all(listener)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    def get_state(self) -> dict[str, Any]:
        """Snapshot of the full runtime state (a deep copy)."""
        return self.store.clone()

    def set_state(self, state: dict[str, Any]) -> None:
        """Merge a partial state: variables key by key, node states whole."""
        for key, value in (state.get("globals") or {}).get("vars", {}).items():
            self.store.set(f"globals.vars.{key}", value)
        for key, value in (state.get("scene") or {}).get("vars", {}).items():
            self.store.set(f"scene.vars.{key}", value)
        for node_id, node_state in (state.get("nodes") or {}).items():
            self.store.set_node_state(node_id, node_state)

    def get_node_state(self, node_id: str) -> dict[str, Any]:
        return self.store.get_node_state(node_id)

    def update_node_state(self, node_id: str, updates: dict[str, Any]) -> None:
        self.store.update_node_state(node_id, updates)
        if self.on_state_change is not None:
            self.on_state_change(self.store.clone())

    def get_current_scene_id(self) -> Optional[str]:
        return self.current_scene_id

    def get_current_scene(self) -> Optional[Scene]:
        if self.course is None or self.current_scene_id is None:
            return None
        return self.course.get_scene(self.current_scene_id)

    # ------------------------------------------------------------------
    # Logs
    # ------------------------------------------------------------------

    def get_logs(self) -> list[LogEntry]:
        return self.logger.get_logs()

    def export_logs(self) -> str:
        return self.logger.export()

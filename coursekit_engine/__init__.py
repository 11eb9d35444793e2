"""Coursekit Engine - live runtime for Coursekit course documents.

The Engine interprets a loaded course: it keeps learner state, routes host
events through the scene's ECA triggers, and reports scene changes, state
changes and UI requests back to the host.

Core Components:
- CourseRuntime: Facade owning the scene lifecycle and event ingress
- Store: Three-tier state (globals, scene, nodes) addressed by dotted paths
- EventBus: Synchronous publish/subscribe dispatcher
- ReferenceResolver / ConditionEvaluator: Value and condition evaluation
- ActionExecutor: Applies actions (the only Store mutation point)
- TriggerInterpreter: Event -> condition -> action loop
- RuntimeLogger: Bounded runtime log

Usage:
    from coursekit_engine import CourseRuntime

    runtime = CourseRuntime()
    runtime.load_course(course)
    runtime.start()
    runtime.emit({"type": "click", "target": "next"})
"""

from .evaluator import ConditionEvaluator
from .event_bus import EventBus
from .executor import ActionExecutor
from .interpreter import TriggerInterpreter
from .resolver import ReferenceResolver
from .run_log import LogCategory, LogEntry, LogLevel, RuntimeLogger
from .runtime import CourseRuntime, RuntimePhase
from .store import Store

__version__ = "0.1.0"

__all__ = [
    "CourseRuntime",
    "RuntimePhase",
    "Store",
    "EventBus",
    "ReferenceResolver",
    "ConditionEvaluator",
    "ActionExecutor",
    "TriggerInterpreter",
    "RuntimeLogger",
    "LogEntry",
    "LogLevel",
    "LogCategory",
]

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Dict, List, Optional, TypeAlias

from coursekit_core.events import RuntimeEvent
from coursekit_core.utils.logging import get_logger, log_error
from coursekit_engine.run_log import LogCategory, RuntimeLogger

EventListener: TypeAlias = Callable[[RuntimeEvent], None]
Unsubscribe: TypeAlias = Callable[[], None]


class EventBus:
    """Synchronous publish/subscribe hub for runtime events.

    ``emit`` calls the listeners registered for the event's type in
    registration order, then the wildcard listeners in registration order.
    Listeners may emit in turn; the nested emit completes before the outer
    dispatch resumes.
    """

    def __init__(self, diagnostics: Optional[RuntimeLogger] = None) -> None:
        self._listeners: Dict[str, List[EventListener]] = defaultdict(list)
        self._all_listeners: List[EventListener] = []
        self._diagnostics = diagnostics
        self._logger = get_logger("engine.event_bus")

    def on(self, event_type: str, listener: EventListener) -> Unsubscribe:
        """Register ``listener`` for ``event_type``; returns an unsubscribe callable."""
        if listener not in self._listeners[event_type]:
            self._listeners[event_type].append(listener)
        return lambda: self.off(event_type, listener)

    def on_all(self, listener: EventListener) -> Unsubscribe:
        """Register ``listener`` for every event; returns an unsubscribe callable."""
        if listener not in self._all_listeners:
            self._all_listeners.append(listener)
        return lambda: self.off_all(listener)

    def off(self, event_type: str, listener: EventListener) -> None:
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)
            if not listeners:
                del self._listeners[event_type]

    def off_all(self, listener: EventListener) -> None:
        if listener in self._all_listeners:
            self._all_listeners.remove(listener)

    def emit(self, event: RuntimeEvent) -> None:
        """Dispatch ``event`` to its type listeners, then to wildcard listeners."""
        for listener in list(self._listeners.get(event.type, [])):
            self._safe_dispatch(event, listener, wildcard=False)
        for listener in list(self._all_listeners):
            self._safe_dispatch(event, listener, wildcard=True)

    def _safe_dispatch(self, event: RuntimeEvent, listener: EventListener, wildcard: bool) -> None:
        """Dispatch wrapper to keep one listener failure from stopping the bus."""
        try:
            listener(event)
        except Exception as exc:
            listener_name = getattr(listener, "__name__", str(listener))
            scope = "global event listener" if wildcard else f"event listener for '{event.type}'"
            if self._diagnostics is not None:
                self._diagnostics.error(
                    LogCategory.EVENT,
                    f"Error in {scope} '{listener_name}': {type(exc).__name__}: {exc}",
                    {"type": event.type, "target": event.target},
                )
            else:
                log_error(self._logger, f"{scope} '{listener_name}'", exc, {"type": event.type, "target": event.target})

    def clear(self) -> None:
        """Remove all subscriptions."""
        self._listeners.clear()
        self._all_listeners.clear()

    def listener_count(self, event_type: Optional[str] = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return len(self._all_listeners) + sum(len(group) for group in self._listeners.values())

"""Runtime event models for Coursekit.

``RuntimeEvent`` is what hosts hand to ``Runtime.emit`` and what bus
listeners receive. ``UIAction`` is what the runtime hands back to the
presentation layer for toasts and modals.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# Synthetic event emitted by the runtime after every scene change.
SCENE_ENTER = "sceneEnter"


def now_ms() -> int:
    """Wall-clock time in milliseconds."""
    return int(time.time() * 1000)


class RuntimeEvent(BaseModel):
    """Immutable event flowing through the bus.

    Attributes:
        type: Event type, e.g. ``click``, ``submit``, ``sceneEnter``
        target: Node or scene id the event concerns (optional)
        payload: Free-form event data (optional)
        ts: Wall-clock timestamp in milliseconds
    """

    type: str = Field(description="Event type")
    target: Optional[str] = Field(default=None, description="Target node or scene id")
    payload: Optional[dict[str, Any]] = Field(default=None, description="Event payload")
    ts: int = Field(default_factory=now_ms, description="Wall-clock milliseconds")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.target:
            return f"Event({self.type} -> {self.target})"
        return f"Event({self.type})"

    @classmethod
    def coerce(cls, event: "RuntimeEvent | dict[str, Any]") -> "RuntimeEvent":
        """Accept either a model or a plain ``{type, target?, payload?, ts?}`` dict."""
        if isinstance(event, cls):
            return event
        return cls.model_validate(event)


class UIActionKind(str, Enum):
    TOAST = "toast"
    MODAL = "modal"


class UIAction(BaseModel):
    """Presentation request forwarded to the host's ``on_ui_action`` callback.

    ``text`` is already interpolated. ``options`` carries the remaining
    action parameters (title, duration, variant...) untouched.
    """

    kind: UIActionKind
    text: str
    options: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

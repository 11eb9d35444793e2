"""Store - three-tier state container for a running course.

State layout::

    {
        "globals": {"vars": {...}},   # whole session
        "scene":   {"vars": {...}},   # cleared on every scene change
        "nodes":   {nodeId: {...}},   # cleared on every scene change
    }

Values are addressed by dotted paths: ``globals.vars.score``,
``scene.vars.temp``, ``nodes.q1.selected``. ``<nodeId>.state.<key>`` is an
alias for ``nodes.<nodeId>.<key>``. Any other root is stored as given.

Each Runtime owns one Store; there is no module-level state. Access is
single-threaded.
"""

from __future__ import annotations

import copy
from typing import Any, Optional

STATE_ROOTS = ("globals", "scene", "nodes")
NODE_STATE_SEGMENT = "state"


def empty_state() -> dict[str, Any]:
    return {
        "globals": {"vars": {}},
        "scene": {"vars": {}},
        "nodes": {},
    }


def split_path(path: str) -> list[str]:
    """Split a dotted path, mapping ``<node>.state.*`` onto ``nodes.<node>.*``."""
    parts = path.split(".")
    if (
        len(parts) >= 2
        and parts[0] not in STATE_ROOTS
        and parts[1] == NODE_STATE_SEGMENT
    ):
        return ["nodes", parts[0], *parts[2:]]
    return parts


class Store:
    """Hierarchical key-value state addressed by dotted paths."""

    def __init__(self, initial_state: Optional[dict[str, Any]] = None):
        self._state = empty_state()
        if initial_state:
            self._state.update(copy.deepcopy(initial_state))

    # ------------------------------------------------------------------
    # Path access
    # ------------------------------------------------------------------

    def get(self, path: str) -> Any:
        """Value at ``path``, or None when any segment is missing."""
        current: Any = self._state
        for part in split_path(path):
            if isinstance(current, dict):
                current = current.get(part)
            elif isinstance(current, list) and part.isdigit():
                index = int(part)
                current = current[index] if index < len(current) else None
            else:
                return None
            if current is None:
                return None
        return current

    def set(self, path: str, value: Any) -> None:
        """Write ``value`` at ``path``, creating intermediate dicts.

        An intermediate segment holding a non-dict value is replaced by a dict.
        """
        parts = split_path(path)
        last = parts.pop()
        current = self._state
        for part in parts:
            child = current.get(part)
            if not isinstance(child, dict):
                child = {}
                current[part] = child
            current = child
        current[last] = value

    # ------------------------------------------------------------------
    # Tier accessors
    # ------------------------------------------------------------------

    def get_all(self) -> dict[str, Any]:
        """The live state tree (not a copy)."""
        return self._state

    def get_global_vars(self) -> dict[str, Any]:
        return self._state["globals"]["vars"]

    def get_scene_vars(self) -> dict[str, Any]:
        return self._state["scene"]["vars"]

    def get_node_state(self, node_id: str) -> dict[str, Any]:
        """Copy of the state of ``node_id``; an empty dict when the node has none.

        Changes go through ``set_node_state``/``update_node_state``.
        """
        return copy.deepcopy(self._state["nodes"].get(node_id) or {})

    def set_node_state(self, node_id: str, state: dict[str, Any]) -> None:
        self._state["nodes"][node_id] = state

    def update_node_state(self, node_id: str, updates: dict[str, Any]) -> None:
        """Shallow-merge ``updates`` into the node's state, creating it if needed."""
        nodes = self._state["nodes"]
        if not isinstance(nodes.get(node_id), dict):
            nodes[node_id] = {}
        nodes[node_id].update(updates)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset_scene_state(self) -> None:
        """Clear scene variables and node state; globals are kept."""
        self._state["scene"] = {"vars": {}}
        self._state["nodes"] = {}

    def reset(self) -> None:
        self._state = empty_state()

    def clone(self) -> dict[str, Any]:
        """Deep copy of the full state, for snapshots."""
        return copy.deepcopy(self._state)

    def restore(self, snapshot: dict[str, Any]) -> None:
        """Replace the state with a deep copy of ``snapshot``.

        Missing tiers in a partial snapshot start out empty.
        """
        state = empty_state()
        state.update(copy.deepcopy(snapshot))
        self._state = state

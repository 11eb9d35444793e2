"""Reference resolution and text interpolation.

A value in a course document is either a literal or a reference of the
shape ``{"ref": "globals.vars.score"}``. Strings may also embed
``{{ path }}`` placeholders that are replaced with values from the Store.
"""

from __future__ import annotations

import copy
import json
import math
import re
from typing import Any, Optional

from coursekit_engine.run_log import LogCategory, RuntimeLogger
from coursekit_engine.store import Store

REF_KEY = "ref"
PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def stringify(value: Any) -> str:
    """Text form of a resolved value as it appears in interpolated strings."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


class ReferenceResolver:
    """Resolves ``{"ref": path}`` values and ``{{path}}`` placeholders against a Store."""

    def __init__(
        self,
        store: Store,
        diagnostics: Optional[RuntimeLogger] = None,
        max_depth: int = 64,
    ):
        self.store = store
        self.diagnostics = diagnostics if diagnostics is not None else RuntimeLogger()
        self.max_depth = max_depth

    @staticmethod
    def is_ref(value: Any) -> bool:
        return isinstance(value, dict) and REF_KEY in value

    def resolve(self, value: Any) -> Any:
        """Literal values pass through; references yield the Store value or None."""
        if self.is_ref(value):
            path = value[REF_KEY]
            if not isinstance(path, str):
                self.diagnostics.warn(
                    LogCategory.STATE,
                    "Reference path must be a string",
                    {"ref": path},
                )
                return None
            return self.store.get(path)
        return value

    def interpolate(self, template: Any) -> Any:
        """Replace each ``{{ path }}`` with its resolved value.

        Placeholders whose path resolves to None are left verbatim.
        Non-string input is returned unchanged.
        """
        if not isinstance(template, str):
            return template

        def _replace(match: re.Match) -> str:
            value = self.store.get(match.group(1).strip())
            return match.group(0) if value is None else stringify(value)

        return PLACEHOLDER_PATTERN.sub(_replace, template)

    def resolve_object(self, obj: Any) -> Any:
        """Deep-resolve references and placeholders inside ``obj``.

        Returns a new structure; ``obj`` itself is never mutated.
        """
        return self._resolve_node(obj, 0)

    def _resolve_node(self, node: Any, depth: int) -> Any:
        if depth > self.max_depth:
            self.diagnostics.warn(
                LogCategory.STATE,
                f"resolve_object nesting exceeds {self.max_depth} levels; branch left unresolved",
            )
            return copy.deepcopy(node)

        if self.is_ref(node):
            return copy.deepcopy(self.resolve(node))
        if isinstance(node, str):
            return self.interpolate(node)
        if isinstance(node, dict):
            return {key: self._resolve_node(value, depth + 1) for key, value in node.items()}
        if isinstance(node, (list, tuple)):
            return [self._resolve_node(item, depth + 1) for item in node]
        return node

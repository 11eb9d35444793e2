"""Exceptions raised by Coursekit.

Only programmer errors are raised: navigating without a loaded course,
navigating to an undeclared scene, or handing the loader an unreadable
file. Data faults inside a running course degrade to logged diagnostics.
"""

from __future__ import annotations


# ============================================================================
# Exceptions
# ============================================================================


class CoursekitError(Exception):
    """Base exception for Coursekit errors."""


class CourseNotLoadedError(CoursekitError, RuntimeError):
    """A runtime operation needs a course but none is loaded."""

    def __init__(self, message: str = "No course loaded. Call load_course() first."):
        super().__init__(message)


class SceneNotFoundError(CoursekitError, LookupError):
    """The requested scene id is not declared by the loaded course."""

    def __init__(self, scene_id: str):
        super().__init__(f"Scene not found: {scene_id}")
        self.scene_id = scene_id


class CourseLoadError(CoursekitError, ValueError):
    """A course file could not be read or parsed."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path

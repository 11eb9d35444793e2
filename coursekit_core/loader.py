"""
Course Loader for Coursekit.

Reads course documents from JSON or YAML files into ``Course`` models.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from coursekit_core.document import Course
from coursekit_core.errors import CourseLoadError
from coursekit_core.utils.logging import get_logger, log_operation

logger = get_logger("core.loader")

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml")

_BOOL_TAG = "tag:yaml.org,2002:bool"


class CourseYamlLoader(yaml.SafeLoader):
    """Safe loader that only reads ``true``/``false`` as booleans.

    YAML 1.1 also resolves ``on``/``off``/``yes``/``no``, which would turn the
    unquoted trigger key ``on:`` into ``True``.
    """


CourseYamlLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
CourseYamlLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def parse_course(data: dict[str, Any]) -> Course:
    """Build a ``Course`` from an already-decoded mapping.

    Raises:
        CourseLoadError: If the mapping does not have the document shape
    """
    try:
        return Course.model_validate(data)
    except ValidationError as exc:
        raise CourseLoadError(f"Invalid course document: {exc}") from exc


def load_course(path: str | Path) -> Course:
    """Read a course file.

    Args:
        path: ``.json``, ``.yaml`` or ``.yml`` file

    Returns:
        Parsed course

    Raises:
        CourseLoadError: Missing file, unsupported suffix or unparsable content
    """
    path = Path(path)
    if not path.exists():
        raise CourseLoadError(f"Course file not found: {path}", path=str(path))

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise CourseLoadError(
            f"Unsupported course format '{suffix}' (expected one of {', '.join(SUPPORTED_SUFFIXES)})",
            path=str(path),
        )

    text = path.read_text(encoding="utf-8")
    try:
        if suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.load(text, Loader=CourseYamlLoader)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CourseLoadError(f"Could not parse {path.name}: {exc}", path=str(path)) from exc

    if not isinstance(data, dict):
        raise CourseLoadError(f"Course root must be a mapping: {path}", path=str(path))

    course = parse_course(data)
    log_operation(logger, "Loaded course", {"id": course.meta.id, "version": course.meta.version, "path": path})
    return course

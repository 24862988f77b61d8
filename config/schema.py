"""drf-spectacular post-processing for the SynergySphere API schema.

Only the versioned ``/api/v1/`` routes are documented; the unversioned
``/api/`` mirror kept for the original frontend is dropped from the schema.
Every operation is tagged by the first path segment after the version prefix.
"""

from __future__ import annotations

from typing import Any

VERSION_PREFIX = "/api/v1/"

SEGMENT_TAGS = {
    "auth": "Authentication",
    "users": "Users",
    "projects": "Projects",
    "tasks": "Tasks",
    "health": "Meta",
    "schema": "Meta",
}

OPERATION_KEYS = frozenset({"get", "post", "put", "patch", "delete", "options", "head"})


def tag_for_path(path: str) -> str | None:
    if not path.startswith(VERSION_PREFIX):
        return None
    segment = path[len(VERSION_PREFIX) :].split("/", 1)[0]
    return SEGMENT_TAGS.get(segment)


def group_tags(result: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
    paths: dict[str, Any] = result.get("paths", {})
    for path in [p for p in paths if p.startswith("/api/") and not p.startswith(VERSION_PREFIX)]:
        del paths[path]

    used: list[str] = []
    for path, path_item in paths.items():
        tag = tag_for_path(path)
        if tag is None:
            continue
        for key, operation in path_item.items():
            if key in OPERATION_KEYS and isinstance(operation, dict):
                operation["tags"] = [tag]
        if tag not in used:
            used.append(tag)

    declared = result.setdefault("tags", [])
    known = {entry.get("name") for entry in declared}
    declared.extend({"name": tag} for tag in used if tag not in known)
    return result

"""Typed envelopes for the four relayed event kinds.

Every event carries the full REST representation of the mutated record; the
identifying fields needed for routing are checked up front so malformed data
is never broadcast.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from synergysphere.realtime.exceptions import InvalidEventError
from synergysphere.realtime.exceptions import InvalidRoomKeyError
from synergysphere.realtime.rooms import room_for_project
from synergysphere.realtime.rooms import room_for_user


class EventKind(str, enum.Enum):
    PROJECT_CREATED = "project-created"
    PROJECT_UPDATED = "project-updated"
    TASK_CREATED = "task-created"
    TASK_UPDATED = "task-updated"

    @property
    def collection(self) -> str:
        """REST collection a client refetches when it sees this event."""
        if self in (EventKind.PROJECT_CREATED, EventKind.PROJECT_UPDATED):
            return "projects"
        return "tasks"

    @classmethod
    def parse(cls, value: object) -> EventKind:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"unknown event kind: {value!r}"
            raise InvalidEventError(msg) from exc


def _rooms_for(kind: EventKind, payload: dict[str, Any]) -> tuple[str, ...]:
    if kind is EventKind.PROJECT_CREATED:
        return (room_for_user(_required(payload, "ownerId")),)
    if kind is EventKind.PROJECT_UPDATED:
        return (room_for_project(_required(payload, "id")),)

    rooms = [room_for_project(_required(payload, "projectId"))]
    if "assigneeId" not in payload:
        msg = "task event payload is missing 'assigneeId'"
        raise InvalidEventError(msg)
    # Unassigned tasks only reach the project room.
    if payload["assigneeId"] is not None:
        rooms.append(room_for_user(payload["assigneeId"]))
    return tuple(rooms)


def _required(payload: dict[str, Any], key: str) -> Any:
    value = payload.get(key)
    if value is None:
        msg = f"event payload is missing {key!r}"
        raise InvalidEventError(msg)
    return value


@dataclass(frozen=True)
class RealtimeEvent:
    kind: EventKind
    payload: dict[str, Any]
    target_rooms: tuple[str, ...] = field(default=())

    @classmethod
    def build(cls, kind: object, payload: object) -> RealtimeEvent:
        """Validate ``kind``/``payload`` and resolve the target rooms.

        Raises:
            InvalidEventError: unknown kind, non-object payload, or missing or
                malformed identifying fields.
        """

        event_kind = EventKind.parse(kind)
        if not isinstance(payload, dict):
            msg = f"{event_kind.value} payload must be an object"
            raise InvalidEventError(msg)
        try:
            rooms = _rooms_for(event_kind, payload)
        except InvalidRoomKeyError as exc:
            msg = f"{event_kind.value} payload has a malformed identifier: {exc}"
            raise InvalidEventError(msg) from exc
        return cls(kind=event_kind, payload=payload, target_rooms=rooms)

    @property
    def title(self) -> str:
        value = self.payload.get("title")
        return value if isinstance(value, str) else ""

"""Room membership for the Socket.IO relay.

Rooms are named ``user-<id>`` (one person across all their projects) or
``project-<id>`` (everyone viewing a project). A room exists only through its
members: it appears on first join and is dropped when its last member leaves.

The registry is plain in-memory state owned by one ``RealtimeServer``. Every
operation runs to completion without awaiting, so on the single-threaded event
loop they are atomic with respect to each other.
"""

from __future__ import annotations

import re
from collections import defaultdict

from synergysphere.realtime.exceptions import InvalidRoomKeyError

USER_ROOM_PREFIX = "user"
PROJECT_ROOM_PREFIX = "project"

_ROOM_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
_ROOM_KEY_RE = re.compile(
    rf"^(?:{USER_ROOM_PREFIX}|{PROJECT_ROOM_PREFIX})-[A-Za-z0-9_-]{{1,64}}$"
)


def normalize_room_id(value: object) -> str:
    """Return the textual id used inside a room key.

    Accepts ints and short identifier strings; rejects everything else
    (``None``, booleans, floats, containers, blank or oversized strings).
    """

    if isinstance(value, bool) or not isinstance(value, (int, str)):
        msg = f"invalid room id: {value!r}"
        raise InvalidRoomKeyError(msg)
    text = str(value).strip()
    if not _ROOM_ID_RE.match(text):
        msg = f"invalid room id: {value!r}"
        raise InvalidRoomKeyError(msg)
    return text


def room_for_user(user_id: object) -> str:
    return f"{USER_ROOM_PREFIX}-{normalize_room_id(user_id)}"


def room_for_project(project_id: object) -> str:
    return f"{PROJECT_ROOM_PREFIX}-{normalize_room_id(project_id)}"


def is_user_room(room: str) -> bool:
    return room.startswith(f"{USER_ROOM_PREFIX}-")


def validate_room_key(room: object) -> str:
    if not isinstance(room, str) or not _ROOM_KEY_RE.match(room):
        msg = f"malformed room key: {room!r}"
        raise InvalidRoomKeyError(msg)
    return room


class RoomRegistry:
    """Maps room key -> member connections, and connection -> room keys."""

    def __init__(self) -> None:
        self._members: defaultdict[str, set[str]] = defaultdict(set)
        self._rooms: defaultdict[str, set[str]] = defaultdict(set)

    def join(self, connection: str, room: str) -> None:
        """Add ``connection`` to ``room``. Joining twice is the same as once."""

        validate_room_key(room)
        self._members[room].add(connection)
        self._rooms[connection].add(room)

    def leave(self, connection: str, room: str) -> None:
        """Remove ``connection`` from ``room``; a no-op for non-members."""

        validate_room_key(room)
        members = self._members.get(room)
        if members is not None:
            members.discard(connection)
            if not members:
                del self._members[room]
        rooms = self._rooms.get(connection)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                del self._rooms[connection]

    def on_disconnect(self, connection: str) -> frozenset[str]:
        """Drop ``connection`` from every room and return the rooms it left."""

        rooms = self._rooms.pop(connection, set())
        for room in rooms:
            members = self._members.get(room)
            if members is None:
                continue
            members.discard(connection)
            if not members:
                del self._members[room]
        return frozenset(rooms)

    def members_of(self, room: str) -> frozenset[str]:
        """Snapshot of the current members; empty for unknown rooms."""

        return frozenset(self._members.get(room, ()))

    def rooms_of(self, connection: str) -> frozenset[str]:
        return frozenset(self._rooms.get(connection, ()))

    def is_member(self, connection: str, room: str) -> bool:
        return connection in self._members.get(room, ())

    @property
    def connection_count(self) -> int:
        """Connections that belong to at least one room."""
        return len(self._rooms)

    @property
    def room_count(self) -> int:
        return len(self._members)

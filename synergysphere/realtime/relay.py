"""Fan-out of realtime events to room members.

Delivery is at-most-once and best-effort: nothing is queued or persisted, an
event whose target rooms are empty is dropped, and a restart loses whatever was
in flight. Every event mirrors a change already committed to the database, so
clients recover the true state by refetching it.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from collections.abc import Callable
from typing import Any

from synergysphere.realtime.envelopes import RealtimeEvent
from synergysphere.realtime.exceptions import InvalidEventError
from synergysphere.realtime.rooms import RoomRegistry

logger = logging.getLogger(__name__)

# (connection id, event name, payload) -> delivery to that one connection
Sender = Callable[[str, str, dict[str, Any]], Awaitable[None]]


class EventRelay:
    def __init__(self, registry: RoomRegistry, send: Sender) -> None:
        self.registry = registry
        self._send = send

    def recipients(self, event: RealtimeEvent, origin: str | None = None) -> list[str]:
        """Members of every target room, each listed once, minus ``origin``."""

        seen: set[str] = set()
        out: list[str] = []
        for room in event.target_rooms:
            for sid in sorted(self.registry.members_of(room)):
                if sid == origin or sid in seen:
                    continue
                seen.add(sid)
                out.append(sid)
        return out

    async def publish(
        self,
        kind: object,
        payload: object,
        *,
        origin: str | None = None,
    ) -> int:
        """Deliver an event to its target rooms and return the delivery count.

        ``origin`` is the connection that emitted a client-originated event; it
        never receives its own event back. Invalid events are logged and
        dropped.
        """

        try:
            event = RealtimeEvent.build(kind, payload)
        except InvalidEventError as exc:
            logger.warning("Dropping realtime event from %s: %s", origin or "server", exc)
            return 0
        return await self.dispatch(event, origin=origin)

    async def dispatch(self, event: RealtimeEvent, *, origin: str | None = None) -> int:
        # Resolve recipients before the first await so membership changes made
        # by other handlers during delivery cannot affect this event.
        recipients = self.recipients(event, origin)
        if not recipients:
            logger.debug(
                "No members in %s for %s", ", ".join(event.target_rooms), event.kind.value
            )
            return 0

        delivered = 0
        for sid in recipients:
            if not self.registry.rooms_of(sid):
                # Disconnected while this fan-out was in progress.
                continue
            try:
                await self._send(sid, event.kind.value, event.payload)
            except Exception:  # noqa: BLE001 - one dead socket must not stop fan-out
                logger.exception("Failed to deliver %s to %s", event.kind.value, sid)
                continue
            delivered += 1

        logger.debug(
            "Delivered %s to %d/%d connection(s)",
            event.kind.value,
            delivered,
            len(recipients),
        )
        return delivered

    async def relay_from_client(self, sid: str, kind: object, payload: object) -> int:
        """Re-broadcast an event a client emitted itself.

        The payload is not checked against the database: any member of a room
        can broadcast arbitrary records into it.
        """

        return await self.publish(kind, payload, origin=sid)

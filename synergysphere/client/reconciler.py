"""Turns relayed events into a fresh view of the REST API.

The event payload is never merged into local state. Each event adds a
notification and triggers one refetch of the affected collection; the response
replaces the local list wholesale. When refetches overlap, whichever completes
last wins, which is correct because the server is the only source of truth.
"""

from __future__ import annotations

import logging
from typing import Any

from synergysphere.client.api import APIError
from synergysphere.client.api import SynergySphereAPI
from synergysphere.client.state import ClientState
from synergysphere.client.state import Notification
from synergysphere.realtime.envelopes import EventKind
from synergysphere.realtime.exceptions import InvalidEventError

logger = logging.getLogger(__name__)

_NOTIFICATION_TEXT: dict[EventKind, tuple[str, str, str]] = {
    EventKind.PROJECT_CREATED: ("New Project", 'New project "{title}" created!', "success"),
    EventKind.PROJECT_UPDATED: ("Project Updated", 'Project "{title}" was updated', "info"),
    EventKind.TASK_CREATED: ("New Task", 'New task "{title}" created!', "success"),
    EventKind.TASK_UPDATED: ("Task Updated", 'Task "{title}" was updated', "info"),
}


class Reconciler:
    def __init__(self, api: SynergySphereAPI, state: ClientState | None = None) -> None:
        self.api = api
        self.state = state if state is not None else ClientState()

    # Notifications --------------------------------------------------------------
    def notify(self, title: str, message: str, type_: str = "info") -> Notification:
        notification = Notification(title=title, message=message, type=type_)
        self.state.notifications.append(notification)
        return notification

    def mark_read(self, notification_id: int) -> None:
        for notification in self.state.notifications:
            if notification.id == notification_id:
                notification.read = True

    def remove_notification(self, notification_id: int) -> None:
        self.state.notifications = [
            n for n in self.state.notifications if n.id != notification_id
        ]

    # Refetching -----------------------------------------------------------------
    async def refresh_projects(self) -> bool:
        projects = await self._fetch("projects", self.api.list_projects())
        if projects is None:
            return False
        self.state.projects = projects
        return True

    async def refresh_tasks(self) -> bool:
        tasks = await self._fetch(
            "tasks", self.api.list_tasks(self.state.current_project_id)
        )
        if tasks is None:
            return False
        self.state.tasks = tasks
        return True

    async def refresh(self, collection: str) -> bool:
        if collection == "projects":
            return await self.refresh_projects()
        return await self.refresh_tasks()

    async def _fetch(self, collection: str, call) -> list[dict[str, Any]] | None:
        """Await one list call; None (after reporting) when it failed."""

        try:
            result = await call
        except APIError as exc:
            self._refetch_failed(collection, exc.message)
            return None
        if not isinstance(result, list):
            self._refetch_failed(collection, "unexpected response body")
            return None
        self.state.errors.pop(collection, None)
        return list(result)

    def _refetch_failed(self, collection: str, reason: str) -> None:
        # Local data stays at its last good value; the next event or a manual
        # refresh retries.
        logger.warning("Failed to fetch %s: %s", collection, reason)
        self.state.errors.pop(collection, None)
        self.state.errors[collection] = f"Failed to fetch {collection}"
        self.notify(
            "Refresh Failed",
            f"Failed to fetch {collection}: {reason}",
            "error",
        )

    # Events -----------------------------------------------------------------------
    async def handle_event(self, kind: Any, payload: Any) -> bool:
        """React to one relayed event: notify, then refetch its collection.

        Returns False when the event was ignored or the refetch failed.
        """

        try:
            event_kind = EventKind.parse(kind)
        except InvalidEventError:
            logger.warning("Ignoring unknown realtime event %r", kind)
            return False

        title, template, type_ = _NOTIFICATION_TEXT[event_kind]
        record_title = payload.get("title") if isinstance(payload, dict) else None
        self.notify(title, template.format(title=record_title or ""), type_)
        return await self.refresh(event_kind.collection)

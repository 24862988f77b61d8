from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from asgiref.sync import async_to_sync

from synergysphere.realtime.envelopes import EventKind
from synergysphere.realtime.socketio import get_realtime_server

if TYPE_CHECKING:  # import for type checking only
    from synergysphere.projects.models import Task


def build_task_payload(task: Task) -> dict[str, Any]:
    from synergysphere.projects.api.serializers import TaskSerializer  # noqa: PLC0415

    return dict(TaskSerializer(task).data)


def publish_task_created(task: Task) -> int:
    """Publish a new task to its project room and its assignee."""

    payload = build_task_payload(task)
    return async_to_sync(get_realtime_server().relay.publish)(
        EventKind.TASK_CREATED, payload
    )


def publish_task_updated(task: Task) -> int:
    payload = build_task_payload(task)
    return async_to_sync(get_realtime_server().relay.publish)(
        EventKind.TASK_UPDATED, payload
    )

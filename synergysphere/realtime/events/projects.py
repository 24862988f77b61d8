from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from asgiref.sync import async_to_sync

from synergysphere.realtime.envelopes import EventKind
from synergysphere.realtime.socketio import get_realtime_server

if TYPE_CHECKING:  # import for type checking only
    from synergysphere.projects.models import Project

logger = logging.getLogger(__name__)


def build_project_payload(project: Project) -> dict[str, Any]:
    from synergysphere.projects.api.serializers import ProjectSerializer  # noqa: PLC0415

    return dict(ProjectSerializer(project).data)


def _publish(kind: EventKind, project: Project) -> int:
    payload = build_project_payload(project)
    delivered = async_to_sync(get_realtime_server().relay.publish)(kind, payload)
    logger.debug("%s for project %s reached %d socket(s)", kind.value, project.pk, delivered)
    return delivered


def publish_project_created(project: Project) -> int:
    """Notify the owner's sessions (``user-<ownerId>``) about a new project."""

    return _publish(EventKind.PROJECT_CREATED, project)


def publish_project_updated(project: Project) -> int:
    """Notify everyone viewing the project (``project-<id>``)."""

    return _publish(EventKind.PROJECT_UPDATED, project)

from __future__ import annotations

import itertools
from dataclasses import dataclass
from dataclasses import field
from datetime import UTC
from datetime import datetime
from typing import Any

_notification_ids = itertools.count(1)


@dataclass
class Notification:
    title: str
    message: str
    type: str = "info"
    read: bool = False
    id: int = field(default_factory=lambda: next(_notification_ids))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class ClientState:
    """What one frontend session currently displays."""

    projects: list[dict[str, Any]] = field(default_factory=list)
    tasks: list[dict[str, Any]] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)
    current_project_id: Any = None
    # collection -> message of its last failed refetch
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def error(self) -> str | None:
        """Most recent refetch failure that has not been cleared by a success."""
        if not self.errors:
            return None
        return next(reversed(self.errors.values()))

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.read)

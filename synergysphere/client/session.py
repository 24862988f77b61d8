from __future__ import annotations

import logging
from typing import Any

import socketio

from synergysphere.client.reconciler import Reconciler
from synergysphere.realtime.envelopes import EventKind

logger = logging.getLogger(__name__)


class RealtimeSession:
    """One frontend session's socket: room handshakes plus event routing.

    Joins ``user-<id>`` on every (re)connect and keeps at most one project
    room, leaving the previous one whenever another project is viewed.
    """

    def __init__(
        self,
        url: str,
        reconciler: Reconciler,
        *,
        socketio_path: str = "ws/socket.io",
        client: socketio.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.socketio_path = socketio_path
        self.reconciler = reconciler
        self.user_id: Any = None
        self.sio = client if client is not None else socketio.AsyncClient()

        self.sio.on("connect", self._on_connect)
        self.sio.on("disconnect", self._on_disconnect)
        for kind in EventKind:
            self.sio.on(kind.value, self._event_handler(kind))

    @property
    def connected(self) -> bool:
        return bool(self.sio.connected)

    async def connect(self, user_id: Any, token: str | None = None) -> None:
        self.user_id = user_id
        auth = {"token": token} if token else None
        await self.sio.connect(
            self.url,
            auth=auth,
            transports=["websocket"],
            socketio_path=self.socketio_path,
        )

    async def disconnect(self) -> None:
        await self.sio.disconnect()

    async def _on_connect(self) -> None:
        logger.info("Realtime connected as user %s", self.user_id)
        if self.user_id is not None:
            await self.sio.emit("join-user-room", self.user_id)
        project_id = self.reconciler.state.current_project_id
        if project_id is not None:
            await self.sio.emit("join-project-room", project_id)

    async def _on_disconnect(self, *args: Any) -> None:
        logger.info("Realtime disconnected")

    def _event_handler(self, kind: EventKind):
        async def handler(payload: Any = None) -> None:
            await self.reconciler.handle_event(kind, payload)

        return handler

    async def view_project(self, project_id: Any) -> None:
        """Switch the viewed project, moving the socket to its room."""

        state = self.reconciler.state
        previous = state.current_project_id
        if previous is not None and previous != project_id:
            await self.sio.emit("leave-project-room", previous)
        state.current_project_id = project_id
        await self.sio.emit("join-project-room", project_id)
        await self.reconciler.refresh_tasks()

    async def leave_project(self) -> None:
        state = self.reconciler.state
        if state.current_project_id is None:
            return
        await self.sio.emit("leave-project-room", state.current_project_id)
        state.current_project_id = None

    async def emit_event(self, kind: Any, payload: dict[str, Any]) -> None:
        """Broadcast a client-originated event to the other room members."""

        await self.sio.emit(EventKind.parse(kind).value, payload)

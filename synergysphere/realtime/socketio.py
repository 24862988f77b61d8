"""Socket.IO server that owns the realtime relay.

Frontend convention:
- Socket.IO path: ``settings.REALTIME_SOCKETIO_PATH`` (``/ws/socket.io`` by default)
- Auth: optional ``query.token`` or ``auth.token`` (JWT access token)
- After connecting the client emits ``join-user-room`` with its user id and
  ``join-project-room`` / ``leave-project-room`` while viewing a project.

``config.asgi`` builds the process-wide instance through
``get_realtime_server()``; tests construct their own ``RealtimeServer``.
"""

from __future__ import annotations

import functools
import logging
from typing import Any
from urllib.parse import parse_qs

import socketio
from channels.db import database_sync_to_async
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError

from synergysphere.realtime.envelopes import EventKind
from synergysphere.realtime.exceptions import InvalidRoomKeyError
from synergysphere.realtime.relay import EventRelay
from synergysphere.realtime.rooms import RoomRegistry
from synergysphere.realtime.rooms import is_user_room
from synergysphere.realtime.rooms import room_for_project
from synergysphere.realtime.rooms import room_for_user
from synergysphere.realtime.sessions import SessionStore

logger = logging.getLogger(__name__)


@database_sync_to_async
def _get_user_id_from_access_token(token: str) -> int:
    jwt_auth = JWTAuthentication()
    validated = jwt_auth.get_validated_token(token)
    user = jwt_auth.get_user(validated)
    return int(user.id)


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract JWT token from Socket.IO environ/auth.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    # Allow `auth: { token }` as fallback.
    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    return None


def _ack(room: str) -> dict[str, Any]:
    return {"ok": True, "room": room}


def _nack(error: str) -> dict[str, Any]:
    return {"ok": False, "error": error}


class RealtimeServer:
    """Socket.IO server plus the room registry, sessions and relay it drives."""

    def __init__(
        self,
        *,
        registry: RoomRegistry | None = None,
        require_auth: bool | None = None,
        relay_client_events: bool | None = None,
        cors_allowed_origins: list[str] | str | None = None,
    ) -> None:
        self.registry = registry if registry is not None else RoomRegistry()
        self.sessions = SessionStore()
        self.require_auth = (
            settings.REALTIME_REQUIRE_AUTH if require_auth is None else require_auth
        )
        self.relay_client_events = (
            settings.REALTIME_RELAY_CLIENT_EVENTS
            if relay_client_events is None
            else relay_client_events
        )
        if cors_allowed_origins is None:
            cors_allowed_origins = settings.REALTIME_CORS_ALLOWED_ORIGINS
        if cors_allowed_origins == ["*"]:
            cors_allowed_origins = "*"
        self.sio = socketio.AsyncServer(
            async_mode="asgi",
            cors_allowed_origins=cors_allowed_origins,
            logger=False,
            engineio_logger=False,
        )
        self.relay = EventRelay(self.registry, self._send)

        self.sio.on("connect", self.connect)
        self.sio.on("disconnect", self.disconnect)
        self.sio.on("join-user-room", self.join_user_room)
        self.sio.on("join-project-room", self.join_project_room)
        self.sio.on("leave-project-room", self.leave_project_room)
        for kind in EventKind:
            self.sio.on(kind.value, self._client_event_handler(kind))

    def asgi_app(self, other_asgi_app=None, socketio_path: str | None = None):
        return socketio.ASGIApp(
            self.sio,
            other_asgi_app=other_asgi_app,
            socketio_path=socketio_path or settings.REALTIME_SOCKETIO_PATH,
        )

    async def _send(self, sid: str, event: str, payload: dict[str, Any]) -> None:
        await self.sio.emit(event, payload, to=sid)

    # Connection lifecycle -----------------------------------------------------
    async def connect(self, sid: str, environ: dict[str, Any], auth: Any | None = None):
        token = _extract_token(environ, auth)
        if not token:
            if self.require_auth:
                msg = "unauthorized"
                raise ConnectionRefusedError(msg)
            self.sessions.open(sid)
            logger.debug("Anonymous socket connected: %s", sid)
            return

        try:
            user_id = await _get_user_id_from_access_token(token)
        except TokenError as exc:
            message = str(exc)
            # Frontend expects this exact string to trigger refresh.
            if "expired" in message.lower():
                msg = "jwt_expired"
                raise ConnectionRefusedError(msg) from exc
            msg = "unauthorized"
            raise ConnectionRefusedError(msg) from exc
        except AuthenticationFailed as exc:  # user not found / inactive, etc.
            msg = "unauthorized"
            raise ConnectionRefusedError(msg) from exc
        except Exception as exc:
            logger.exception("Socket.IO connect error")
            msg = "server_error"
            raise ConnectionRefusedError(msg) from exc

        room = room_for_user(user_id)
        self.sessions.identify(sid, str(user_id), authenticated=True)
        self.registry.join(sid, room)
        logger.info("Socket %s connected as user %s", sid, user_id)

    async def disconnect(self, sid: str, reason: Any = None) -> None:
        rooms = self.registry.on_disconnect(sid)
        self.sessions.close(sid)
        logger.debug("Socket %s disconnected (%s), left %d room(s)", sid, reason, len(rooms))

    # Room handshakes ------------------------------------------------------------
    async def join_user_room(self, sid: str, user_id: Any = None) -> dict[str, Any]:
        """Subscribe the connection to ``user-<user_id>``.

        The id is taken on trust; a connection holds at most one user room, so
        any previous one is left first.
        """

        session = self.sessions.get(sid)
        if session is None:
            logger.info("join-user-room from closed socket %s ignored", sid)
            return _nack("not_connected")
        try:
            room = room_for_user(user_id)
        except InvalidRoomKeyError as exc:
            logger.warning("join-user-room from %s ignored: %s", sid, exc)
            return _nack("invalid_room")

        for previous in self.registry.rooms_of(sid):
            if is_user_room(previous) and previous != room:
                self.registry.leave(sid, previous)
        user_key = room.split("-", 1)[1]
        verified = session.authenticated and session.user_id == user_key
        self.sessions.identify(sid, user_key, authenticated=verified)
        self.registry.join(sid, room)
        logger.info("Socket %s joined %s", sid, room)
        return _ack(room)

    async def join_project_room(self, sid: str, project_id: Any = None) -> dict[str, Any]:
        # Handlers run as background tasks; a join can arrive after disconnect.
        if self.sessions.get(sid) is None:
            logger.info("join-project-room from closed socket %s ignored", sid)
            return _nack("not_connected")
        try:
            room = room_for_project(project_id)
        except InvalidRoomKeyError as exc:
            logger.warning("join-project-room from %s ignored: %s", sid, exc)
            return _nack("invalid_room")
        self.registry.join(sid, room)
        logger.debug("Socket %s joined %s", sid, room)
        return _ack(room)

    async def leave_project_room(self, sid: str, project_id: Any = None) -> dict[str, Any]:
        try:
            room = room_for_project(project_id)
        except InvalidRoomKeyError as exc:
            logger.warning("leave-project-room from %s ignored: %s", sid, exc)
            return _nack("invalid_room")
        self.registry.leave(sid, room)
        logger.debug("Socket %s left %s", sid, room)
        return _ack(room)

    # Client-originated events ---------------------------------------------------
    def _client_event_handler(self, kind: EventKind):
        async def handler(sid: str, data: Any = None) -> None:
            await self.client_event(kind, sid, data)

        return handler

    async def client_event(self, kind: EventKind, sid: str, data: Any = None) -> None:
        if not self.relay_client_events:
            logger.info("Client-originated %s from %s dropped", kind.value, sid)
            return
        await self.relay.relay_from_client(sid, kind, data)

    def stats(self) -> dict[str, int]:
        return {
            "connections": len(self.sessions),
            "rooms": self.registry.room_count,
        }


@functools.cache
def get_realtime_server() -> RealtimeServer:
    """The process-wide server composed by ``config.asgi``."""

    return RealtimeServer()

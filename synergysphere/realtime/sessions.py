from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ConnectionSession:
    user_id: str | None = None
    # True when the identity came from a verified JWT rather than the
    # client-supplied ``join-user-room`` handshake.
    authenticated: bool = False


class SessionStore:
    """Per-connection identity, kept for the lifetime of the socket."""

    def __init__(self) -> None:
        self._sessions: dict[str, ConnectionSession] = {}

    def open(self, sid: str) -> ConnectionSession:
        return self._sessions.setdefault(sid, ConnectionSession())

    def get(self, sid: str) -> ConnectionSession | None:
        return self._sessions.get(sid)

    def identify(self, sid: str, user_id: str, *, authenticated: bool = False) -> None:
        session = self.open(sid)
        session.user_id = user_id
        session.authenticated = authenticated

    def close(self, sid: str) -> ConnectionSession | None:
        return self._sessions.pop(sid, None)

    def __len__(self) -> int:
        return len(self._sessions)

"""Python client for SynergySphere: REST calls plus realtime reconciliation."""

from synergysphere.client.api import APIError
from synergysphere.client.api import SynergySphereAPI
from synergysphere.client.reconciler import Reconciler
from synergysphere.client.session import RealtimeSession
from synergysphere.client.state import ClientState
from synergysphere.client.state import Notification

__all__ = [
    "APIError",
    "ClientState",
    "Notification",
    "RealtimeSession",
    "Reconciler",
    "SynergySphereAPI",
]

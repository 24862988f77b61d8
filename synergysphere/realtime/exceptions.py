class RealtimeError(Exception):
    """Base class for faults handled inside the realtime layer."""


class InvalidRoomKeyError(RealtimeError, ValueError):
    """Raised for room keys or room ids that do not match ``user-<id>``/``project-<id>``."""


class InvalidEventError(RealtimeError, ValueError):
    """Raised when an event kind is unknown or its payload lacks routing fields."""

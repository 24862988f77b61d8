"""Liveness endpoint: one probe per dependency the API needs to be useful."""

from __future__ import annotations

import logging
from typing import Any

from django.db import connection
from django.db import transaction
from django.http import JsonResponse

from synergysphere.realtime.socketio import get_realtime_server

logger = logging.getLogger(__name__)


def check_db() -> dict[str, Any]:
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1;")
        cursor.fetchone()
    return {}


def check_realtime() -> dict[str, Any]:
    # Connections and non-empty rooms held by this process.
    return get_realtime_server().stats()


CHECKS = {
    "db": check_db,
    "realtime": check_realtime,
}


def _probe(name: str) -> dict[str, Any]:
    try:
        details = CHECKS[name]()
    except Exception as exc:  # noqa: BLE001 - a failing probe degrades the report
        logger.warning("Health check %s failed: %s", name, exc)
        return {"ok": False, "error": str(exc)}
    return {"ok": True, **details}


# Outside ATOMIC_REQUESTS: opening the transaction would fail before the db
# probe runs.
@transaction.non_atomic_requests
def health(request):
    components = {name: _probe(name) for name in CHECKS}
    healthy = [c["ok"] for c in components.values()]

    if all(healthy):
        status = "ok"
    elif any(healthy):
        status = "degraded"
    else:
        status = "down"

    return JsonResponse(
        {"status": status, "components": components},
        status=200 if status == "ok" else 503,
    )

"""
ASGI config for the SynergySphere project.

It exposes the ASGI callable as a module-level variable named ``application``.
This is the composition point of the process: the Django app and the realtime
server (room registry + event relay) are built here exactly once.

For more information on this file, see
https://docs.djangoproject.com/en/dev/howto/deployment/asgi/

"""

import os
import sys
from pathlib import Path

from django.core.asgi import get_asgi_application

# This allows easy placement of apps within the interior
# synergysphere directory.
BASE_DIR = Path(__file__).resolve(strict=True).parent.parent
sys.path.append(str(BASE_DIR / "synergysphere"))

# If DJANGO_SETTINGS_MODULE is unset, select a sensible default based on BUILD_ENV
# Default to local settings for the local dev image, production otherwise.
if "DJANGO_SETTINGS_MODULE" not in os.environ:
    build_env = os.environ.get("BUILD_ENV", "production").lower()
    default_settings = (
        "config.settings.local"
        if build_env == "local"
        else "config.settings.production"
    )
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", default_settings)

django_application = get_asgi_application()

from synergysphere.realtime.socketio import get_realtime_server  # noqa: E402

# Socket.IO sits in front of Django because it uses BOTH:
# - HTTP long-polling (Engine.IO)
# - WebSocket upgrades
# Everything outside REALTIME_SOCKETIO_PATH falls through to Django.
application = get_realtime_server().asgi_app(other_asgi_app=django_application)

#!/usr/bin/env python
import os
import sys
from pathlib import Path

if __name__ == "__main__":
    if "DJANGO_SETTINGS_MODULE" not in os.environ:
        build_env = os.environ.get("BUILD_ENV", "local").lower()
        os.environ.setdefault(
            "DJANGO_SETTINGS_MODULE",
            "config.settings.local"
            if build_env == "local"
            else "config.settings.production",
        )

    from django.core.management import execute_from_command_line

    # This allows easy placement of apps within the interior
    # synergysphere directory.
    current_path = Path(__file__).parent.resolve()
    sys.path.append(str(current_path / "synergysphere"))

    execute_from_command_line(sys.argv)

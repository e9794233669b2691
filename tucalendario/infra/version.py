from __future__ import annotations

import os
from importlib import metadata

DISTRIBUTION_NAME = "tucalendario-bot"


def resolve_app_version() -> str:
    for key in ("APP_VERSION", "RENDER_GIT_COMMIT", "GIT_SHA"):
        value = os.getenv(key)
        if value and value.strip():
            return value.strip()
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"

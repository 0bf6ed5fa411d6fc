# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS
- SQLite from base.py unless DATABASE_URL is set
- Settlement and ledger writes logged at DEBUG (override with DEV_LOG_LEVEL)
- Browsable API on top of JSON
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, REST_FRAMEWORK, env

DEBUG = True

CORS_ALLOW_CREDENTIALS = True

# -----------------------------------------
# LOGGING
# -----------------------------------------
DEV_LOG_LEVEL = (env("DEV_LOG_LEVEL", default="DEBUG") or "DEBUG").strip().upper()

LOGGING = {
    **LOGGING,
    "loggers": {
        name: {**cfg, "level": DEV_LOG_LEVEL} if name in ("billing", "ledger") else cfg
        for name, cfg in LOGGING["loggers"].items()
    },
}

# -----------------------------------------
# DRF
# -----------------------------------------
REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_RENDERER_CLASSES": (
        "rest_framework.renderers.JSONRenderer",
        "rest_framework.renderers.BrowsableAPIRenderer",
    ),
}

# backend/settings/dev.py
"""
LOCAL DEVELOPMENT SETTINGS

SQLite by default, Vite dev server allowed through CORS, browsable API on.
Test runs use these settings as well.
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import REST_FRAMEWORK, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1", "testserver"])

_local_origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=_local_origins)
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=_local_origins)
CORS_ALLOW_CREDENTIALS = True

REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"] = (
    "rest_framework.renderers.JSONRenderer",
    "rest_framework.renderers.BrowsableAPIRenderer",
)

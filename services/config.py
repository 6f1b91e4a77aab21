"""
Environment settings for the portal.

Defaults live here; any of them can be overridden with an environment variable
so the app and tests can run against a different data directory.
"""
from __future__ import annotations

import os
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

_DEFAULTS = {
    "data_dir": "data",
    "env": "development",
    "log_level": "INFO",
    "sentry_dsn": "",
}

_ENV_VARS = {
    "data_dir": "AGENCY_DATA_DIR",
    "env": "AGENCY_ENV",
    "log_level": "AGENCY_LOG_LEVEL",
    "sentry_dsn": "AGENCY_SENTRY_DSN",
}


def _resolve_path(value: str) -> Path:
    p = Path(value)
    if not p.is_absolute():
        p = ROOT / value
    return p


def get_config() -> dict:
    cfg = _DEFAULTS.copy()
    for key, env_key in _ENV_VARS.items():
        val = os.environ.get(env_key)
        if val is not None and val != "":
            cfg[key] = val
    return cfg


def data_dir() -> Path:
    return _resolve_path(get_config()["data_dir"])

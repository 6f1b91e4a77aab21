"""Error tracking and logging for the portal.

- Logging configured once for the whole app (named logger ``agency``)
- Optional Sentry error tracking (with log breadcrumbs), enabled when a DSN is configured
- ``timed`` decorator that logs slow operations

Usage:
    from services.monitoring import get_logger, init_monitoring, timed

    init_monitoring()          # app entry point
    logger = get_logger(__name__)
"""
from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from .config import get_config

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger('agency')

_sentry_initialized = False


def get_logger(name: str) -> logging.Logger:
    """Child of the ``agency`` logger, e.g. ``agency.services.calibration``."""
    return logger.getChild(name)


def init_monitoring() -> bool:
    """Apply the configured log level and start Sentry when a DSN is set.

    Returns True if Sentry is active.
    """
    global _sentry_initialized
    cfg = get_config()
    level = str(cfg["log_level"]).upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning(f"Unknown log level {cfg['log_level']!r}, using INFO")
        level = "INFO"
    logger.setLevel(level)

    if _sentry_initialized:
        return True
    dsn = cfg["sentry_dsn"]
    if not dsn:
        logger.info("Sentry DSN not provided, error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=cfg["env"],
        sample_rate=1.0,
        traces_sample_rate=0.1,
        integrations=[LoggingIntegration(level=logging.INFO, event_level=None)],
    )
    _sentry_initialized = True
    logger.info(f"Sentry initialized for {cfg['env']} environment")
    return True


def capture_exception(error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an unexpected error and forward it to Sentry when enabled."""
    logger.error(f"Unexpected error: {error}", exc_info=error)
    if not _sentry_initialized:
        return
    with sentry_sdk.new_scope() as scope:
        for k, v in (context or {}).items():
            scope.set_extra(k, v)
        sentry_sdk.capture_exception(error)


def timed(threshold_ms: float = 500.0) -> Callable:
    """Log a warning when the wrapped call takes longer than threshold_ms."""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed = (time.perf_counter() - start) * 1000
                if elapsed > threshold_ms:
                    logger.warning(f"Slow operation: {func.__name__} took {elapsed:.0f}ms")
                else:
                    logger.debug(f"{func.__name__} took {elapsed:.0f}ms")
        return wrapper
    return decorator

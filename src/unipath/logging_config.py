from __future__ import annotations

import logging

from unipath.config import get_settings

# Both log per request at INFO/DEBUG.
_NOISY_LOGGERS = ("passlib.handlers.bcrypt", "multipart.multipart")

_LOG_CONFIGURED = False


def configure_logging(level: str | None = None) -> None:
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)
    _LOG_CONFIGURED = True

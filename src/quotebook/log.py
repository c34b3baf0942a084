"""Logging helpers.

All modules log through ``get_logger`` so the handler and level are set up
once, from ``QUOTEBOOK_LOG_LEVEL``.
"""

import logging
import threading

from .config import get_config

_LOCK = threading.Lock()
_ROOT_NAME = "quotebook"
_configured = False


def _configure_root() -> None:
    global _configured
    with _LOCK:
        if _configured:
            return
        root = logging.getLogger(_ROOT_NAME)
        level = getattr(logging, get_config().log_level, logging.INFO)
        root.setLevel(level)
        if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("[quotebook] %(asctime)s %(levelname)s %(name)s %(message)s")
            )
            root.addHandler(handler)
        _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``quotebook`` namespace."""
    _configure_root()
    if name == _ROOT_NAME or name.startswith(_ROOT_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_NAME}.{name}")


__all__ = ["get_logger"]

"""Logging del paquete `playreviews`.

Un unico logger raiz del paquete (`playreviews`); los modulos piden hijos
con `get_logger(__name__)`. La configuracion sale de `Settings` (LOG_*).
"""

from __future__ import annotations

import logging
from contextlib import suppress
from pathlib import Path
from threading import Lock
from typing import Optional

from playreviews.config import REPO_ROOT, Settings

_LOGGER_NAME = "playreviews"
_DISABLED_LEVEL = logging.CRITICAL + 10
_BASE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DEBUG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False
_config_lock = Lock()


def _resolve_path(file_name: str | Path) -> Path:
    name = str(file_name).strip() or "playreviews.log"
    path = Path(name)
    if path.is_absolute():
        return path
    return (REPO_ROOT / "logs" / path).resolve()


def _build_handler(cfg: Settings) -> logging.Handler:
    if not cfg.log_to_file:
        return logging.StreamHandler()
    log_path = _resolve_path(cfg.log_file_name)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(log_path, encoding="utf-8", delay=True)


def reset_handlers() -> None:
    """Quita y cierra los handlers del logger del paquete."""
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        with suppress(Exception):
            handler.close()


def configure_logging(force: bool = False) -> None:
    """Aplica LOG_ENABLED / LOG_TO_FILE / LOG_DEBUG; sin `force` solo la primera vez."""
    global _configured

    with _config_lock:
        if _configured and not force:
            return
        cfg = Settings()
        _configured = True

        reset_handlers()
        logger = logging.getLogger(_LOGGER_NAME)
        logger.propagate = False

        if not cfg.log_enabled:
            logger.disabled = True
            logger.setLevel(_DISABLED_LEVEL)
            logger.addHandler(logging.NullHandler())
            return

        level = logging.DEBUG if cfg.log_debug else logging.INFO
        handler = _build_handler(cfg)
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(_DEBUG_FORMAT if cfg.log_debug else _BASE_FORMAT, _DATE_FORMAT)
        )
        logger.disabled = False
        logger.setLevel(level)
        logger.addHandler(handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name or _LOGGER_NAME)

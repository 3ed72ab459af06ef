from __future__ import annotations

import logging
from pathlib import Path
from tempfile import gettempdir
from typing import Any

from pythonjsonlogger import jsonlogger

from .settings import settings

LOGGER_NAME = "commute_engine"
LOG_FILE_NAME = "engine.log.jsonl"

# LogRecord attributes; event fields with these names would make Logger.makeRecord raise.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def _level_from_name(name: str) -> int:
    resolved = logging.getLevelName(str(name).strip().upper())
    if isinstance(resolved, int):
        return resolved
    return logging.INFO


def _writable_log_dir(out_dir: str) -> Path | None:
    for candidate in (
        Path(out_dir) / "logs",
        Path(gettempdir()) / LOGGER_NAME.replace("_", "-") / "logs",
    ):
        try:
            candidate.mkdir(parents=True, exist_ok=True)
            marker = candidate / ".probe"
            marker.touch(exist_ok=True)
            marker.unlink(missing_ok=True)
        except OSError:
            continue
        return candidate
    return None


def _formatter() -> logging.Formatter:
    return jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level", "name": "logger"},
    )


def get_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        # Already wired up (uvicorn --reload re-imports modules).
        return logger

    logger.setLevel(_level_from_name(settings.log_level))
    logger.propagate = False
    formatter = _formatter()

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    log_dir = _writable_log_dir(settings.out_dir)
    if log_dir is None:
        logger.warning("log_file_disabled", extra={"event": "log_file_disabled", "out_dir": settings.out_dir})
        return logger

    try:
        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8")
    except OSError as exc:
        logger.warning("log_file_disabled", extra={"event": "log_file_disabled", "detail": str(exc)})
        return logger
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    return logger


def _safe_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {(f"field_{k}" if k in _RECORD_ATTRS else k): v for k, v in fields.items()}


def log_event(event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Emit one structured event; ``event`` is both the message and a top-level key."""
    get_logger().log(level, event, extra={"event": event, **_safe_fields(fields)})

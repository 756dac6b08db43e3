"""JSON-lines logging for cloze runs."""

from __future__ import annotations

import json
import logging
import sys
import tempfile
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

__all__ = [
    "JsonLogFormatter",
    "configure_logger",
    "release_logger",
]

_FILE_MARKER = "_code_cloze_file"
_CONSOLE_MARKER = "_code_cloze_console"


class JsonLogFormatter(logging.Formatter):
    """Emit log records as structured JSON lines."""

    # Attributes every LogRecord carries; anything else came from ``extra``.
    _RESERVED = frozenset(
        logging.LogRecord(
            "", logging.INFO, "", 0, "", None, None
        ).__dict__.keys()
    ) | {"message", "asctime", "taskName"}

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {
            key: _coerce_value(value)
            for key, value in record.__dict__.items()
            if key not in self._RESERVED
        }
        if extras:
            payload["extra"] = extras
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 3,
    filename: str | None = None,
) -> tuple[logging.Logger, Path]:
    """Return a namespaced logger writing JSON lines under ``log_dir``.

    Calling this again for the same logger reuses its file handler, so
    repeated CLI invocations in one process do not duplicate output.
    """

    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(logging.DEBUG)

    file_level = logging.DEBUG if verbose else _coerce_level(level)
    log_name = filename or f"{name.rsplit('.', 1)[-1]}.log"
    target = _prepare_log_file(log_dir, log_name)

    handler = _find_handler(logger, _FILE_MARKER)
    if handler is None or Path(handler.baseFilename) != target:
        if handler is not None:
            logger.removeHandler(handler)
            handler.close()
        handler = _open_file_handler(target, max_bytes, backup_count)
        logger.addHandler(handler)
    handler.setLevel(file_level)

    console = _find_handler(logger, _CONSOLE_MARKER)
    if verbose and console is None:
        console = logging.StreamHandler(stream=sys.stderr)
        console.setLevel(logging.DEBUG)
        console.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        setattr(console, _CONSOLE_MARKER, True)
        logger.addHandler(console)
    elif not verbose and console is not None:
        logger.removeHandler(console)
        console.close()

    return logger, Path(handler.baseFilename)


def release_logger(logger: logging.Logger) -> None:
    """Detach and close every handler this module attached to ``logger``."""

    for handler in list(logger.handlers):
        if getattr(handler, _FILE_MARKER, False) or getattr(
            handler, _CONSOLE_MARKER, False
        ):
            logger.removeHandler(handler)
            handler.close()


def _find_handler(logger: logging.Logger, marker: str) -> Any:
    for handler in logger.handlers:
        if getattr(handler, marker, False):
            return handler
    return None


def _open_file_handler(
    path: Path, max_bytes: int, backup_count: int
) -> RotatingFileHandler:
    try:
        handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    except PermissionError:
        fallback = _prepare_log_file(_fallback_log_dir(), path.name)
        handler = RotatingFileHandler(
            fallback,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    handler.setFormatter(JsonLogFormatter())
    setattr(handler, _FILE_MARKER, True)
    return handler


def _coerce_level(level: str) -> int:
    numeric = logging.getLevelName(level.upper())
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def _coerce_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(key): _coerce_value(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_coerce_value(item) for item in value]
    return repr(value)


def _prepare_log_file(log_dir: Path, filename: str) -> Path:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        path = log_dir / filename
        path.touch(exist_ok=True)
    except PermissionError:
        fallback = _fallback_log_dir()
        fallback.mkdir(parents=True, exist_ok=True)
        path = fallback / filename
        path.touch(exist_ok=True)
    try:
        path.chmod(0o600)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path.resolve()


def _fallback_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / "code-cloze-logs"

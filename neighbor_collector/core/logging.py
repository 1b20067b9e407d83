"""
Логирование Neighbor Collector.

Компоненты пишут через StructuredLogger: текст сообщения плюс поля
сбора (device, operation, command, entries, elapsed). Логгер передаётся
в компоненты явно; get_logger() — значение по умолчанию. На время
одной операции коллектор привязывает устройство через bind():

    log = get_logger(__name__).bind(device="sw1.core.example.net", operation="arp")
    log.info("sw1.core.example.net: ARP кэш получен", entries=120, elapsed="00:00:03")

Консоль — строки для человека:
    2026-10-19 10:30:15 INFO     sw1.core.example.net: ARP кэш получен [operation=arp entries=120]

Файл и --json-logs — одна JSON запись на строку:
    {"ts": "2026-10-19T10:30:15.123456+00:00", "level": "INFO", "logger": "...",
     "message": "...", "device": "sw1.core.example.net", "operation": "arp", "entries": 120}
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from .config_schema import LoggingConfig

# Атрибуты, которые есть у любого LogRecord (всё остальное пришло из extra)
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """Запись лога -> JSON строка (время в UTC, поля extra как есть)."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(_extra_fields(record))
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


class HumanFormatter(logging.Formatter):
    """
    Строка для консоли.

    Hostname уже есть в тексте сообщений, поэтому device в хвост не выводится.
    """

    FIELDS = ("operation", "command", "entries", "elapsed", "retryable")

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{timestamp} {record.levelname:<8} {record.getMessage()}"

        fields = [
            f"{name}={getattr(record, name)}"
            for name in self.FIELDS
            if getattr(record, name, None) is not None
        ]
        if fields:
            line += f" [{' '.join(fields)}]"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger:
    """
    logging.Logger с полями сбора.

    Args:
        name: Имя логгера
        context: Поля, добавляемые к каждой записи
    """

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self._logger = logging.getLogger(name)
        self._context = context or {}

    def _log(self, level: int, message: str, **fields: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, extra={**self._context, **fields})

    def debug(self, message: str, **fields: Any) -> None:
        self._log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, **fields)

    def bind(self, **fields: Any) -> "StructuredLogger":
        """
        Логгер с дополнительными постоянными полями.

        Example:
            log = logger.bind(device=device.host)
            log.debug(f"{device.host}: в окне обслуживания, пропуск")  # device добавится сам
        """
        return StructuredLogger(self._logger.name, {**self._context, **fields})


_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Возвращает StructuredLogger модуля (один на имя)."""
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def _install(handlers: List[logging.Handler], level: int) -> None:
    """Заменяет handlers root логгера."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        handler.setLevel(level)
        root.addHandler(handler)
    root.setLevel(level)


def setup_logging(
    json_format: bool = False,
    level: int = logging.INFO,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Логирование в поток (sys.stderr): до загрузки config.yaml и для --json-logs.

    stdout занят JSON результатом сбора, поэтому логи идут в stderr.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if json_format else HumanFormatter())
    _install([handler], level)


def _file_handler(settings: LoggingConfig) -> logging.Handler:
    """File handler по settings.rotation (size, time, none)."""
    Path(settings.file_path).parent.mkdir(parents=True, exist_ok=True)

    if settings.rotation == "size":
        return logging.handlers.RotatingFileHandler(
            settings.file_path,
            maxBytes=settings.max_bytes,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
    if settings.rotation == "time":
        return logging.handlers.TimedRotatingFileHandler(
            settings.file_path,
            when=settings.when,
            interval=settings.interval,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
    return logging.FileHandler(settings.file_path, encoding="utf-8")


def setup_logging_from_config(settings: LoggingConfig, level: Optional[int] = None) -> None:
    """
    Логирование по секции logging из config.yaml.

    Консоль всегда в human формате, файл — в JSON если json_format.

    Args:
        settings: Секция logging
        level: Уровень вместо settings.level (флаг -v)
    """
    if level is None:
        level = getattr(logging, settings.level)

    handlers: List[logging.Handler] = []
    if settings.console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(HumanFormatter())
        handlers.append(console)
    if settings.file_path:
        file_handler = _file_handler(settings)
        file_handler.setFormatter(JSONFormatter() if settings.json_format else HumanFormatter())
        handlers.append(file_handler)

    _install(handlers, level)

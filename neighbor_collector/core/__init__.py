"""
Core модули Neighbor Collector.

Содержит базовые компоненты:
- Device: Представление сетевого устройства
- CredentialResolver / Credentials: Выбор CLI учётных данных
- ConnectionManager: CLI сессии через Scrapli (одна команда на сессию)
- Structured Logging: JSON/Human-readable логирование
- exceptions: Типизированные исключения
- constants: Команды, нормализация имён интерфейсов и MAC
"""

from .device import Device
from .connection import ConnectionManager
from .credentials import CredentialResolver, Credentials
from .logging import (
    get_logger,
    setup_logging,
    setup_logging_from_config,
    StructuredLogger,
    JSONFormatter,
    HumanFormatter,
)
from .exceptions import (
    NetworkCollectorError,
    CollectorError,
    ConnectionError,
    AuthenticationError,
    PrivilegeError,
    CommandError,
    TimeoutError,
    NetBoxError,
    NetBoxAPIError,
    ConfigError,
    format_error_for_log,
    is_retryable,
)
from .models import InterfaceRef, count_entries

__all__ = [
    "Device",
    "ConnectionManager",
    "CredentialResolver",
    "Credentials",
    "get_logger",
    "setup_logging",
    "setup_logging_from_config",
    "StructuredLogger",
    "JSONFormatter",
    "HumanFormatter",
    "NetworkCollectorError",
    "CollectorError",
    "ConnectionError",
    "AuthenticationError",
    "PrivilegeError",
    "CommandError",
    "TimeoutError",
    "NetBoxError",
    "NetBoxAPIError",
    "ConfigError",
    "format_error_for_log",
    "is_retryable",
    "InterfaceRef",
    "count_entries",
]

"""
Исключения Neighbor Collector.

Три ветки по тому, как их обрабатывает вызывающий код:

    NetworkCollectorError
    ├── CollectorError      сессия с устройством не удалась
    │   ├── ConnectionError       TCP/SSH/Telnet, обрыв
    │   ├── AuthenticationError   логин/пароль
    │   ├── PrivilegeError        enable / disable
    │   ├── CommandError          устройство отвергло команду
    │   └── TimeoutError
    ├── NetBoxError         инвентарь недоступен
    │   └── NetBoxAPIError        ответ API с ошибкой
    └── ConfigError         ошибка развёртывания

CollectorError не покидает коллектор: он пишется в лог, а результатом CLI
становится "нет результата" (дальше резервный источник). NetBoxError и
ConfigError пробрасываются до CLI и завершают запуск с кодом 1.
"""

from typing import Any, Dict, Optional

# Сколько символов вывода устройства сохранять в CommandError.details
OUTPUT_LIMIT = 200


def _context(**fields: Any) -> Dict[str, Any]:
    """Контекст ошибки без пустых значений."""
    return {key: value for key, value in fields.items() if value is not None and value != ""}


class NetworkCollectorError(Exception):
    """
    Базовое исключение.

    Attributes:
        message: Описание ошибки
        details: Контекст (hostname, команда, endpoint...) для лога
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"{self.message} ({context})"


class CollectorError(NetworkCollectorError):
    """
    Ошибка CLI сессии с устройством.

    Attributes:
        device: Hostname устройства
        retryable: Повторный запуск может пройти успешно
    """

    retryable = False

    def __init__(self, message: str, device: Optional[str] = None, **context: Any):
        self.device = device
        super().__init__(message, _context(device=device, **context))


class ConnectionError(CollectorError):
    """Устройство недоступно или сессия оборвалась."""

    retryable = True

    def __init__(self, message: str, device: Optional[str] = None, port: int = 22):
        self.port = port
        super().__init__(message, device, port=port)


class AuthenticationError(CollectorError):
    """Устройство не приняло логин/пароль из правила cli_credentials."""


class PrivilegeError(CollectorError):
    """Не удалось войти в privileged режим или выйти из него."""


class CommandError(CollectorError):
    """
    Команда отвергнута (% Invalid input...).

    Attributes:
        command: Команда
        output: Полный вывод устройства (в details попадает начало)
    """

    def __init__(
        self,
        message: str,
        device: Optional[str] = None,
        command: Optional[str] = None,
        output: Optional[str] = None,
    ):
        self.command = command
        self.output = output
        super().__init__(
            message,
            device,
            command=command,
            output=output[:OUTPUT_LIMIT] if output else None,
        )


class TimeoutError(CollectorError):
    """Истёк таймаут из правила cli_credentials."""

    retryable = True

    def __init__(
        self,
        message: str,
        device: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
    ):
        self.timeout_seconds = timeout_seconds
        super().__init__(message, device, timeout_seconds=timeout_seconds)


class NetBoxError(NetworkCollectorError):
    """
    NetBox недоступен.

    Attributes:
        url: URL NetBox
    """

    def __init__(self, message: str, url: Optional[str] = None, **context: Any):
        self.url = url
        super().__init__(message, _context(url=url, **context))


class NetBoxAPIError(NetBoxError):
    """
    NetBox вернул ошибку (403 на токен, 404 на endpoint...).

    Attributes:
        status_code: HTTP код ответа
        endpoint: Endpoint API (dcim/interfaces, ipam/prefixes...)
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
    ):
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message, url, status_code=status_code, endpoint=endpoint)


class ConfigError(NetworkCollectorError):
    """
    Ошибка конфигурации: файл, cli_credentials, платформа, NetBox URL/токен.

    Attributes:
        config_file: Путь к файлу конфигурации
        key: Ключ конфигурации (cli_credentials, netbox.url, platform...)
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        key: Optional[str] = None,
    ):
        self.config_file = config_file
        self.key = key
        super().__init__(message, _context(config_file=config_file, key=key))


def format_error_for_log(error: Exception) -> str:
    """
    Строка ошибки для лога.

    Для исключений пакета — сообщение и контекст,
    для остальных — имя класса и текст.
    """
    if isinstance(error, NetworkCollectorError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"


def is_retryable(error: Exception) -> bool:
    """Может ли повторный сбор с устройства пройти успешно."""
    return isinstance(error, CollectorError) and error.retryable

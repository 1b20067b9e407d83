"""
Модуль CLI сессий через Scrapli.

ConnectionManager выполняет ровно одну show-команду за сессию:
- Подключение (SSH или Telnet) с таймаутом из правила учётных данных
- Отключение постраничного вывода (terminal length 0)
- Переход в privileged режим, если задан enable пароль
- Выполнение команды
- Возврат paging к значению по умолчанию и выход из privileged режима
- Закрытие сессии

Любая ошибка на любом шаге превращается в один CollectorError
с hostname и исходной причиной. Частичный вывод не возвращается.

Пример использования:
    manager = ConnectionManager()
    lines = manager.run_command(device, credentials, "show ip arp")
"""

from contextlib import contextmanager
from typing import Optional, Generator, Any, Dict, List

from scrapli import Scrapli
from scrapli.exceptions import (
    ScrapliException,
    ScrapliTimeout,
    ScrapliAuthenticationFailed,
    ScrapliConnectionError,
    ScrapliPrivilegeError,
)

from .config_schema import ConnectionConfig
from .constants import PAGING_DISABLE_COMMAND, PAGING_RESTORE_COMMAND
from .credentials import Credentials
from .device import Device
from .exceptions import (
    CollectorError,
    ConnectionError as CollectorConnectionError,
    AuthenticationError,
    PrivilegeError,
    TimeoutError as CollectorTimeoutError,
    CommandError,
    ConfigError,
)
from .logging import StructuredLogger, get_logger

# Драйвер Scrapli для платформ устройства
SCRAPLI_PLATFORM_MAP = {
    "cisco_ios": "cisco_iosxe",
    "cisco_iosxe": "cisco_iosxe",
}

# Уровни привилегий драйвера cisco_iosxe
EXEC = "exec"
PRIVILEGE_EXEC = "privilege_exec"


def get_scrapli_platform(platform: str) -> str:
    """
    Преобразует платформу устройства в драйвер Scrapli.

    Args:
        platform: Платформа устройства (cisco_ios, cisco_iosxe)

    Returns:
        str: Драйвер для Scrapli
    """
    if not platform:
        return "cisco_iosxe"
    return SCRAPLI_PLATFORM_MAP.get(platform.lower(), "cisco_iosxe")


def _on_open(conn: Scrapli) -> None:
    """Сессия открывается без смены режима: paging и enable выполняются явно."""


def _on_close(conn: Scrapli) -> None:
    """Выход без повторного enable (стандартный on_close драйвера его делает)."""
    conn.channel.write(channel_input="exit")
    conn.channel.send_return()


class ConnectionManager:
    """
    Менеджер CLI сессий через Scrapli.

    Каждый вызов run_command открывает собственную сессию, поэтому
    один менеджер можно использовать для нескольких устройств.

    Attributes:
        ssh_transport: Транспорт Scrapli для SSH (system, ssh2, paramiko)
        auth_strict_key: Проверять host key
        ssh_port: Порт SSH по умолчанию
        telnet_port: Порт Telnet по умолчанию

    Example:
        manager = ConnectionManager(ssh_transport="paramiko")
        lines = manager.run_command(device, creds, "show ipv6 neighbors")
    """

    def __init__(
        self,
        ssh_transport: str = "system",
        auth_strict_key: bool = False,
        ssh_port: int = 22,
        telnet_port: int = 23,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Инициализация менеджера подключений.

        Args:
            ssh_transport: Транспорт Scrapli для SSH
            auth_strict_key: Проверять host key
            ssh_port: Порт SSH по умолчанию
            telnet_port: Порт Telnet по умолчанию
            logger: Логгер (по умолчанию модульный)
        """
        self.ssh_transport = ssh_transport
        self.auth_strict_key = auth_strict_key
        self.ssh_port = ssh_port
        self.telnet_port = telnet_port
        self._logger = logger or get_logger(__name__)

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        logger: Optional[StructuredLogger] = None,
    ) -> "ConnectionManager":
        """Создаёт менеджер из секции connection конфигурации."""
        return cls(
            ssh_transport=config.ssh_transport,
            auth_strict_key=config.auth_strict_key,
            ssh_port=config.ssh_port,
            telnet_port=config.telnet_port,
            logger=logger,
        )

    def _resolve_transport(self, credentials: Credentials, device: Device) -> Dict[str, Any]:
        """
        Определяет транспорт Scrapli и порт.

        Raises:
            ConfigError: Неизвестный транспорт в правиле учётных данных
        """
        transport = (credentials.transport or "SSH").lower()
        if transport == "ssh":
            return {"transport": self.ssh_transport, "port": device.port or self.ssh_port}
        if transport == "telnet":
            return {"transport": "telnet", "port": device.port or self.telnet_port}
        raise ConfigError(
            f"Неизвестный transport: {credentials.transport}",
            key="cli_credentials",
        )

    def _build_connection_params(
        self,
        device: Device,
        credentials: Credentials,
    ) -> Dict[str, Any]:
        """
        Формирует параметры подключения для Scrapli.

        Args:
            device: Объект устройства
            credentials: Учётные данные

        Returns:
            Dict: Параметры для Scrapli
        """
        params = {
            "host": device.host,
            "auth_username": credentials.login,
            "auth_password": credentials.password,
            "platform": get_scrapli_platform(device.platform),
            "auth_strict_key": self.auth_strict_key,
            "timeout_socket": credentials.timeout,
            "timeout_transport": credentials.timeout,
            "timeout_ops": credentials.timeout,
            "on_open": _on_open,
            "on_close": _on_close,
        }
        params.update(self._resolve_transport(credentials, device))

        if credentials.privileged:
            params["auth_secondary"] = credentials.privileged

        return params

    def _send(
        self,
        connection: Scrapli,
        command: str,
        host: str,
        timeout: int,
    ) -> str:
        """
        Выполняет одну команду.

        Raises:
            CommandError: Устройство отвергло команду
        """
        self._logger.debug(f"{host}: выполнение '{command}'", device=host, command=command)
        response = connection.send_command(command, timeout_ops=timeout)
        if response.failed:
            raise CommandError(
                "Устройство отвергло команду",
                device=host,
                command=command,
                output=response.result,
            )
        return response.result

    @staticmethod
    def _current_level(connection: Scrapli) -> str:
        """Определяет уровень привилегий по prompt (# — privileged)."""
        prompt = connection.get_prompt().strip()
        return PRIVILEGE_EXEC if prompt.endswith("#") else EXEC

    def _restore_baseline(
        self,
        connection: Scrapli,
        host: str,
        timeout: int,
        elevated: bool,
    ) -> None:
        """Возвращает paging по умолчанию и выходит из privileged режима."""
        self._send(connection, PAGING_RESTORE_COMMAND, host, timeout)
        if elevated:
            connection.acquire_priv(EXEC)
            connection.default_desired_privilege_level = EXEC

    @contextmanager
    def session(
        self,
        device: Device,
        credentials: Credentials,
    ) -> Generator[Scrapli, None, None]:
        """
        Контекстный менеджер CLI сессии.

        Внутри контекста paging отключён и (при наличии enable пароля)
        активен privileged режим. При выходе — в том числе по ошибке —
        paging возвращается, privileged режим снимается, сессия закрывается.

        Args:
            device: Объект устройства
            credentials: Учётные данные

        Yields:
            Scrapli: Активное подключение

        Raises:
            CollectorError: Любая ошибка сессии (подкласс по типу причины)
            ConfigError: Невалидный transport в правиле учётных данных
        """
        host = device.host
        params = self._build_connection_params(device, credentials)
        timeout = credentials.timeout
        connection = None
        log = self._logger.bind(device=host)

        try:
            log.debug(f"Подключение к {host} через {credentials.transport}")
            connection = Scrapli(**params)
            connection.open()

            # send_command переключает режим в default_desired_privilege_level,
            # поэтому фиксируем уровень, в котором оказались после логина
            connection.default_desired_privilege_level = self._current_level(connection)
            self._send(connection, PAGING_DISABLE_COMMAND, host, timeout)

            elevated = False
            try:
                if credentials.privileged and connection.default_desired_privilege_level != PRIVILEGE_EXEC:
                    connection.acquire_priv(PRIVILEGE_EXEC)
                    connection.default_desired_privilege_level = PRIVILEGE_EXEC
                    elevated = True
                yield connection
            except Exception:
                try:
                    self._restore_baseline(connection, host, timeout, elevated)
                except Exception as restore_error:
                    log.debug(f"{host}: не удалось вернуть настройки сессии: {restore_error}")
                raise
            else:
                self._restore_baseline(connection, host, timeout, elevated)

        except CollectorError:
            raise

        except ScrapliTimeout as e:
            raise CollectorTimeoutError(
                f"Таймаут: {e}",
                device=host,
                timeout_seconds=timeout,
            ) from e

        except ScrapliAuthenticationFailed as e:
            raise AuthenticationError(
                f"Ошибка аутентификации: {e}",
                device=host,
            ) from e

        except ScrapliPrivilegeError as e:
            raise PrivilegeError(
                f"Ошибка смены режима привилегий: {e}",
                device=host,
            ) from e

        except ScrapliConnectionError as e:
            raise CollectorConnectionError(
                f"Ошибка подключения: {e}",
                device=host,
                port=params["port"],
            ) from e

        except (ScrapliException, OSError, EOFError) as e:
            raise CollectorConnectionError(
                f"Неизвестная ошибка: {e}",
                device=host,
                port=params["port"],
            ) from e

        finally:
            if connection is not None:
                try:
                    connection.close()
                    log.debug(f"Отключено от {host}")
                except Exception as close_error:
                    log.debug(f"{host}: ошибка при закрытии сессии: {close_error}")

    def run_command(
        self,
        device: Device,
        credentials: Credentials,
        command: str,
    ) -> List[str]:
        """
        Выполняет одну команду в отдельной сессии.

        Args:
            device: Устройство
            credentials: Учётные данные
            command: Команда (show ip arp, ...)

        Returns:
            List[str]: Строки вывода команды

        Raises:
            CollectorError: Ошибка подключения, авторизации, enable или команды
        """
        self._logger.debug(
            f"{device.host}: CLI команда '{command}' через {credentials.transport}",
            device=device.host,
            command=command,
        )
        with self.session(device, credentials) as connection:
            output = self._send(connection, command, device.host, credentials.timeout)
        return output.splitlines()

"""
Модуль выбора CLI учётных данных.

Учётные данные задаются упорядоченным списком правил в config.yaml
(cli_credentials). Для устройства используется первое правило,
regex pattern которого находит совпадение в hostname.

Пример использования:
    resolver = CredentialResolver(config.cli_credentials)
    creds = resolver.resolve("sw1.core.example.net")
    if creds is None:
        # Нет подходящего правила: CLI недоступен
        ...
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Pattern

from .config_schema import CredentialRule, validate_credential_rules
from .logging import StructuredLogger, get_logger

DEFAULT_TRANSPORT = "SSH"
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class Credentials:
    """
    Нормализованные учётные данные для одной CLI сессии.

    Attributes:
        login: Имя пользователя
        password: Пароль
        privileged: Enable пароль (None — privileged режим не нужен)
        transport: Транспорт (SSH, Telnet)
        timeout: Таймаут подключения и команды (секунды)
    """
    login: str
    password: str
    privileged: Optional[str] = None
    transport: str = DEFAULT_TRANSPORT
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def from_rule(cls, rule: CredentialRule) -> "Credentials":
        """Создаёт Credentials из правила конфигурации."""
        return cls(
            login=rule.login,
            password=rule.password,
            privileged=rule.privileged or None,
            transport=rule.transport or DEFAULT_TRANSPORT,
            timeout=rule.timeout or DEFAULT_TIMEOUT,
        )

    def __repr__(self) -> str:
        # Пароли в логи не попадают
        return (
            f"Credentials(login={self.login!r}, transport={self.transport!r}, "
            f"timeout={self.timeout}, privileged={self.privileged is not None})"
        )


class CredentialResolver:
    """
    Выбор учётных данных по hostname.

    Список правил только читается, поэтому один resolver можно
    использовать из нескольких потоков.

    Attributes:
        rules: Валидированные правила в исходном порядке

    Raises:
        ConfigError: Список правил отсутствует, пуст или невалиден
    """

    def __init__(
        self,
        rules: Optional[Sequence] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            rules: cli_credentials из конфигурации
            logger: Логгер (по умолчанию модульный)
        """
        self.rules: List[CredentialRule] = validate_credential_rules(rules)
        self._compiled: List[Tuple[Pattern, CredentialRule]] = [
            (re.compile(rule.pattern), rule) for rule in self.rules
        ]
        self._logger = logger or get_logger(__name__)

    def resolve(self, host: str) -> Optional[Credentials]:
        """
        Возвращает учётные данные первого подходящего правила.

        Args:
            host: Hostname устройства (FQDN)

        Returns:
            Credentials или None если ни одно правило не подошло
        """
        for pattern, rule in self._compiled:
            if pattern.search(host):
                return Credentials.from_rule(rule)

        self._logger.warning(
            f"{host} не совпал ни с одним pattern в cli_credentials",
            device=host,
        )
        return None

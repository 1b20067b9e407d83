"""
Pydantic схемы для валидации config.yaml.

Валидация происходит при загрузке конфигурации.
Ошибки валидации выбрасывают ConfigError.

Пример использования:
    from neighbor_collector.core.config_schema import validate_config

    config_dict = yaml.safe_load(open("config.yaml"))
    validated = validate_config(config_dict)  # raises ConfigError on failure
"""

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from .exceptions import ConfigError


class CredentialRule(BaseModel):
    """
    Правило выбора CLI учётных данных.

    Порядок правил важен: используется первое правило,
    pattern которого находит совпадение в hostname устройства.
    """
    model_config = ConfigDict(frozen=True)

    pattern: str
    login: str = Field(min_length=1)
    password: str = Field(min_length=1)
    privileged: Optional[str] = None
    transport: str = "SSH"
    timeout: int = Field(default=30, ge=1, le=600)

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Проверяет что pattern — валидное регулярное выражение."""
        try:
            re.compile(v)
        except re.error as e:
            raise PydanticCustomError(
                "invalid_pattern",
                "pattern не является регулярным выражением: {error}",
                {"error": str(e)},
            )
        return v

    @field_validator("transport", mode="before")
    @classmethod
    def default_transport(cls, v: Optional[str]) -> str:
        """Пустой transport означает SSH. Допустимы SSH и Telnet."""
        v = v or "SSH"
        if not isinstance(v, str) or v.lower() not in ("ssh", "telnet"):
            raise PydanticCustomError(
                "invalid_transport",
                "transport должен быть SSH или Telnet",
            )
        return v

    @field_validator("timeout", mode="before")
    @classmethod
    def default_timeout(cls, v: Optional[int]) -> int:
        """Пустой timeout означает 30 секунд."""
        return v or 30


class CollectionConfig(BaseModel):
    """Настройки валидации собранных данных."""
    model_config = ConfigDict(frozen=True)

    ignore_ips_not_within_subnet: bool = False
    mac_format: str = Field(default="ieee", pattern="^(ieee|cisco|netbox|unix|raw)$")


class ConnectionConfig(BaseModel):
    """Настройки CLI подключения."""
    model_config = ConfigDict(frozen=True)

    ssh_transport: str = Field(default="system", pattern="^(system|ssh2|paramiko)$")
    auth_strict_key: bool = False
    ssh_port: int = Field(default=22, ge=1, le=65535)
    telnet_port: int = Field(default=23, ge=1, le=65535)


class NetBoxConfig(BaseModel):
    """Настройки NetBox."""
    model_config = ConfigDict(frozen=True)

    url: str = ""
    token: str = ""
    verify_ssl: bool = True
    timeout: int = Field(default=30, ge=1, le=300)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Проверяет что URL валидный."""
        if v and not v.startswith(("http://", "https://")):
            raise PydanticCustomError(
                "invalid_url",
                "NetBox URL должен начинаться с http:// или https://",
            )
        return v.rstrip("/") + "/" if v else v


class LoggingConfig(BaseModel):
    """Настройки логирования."""
    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    json_format: bool = False
    console: bool = True
    file_path: Optional[str] = None
    rotation: str = Field(default="size", pattern="^(size|time|none)$")
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)  # min 1KB
    backup_count: int = Field(default=5, ge=1, le=100)
    when: str = "midnight"
    interval: int = Field(default=1, ge=1)


class AppConfig(BaseModel):
    """Полная конфигурация приложения."""
    model_config = ConfigDict(frozen=True)

    cli_credentials: List[CredentialRule] = Field(default_factory=list)
    collection: CollectionConfig = Field(default_factory=CollectionConfig)
    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    netbox: NetBoxConfig = Field(default_factory=NetBoxConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _format_validation_error(e: ValidationError) -> str:
    """Форматирует первую ошибку Pydantic в читаемый вид."""
    errors = e.errors()
    if not errors:
        return str(e)
    first_error = errors[0]
    loc = ".".join(str(x) for x in first_error.get("loc", []))
    msg = first_error.get("msg", "Unknown error")
    return f"{loc}: {msg}"


def validate_config(config_dict: dict, config_file: Optional[str] = None) -> AppConfig:
    """
    Валидирует словарь конфигурации.

    Args:
        config_dict: Словарь из YAML
        config_file: Путь к файлу (для сообщения об ошибке)

    Returns:
        AppConfig: Валидированная конфигурация

    Raises:
        ConfigError: При ошибке валидации
    """
    try:
        return AppConfig(**config_dict)
    except ValidationError as e:
        raise ConfigError(
            message=f"Ошибка валидации конфигурации: {_format_validation_error(e)}",
            config_file=config_file,
        ) from e


def validate_credential_rules(rules: object) -> List[CredentialRule]:
    """
    Валидирует список правил CLI учётных данных.

    Args:
        rules: Значение cli_credentials (list of dict или list of CredentialRule)

    Returns:
        List[CredentialRule]: Правила в исходном порядке

    Raises:
        ConfigError: Список отсутствует, пуст или содержит невалидное правило
    """
    key = "cli_credentials"
    if not isinstance(rules, (list, tuple)):
        raise ConfigError(f"{key} должен быть списком правил", key=key)
    if not rules:
        raise ConfigError(f"{key} пуст", key=key)

    validated = []
    for index, rule in enumerate(rules):
        if isinstance(rule, CredentialRule):
            validated.append(rule)
            continue
        if not isinstance(rule, dict):
            raise ConfigError(f"{key}[{index}] должен быть словарём", key=key)
        try:
            validated.append(CredentialRule(**rule))
        except ValidationError as e:
            raise ConfigError(
                f"{key}[{index}]: {_format_validation_error(e)}",
                key=key,
            ) from e
    return validated


def get_default_config() -> AppConfig:
    """Возвращает конфигурацию по умолчанию."""
    return AppConfig()

"""
Загрузчик конфигурации из config.yaml.

Возвращает валидированный снимок AppConfig, который вызывающий код
передаёт в компоненты явно. Глобального экземпляра нет.

Пример:
    config = load_config("config.yaml")
    config.collection.ignore_ips_not_within_subnet  # False
    config.cli_credentials[0].login                 # "netops"

Пример config.yaml:
    cli_credentials:
      - pattern: '\\.core\\.example\\.net$'
        login: netops
        password: secret
        privileged: enable-secret
      - pattern: '.*'
        login: readonly
        password: readonly
        transport: Telnet
        timeout: 60
    collection:
      ignore_ips_not_within_subnet: true
"""

import copy
import os
import logging
from typing import Any, Dict, Optional

import yaml

from .core.config_schema import AppConfig, validate_config
from .core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Файлы, которые ищутся если путь не указан явно
SEARCH_PATHS = (
    "config.yaml",
    "config.yml",
    ".neighbor_collector.yaml",
)

DEFAULTS: Dict[str, Any] = {
    "cli_credentials": [],
    "collection": {
        "ignore_ips_not_within_subnet": False,
        "mac_format": "ieee",
    },
    "connection": {
        "ssh_transport": "system",
        "auth_strict_key": False,
        "ssh_port": 22,
        "telnet_port": 23,
    },
    "netbox": {
        "url": "",
        "token": "",
        "verify_ssl": True,
        "timeout": 30,
    },
    "logging": {
        "level": "INFO",
        "json_format": False,
        "console": True,
        "file_path": None,
    },
}


def _merge_dict(base: dict, override: dict) -> None:
    """
    Рекурсивно мержит словари.

    Пустая секция в YAML (`netbox:` без значений) оставляет значения по умолчанию.
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict):
            if value is None:
                continue
            if isinstance(value, dict):
                _merge_dict(base[key], value)
                continue
        base[key] = value


def _find_config_file() -> Optional[str]:
    """Ищет config.yaml в текущей директории."""
    for path in SEARCH_PATHS:
        if os.path.exists(path):
            return path
    return None


def _read_yaml(config_file: str) -> dict:
    """
    Читает YAML файл.

    Raises:
        ConfigError: Файл не читается или не является словарём
    """
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Не удалось прочитать файл: {e}", config_file=config_file) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Ошибка YAML: {e}", config_file=config_file) from e

    if not isinstance(data, dict):
        raise ConfigError("Корень конфигурации должен быть словарём", config_file=config_file)
    return data


def _apply_env(data: dict) -> None:
    """
    Переопределяет настройки из переменных окружения.

    Секция netbox не словарь: оставляем как есть, её отвергнет валидация.
    """
    if not isinstance(data.get("netbox"), dict):
        return
    if os.getenv("NETBOX_URL"):
        data["netbox"]["url"] = os.getenv("NETBOX_URL")
    if os.getenv("NETBOX_TOKEN"):
        data["netbox"]["token"] = os.getenv("NETBOX_TOKEN")


def build_config(overrides: Optional[dict] = None, config_file: Optional[str] = None) -> AppConfig:
    """
    Собирает AppConfig из дефолтов, словаря и переменных окружения.

    Args:
        overrides: Данные поверх дефолтов (обычно содержимое YAML)
        config_file: Путь к файлу (для сообщений об ошибках)

    Returns:
        AppConfig: Валидированная конфигурация
    """
    data = copy.deepcopy(DEFAULTS)
    if overrides:
        _merge_dict(data, overrides)
    _apply_env(data)
    return validate_config(data, config_file=config_file)


def load_config(config_file: Optional[str] = None) -> AppConfig:
    """
    Загружает конфигурацию из файла.

    Args:
        config_file: Путь к YAML файлу (опционально)

    Returns:
        AppConfig: Объект конфигурации

    Raises:
        ConfigError: Файл указан но не найден, или конфигурация невалидна
    """
    if config_file and not os.path.exists(config_file):
        raise ConfigError("Файл конфигурации не найден", config_file=config_file)

    config_file = config_file or _find_config_file()
    if not config_file:
        logger.debug("config.yaml не найден, используем настройки по умолчанию")
        return build_config()

    config = build_config(_read_yaml(config_file), config_file=config_file)
    logger.debug(f"Конфигурация загружена из {config_file}")
    return config

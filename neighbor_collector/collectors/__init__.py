"""
Коллекторы данных с сетевых устройств.

Коллектор выбирается по платформе устройства через COLLECTOR_REGISTRY.

Пример использования:
    from neighbor_collector.collectors import get_collector

    collector = get_collector(device.platform, inventory=inventory, credential_rules=rules)
    fwt = collector.fetch_forwarding_table(device)
"""

from typing import Dict, Type

from ..core.exceptions import ConfigError
from .base import BaseCollector
from .cisco_ios import CiscoIOSCollector
from .eligibility import DeviceEligibility, EligibilityPolicy
from .fallback import FallbackCollector, NullFallback

# Платформа -> класс коллектора
COLLECTOR_REGISTRY: Dict[str, Type[BaseCollector]] = {
    "cisco_ios": CiscoIOSCollector,
    "cisco_iosxe": CiscoIOSCollector,
}


def get_collector_class(platform: str) -> Type[BaseCollector]:
    """
    Класс коллектора для платформы.

    Raises:
        ConfigError: Платформа не поддерживается
    """
    collector_cls = COLLECTOR_REGISTRY.get((platform or "").lower())
    if collector_cls is None:
        raise ConfigError(
            f"Платформа не поддерживается: {platform}. "
            f"Доступны: {', '.join(sorted(COLLECTOR_REGISTRY))}",
            key="platform",
        )
    return collector_cls


def get_collector(platform: str, **kwargs) -> BaseCollector:
    """
    Создаёт коллектор для платформы.

    Args:
        platform: Платформа устройства (cisco_ios, cisco_iosxe)
        **kwargs: Аргументы конструктора коллектора

    Returns:
        BaseCollector: Коллектор

    Raises:
        ConfigError: Платформа не поддерживается
    """
    return get_collector_class(platform)(**kwargs)


__all__ = [
    "BaseCollector",
    "CiscoIOSCollector",
    "COLLECTOR_REGISTRY",
    "get_collector",
    "get_collector_class",
    "EligibilityPolicy",
    "DeviceEligibility",
    "FallbackCollector",
    "NullFallback",
]

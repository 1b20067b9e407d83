"""
Проверка допустимости сбора с устройства.

Проверяется до открытия любой сессии: отключённый тип сбора или
окно обслуживания означают "нет результата" без подключения.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional

from ..core.device import Device

# Тип сбора -> флаг устройства
COLLECTION_FLAGS = {
    "arp": "collect_arp",
    "fwt": "collect_fwt",
}


class EligibilityPolicy(ABC):
    """Политика допустимости сбора."""

    @abstractmethod
    def is_collection_enabled(self, device: Device, kind: str) -> bool:
        """Разрешён ли сбор данных типа kind (arp, fwt)."""

    @abstractmethod
    def is_in_downtime(self, device: Device) -> bool:
        """Находится ли устройство в окне обслуживания."""


class DeviceEligibility(EligibilityPolicy):
    """
    Политика по флагам и окну обслуживания самого Device.

    Args:
        clock: Источник текущего времени (для тестов)
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock

    def is_collection_enabled(self, device: Device, kind: str) -> bool:
        flag = COLLECTION_FLAGS.get(kind)
        if flag is None:
            return False
        return bool(getattr(device, flag, False))

    def is_in_downtime(self, device: Device) -> bool:
        now = self._clock() if self._clock else None
        return device.is_in_downtime(now)

"""
Модуль представления сетевого устройства.

Device описывает устройство, с которого собираются ARP/ND кэши
и таблица коммутации:
- Параметры подключения (hostname, платформа, порт)
- Флаги сбора (collect_arp, collect_fwt)
- Окно обслуживания (down_from / down_until)

Пример использования:
    device = Device(id=12, host="sw1.core.example.net", platform="cisco_ios")
    device.is_in_downtime()  # False
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any


def to_utc(value: datetime) -> datetime:
    """
    Приводит datetime к UTC.

    Значение без timezone считается временем в UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class Device:
    """
    Представление сетевого устройства.

    Attributes:
        id: ID устройства в инвентаре
        host: FQDN устройства (используется для подключения и выбора учётных данных)
        platform: Платформа (cisco_ios, cisco_iosxe)
        port: Порт CLI (None — порт транспорта по умолчанию)
        collect_arp: Собирать ARP/ND кэш
        collect_fwt: Собирать таблицу коммутации
        down_from: Начало окна обслуживания
        down_until: Конец окна обслуживания
        metadata: Дополнительные данные из инвентаря
    """

    id: int
    host: str
    platform: str = "cisco_ios"
    port: Optional[int] = None

    collect_arp: bool = True
    collect_fwt: bool = True

    down_from: Optional[datetime] = None
    down_until: Optional[datetime] = None

    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        """Возвращает отображаемое имя устройства."""
        return self.host or str(self.id)

    def is_in_downtime(self, now: Optional[datetime] = None) -> bool:
        """
        Проверяет, находится ли устройство в окне обслуживания.

        Окно без одной из границ считается открытым с этой стороны.
        Если не задана ни одна граница — устройство не в обслуживании.
        Все значения сравниваются в UTC (без timezone = UTC).

        Args:
            now: Текущее время (для тестов)

        Returns:
            bool: True если устройство сейчас в обслуживании
        """
        if self.down_from is None and self.down_until is None:
            return False
        now = to_utc(now) if now is not None else datetime.now(timezone.utc)
        if self.down_from is not None and now < to_utc(self.down_from):
            return False
        if self.down_until is not None and now > to_utc(self.down_until):
            return False
        return True

    def __str__(self) -> str:
        return f"{self.display_name} ({self.platform})"

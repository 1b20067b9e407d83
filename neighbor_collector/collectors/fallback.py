"""
Резервный (протокольный) источник данных.

Используется, только когда CLI путь не дал результата. Реализация
(например, SNMP) возвращает уже проверенные данные, ключованные ID
интерфейса, или None.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..core.device import Device
from ..core.models import ForwardingTable, NeighborTable


class FallbackCollector(ABC):
    """
    Интерфейс резервного сборщика.

    Example:
        class SnmpFallback(FallbackCollector):
            def fetch_arp(self, device, session=None):
                ...
    """

    @abstractmethod
    def fetch_arp(self, device: Device, session: Any = None) -> Optional[NeighborTable]:
        """IPv4 ARP таблица или None."""

    @abstractmethod
    def fetch_nd(self, device: Device, session: Any = None) -> Optional[NeighborTable]:
        """IPv6 ND таблица или None."""

    @abstractmethod
    def fetch_fwt(self, device: Device, session: Any = None) -> Optional[ForwardingTable]:
        """Таблица коммутации или None."""


class NullFallback(FallbackCollector):
    """Резервного источника нет: всегда None."""

    def fetch_arp(self, device: Device, session: Any = None) -> Optional[NeighborTable]:
        return None

    def fetch_nd(self, device: Device, session: Any = None) -> Optional[NeighborTable]:
        return None

    def fetch_fwt(self, device: Device, session: Any = None) -> Optional[ForwardingTable]:
        return None

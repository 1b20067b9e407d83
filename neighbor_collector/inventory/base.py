"""
Интерфейс инвентаря (источника интерфейсов и подсетей устройства).

Инвентарь только читается: коллекторы не меняют интерфейсы и адреса.
"""

from abc import ABC, abstractmethod
from ipaddress import IPv4Interface, IPv6Interface, IPv4Network, IPv6Network
from typing import List, Optional, Union

from ..core.models import InterfaceRef

IPInterface = Union[IPv4Interface, IPv6Interface]
IPNetwork = Union[IPv4Network, IPv6Network]


class InventoryBackend(ABC):
    """
    Абстрактный источник данных инвентаря.

    Example:
        class MyInventory(InventoryBackend):
            def list_interfaces(self, device_id):
                return [InterfaceRef(id=42, name="GigabitEthernet0/3.2335")]
            ...
    """

    @abstractmethod
    def list_interfaces(self, device_id: int) -> List[InterfaceRef]:
        """Интерфейсы устройства."""

    @abstractmethod
    def list_interface_addresses(self, interface_id: int, version: int) -> List[IPInterface]:
        """IP-адреса интерфейса указанной версии (адрес с маской)."""

    @abstractmethod
    def subnet_of(self, ip: IPInterface) -> Optional[IPNetwork]:
        """Подсеть, в которую входит адрес (None если подсеть не заведена)."""

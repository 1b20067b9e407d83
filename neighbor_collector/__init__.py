"""
Neighbor Collector - сбор ARP/ND кэша и таблицы коммутации с сетевых устройств.

Модуль предоставляет:
- Выполнение show-команд через CLI (Scrapli, SSH/Telnet)
- Построчный разбор вывода show ip arp / show ipv6 neighbors / show mac-address-table
- Сверку записей с интерфейсами и подсетями устройства в NetBox
- Резервный (протокольный) источник при недоступности CLI

Примеры использования:
    # CLI
    python -m neighbor_collector arp sw1.core.example.net
    python -m neighbor_collector fwt sw1.core.example.net

    # Python API
    from neighbor_collector import load_config, NetBoxInventory, get_collector_class

    config = load_config("config.yaml")
    inventory = NetBoxInventory.from_config(config)
    device = inventory.get_device("sw1.core.example.net")
    collector = get_collector_class(device.platform).from_config(config, inventory)
    cache = collector.fetch_neighbor_cache(device)
"""

__version__ = "1.0.0"

from .config import load_config
from .core.device import Device
from .core.credentials import CredentialResolver, Credentials
from .core.connection import ConnectionManager
from .collectors import (
    BaseCollector,
    CiscoIOSCollector,
    COLLECTOR_REGISTRY,
    get_collector,
    get_collector_class,
)
from .inventory import InventoryBackend, NetBoxInventory

__all__ = [
    "load_config",
    "Device",
    "CredentialResolver",
    "Credentials",
    "ConnectionManager",
    "BaseCollector",
    "CiscoIOSCollector",
    "COLLECTOR_REGISTRY",
    "get_collector",
    "get_collector_class",
    "InventoryBackend",
    "NetBoxInventory",
]

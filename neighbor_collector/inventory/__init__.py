"""
Инвентарь устройств: интерфейсы, адреса и подсети.
"""

from .base import InventoryBackend
from .netbox import NetBoxInventory

__all__ = ["InventoryBackend", "NetBoxInventory"]

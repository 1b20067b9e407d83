"""
Константы и маппинги для Neighbor Collector.

Импорт:
    from neighbor_collector.core.constants import validate_mac, reduce_interface_name

    # Импорт из конкретного модуля
    from neighbor_collector.core.constants.mac import normalize_mac
"""

# Интерфейсы
from .interfaces import reduce_interface_name

# MAC
from .mac import (
    normalize_mac_raw,
    normalize_mac,
    is_group_mac,
    validate_mac,
)

# Команды
from .commands import (
    COLLECTOR_COMMANDS,
    PAGING_DISABLE_COMMAND,
    PAGING_RESTORE_COMMAND,
    get_collector_command,
)

# Утилиты
from .utils import sec2dhms

__all__ = [
    # Интерфейсы
    "reduce_interface_name",
    # MAC
    "normalize_mac_raw",
    "normalize_mac",
    "is_group_mac",
    "validate_mac",
    # Команды
    "COLLECTOR_COMMANDS",
    "PAGING_DISABLE_COMMAND",
    "PAGING_RESTORE_COMMAND",
    "get_collector_command",
    # Утилиты
    "sec2dhms",
]

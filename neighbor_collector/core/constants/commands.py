"""
Команды коллекторов (централизованные).

Все платформо-зависимые команды для CLI коллекторов.
"""

from typing import Dict

# =============================================================================
# КОМАНДЫ КОЛЛЕКТОРОВ
# =============================================================================

COLLECTOR_COMMANDS: Dict[str, Dict[str, str]] = {
    # IPv4 ARP
    "arp": {
        "cisco_ios": "show ip arp",
        "cisco_iosxe": "show ip arp",
    },
    # IPv6 Neighbor Discovery
    "nd": {
        "cisco_ios": "show ipv6 neighbors",
        "cisco_iosxe": "show ipv6 neighbors",
    },
    # Динамическая таблица коммутации
    "fwt": {
        "cisco_ios": "show mac-address-table dynamic",
        "cisco_iosxe": "show mac-address-table dynamic",
    },
}

# =============================================================================
# КОМАНДЫ СЕССИИ
# =============================================================================

# Отключение постраничного вывода и возврат к значению по умолчанию
PAGING_DISABLE_COMMAND = "terminal length 0"
PAGING_RESTORE_COMMAND = "terminal length 36"


def get_collector_command(collector: str, platform: str) -> str:
    """
    Возвращает команду для коллектора и платформы.

    Args:
        collector: Тип данных (arp, nd, fwt)
        platform: Платформа устройства (cisco_ios, cisco_iosxe)

    Returns:
        str: Команда для выполнения или пустая строка

    Examples:
        >>> get_collector_command("arp", "cisco_ios")
        'show ip arp'
        >>> get_collector_command("fwt", "cisco_iosxe")
        'show mac-address-table dynamic'
    """
    commands = COLLECTOR_COMMANDS.get(collector, {})
    return commands.get(platform, "")

"""
Парсеры вывода show-команд.

Модуль предоставляет:
- LineParser / NeighborParser: базовые построчные парсеры
- ArpParser, Ipv6NeighborParser, MacTableParser: Cisco IOS

Пример использования:
    from neighbor_collector.parsers import ArpParser

    raw = ArpParser().parse(lines, host="sw1.example.net")
    # {"GigabitEthernet0/3.2335": {"10.82.250.129": "0000.0c9f.f002"}}
"""

from .base import LineParser, NeighborParser
from .cisco_ios import ArpParser, Ipv6NeighborParser, MacTableParser, CISCO_IOS_PARSERS

__all__ = [
    "LineParser",
    "NeighborParser",
    "ArpParser",
    "Ipv6NeighborParser",
    "MacTableParser",
    "CISCO_IOS_PARSERS",
]

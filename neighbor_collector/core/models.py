"""
Data Models для Neighbor Collector.

Промежуточные (сырые) структуры ключуются именем интерфейса из вывода
команды. Проверенные структуры ключуются ID интерфейса из инвентаря —
только им можно доверять дальше по цепочке.

    RawNeighborTable:  {"GigabitEthernet0/3.2335": {"10.82.250.129": "0000.0c9f.f002"}}
    NeighborTable:     {42: {"10.82.250.129": "00:00:0c:9f:f0:02"}}
    NeighborCache:     {4: NeighborTable, 6: NeighborTable}
    RawForwardingTable: {"Gi9/22": {"0024.b20e.fe0f"}}
    ForwardingTable:   {7: {"00:24:b2:0e:fe:0f"}}
"""

from dataclasses import dataclass
from typing import Dict, Set

RawNeighborTable = Dict[str, Dict[str, str]]
NeighborTable = Dict[int, Dict[str, str]]
NeighborCache = Dict[int, NeighborTable]
RawForwardingTable = Dict[str, Set[str]]
ForwardingTable = Dict[int, Set[str]]


@dataclass(frozen=True)
class InterfaceRef:
    """
    Интерфейс устройства из инвентаря.

    Attributes:
        id: ID интерфейса
        name: Полное имя (GigabitEthernet0/3.2335)
    """
    id: int
    name: str


def count_entries(table: Dict[int, dict]) -> int:
    """Количество записей во вложенной таблице (сумма по интерфейсам)."""
    return sum(len(entries) for entries in table.values())

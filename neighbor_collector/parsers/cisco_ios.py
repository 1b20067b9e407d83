"""
Парсеры вывода Cisco IOS / IOS-XE.

    show ip arp
        Protocol  Address          Age (min)  Hardware Addr   Type   Interface
        Internet  10.82.250.129           -   0000.0c9f.f002  ARPA   GigabitEthernet0/3.2335

    show ipv6 neighbors
        IPv6 Address                              Age Link-layer Addr State Interface
        FE80::219:E200:3B7:1920                     0 0019.e2b7.1920  REACH Gi0/2.3

    show mac-address-table dynamic (Catalyst 6500)
         vlan   mac address     type    learn     age              ports
        ------+----------------+--------+-----+----------+--------------------------
          128  0024.b20e.fe0f   dynamic  Yes        255   Gi9/22

    show mac-address-table dynamic (Catalyst 2900/3500)
                  Mac Address Table
        -------------------------------------------
        Vlan    Mac Address       Type        Ports
        ----    -----------       --------    -----
          10    0024.b20e.fe0f    DYNAMIC     Gi0/1
"""

import re
from typing import Dict, Match, Optional, Set, Tuple

from ..core.constants import reduce_interface_name
from ..core.models import RawForwardingTable
from .base import LineParser, NeighborParser

IPV4 = r"\d{1,3}(?:\.\d{1,3}){3}"
IPV6 = r"[0-9A-Fa-f:.]*:[0-9A-Fa-f:.]*"
CISCO_MAC = r"\w{4}\.\w{4}\.\w{4}"


class ArpParser(NeighborParser):
    """Парсер show ip arp."""

    command = "show ip arp"
    ip_version = 4
    patterns = (
        re.compile(
            rf"^Internet\s+(?P<ip>{IPV4})\s+[-\d]+\s+(?P<mac>{CISCO_MAC})\s+ARPA\s+(?P<interface>\S+)"
        ),
    )


class Ipv6NeighborParser(NeighborParser):
    """Парсер show ipv6 neighbors."""

    command = "show ipv6 neighbors"
    ip_version = 6
    patterns = (
        re.compile(
            rf"^(?P<ip>{IPV6})\s+[-\d]+\s+(?P<mac>{CISCO_MAC})\s+\S+\s+(?P<interface>\S+)"
        ),
    )


class MacTableParser(LineParser):
    """
    Парсер show mac-address-table dynamic.

    Результат: {сокращённое имя интерфейса: {MAC, ...}}.
    Имена сокращаются сразу (Gi9/22), т.к. таблица коммутации
    выводит только короткую форму.
    """

    command = "show mac-address-table dynamic"
    patterns = (
        # vlan  mac  type  learn  age  ports
        re.compile(
            rf"^\*?\s+.*?(?P<mac>{CISCO_MAC})\s+dynamic\s+\S+\s+\S+\s+(?P<interface>\S+)\s*$",
            re.IGNORECASE,
        ),
        # vlan  mac  type  ports
        re.compile(
            rf"^\*?\s*\d+\s+(?P<mac>{CISCO_MAC})\s+dynamic\s+(?P<interface>\S+)\s*$",
            re.IGNORECASE,
        ),
    )

    def _extract(self, match: Match) -> Optional[Tuple[str, str]]:
        return reduce_interface_name(match.group("interface")), match.group("mac")

    def _store(self, result: RawForwardingTable, fields: Tuple[str, ...], host: str) -> None:
        iname, mac = fields
        macs: Set[str] = result.setdefault(iname, set())
        macs.add(mac)


# Парсеры по типу данных
CISCO_IOS_PARSERS: Dict[str, type] = {
    "arp": ArpParser,
    "nd": Ipv6NeighborParser,
    "fwt": MacTableParser,
}

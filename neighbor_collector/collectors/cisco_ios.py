"""
Коллектор для Cisco IOS / IOS-XE.
"""

from ..parsers.cisco_ios import CISCO_IOS_PARSERS
from .base import BaseCollector


class CiscoIOSCollector(BaseCollector):
    """
    ARP, IPv6 ND и таблица коммутации с Cisco IOS через CLI.

    Команды:
        show ip arp
        show ipv6 neighbors
        show mac-address-table dynamic
    """

    platform = "cisco_ios"
    parsers = CISCO_IOS_PARSERS

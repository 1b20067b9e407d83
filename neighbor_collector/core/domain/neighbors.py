"""
Domain logic для ARP/ND кэшей и таблицы коммутации.

Сверяет промежуточные таблицы парсеров с инвентарём устройства:
- имя интерфейса должно совпасть с реальным интерфейсом
- MAC должен пройти валидацию
- IPv6 link-local адреса отбрасываются
- (опционально) IP должен входить в одну из подсетей интерфейса

Результат ключуется ID интерфейса. Не зависит от SSH/collectors —
работает с сырыми данными и снимком инвентаря. Невалидные записи
пишутся в лог и пропускаются, исключений на входных данных нет.
"""

import ipaddress
from typing import Dict, List, Optional

from ..constants import reduce_interface_name, validate_mac
from ..device import Device
from ..logging import StructuredLogger, get_logger
from ..models import (
    ForwardingTable,
    NeighborTable,
    RawForwardingTable,
    RawNeighborTable,
)
from ...inventory.base import InventoryBackend, IPNetwork


class NeighborValidator:
    """
    Валидация собранных записей по инвентарю устройства.

    Attributes:
        inventory: Источник интерфейсов и подсетей
        ignore_ips_not_within_subnet: Отбрасывать IP вне подсетей интерфейса
        mac_format: Формат MAC в результате

    Example:
        validator = NeighborValidator(inventory, ignore_ips_not_within_subnet=True)
        table = validator.validate_neighbors(device, raw_arp, version=4)
        # {42: {"10.82.250.129": "00:00:0c:9f:f0:02"}}
    """

    def __init__(
        self,
        inventory: InventoryBackend,
        ignore_ips_not_within_subnet: bool = False,
        mac_format: str = "ieee",
        logger: Optional[StructuredLogger] = None,
    ):
        self.inventory = inventory
        self.ignore_ips_not_within_subnet = ignore_ips_not_within_subnet
        self.mac_format = mac_format
        self._logger = logger or get_logger(__name__)

    def _interface_ids(self, device: Device) -> Dict[str, int]:
        """Маппинг сокращённое имя -> ID интерфейса."""
        int_names: Dict[str, int] = {}
        for interface in self.inventory.list_interfaces(device.id):
            name = reduce_interface_name(interface.name)
            if name in int_names and int_names[name] != interface.id:
                self._logger.debug(
                    f"{device.host}: {interface.name} и интерфейс {int_names[name]} "
                    f"сокращаются до {name}",
                    device=device.host,
                )
            int_names[name] = interface.id
        return int_names

    def _interface_subnets(self, interface_ids: List[int], version: int) -> Dict[int, List[IPNetwork]]:
        """Подсети адресов каждого интерфейса для версии IP."""
        subnets: Dict[int, List[IPNetwork]] = {}
        for intid in interface_ids:
            for ip in self.inventory.list_interface_addresses(intid, version):
                if ip.version != version:
                    continue
                subnet = self.inventory.subnet_of(ip)
                if subnet is not None:
                    subnets.setdefault(intid, []).append(subnet)
        return subnets

    def _resolve_interface(self, device: Device, raw_name: str, int_names: Dict[str, int]) -> Optional[int]:
        """ID интерфейса по имени из вывода (None + WARNING если не найден)."""
        iname = reduce_interface_name(raw_name)
        intid = int_names.get(iname)
        if intid is None:
            self._logger.warning(
                f"{device.host}: не удалось сопоставить {iname} ни с одним интерфейсом",
                device=device.host,
            )
        return intid

    def validate_neighbors(
        self,
        device: Device,
        cache: RawNeighborTable,
        version: int,
    ) -> NeighborTable:
        """
        Проверяет ARP (version=4) или ND (version=6) таблицу.

        Args:
            device: Устройство
            cache: {имя интерфейса из вывода: {IP: MAC}}
            version: Версия IP (4 или 6)

        Returns:
            NeighborTable: {ID интерфейса: {IP: канонический MAC}}
        """
        host = device.host
        int_names = self._interface_ids(device)

        subnets: Dict[int, List[IPNetwork]] = {}
        if self.ignore_ips_not_within_subnet:
            subnets = self._interface_subnets(sorted(set(int_names.values())), version)

        valid: NeighborTable = {}
        for raw_name, entries in cache.items():
            intid = self._resolve_interface(device, raw_name, int_names)
            if intid is None:
                continue

            for ip_str, mac in entries.items():
                try:
                    ip = ipaddress.ip_address(ip_str)
                except ValueError:
                    self._logger.debug(f"{host}: невалидный IP: {ip_str}", device=host)
                    continue
                if ip.version != version:
                    self._logger.debug(f"{host}: {ip_str} не IPv{version}", device=host)
                    continue

                if version == 6 and ip.is_link_local:
                    continue

                validmac = validate_mac(mac, format=self.mac_format)
                if not validmac:
                    self._logger.debug(f"{host}: невалидный MAC: {mac}", device=host)
                    continue

                if self.ignore_ips_not_within_subnet and not self._within_subnets(
                    host, ip, subnets.get(intid, [])
                ):
                    continue

                valid.setdefault(intid, {})[str(ip)] = validmac
                self._logger.debug(
                    f"{host}: valid: {raw_name} -> {ip} -> {validmac}",
                    device=host,
                )

        return valid

    def _within_subnets(self, host: str, ip, subnets: List[IPNetwork]) -> bool:
        """Проверяет, входит ли IP хотя бы в одну подсеть интерфейса."""
        for subnet in subnets:
            if ip in subnet:
                return True
            self._logger.debug(f"{host}: {ip} вне {subnet}", device=host)
        if not subnets:
            self._logger.debug(f"{host}: у интерфейса нет подсетей для {ip}", device=host)
        return False

    def validate_forwarding_table(
        self,
        device: Device,
        fwt: RawForwardingTable,
    ) -> ForwardingTable:
        """
        Проверяет таблицу коммутации.

        Args:
            device: Устройство
            fwt: {имя интерфейса из вывода: {MAC, ...}}

        Returns:
            ForwardingTable: {ID интерфейса: {канонический MAC, ...}}
        """
        host = device.host
        int_names = self._interface_ids(device)

        valid: ForwardingTable = {}
        for raw_name, macs in fwt.items():
            intid = self._resolve_interface(device, raw_name, int_names)
            if intid is None:
                continue

            for mac in macs:
                validmac = validate_mac(mac, format=self.mac_format)
                if not validmac:
                    self._logger.debug(f"{host}: невалидный MAC: {mac}", device=host)
                    continue
                valid.setdefault(intid, set()).add(validmac)
                self._logger.debug(f"{host}: {raw_name} -> {validmac}", device=host)

        return valid

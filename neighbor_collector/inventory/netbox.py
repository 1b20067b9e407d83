"""
Инвентарь на основе NetBox.

Читает интерфейсы устройства, их IP-адреса и подсети (prefixes)
через pynetbox. Ничего не записывает.
"""

import ipaddress
import logging
import os
from datetime import datetime
from typing import Any, Callable, List, Optional

import pynetbox
import requests

from ..core.device import Device, to_utc
from ..core.exceptions import ConfigError, NetBoxAPIError, NetBoxError
from ..core.models import InterfaceRef
from .base import InventoryBackend, IPInterface, IPNetwork

logger = logging.getLogger(__name__)

# Custom fields устройства, управляющие сбором
CF_COLLECT_ARP = "collect_arp"
CF_COLLECT_FWT = "collect_fwt"
CF_DOWN_FROM = "down_from"
CF_DOWN_UNTIL = "down_until"


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Custom field даты/времени -> datetime в UTC (None если пусто или не разобрано)."""
    if not value:
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    try:
        return to_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except ValueError:
        logger.warning(f"Не удалось разобрать дату: {value}")
        return None


def _cf_flag(custom_fields: dict, name: str) -> bool:
    """Флаг сбора: не заданный custom field означает True."""
    value = custom_fields.get(name)
    return True if value is None else bool(value)


class NetBoxInventory(InventoryBackend):
    """
    Инвентарь NetBox.

    Example:
        inventory = NetBoxInventory(url="https://netbox.example.net", token="xxx")
        device = inventory.get_device("sw1.core.example.net")
        interfaces = inventory.list_interfaces(device.id)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        ssl_verify: bool = True,
        api: Optional[Any] = None,
    ):
        """
        Инициализация клиента NetBox.

        Args:
            url: URL NetBox сервера (или env NETBOX_URL)
            token: API токен (или env NETBOX_TOKEN)
            ssl_verify: Проверять SSL сертификат
            api: Готовый pynetbox.api (для тестов)

        Raises:
            ConfigError: URL или токен не указаны
        """
        self.url = url or os.environ.get("NETBOX_URL", "")

        if api is not None:
            self.api = api
            return

        token = token or os.environ.get("NETBOX_TOKEN")
        if not self.url:
            raise ConfigError(
                "NetBox URL не указан. Укажите netbox.url или установите NETBOX_URL",
                key="netbox.url",
            )
        if not token:
            raise ConfigError(
                "NetBox токен не указан. Укажите netbox.token или установите NETBOX_TOKEN",
                key="netbox.token",
            )

        self.api = pynetbox.api(self.url, token=token)

        if not ssl_verify:
            session = requests.Session()
            session.verify = False
            self.api.http_session = session

        logger.info(f"NetBox клиент инициализирован: {self.url}")

    @classmethod
    def from_config(cls, config) -> "NetBoxInventory":
        """Создаёт инвентарь из секции netbox конфигурации (AppConfig)."""
        netbox = config.netbox
        return cls(url=netbox.url, token=netbox.token, ssl_verify=netbox.verify_ssl)

    def _call(self, endpoint: str, func: Callable[[], Any]) -> Any:
        """Выполняет запрос к API, оборачивая ошибки в NetBoxError."""
        try:
            return func()
        except pynetbox.RequestError as e:
            status_code = getattr(getattr(e, "req", None), "status_code", None)
            raise NetBoxAPIError(
                f"Ошибка NetBox API: {e}",
                url=self.url,
                status_code=status_code,
                endpoint=endpoint,
            ) from e
        except requests.exceptions.RequestException as e:
            raise NetBoxError(f"NetBox недоступен: {e}", url=self.url) from e

    def get_device(self, name: str) -> Optional[Device]:
        """
        Получает устройство по имени.

        Args:
            name: Имя устройства в NetBox (FQDN)

        Returns:
            Device или None если устройство не найдено
        """
        nb_device = self._call("dcim/devices", lambda: self.api.dcim.devices.get(name=name))
        if not nb_device:
            logger.warning(f"Устройство не найдено в NetBox: {name}")
            return None

        custom_fields = dict(getattr(nb_device, "custom_fields", None) or {})
        platform = getattr(nb_device, "platform", None)
        platform_slug = getattr(platform, "slug", None) or "cisco_ios"

        metadata = {}
        primary_ip = getattr(nb_device, "primary_ip", None)
        if primary_ip:
            metadata["primary_ip"] = str(primary_ip.address).split("/")[0]

        return Device(
            id=nb_device.id,
            host=nb_device.name,
            platform=platform_slug.replace("-", "_"),
            collect_arp=_cf_flag(custom_fields, CF_COLLECT_ARP),
            collect_fwt=_cf_flag(custom_fields, CF_COLLECT_FWT),
            down_from=_parse_datetime(custom_fields.get(CF_DOWN_FROM)),
            down_until=_parse_datetime(custom_fields.get(CF_DOWN_UNTIL)),
            metadata=metadata,
        )

    def list_interfaces(self, device_id: int) -> List[InterfaceRef]:
        interfaces = self._call(
            "dcim/interfaces",
            lambda: list(self.api.dcim.interfaces.filter(device_id=device_id)),
        )
        logger.debug(f"Получено интерфейсов: {len(interfaces)}")
        return [InterfaceRef(id=intf.id, name=intf.name) for intf in interfaces]

    def list_interface_addresses(self, interface_id: int, version: int) -> List[IPInterface]:
        ips = self._call(
            "ipam/ip-addresses",
            lambda: list(
                self.api.ipam.ip_addresses.filter(interface_id=interface_id, family=version)
            ),
        )
        result = []
        for ip in ips:
            try:
                result.append(ipaddress.ip_interface(str(ip.address)))
            except ValueError:
                logger.warning(f"Невалидный адрес в NetBox: {ip.address}")
        return [ip for ip in result if ip.version == version]

    def subnet_of(self, ip: IPInterface) -> Optional[IPNetwork]:
        """Самый специфичный prefix, содержащий адрес."""
        address = str(ip.ip)
        prefixes = self._call(
            "ipam/prefixes",
            lambda: list(self.api.ipam.prefixes.filter(contains=address)),
        )
        best: Optional[IPNetwork] = None
        for prefix in prefixes:
            try:
                network = ipaddress.ip_network(str(prefix.prefix))
            except ValueError:
                continue
            if ip.ip not in network:
                continue
            if best is None or network.prefixlen > best.prefixlen:
                best = network
        return best

"""
Pytest configuration и общие fixtures для тестов.

Предоставляет переиспользуемые fixtures:
- load_fixture: Загрузка вывода show-команд из файлов
- make_inventory: Инвентарь в памяти (интерфейсы, адреса, подсети)
- credential_rules: Примеры правил cli_credentials
- device: Тестовое устройство
"""

import ipaddress
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from neighbor_collector.core.device import Device
from neighbor_collector.core.models import InterfaceRef
from neighbor_collector.inventory.base import InventoryBackend


class FakeInventory(InventoryBackend):
    """
    Инвентарь в памяти.

    Args:
        interfaces: {ID: полное имя интерфейса}
        addresses: {(ID интерфейса, версия): ["10.0.0.1/24", ...]}
        subnets: Подсети, заведённые в IPAM ("10.0.0.0/24", ...)
    """

    def __init__(
        self,
        interfaces: Optional[Dict[int, str]] = None,
        addresses: Optional[Dict[Tuple[int, int], List[str]]] = None,
        subnets: Optional[List[str]] = None,
    ):
        self.interfaces = interfaces or {}
        self.addresses = addresses or {}
        self.subnets = [ipaddress.ip_network(s) for s in (subnets or [])]
        self.calls: List[tuple] = []

    def list_interfaces(self, device_id):
        self.calls.append(("list_interfaces", device_id))
        return [InterfaceRef(id=i, name=name) for i, name in self.interfaces.items()]

    def list_interface_addresses(self, interface_id, version):
        self.calls.append(("list_interface_addresses", interface_id, version))
        return [
            ipaddress.ip_interface(a)
            for a in self.addresses.get((interface_id, version), [])
        ]

    def subnet_of(self, ip):
        self.calls.append(("subnet_of", str(ip)))
        candidates = [
            net for net in self.subnets
            if net.version == ip.version and ip.ip in net
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda net: net.prefixlen)


@pytest.fixture
def fixtures_dir() -> Path:
    """Возвращает путь к директории fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture(fixtures_dir):
    """
    Fixture для загрузки вывода команд из файлов.

    Usage:
        lines = load_fixture("cisco_ios", "show_ip_arp.txt").splitlines()

    Args:
        platform: Платформа (cisco_ios)
        filename: Имя файла с данными

    Returns:
        str: Содержимое файла
    """
    def _load(platform: str, filename: str) -> str:
        fixture_path = fixtures_dir / platform / filename
        if not fixture_path.exists():
            pytest.skip(f"Fixture не найден: {fixture_path}")
        return fixture_path.read_text(encoding="utf-8")
    return _load


@pytest.fixture
def make_inventory():
    """
    Фабрика FakeInventory.

    Usage:
        inventory = make_inventory({42: "GigabitEthernet0/3.2335"})
    """
    def _make(interfaces=None, addresses=None, subnets=None) -> FakeInventory:
        return FakeInventory(interfaces, addresses, subnets)
    return _make


@pytest.fixture
def device() -> Device:
    """Тестовое устройство."""
    return Device(id=12, host="sw1.core.example.net", platform="cisco_ios")


@pytest.fixture
def credential_rules() -> List[dict]:
    """
    Правила cli_credentials в порядке приоритета.

    Returns:
        List[dict]: Правила как в config.yaml
    """
    return [
        {
            "pattern": r"\.core\.example\.net$",
            "login": "netops",
            "password": "secret",
            "privileged": "enable-secret",
        },
        {
            "pattern": r"^lab-",
            "login": "lab",
            "password": "lab",
            "transport": "Telnet",
            "timeout": 60,
        },
    ]


def pytest_configure(config):
    """Регистрация custom markers для pytest."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (быстрые, без внешних зависимостей)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (требуют fixtures)"
    )
    config.addinivalue_line(
        "markers", "netbox: NetBox tests (требуют mock NetBox API)"
    )

"""
Тесты NetBoxInventory с mock pynetbox API.
"""

import ipaddress
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pynetbox
import pytest
import requests

from neighbor_collector.core.config_schema import AppConfig
from neighbor_collector.core.exceptions import ConfigError, NetBoxAPIError, NetBoxError
from neighbor_collector.core.models import InterfaceRef
from neighbor_collector.inventory import NetBoxInventory


@pytest.fixture
def api():
    return MagicMock()


@pytest.fixture
def inventory(api):
    return NetBoxInventory(url="https://netbox.example.net/", api=api)


@pytest.mark.netbox
class TestNetBoxInventoryInit:

    def test_missing_url(self, monkeypatch):
        monkeypatch.delenv("NETBOX_URL", raising=False)

        with pytest.raises(ConfigError) as exc_info:
            NetBoxInventory(token="abc")
        assert exc_info.value.key == "netbox.url"

    def test_missing_token(self, monkeypatch):
        monkeypatch.delenv("NETBOX_TOKEN", raising=False)

        with pytest.raises(ConfigError) as exc_info:
            NetBoxInventory(url="https://netbox.example.net")
        assert exc_info.value.key == "netbox.token"

    @patch("neighbor_collector.inventory.netbox.pynetbox.api")
    def test_ssl_verify_disabled(self, mock_api):
        inventory = NetBoxInventory(
            url="https://netbox.example.net", token="abc", ssl_verify=False,
        )

        mock_api.assert_called_once_with("https://netbox.example.net", token="abc")
        assert inventory.api.http_session.verify is False

    @patch("neighbor_collector.inventory.netbox.pynetbox.api")
    def test_from_config(self, mock_api):
        config = AppConfig(netbox={"url": "https://netbox.example.net", "token": "abc"})

        inventory = NetBoxInventory.from_config(config)

        assert inventory.url == "https://netbox.example.net/"
        mock_api.assert_called_once_with("https://netbox.example.net/", token="abc")


@pytest.mark.netbox
class TestNetBoxInventoryQueries:

    def test_list_interfaces(self, inventory, api):
        api.dcim.interfaces.filter.return_value = [
            SimpleNamespace(id=42, name="GigabitEthernet0/3.2335"),
            SimpleNamespace(id=7, name="GigabitEthernet9/22"),
        ]

        result = inventory.list_interfaces(12)

        api.dcim.interfaces.filter.assert_called_once_with(device_id=12)
        assert result == [
            InterfaceRef(id=42, name="GigabitEthernet0/3.2335"),
            InterfaceRef(id=7, name="GigabitEthernet9/22"),
        ]

    def test_list_interface_addresses(self, inventory, api):
        api.ipam.ip_addresses.filter.return_value = [
            SimpleNamespace(address="10.82.250.254/25"),
            SimpleNamespace(address="garbage"),
        ]

        result = inventory.list_interface_addresses(42, 4)

        api.ipam.ip_addresses.filter.assert_called_once_with(interface_id=42, family=4)
        assert result == [ipaddress.ip_interface("10.82.250.254/25")]

    def test_subnet_of_most_specific(self, inventory, api):
        api.ipam.prefixes.filter.return_value = [
            SimpleNamespace(prefix="10.0.0.0/8"),
            SimpleNamespace(prefix="10.82.250.128/25"),
            SimpleNamespace(prefix="10.82.250.0/24"),
        ]

        result = inventory.subnet_of(ipaddress.ip_interface("10.82.250.254/25"))

        api.ipam.prefixes.filter.assert_called_once_with(contains="10.82.250.254")
        assert result == ipaddress.ip_network("10.82.250.128/25")

    def test_subnet_of_none(self, inventory, api):
        api.ipam.prefixes.filter.return_value = []

        assert inventory.subnet_of(ipaddress.ip_interface("192.0.2.1/24")) is None

    def test_get_device(self, inventory, api):
        api.dcim.devices.get.return_value = SimpleNamespace(
            id=12,
            name="sw1.core.example.net",
            platform=SimpleNamespace(slug="cisco-ios"),
            primary_ip=SimpleNamespace(address="10.0.0.1/32"),
            custom_fields={
                "collect_arp": True,
                "collect_fwt": False,
                "down_from": "2026-10-01T00:00:00Z",
                "down_until": None,
            },
        )

        device = inventory.get_device("sw1.core.example.net")

        api.dcim.devices.get.assert_called_once_with(name="sw1.core.example.net")
        assert device.id == 12
        assert device.host == "sw1.core.example.net"
        assert device.platform == "cisco_ios"
        assert device.collect_arp is True
        assert device.collect_fwt is False
        assert device.down_from == datetime(2026, 10, 1, tzinfo=timezone.utc)
        assert device.down_until is None
        assert device.metadata == {"primary_ip": "10.0.0.1"}

    def test_get_device_without_custom_fields(self, inventory, api):
        """Не заданные флаги сбора означают True."""
        api.dcim.devices.get.return_value = SimpleNamespace(
            id=13, name="sw2", platform=None, primary_ip=None, custom_fields={},
        )

        device = inventory.get_device("sw2")

        assert device.collect_arp is True
        assert device.collect_fwt is True
        assert device.platform == "cisco_ios"

    def test_get_device_date_and_datetime_fields(self, inventory, api):
        """Custom field типа date и типа datetime приводятся к UTC."""
        api.dcim.devices.get.return_value = SimpleNamespace(
            id=14, name="sw3", platform=None, primary_ip=None,
            custom_fields={"down_from": "2026-01-01", "down_until": "2099-01-01T00:00:00Z"},
        )

        device = inventory.get_device("sw3")

        assert device.down_from == datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert device.down_until == datetime(2099, 1, 1, tzinfo=timezone.utc)
        assert device.is_in_downtime(datetime(2026, 10, 19, 12, 0)) is True

    def test_get_device_not_found(self, inventory, api):
        api.dcim.devices.get.return_value = None

        assert inventory.get_device("missing") is None


@pytest.mark.netbox
class TestNetBoxInventoryErrors:

    def test_request_error_wrapped(self, inventory, api):
        response = MagicMock(status_code=403, url="https://netbox.example.net/api/dcim/interfaces/")
        response.json.return_value = {"detail": "Invalid token"}
        api.dcim.interfaces.filter.side_effect = pynetbox.RequestError(response)

        with pytest.raises(NetBoxAPIError) as exc_info:
            inventory.list_interfaces(12)

        assert exc_info.value.status_code == 403
        assert exc_info.value.endpoint == "dcim/interfaces"

    def test_connection_error_wrapped(self, inventory, api):
        api.ipam.prefixes.filter.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(NetBoxError):
            inventory.subnet_of(ipaddress.ip_interface("10.0.0.1/24"))

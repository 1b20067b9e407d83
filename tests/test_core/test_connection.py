"""
Тесты CLI сессии (ConnectionManager) с mock Scrapli.

Проверяет порядок команд в сессии, возврат paging и выход из
privileged режима на пути ошибки, перевод ошибок Scrapli в
CollectorError.
"""

import pytest
from unittest.mock import patch, MagicMock

from scrapli.exceptions import (
    ScrapliAuthenticationFailed,
    ScrapliConnectionError,
    ScrapliPrivilegeError,
    ScrapliTimeout,
)

from neighbor_collector.core.config_schema import ConnectionConfig
from neighbor_collector.core.connection import ConnectionManager, get_scrapli_platform
from neighbor_collector.core.credentials import Credentials
from neighbor_collector.core.exceptions import (
    AuthenticationError,
    CommandError,
    ConfigError,
    ConnectionError as CollectorConnectionError,
    PrivilegeError,
    TimeoutError as CollectorTimeoutError,
)

ARP_OUTPUT = (
    "Protocol  Address          Age (min)  Hardware Addr   Type   Interface\n"
    "Internet  10.82.250.129           -   0000.0c9f.f002  ARPA   GigabitEthernet0/3.2335"
)


def make_connection(prompt="sw1>", outputs=None, fail_on=None, failed=()):
    """
    Mock Scrapli подключения.

    Args:
        prompt: Prompt после логина
        outputs: {команда: вывод}
        fail_on: {команда: исключение}
        failed: Команды, которые устройство отвергает (response.failed)
    """
    outputs = outputs or {}
    fail_on = fail_on or {}
    conn = MagicMock()
    conn.get_prompt.return_value = prompt

    def send_command(command, timeout_ops=None):
        if command in fail_on:
            raise fail_on[command]
        return MagicMock(failed=command in failed, result=outputs.get(command, ""))

    conn.send_command.side_effect = send_command
    return conn


def session_steps(conn):
    """Шаги сессии: open, send_command, acquire_priv, close."""
    steps = []
    for call in conn.mock_calls:
        name = call[0]
        if name in ("open", "close"):
            steps.append((name, None))
        elif name in ("send_command", "acquire_priv"):
            steps.append((name, call[1][0]))
    return steps


@pytest.fixture
def manager():
    return ConnectionManager()


@pytest.fixture
def creds():
    return Credentials(login="netops", password="secret", privileged="enable-secret")


@pytest.mark.unit
class TestRunCommand:
    """Успешная сессия."""

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_returns_output_lines(self, mock_scrapli, manager, device, creds):
        mock_scrapli.return_value = make_connection(outputs={"show ip arp": ARP_OUTPUT})

        lines = manager.run_command(device, creds, "show ip arp")

        assert lines == ARP_OUTPUT.splitlines()

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_session_order_with_elevation(self, mock_scrapli, manager, device, creds):
        """paging off, enable, команда, paging restore, disable, close."""
        conn = make_connection(outputs={"show ip arp": ARP_OUTPUT})
        mock_scrapli.return_value = conn

        manager.run_command(device, creds, "show ip arp")

        assert session_steps(conn) == [
            ("open", None),
            ("send_command", "terminal length 0"),
            ("acquire_priv", "privilege_exec"),
            ("send_command", "show ip arp"),
            ("send_command", "terminal length 36"),
            ("acquire_priv", "exec"),
            ("close", None),
        ]

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_no_elevation_without_privileged_secret(self, mock_scrapli, manager, device):
        conn = make_connection()
        mock_scrapli.return_value = conn
        creds = Credentials(login="netops", password="secret")

        manager.run_command(device, creds, "show ip arp")

        assert conn.acquire_priv.call_count == 0
        assert "auth_secondary" not in mock_scrapli.call_args.kwargs

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_already_privileged_prompt(self, mock_scrapli, manager, device, creds):
        """Prompt с # — enable не нужен и не снимается."""
        conn = make_connection(prompt="sw1#")
        mock_scrapli.return_value = conn

        manager.run_command(device, creds, "show ip arp")

        assert conn.acquire_priv.call_count == 0
        assert conn.close.call_count == 1

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_exactly_one_show_command(self, mock_scrapli, manager, device, creds):
        conn = make_connection()
        mock_scrapli.return_value = conn

        manager.run_command(device, creds, "show ipv6 neighbors")

        sent = [step[1] for step in session_steps(conn) if step[0] == "send_command"]
        assert sent.count("show ipv6 neighbors") == 1
        assert len(sent) == 3
        assert mock_scrapli.call_count == 1


@pytest.mark.unit
class TestConnectionParams:
    """Параметры подключения Scrapli."""

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_ssh_params(self, mock_scrapli, manager, device, creds):
        mock_scrapli.return_value = make_connection()

        manager.run_command(device, creds, "show ip arp")

        params = mock_scrapli.call_args.kwargs
        assert params["host"] == "sw1.core.example.net"
        assert params["auth_username"] == "netops"
        assert params["auth_password"] == "secret"
        assert params["auth_secondary"] == "enable-secret"
        assert params["auth_strict_key"] is False
        assert params["transport"] == "system"
        assert params["port"] == 22
        assert params["platform"] == "cisco_iosxe"
        assert params["timeout_socket"] == 30
        assert params["timeout_ops"] == 30

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_telnet_params(self, mock_scrapli, manager, device):
        mock_scrapli.return_value = make_connection()
        creds = Credentials(login="lab", password="lab", transport="Telnet", timeout=60)

        manager.run_command(device, creds, "show ip arp")

        params = mock_scrapli.call_args.kwargs
        assert params["transport"] == "telnet"
        assert params["port"] == 23
        assert params["timeout_transport"] == 60

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_device_port_overrides_default(self, mock_scrapli, manager, device, creds):
        mock_scrapli.return_value = make_connection()
        device.port = 2222

        manager.run_command(device, creds, "show ip arp")

        assert mock_scrapli.call_args.kwargs["port"] == 2222

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_from_config(self, mock_scrapli, device, creds):
        mock_scrapli.return_value = make_connection()
        manager = ConnectionManager.from_config(
            ConnectionConfig(ssh_transport="paramiko", ssh_port=8022)
        )

        manager.run_command(device, creds, "show ip arp")

        params = mock_scrapli.call_args.kwargs
        assert params["transport"] == "paramiko"
        assert params["port"] == 8022

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_unknown_transport_is_config_error(self, mock_scrapli, manager, device):
        creds = Credentials(login="a", password="b", transport="ftp")

        with pytest.raises(ConfigError):
            manager.run_command(device, creds, "show ip arp")

        mock_scrapli.assert_not_called()


@pytest.mark.unit
class TestSessionErrors:
    """Ошибки на любом шаге превращаются в один CollectorError."""

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_connect_refused(self, mock_scrapli, manager, device, creds):
        conn = make_connection()
        conn.open.side_effect = ScrapliConnectionError("connection refused")
        mock_scrapli.return_value = conn

        with pytest.raises(CollectorConnectionError) as exc_info:
            manager.run_command(device, creds, "show ip arp")

        assert exc_info.value.device == "sw1.core.example.net"
        assert "connection refused" in str(exc_info.value)
        assert conn.send_command.call_count == 0

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_os_error_on_connect(self, mock_scrapli, manager, device, creds):
        conn = make_connection()
        conn.open.side_effect = OSError("no route to host")
        mock_scrapli.return_value = conn

        with pytest.raises(CollectorConnectionError):
            manager.run_command(device, creds, "show ip arp")

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_auth_failure(self, mock_scrapli, manager, device, creds):
        conn = make_connection()
        conn.open.side_effect = ScrapliAuthenticationFailed("bad password")
        mock_scrapli.return_value = conn

        with pytest.raises(AuthenticationError) as exc_info:
            manager.run_command(device, creds, "show ip arp")

        assert exc_info.value.device == "sw1.core.example.net"

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_command_timeout_restores_paging(self, mock_scrapli, manager, device, creds):
        """Таймаут команды: paging и режим всё равно возвращаются."""
        conn = make_connection(fail_on={"show ip arp": ScrapliTimeout("timed out")})
        mock_scrapli.return_value = conn

        with pytest.raises(CollectorTimeoutError) as exc_info:
            manager.run_command(device, creds, "show ip arp")

        assert exc_info.value.timeout_seconds == 30
        steps = session_steps(conn)
        assert steps[-3:] == [
            ("send_command", "terminal length 36"),
            ("acquire_priv", "exec"),
            ("close", None),
        ]

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_rejected_command(self, mock_scrapli, manager, device, creds):
        conn = make_connection(
            outputs={"show ipv6 neighbors": "% Invalid input detected at '^' marker."},
            failed={"show ipv6 neighbors"},
        )
        mock_scrapli.return_value = conn

        with pytest.raises(CommandError) as exc_info:
            manager.run_command(device, creds, "show ipv6 neighbors")

        assert exc_info.value.command == "show ipv6 neighbors"
        assert ("send_command", "terminal length 36") in session_steps(conn)

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_elevation_failure(self, mock_scrapli, manager, device, creds):
        """enable не удался: paging возвращается, exec не запрашивается."""
        conn = make_connection()
        conn.acquire_priv.side_effect = ScrapliPrivilegeError("bad secret")
        mock_scrapli.return_value = conn

        with pytest.raises(PrivilegeError):
            manager.run_command(device, creds, "show ip arp")

        steps = session_steps(conn)
        assert ("send_command", "show ip arp") not in steps
        assert ("send_command", "terminal length 36") in steps
        assert steps[-1] == ("close", None)

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_restore_failure_does_not_mask_original_error(self, mock_scrapli, manager, device, creds):
        disconnect = ScrapliConnectionError("connection reset")
        conn = make_connection(fail_on={
            "show ip arp": ScrapliTimeout("timed out"),
            "terminal length 36": disconnect,
        })
        mock_scrapli.return_value = conn

        with pytest.raises(CollectorTimeoutError):
            manager.run_command(device, creds, "show ip arp")

        assert conn.close.call_count == 1

    @patch("neighbor_collector.core.connection.Scrapli")
    def test_close_error_is_ignored(self, mock_scrapli, manager, device, creds):
        conn = make_connection(outputs={"show ip arp": ARP_OUTPUT})
        conn.close.side_effect = ScrapliConnectionError("already closed")
        mock_scrapli.return_value = conn

        assert manager.run_command(device, creds, "show ip arp")


@pytest.mark.unit
class TestGetScrapliPlatform:

    @pytest.mark.parametrize("platform, expected", [
        ("cisco_ios", "cisco_iosxe"),
        ("cisco_iosxe", "cisco_iosxe"),
        ("CISCO_IOS", "cisco_iosxe"),
        ("", "cisco_iosxe"),
    ])
    def test_mapping(self, platform, expected):
        assert get_scrapli_platform(platform) == expected

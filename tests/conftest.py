"""
Pytest configuration and shared fixtures for NetSwitcher tests.

This module provides reusable fixtures and configuration for all tests.
"""

import threading

import pytest
from unittest.mock import MagicMock

from netswitcher.logging_config import NetSwitcherLogger
from netswitcher.profiles import ConfigType, NetworkConfig, NetworkIdentity, ServiceSettings


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no system access")


@pytest.fixture
def home_config():
    """An auto-apply config bound to a router MAC."""
    return NetworkConfig(
        name="Home",
        ssid="HomeNet",
        router_mac="aa:bb:cc:dd:ee:ff",
        auto_apply=True,
        target_service="Wi-Fi",
        use_dhcp=True,
        dns_servers=["1.1.1.1", "8.8.8.8"],
    )


@pytest.fixture
def office_config():
    """A legacy auto-apply config keyed on SSID only, with static addressing."""
    return NetworkConfig(
        name="Office",
        ssid="OfficeNet",
        auto_apply=True,
        use_dhcp=False,
        ip_address="10.0.0.50",
        subnet_mask="255.255.0.0",
        router="10.0.0.1",
        dns_servers=["10.0.0.2"],
    )


@pytest.fixture
def lab_config():
    """A wired config that is not applied automatically."""
    return NetworkConfig(
        name="Lab",
        ssid="[Wired] USB 10/100/1000 LAN",
        config_type=ConfigType.SERVICE,
        target_service="USB 10/100/1000 LAN",
    )


@pytest.fixture
def mock_command_outputs():
    """Provide captured output from the macOS commands the probe runs."""
    return {
        "ioreg": '    |   |   |   "IO80211SSID" = "HomeNet"',
        "airport": "Current Wi-Fi Network: HomeNet\n",
        "airport_off": "You are not associated with an AirPort network.\nWi-Fi power is currently off.\n",
        "system_profiler": """Wi-Fi:

      Interfaces:
        en0:
          Card Type: Wi-Fi  (0x14E4, 0x4387)
          Status: Connected
          Current Network Information:
            HomeNet:
              PHY Mode: 802.11ac
              Channel: 44 (5GHz, 80MHz)
          Other Local Wi-Fi Networks:
            Neighbour:
""",
        "services": """An asterisk (*) denotes that a network service is disabled.
USB 10/100/1000 LAN
Wi-Fi
*Bluetooth PAN
Thunderbolt Bridge
""",
        "hardware_ports": """
Hardware Port: Wi-Fi
Device: en0
Ethernet Address: 3c:22:fb:00:00:01

Hardware Port: Thunderbolt Bridge
Device: bridge0
Ethernet Address: 82:00:00:00:00:00

Hardware Port: USB 10/100/1000 LAN
Device: en7
Ethernet Address: 00:e0:4c:00:00:02
""",
        "getinfo_dhcp": """DHCP Configuration
IP address: 192.168.1.23
Subnet mask: 255.255.255.0
Router: 192.168.1.1
Client ID:
IPv6: Automatic
IPv6 IP address: none
IPv6 Router: none
Wi-Fi ID: 3c:22:fb:00:00:01
""",
        "getinfo_manual": """Manual Configuration
IP address: 10.0.0.50
Subnet mask: 255.255.0.0
Router: 10.0.0.1
IPv6: Automatic
IPv6 IP address: none
IPv6 Router: none
""",
        "getinfo_disconnected": """DHCP Configuration
IP address: none
Subnet mask: none
Router: none
""",
        "dns_servers": "1.1.1.1\n8.8.8.8\n",
        "dns_none": "There aren't any DNS Servers set on Wi-Fi.\n",
        "scutil_dns": """DNS configuration

resolver #1
  nameserver[0] : 192.168.1.1
  nameserver[1] : 198.18.0.2
  if_index : 6 (en0)

DNS configuration (for scoped queries)

resolver #1
  nameserver[0] : 192.168.1.1
  if_index : 6 (en0)
""",
        "netstat": """Routing tables

Internet:
Destination        Gateway            Flags               Netif Expire
default            192.168.1.1        UGScg                 en0
127                127.0.0.1          UCS                   lo0
""",
        "arp": "? (192.168.1.1) at AA:BB:CC:DD:EE:FF on en0 ifscope [ethernet]\n",
        "arp_short": "? (192.168.1.1) at 0:1b:c:dd:ee:f on en0 ifscope [ethernet]\n",
        "arp_incomplete": "? (192.168.1.1) at (incomplete) on en0 ifscope [ethernet]\n",
    }


class FakeProbe:
    """In-memory NetworkProbe whose answers can be changed between polls."""

    def __init__(self, identity=None, live=None, services=None):
        self.identity = identity or NetworkIdentity()
        self.live = live or ServiceSettings(use_dhcp=True)
        self.services = services or ["Wi-Fi", "USB 10/100/1000 LAN"]
        self.identity_calls = 0
        self.gate = None  # threading.Event that blocks the probe until set

    def list_services(self):
        return list(self.services)

    def current_identity(self):
        self.identity_calls += 1
        if self.gate is not None:
            self.gate.wait(5)
        return self.identity

    def current_service_config(self, service):
        return self.live


@pytest.fixture
def fake_probe():
    return FakeProbe()


@pytest.fixture
def probe_gate():
    return threading.Event()


@pytest.fixture
def mock_actuator():
    """Provide an actuator whose calls all succeed."""
    actuator = MagicMock()
    actuator.set_dhcp.return_value = (True, "")
    actuator.set_static.return_value = (True, "")
    actuator.set_dns_servers.return_value = (True, "")
    return actuator


@pytest.fixture
def temp_config_dir(tmp_path):
    """Provide a temporary config directory."""
    config_dir = tmp_path / ".config" / "netswitcher"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def config_file(temp_config_dir):
    return temp_config_dir / "config.toml"


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration between tests."""
    import logging

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)
    yield
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.WARNING)
    NetSwitcherLogger._initialized = False

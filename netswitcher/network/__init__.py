"""
Network module for NetSwitcher.

This module handles all network-related operations including:
- Network identity detection (SSID, router MAC, wired service)
- Live service settings (IP, mask, router, DNS)
- Network configuration (DHCP, static addressing, DNS servers)
"""

from .detection import (
    get_current_ssid,
    get_network_services,
    get_ethernet_status,
    get_router_mac,
    get_network_identity,
    get_current_service_config,
)
from .configuration import set_dhcp, set_static, set_dns_servers
from .adapters import NetworkProbe, NetworkActuator

__all__ = [
    "get_current_ssid",
    "get_network_services",
    "get_ethernet_status",
    "get_router_mac",
    "get_network_identity",
    "get_current_service_config",
    "set_dhcp",
    "set_static",
    "set_dns_servers",
    "NetworkProbe",
    "NetworkActuator",
]

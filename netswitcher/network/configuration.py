"""
Network configuration functions for NetSwitcher.

This module provides functions that change the addressing and DNS settings
of a network service through networksetup. Each returns (ok, message) and
is safe to repeat with the same arguments.
"""

from .. import config
from ..logging_config import get_logger
from ..utils import run_action

# Get module logger
logger = get_logger(__name__)


def _networksetup(*args):
    # Use list form (not shell=True); networksetup handles service names with spaces
    return run_action(["sudo", config.NETWORKSETUP, *args])


def set_dhcp(service_name):
    """Switch a network service to DHCP addressing."""
    logger.info(f"Setting '{service_name}' to DHCP")
    return _networksetup("-setdhcp", service_name)


def set_static(service_name, ip_address, subnet_mask, router):
    """Give a network service a manual IPv4 address."""
    logger.info(f"Setting '{service_name}' to static {ip_address}/{subnet_mask} via {router}")
    return _networksetup("-setmanual", service_name, ip_address, subnet_mask, router)


def set_dns_servers(service_name, dns_servers):
    """Sets the DNS servers for a network service; an empty list clears them."""
    if not dns_servers:
        logger.info(f"Clearing DNS servers for '{service_name}'")
        return _networksetup("-setdnsservers", service_name, config.DNS_EMPTY_SENTINEL)

    dns_list = [str(d) for d in dns_servers]
    logger.info(f"Setting DNS servers for '{service_name}' to: {dns_list}")
    return _networksetup("-setdnsservers", service_name, *dns_list)

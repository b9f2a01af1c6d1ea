"""
Network state detection functions for NetSwitcher.

This module provides read-only functions to detect the current network
identity (SSID, router MAC, wired service) and the live settings of a
network service. None of them raise: failures degrade to None or empty
values so callers can keep working with partial information.
"""

try:
    import CoreWLAN
except ImportError:
    CoreWLAN = None

from .. import config
from ..logging_config import get_logger
from ..profiles.models import NetworkIdentity
from ..utils import run_command, get_router_ip_native
from . import parsing

# Get module logger
logger = get_logger(__name__)


def networksetup(*args):
    """Run a read-only networksetup query and return its output."""
    return run_command([config.NETWORKSETUP, *args], capture=True)


def _get_ssid_corewlan(log_level=20):
    if not CoreWLAN:
        return None
    try:
        interface = CoreWLAN.CWInterface.interface()
        if interface:
            ssid = interface.ssid()
            return str(ssid) if ssid else None
    except Exception as e:
        logger.log(log_level, f"Could not get current SSID using CoreWLAN: {e}")
    return None


def _get_ssid_ioreg():
    # Not affected by the privacy redaction applied to CoreWLAN
    output = run_command("ioreg -l | grep 'IO80211SSID' | head -1", capture=True, shell=True)
    return parsing.parse_ioreg_ssid(output)


def _get_ssid_networksetup():
    return parsing.parse_airport_network(networksetup("-getairportnetwork", config.DEFAULT_WIFI_DEVICE))


def _get_ssid_system_profiler():
    output = run_command(["system_profiler", "SPAirPortDataType"], capture=True)
    return parsing.parse_system_profiler_ssid(output)


def get_current_ssid(log_level=20):  # INFO level
    """Gets the SSID of the current Wi-Fi network, trying each source in turn."""
    sources = [
        ("CoreWLAN", lambda: _get_ssid_corewlan(log_level)),
        ("ioreg", _get_ssid_ioreg),
        ("networksetup", _get_ssid_networksetup),
        ("system_profiler", _get_ssid_system_profiler),
    ]
    for name, source in sources:
        ssid = source()
        if ssid:
            logger.debug(f"SSID '{ssid}' found via {name}")
            return ssid
    logger.log(log_level, "No Wi-Fi network detected")
    return None


def get_network_services():
    """List enabled network services, falling back to Wi-Fi."""
    services = parsing.parse_service_list(networksetup("-listallnetworkservices"))
    return services or [config.DEFAULT_NETWORK_SERVICE]


def get_ethernet_status(log_level=20):  # INFO level
    """Return the name of a connected wired service, or None."""
    ports = parsing.parse_hardware_ports(networksetup("-listallhardwareports"))
    for port, device in ports:
        if not parsing.is_ethernet_port(port, device):
            continue
        if parsing.has_ip_address(networksetup("-getinfo", port)):
            logger.log(log_level, f"Wired connection on '{port}' ({device})")
            return port
    return None


def get_router_ip():
    """Gets the default router IP using native APIs, falling back to netstat."""
    router_ip = get_router_ip_native()
    if router_ip:
        return router_ip

    logger.debug("Falling back to netstat for default router")
    return parsing.parse_default_gateway(run_command(["netstat", "-rn", "-f", "inet"], capture=True))


def get_router_mac(log_level=20):  # INFO level
    """Gets the router MAC address as a network fingerprint."""
    router_ip = get_router_ip()
    if not router_ip:
        logger.log(log_level, "No default router found")
        return None

    mac = parsing.parse_arp_mac(run_command(["arp", "-n", router_ip], capture=True))
    if mac:
        logger.debug(f"Router {router_ip} has MAC {mac}")
    else:
        logger.log(log_level, f"Could not resolve MAC for router {router_ip}")
    return mac


def get_network_identity(log_level=20):  # INFO level
    """Probe which network is present. Wi-Fi takes precedence over wired."""
    router_mac = get_router_mac(log_level=log_level)

    ssid = get_current_ssid(log_level=log_level)
    if ssid:
        return NetworkIdentity(ssid=ssid, router_mac=router_mac)

    wired = get_ethernet_status(log_level=log_level)
    if wired:
        return NetworkIdentity(router_mac=router_mac, is_wired=True, wired_service_name=wired)

    return NetworkIdentity()


def get_dns_servers(service):
    """DNS servers configured on the service, else the resolvers in use."""
    servers = parsing.parse_dns_servers(networksetup("-getdnsservers", service))
    if servers:
        return servers
    return parsing.parse_scutil_nameservers(run_command(["scutil", "--dns"], capture=True))


def get_current_service_config(service):
    """Gets the live IP/DNS settings of a network service."""
    settings = parsing.parse_getinfo(networksetup("-getinfo", service))
    settings.dns_servers = get_dns_servers(service)
    return settings

"""
Parsers for macOS network command output.

Pure functions from captured text to structured values, kept apart from
the code that runs the commands so they can be tested on canned output.
All parsers return None or an empty value when the text does not contain
what they look for.
"""

import re

from .. import config
from ..profiles.models import ServiceSettings

_IOREG_SSID_RE = re.compile(r'"IO80211SSID"\s*=\s*"([^"]*)"')
_ARP_MAC_RE = re.compile(r"\sat\s+(\S+)\s+on\s")
_SCUTIL_NAMESERVER_RE = re.compile(r"nameserver\[\d+\]\s*:\s*(\S+)")
_MAC_OCTETS_RE = re.compile(r"^[0-9a-fA-F]{1,2}(:[0-9a-fA-F]{1,2}){5}$")

_ETHERNET_HINTS = ("ethernet", "lan", "usb")
_NON_ETHERNET_HINTS = ("wi-fi", "bluetooth", "thunderbolt bridge")


def parse_ioreg_ssid(output):
    """Extract the SSID from `ioreg -l` output."""
    if not output:
        return None
    match = _IOREG_SSID_RE.search(output)
    if match and match.group(1):
        return match.group(1)
    return None


def parse_airport_network(output):
    """Extract the SSID from `networksetup -getairportnetwork <device>` output."""
    if not output or "not associated" in output:
        return None
    prefix = "Current Wi-Fi Network: "
    for line in output.splitlines():
        if line.startswith(prefix):
            ssid = line[len(prefix):].strip()
            return ssid or None
    return None


def parse_system_profiler_ssid(output):
    """Extract the current SSID from `system_profiler SPAirPortDataType` output."""
    if not output:
        return None

    in_current_network = False
    for line in output.splitlines():
        stripped = line.strip()
        if stripped == "Current Network Information:":
            in_current_network = True
            continue
        if not in_current_network:
            continue
        if stripped.startswith(("PHY Mode", "Other")):
            break
        # The SSID is the next heading, written as "Name:"
        if stripped.endswith(":") and "Network" not in stripped:
            ssid = stripped[:-1]
            if ssid:
                return ssid
    return None


def parse_service_list(output):
    """Parse `networksetup -listallnetworkservices`, skipping disabled services."""
    if not output:
        return []
    lines = output.splitlines()[1:]  # First line is an explanatory header
    return [line.strip() for line in lines if line.strip() and not line.startswith("*")]


def parse_hardware_ports(output):
    """Parse `networksetup -listallhardwareports` into (port, device) pairs."""
    ports = []
    port = None
    for line in (output or "").splitlines():
        line = line.strip()
        if line.startswith("Hardware Port: "):
            port = line[len("Hardware Port: "):]
        elif line.startswith("Device: ") and port is not None:
            ports.append((port, line[len("Device: "):]))
            port = None
    return ports


def is_ethernet_port(port, device):
    """Decide whether a hardware port looks like a wired Ethernet interface."""
    name = port.lower()
    if any(hint in name for hint in _NON_ETHERNET_HINTS):
        return False
    return any(hint in name for hint in _ETHERNET_HINTS) or device.startswith("en")


def parse_getinfo(output):
    """Parse `networksetup -getinfo <service>` into ServiceSettings (without DNS)."""
    settings = ServiceSettings()
    if not output:
        return settings

    for line in output.splitlines():
        if line.startswith("IP address: "):
            settings.ip_address = line[len("IP address: "):].strip()
        elif line.startswith("Subnet mask: "):
            settings.subnet_mask = line[len("Subnet mask: "):].strip()
        elif line.startswith("Router: "):
            settings.router = line[len("Router: "):].strip()
    settings.use_dhcp = "DHCP Configuration" in output
    return settings


def has_ip_address(output):
    """True when `networksetup -getinfo` output shows an assigned IPv4 address."""
    for line in (output or "").splitlines():
        if line.startswith("IP address:"):
            ip = line[len("IP address:"):].strip()
            if ip and ip != "none":
                return True
    return False


def parse_dns_servers(output):
    """Parse `networksetup -getdnsservers <service>` output."""
    if not output or "There aren't any DNS Servers" in output:
        return []
    return [
        line.strip()
        for line in output.splitlines()
        if line.strip() and "Error" not in line
    ]


def parse_scutil_nameservers(output):
    """Collect resolver addresses from `scutil --dns`, de-duplicated in order."""
    servers = []
    for match in _SCUTIL_NAMESERVER_RE.finditer(output or ""):
        server = match.group(1)
        if server.startswith(config.VPN_FAKE_DNS_PREFIX) or server in servers:
            continue
        servers.append(server)
    return servers


def parse_default_gateway(output):
    """Find the first default route gateway in `netstat -rn` output."""
    for line in (output or "").splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] == "default":
            return parts[1]
    return None


def normalize_mac(mac):
    """Lowercase a MAC address and zero-pad each octet ("0:1b:..." -> "00:1b:...")."""
    if not mac or not _MAC_OCTETS_RE.match(mac):
        return None
    return ":".join(octet.zfill(2) for octet in mac.lower().split(":"))


def parse_arp_mac(output):
    """Extract the MAC address from `arp -n <ip>` output."""
    match = _ARP_MAC_RE.search(output or "")
    if not match:
        return None
    return normalize_mac(match.group(1))

"""
Data model for NetSwitcher network configurations.

A NetworkConfig is a named, user-defined binding from a network identity
(SSID, optional router MAC) to the IP/DNS settings that should be applied
to a network service. A NetworkIdentity is the ephemeral probe result
describing which network is physically present right now.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .. import config


class ConfigType(Enum):
    """Classifies what a config is keyed on; does not gate matching."""

    WIFI = "wifi"
    SERVICE = "service"

    @classmethod
    def parse(cls, value: Any) -> "ConfigType":
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.WIFI


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]


@dataclass
class NetworkConfig:
    """A named network configuration."""

    name: str
    ssid: str = ""
    config_type: ConfigType = ConfigType.WIFI
    router_mac: Optional[str] = None
    auto_apply: bool = False
    target_service: Optional[str] = None
    use_dhcp: bool = True
    ip_address: Optional[str] = None
    subnet_mask: Optional[str] = None
    router: Optional[str] = None
    dns_servers: List[str] = field(default_factory=list)

    @classmethod
    def new(cls, name, ssid="", target_service=None, config_type=ConfigType.WIFI, router_mac=None):
        """Create a blank config: DHCP, automatic DNS, not auto-applied."""
        return cls(
            name=name,
            ssid=ssid,
            config_type=config_type,
            router_mac=router_mac,
            target_service=target_service,
        )

    @classmethod
    def from_live(
        cls, name, live, ssid="", target_service=None, config_type=ConfigType.WIFI, router_mac=None, auto_apply=False
    ):
        """Create a config capturing the live settings probed from a service."""
        return cls(
            name=name,
            ssid=ssid,
            config_type=config_type,
            router_mac=router_mac,
            auto_apply=auto_apply,
            target_service=target_service,
            use_dhcp=live.use_dhcp,
            ip_address=live.ip_address,
            subnet_mask=live.subnet_mask,
            router=live.router,
            dns_servers=list(live.dns_servers),
        )

    def matches_network(self, ssid: str, router_mac: Optional[str]) -> bool:
        """
        Check whether this config matches a probed network identity.

        An empty config SSID matches anything. Otherwise the SSID must be
        equal and, when the config is bound to a router MAC, the probed MAC
        must be present and equal ignoring case.
        """
        if not self.ssid:
            return True

        if self.ssid != ssid:
            return False

        if self.router_mac is not None:
            if router_mac is None:
                # Bound to a MAC we cannot verify
                return False
            return self.router_mac.lower() == router_mac.lower()

        return True

    def display_name(self) -> str:
        """Short one-line label for menus and listings."""
        type_tag = "WiFi" if self.config_type == ConfigType.WIFI else "Service"
        auto_tag = "[auto] " if self.auto_apply else ""
        label = f"{auto_tag}{type_tag}: {self.name}"

        if self.router_mac:
            return f"{label} [{self.ssid}] ({self.router_mac[-8:]})"
        if self.ssid:
            return f"{label} [{self.ssid}]"
        return label

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the TOML document. Absent optionals are omitted."""
        data = {
            "name": self.name,
            "ssid": self.ssid,
            "config_type": self.config_type.value,
            "router_mac": self.router_mac,
            "auto_apply": self.auto_apply,
            "target_service": self.target_service,
            "use_dhcp": self.use_dhcp,
            "ip_address": self.ip_address,
            "subnet_mask": self.subnet_mask,
            "router": self.router,
            "dns_servers": list(self.dns_servers),
        }
        return {key: value for key, value in data.items() if value is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkConfig":
        """Deserialize a document entry, defaulting anything missing."""
        return cls(
            name=str(data.get("name", "")),
            ssid=str(data.get("ssid", "")),
            config_type=ConfigType.parse(data.get("config_type", ConfigType.WIFI.value)),
            router_mac=_optional_str(data.get("router_mac")),
            auto_apply=bool(data.get("auto_apply", False)),
            target_service=_optional_str(data.get("target_service")),
            use_dhcp=bool(data.get("use_dhcp", True)),
            ip_address=_optional_str(data.get("ip_address")),
            subnet_mask=_optional_str(data.get("subnet_mask")),
            router=_optional_str(data.get("router")),
            dns_servers=_str_list(data.get("dns_servers", [])),
        )


@dataclass
class ServiceSettings:
    """Live IP/DNS settings probed from a network service."""

    use_dhcp: bool = False
    ip_address: Optional[str] = None
    subnet_mask: Optional[str] = None
    router: Optional[str] = None
    dns_servers: List[str] = field(default_factory=list)


@dataclass
class NetworkIdentity:
    """What network is physically present right now."""

    ssid: Optional[str] = None
    router_mac: Optional[str] = None
    is_wired: bool = False
    wired_service_name: Optional[str] = None

    @property
    def display_ssid(self) -> Optional[str]:
        """The string configs are matched against; wired services get a label."""
        if self.is_wired:
            if self.wired_service_name is None:
                return None
            return f"{config.WIRED_LABEL_PREFIX}{self.wired_service_name}"
        return self.ssid

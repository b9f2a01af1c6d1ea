"""
Configuration store for NetSwitcher.

Holds the named network configurations plus the process-wide settings and
persists them after every mutation. The store is owned by the foreground
(controller and presentation layer); background threads never touch it.
"""

from typing import Dict, List, Optional

from .. import config
from ..logging_config import get_logger
from .matching import find_auto_apply_match, find_matching_configs
from .models import NetworkConfig

# Get module logger
logger = get_logger(__name__)


class ConfigStore:
    """Mapping of config name to NetworkConfig plus application settings."""

    def __init__(
        self,
        configs=None,
        auto_switch=False,
        network_service="",
        debug=config.DEFAULT_DEBUG,
        refresh_seconds=config.DEFAULT_REFRESH_SECONDS,
        path=None,
    ):
        self._configs: Dict[str, NetworkConfig] = {}
        for cfg in configs or []:
            self._configs[cfg.name] = cfg
        self.auto_switch = auto_switch
        self.network_service = network_service
        self.debug = debug
        self.refresh_seconds = refresh_seconds
        self.path = path

    # --- Persistence ---

    @classmethod
    def load(cls, path=None):
        """Load the store from disk. Never fails; bad input yields defaults."""
        document = config.load_config(path)
        return cls.from_document(document, path=path)

    @classmethod
    def from_document(cls, document, path=None):
        settings = document.get("settings", {})
        configs = []
        for entry in document.get("configs", []):
            if not isinstance(entry, dict):
                logger.warning(f"Ignoring malformed config entry: {entry!r}")
                continue
            configs.append(NetworkConfig.from_dict(entry))

        try:
            refresh_seconds = float(settings.get("refresh_seconds", config.DEFAULT_REFRESH_SECONDS))
        except (TypeError, ValueError):
            refresh_seconds = config.DEFAULT_REFRESH_SECONDS

        return cls(
            configs=configs,
            auto_switch=bool(settings.get("auto_switch", False)),
            network_service=str(settings.get("network_service", "")),
            debug=bool(settings.get("debug", config.DEFAULT_DEBUG)),
            refresh_seconds=refresh_seconds,
            path=path,
        )

    def to_document(self):
        return {
            "settings": {
                "debug": self.debug,
                "refresh_seconds": self.refresh_seconds,
                "auto_switch": self.auto_switch,
                "network_service": self.network_service,
            },
            "configs": [cfg.to_dict() for cfg in self.configs()],
        }

    def save(self) -> Optional[str]:
        """Persist the store. Returns an error message instead of raising."""
        error = config.save_config(self.to_document(), self.path)
        if error:
            logger.warning(f"Failed to save configuration: {error}")
        return error

    # --- Mutation ---

    def add(self, cfg: NetworkConfig) -> Optional[str]:
        """Insert or replace a config by name, then save."""
        replaced = cfg.name in self._configs
        self._configs[cfg.name] = cfg
        logger.info(f"{'Updated' if replaced else 'Added'} network config '{cfg.name}'")
        return self.save()

    def remove(self, name: str) -> Optional[str]:
        """Remove a config by name. Removing an unknown name is a no-op."""
        if self._configs.pop(name, None) is not None:
            logger.info(f"Removed network config '{name}'")
        return self.save()

    def set_auto_switch(self, enabled: bool) -> Optional[str]:
        self.auto_switch = bool(enabled)
        logger.info(f"Auto switch {'enabled' if self.auto_switch else 'disabled'}")
        return self.save()

    def select_service(self, service: str) -> Optional[str]:
        self.network_service = service
        logger.info(f"Selected network service '{service}'")
        return self.save()

    # --- Queries ---

    def get(self, name: str) -> Optional[NetworkConfig]:
        return self._configs.get(name)

    def configs(self) -> List[NetworkConfig]:
        """All configs, sorted by name."""
        return sorted(self._configs.values(), key=lambda cfg: cfg.name)

    def __len__(self):
        return len(self._configs)

    def __contains__(self, name):
        return name in self._configs

    def find_auto_apply_match(self, ssid, router_mac, log_level=20):  # INFO level
        return find_auto_apply_match(self._configs.values(), ssid, router_mac, log_level=log_level)

    def find_matching(self, ssid, router_mac):
        return find_matching_configs(self._configs.values(), ssid, router_mac)

    def resolve_selected_service(self, services):
        """The stored service if still present, else the first listed one."""
        if self.network_service and self.network_service in services:
            return self.network_service
        if services:
            return services[0]
        return self.network_service or config.DEFAULT_NETWORK_SERVICE

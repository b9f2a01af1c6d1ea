"""
Network configuration profiles for NetSwitcher.

This package holds the configuration data model, the store that persists
it, the matching policy, and the applier that pushes a configuration to
the system.
"""

from .models import ConfigType, NetworkConfig, NetworkIdentity, ServiceSettings
from .matching import find_auto_apply_match, find_matching_configs
from .store import ConfigStore
from .applier import Applier, ApplyResult

__all__ = [
    "ConfigType",
    "NetworkConfig",
    "NetworkIdentity",
    "ServiceSettings",
    "find_auto_apply_match",
    "find_matching_configs",
    "ConfigStore",
    "Applier",
    "ApplyResult",
]

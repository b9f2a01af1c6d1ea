"""
Native macOS API utilities for NetSwitcher.

This module provides functions that use the native SystemConfiguration
framework for network information gathering. Callers fall back to parsing
command output when these return None.
"""

try:
    import SystemConfiguration
except ImportError:
    SystemConfiguration = None

from ..logging_config import get_logger

# Get module logger
logger = get_logger(__name__)

GLOBAL_IPV4_KEY = "State:/Network/Global/IPv4"


def _copy_global_ipv4():
    """Read the global IPv4 state dictionary from the dynamic store."""
    if not SystemConfiguration:
        return None

    store = SystemConfiguration.SCDynamicStoreCreate(None, "NetSwitcher", None, None)
    if not store:
        return None
    return SystemConfiguration.SCDynamicStoreCopyValue(store, GLOBAL_IPV4_KEY)


def get_router_ip_native():
    """Get the default router IP address using SystemConfiguration."""
    try:
        ipv4_dict = _copy_global_ipv4()
        if not ipv4_dict:
            return None

        router = ipv4_dict.get("Router")
        if router:
            logger.debug(f"Native API found router: {router}")
            return str(router)
        return None

    except Exception as e:
        logger.debug(f"Native router lookup failed: {e}")
        return None


"""
Network configuration matching logic for NetSwitcher.

This module decides which stored configuration corresponds to the network
the machine is currently attached to.

Candidates are examined in a fixed order so that the outcome never depends
on dictionary iteration: configs bound to a router MAC first, then configs
keyed on an SSID alone, then wildcard configs with an empty SSID. Ties
within a rank are broken by name.
"""

from ..logging_config import get_logger

# Get module logger
logger = get_logger(__name__)

RANK_MAC_BOUND = 0
RANK_SSID_ONLY = 1
RANK_WILDCARD = 2


def _rank(cfg):
    if not cfg.ssid:
        return RANK_WILDCARD
    if cfg.router_mac is not None:
        return RANK_MAC_BOUND
    return RANK_SSID_ONLY


def ordered_candidates(configs):
    """Return configs in matching priority order."""
    return sorted(configs, key=lambda cfg: (_rank(cfg), cfg.name))


def find_matching_configs(configs, ssid, router_mac):
    """Return every config matching the identity, in priority order."""
    ssid = ssid or ""
    return [cfg for cfg in ordered_candidates(configs) if cfg.matches_network(ssid, router_mac)]


def find_auto_apply_match(configs, ssid, router_mac, log_level=20):  # INFO level
    """
    Select the single config to apply automatically for an identity.

    Only configs with auto_apply set take part. The strict pass accepts the
    first config whose matches_network() holds. The legacy pass accepts a
    config whose SSID equals the probed SSID literally and that has no
    router MAC; wildcard configs are not eligible there.

    Returns:
        NetworkConfig or None
    """
    candidates = [cfg for cfg in ordered_candidates(configs) if cfg.auto_apply]

    for cfg in candidates:
        if cfg.matches_network(ssid, router_mac):
            logger.log(log_level, f"Auto-apply match - selected '{cfg.name}' for SSID '{ssid}'")
            return cfg

    for cfg in candidates:
        if cfg.ssid and cfg.ssid == ssid and cfg.router_mac is None:
            logger.log(log_level, f"Legacy SSID match - selected '{cfg.name}' for SSID '{ssid}'")
            return cfg

    logger.debug(f"No auto-apply config for SSID '{ssid}' (router {router_mac})")
    return None

"""
Apply a network configuration to a network service.

The Applier serializes actuator calls so that only one configuration change
is in progress at a time and the static/DHCP step always precedes DNS.
"""

import threading
from dataclasses import dataclass

from .. import config
from ..logging_config import get_logger

# Get module logger
logger = get_logger(__name__)


@dataclass
class ApplyResult:
    success: bool
    service: str
    message: str


class Applier:
    """Drives a NetworkActuator through the steps of one configuration."""

    def __init__(self, actuator):
        self.actuator = actuator
        self._lock = threading.Lock()

    def resolve_service(self, cfg, default_service):
        return cfg.target_service or default_service

    def apply(self, cfg, default_service) -> ApplyResult:
        """
        Apply a config to its target service.

        Steps run in order: DHCP or static addressing, then DNS. The first
        failing step aborts the sequence; earlier steps are not reverted.
        Missing static fields fall back to the documented defaults.
        """
        service = self.resolve_service(cfg, default_service)

        with self._lock:
            logger.info(f"Applying config '{cfg.name}' to '{service}'")

            if cfg.use_dhcp:
                ok, message = self.actuator.set_dhcp(service)
            else:
                ok, message = self.actuator.set_static(
                    service,
                    cfg.ip_address or config.DEFAULT_STATIC_IP,
                    cfg.subnet_mask or config.DEFAULT_SUBNET_MASK,
                    cfg.router or config.DEFAULT_ROUTER,
                )
            if not ok:
                logger.error(f"Failed to set addressing for '{service}': {message}")
                return ApplyResult(False, service, message)

            ok, message = self.actuator.set_dns_servers(service, list(cfg.dns_servers))
            if not ok:
                logger.error(f"Failed to set DNS servers for '{service}': {message}")
                return ApplyResult(False, service, message)

        logger.info(f"Applied config '{cfg.name}' to '{service}'")
        return ApplyResult(True, service, f"Applied {cfg.name} -> {service}")

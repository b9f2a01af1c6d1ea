"""
Periodic driver for NetSwitcher.

The Controller is ticked by the foreground (a menu bar timer or the
headless run loop). Each tick consumes any finished probe, runs the
auto-apply decision as soon as the network identity changes, and starts a
new background probe once the refresh window has elapsed.
"""

import time

from . import config
from .logging_config import get_logger

# Get module logger
logger = get_logger(__name__)


class Controller:
    """Owns the foreground state and decides when to apply configurations."""

    def __init__(self, store, poller, applier, services=None, clock=time.monotonic, on_apply=None):
        self.store = store
        self.poller = poller
        self.applier = applier
        self.clock = clock
        self.on_apply = on_apply

        self.services = list(services) if services is not None else poller.probe.list_services()

        self.current_ssid = None
        self.current_router_mac = None
        self.current_live_config = None
        self.last_applied = None
        self.status_message = ""

        # Backdate so the first tick probes immediately
        self.last_check = self.clock() - max(config.INITIAL_CHECK_OFFSET, self.store.refresh_seconds)
        self._seen_generation = 0
        self._refresh_requested = False

    @property
    def selected_service(self):
        return self.store.resolve_selected_service(self.services)

    def tick(self):
        """
        Run one evaluation step.

        Returns:
            float: Seconds until the next tick should run.
        """
        if self._consume_snapshot():
            self.try_auto_apply()

        now = self.clock()
        if self._refresh_requested or now - self.last_check >= self.store.refresh_seconds:
            self.last_check = now
            self._refresh_requested = False
            self.poller.refresh(self.selected_service)

        if self.poller.is_refreshing:
            return config.TICK_INTERVAL_BUSY
        return config.TICK_INTERVAL_IDLE

    def _consume_snapshot(self):
        """Take over a newly completed probe. Returns True if the identity changed."""
        snapshot = self.poller.read()
        if snapshot.is_loading or snapshot.generation == self._seen_generation:
            return False
        self._seen_generation = snapshot.generation

        changed = (
            snapshot.ssid != self.current_ssid
            or snapshot.router_mac != self.current_router_mac
        )
        if changed:
            logger.info(
                f"Network changed: SSID {self.current_ssid} -> {snapshot.ssid}, "
                f"router {self.current_router_mac} -> {snapshot.router_mac}"
            )

        self.current_ssid = snapshot.ssid
        self.current_router_mac = snapshot.router_mac
        self.current_live_config = snapshot.live_config
        return changed

    def try_auto_apply(self):
        """Apply the auto-apply match for the current network, at most once per match."""
        if not self.store.auto_switch:
            return None
        if self.current_ssid is None:
            return None

        cfg = self.store.find_auto_apply_match(self.current_ssid, self.current_router_mac)
        if cfg is None:
            self.last_applied = None
            return None

        if cfg.name == self.last_applied:
            logger.debug(f"Config '{cfg.name}' already applied, skipping")
            return None

        return self.apply(cfg)

    def apply(self, cfg):
        """Apply a config now and refresh the displayed state on success."""
        result = self.applier.apply(cfg, self.selected_service)
        if result.success:
            self.last_applied = cfg.name
            self.status_message = f"Applied config: {cfg.name} -> {result.service}"
            self.poller.refresh(result.service)
        else:
            self.status_message = f"Apply failed: {result.message}"

        if self.on_apply is not None:
            self.on_apply(cfg, result)
        return result

    def request_refresh(self):
        """Probe again on the next tick regardless of the refresh window."""
        self._refresh_requested = True

    def set_auto_switch(self, enabled):
        """Toggle auto switching; enabling evaluates the current network right away."""
        error = self.store.set_auto_switch(enabled)
        if enabled:
            self.try_auto_apply()
        return error

    def select_service(self, service):
        error = self.store.select_service(service)
        self.request_refresh()
        return error

    def reload_services(self):
        self.services = self.poller.probe.list_services()
        return self.services


def create_controller(store, on_apply=None, probe=None, actuator=None):
    """Wire a Controller to the real network probe and actuator."""
    from .network import NetworkActuator, NetworkProbe
    from .poller import IdentityPoller
    from .profiles import Applier

    poller = IdentityPoller(probe or NetworkProbe())
    applier = Applier(actuator or NetworkActuator())
    return Controller(store, poller, applier, on_apply=on_apply)

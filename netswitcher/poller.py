"""
Background network identity polling for NetSwitcher.

Probing the network means running several external commands and can take
hundreds of milliseconds, so it happens on a short-lived worker thread. The
worker publishes its result into a Snapshot guarded by a single lock. The
lock is only held while fields are copied in or out, never while probing,
so the foreground never waits on a slow OS call.
"""

import copy
import threading
from dataclasses import dataclass
from typing import Optional

from .logging_config import get_logger
from .profiles.models import NetworkIdentity, ServiceSettings

# Get module logger
logger = get_logger(__name__)


@dataclass
class Snapshot:
    """Most recently probed network state."""

    ssid: Optional[str] = None
    router_mac: Optional[str] = None
    live_config: Optional[ServiceSettings] = None
    is_loading: bool = False
    generation: int = 0  # Incremented each time a probe completes


class IdentityPoller:
    """Runs at most one background probe at a time and publishes the result."""

    def __init__(self, probe):
        self.probe = probe
        self._snapshot = Snapshot()
        self._lock = threading.Lock()
        self._thread = None

    @property
    def is_refreshing(self):
        with self._lock:
            return self._snapshot.is_loading

    def refresh(self, service):
        """
        Start a probe cycle for a service unless one is already running.

        Returns:
            bool: True if a new probe was started, False if one was in flight.
        """
        with self._lock:
            if self._snapshot.is_loading:
                logger.debug("Refresh already in progress, skipping")
                return False
            self._snapshot.is_loading = True

        self._thread = threading.Thread(
            target=self._run, args=(service,), name="netswitcher-probe", daemon=True
        )
        self._thread.start()
        return True

    def _run(self, service):
        ssid = router_mac = live_config = None
        try:
            try:
                identity = self.probe.current_identity()
            except Exception as e:
                logger.warning(f"Network identity probe failed: {e}")
                identity = NetworkIdentity()

            try:
                live_config = self.probe.current_service_config(service)
            except Exception as e:
                logger.warning(f"Probe of service '{service}' failed: {e}")

            ssid, router_mac = identity.display_ssid, identity.router_mac
        except Exception as e:
            logger.error(f"Probe cycle for '{service}' failed: {e}")
            ssid = router_mac = None
        finally:
            # is_loading is cleared on every exit path
            with self._lock:
                self._snapshot.ssid = ssid
                self._snapshot.router_mac = router_mac
                self._snapshot.live_config = live_config
                self._snapshot.is_loading = False
                self._snapshot.generation += 1

        logger.debug(f"Probe complete: SSID={ssid}, router={router_mac}")

    def read(self):
        """Return a copy of the current snapshot."""
        with self._lock:
            return copy.deepcopy(self._snapshot)

    def join(self, timeout=None):
        """Wait for the in-flight probe, if any, to finish."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

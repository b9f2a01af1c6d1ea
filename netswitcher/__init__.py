"""
NetSwitcher - Network configuration switcher for macOS.

Saves named IP/DNS configurations bound to a Wi-Fi network, router MAC, or
wired service, and switches between them manually or automatically when a
known network is joined.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from . import config, logging_config

__all__ = ["config", "logging_config"]

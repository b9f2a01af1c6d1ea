"""
Configuration management for NetSwitcher.

This module handles loading, saving, and default configuration values
for the NetSwitcher application.
"""

import copy
import logging
from pathlib import Path

import toml

# --- App Constants ---
APP_NAME = "netswitcher"
LOG_DIR = Path.home() / "Library" / "Logs"
LOG_FILE = LOG_DIR / "netswitcher.log"

# --- Logging Constants ---
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# --- Scheduling Constants ---
DEFAULT_REFRESH_SECONDS = 5  # Minimum spacing between background probes
TICK_INTERVAL_IDLE = 1.0  # Next controller tick when no probe is outstanding
TICK_INTERVAL_BUSY = 0.5  # Next controller tick while a probe is outstanding
INITIAL_CHECK_OFFSET = 10  # Seconds to backdate the first check so it fires immediately
DEFAULT_DEBUG = False

# --- Network Constants ---
NETWORKSETUP = "/usr/sbin/networksetup"
DEFAULT_NETWORK_SERVICE = "Wi-Fi"
DEFAULT_WIFI_DEVICE = "en0"
WIRED_LABEL_PREFIX = "[Wired] "
DNS_EMPTY_SENTINEL = "Empty"
VPN_FAKE_DNS_PREFIX = "198.18."  # Fake-IP DNS handed out by tunnelling clients

# Fallbacks for incompletely filled static configurations
DEFAULT_STATIC_IP = "192.168.1.100"
DEFAULT_SUBNET_MASK = "255.255.255.0"
DEFAULT_ROUTER = "192.168.1.1"

# --- Network Operation Constants ---
WIFI_SCAN_RETRY_COUNT = 5  # Number of times to retry Wi-Fi scanning
LOCATION_AUTH_POLL_COUNT = 10  # Number of times to poll for location authorization
LOCATION_AUTH_POLL_INTERVAL = 1  # Seconds between location authorization polls
WIFI_SCAN_RETRY_DELAY_BASE = 2  # Base delay for exponential backoff in Wi-Fi scanning
SUDO_CHECK_TIMEOUT = 10  # seconds

# Default settings for the application
DEFAULT_SETTINGS = {
    "debug": DEFAULT_DEBUG,
    "refresh_seconds": DEFAULT_REFRESH_SECONDS,
    "auto_switch": False,
    "network_service": "",
}

# Default configuration document
DEFAULT_CONFIG = {
    "settings": DEFAULT_SETTINGS,
    "configs": [],
}

# Only stdlib logging here; logging_config imports this module
logger = logging.getLogger(__name__)


# TOML basic-string escapes; other control characters are written as \uXXXX
_STRING_ESCAPES = {
    "\"": "\\\"",
    "\\": "\\\\",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _dump_string(value):
    chars = []
    for ch in value:
        if ch in _STRING_ESCAPES:
            chars.append(_STRING_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            chars.append(f"\\u{ord(ch):04x}")
        else:
            chars.append(ch)
    return '"' + "".join(chars) + '"'


class ConfigEncoder(toml.TomlEncoder):
    """TomlEncoder that escapes every control character in strings."""

    def __init__(self, _dict=dict, preserve=False):
        super().__init__(_dict, preserve)
        self.dump_funcs[str] = _dump_string


def get_config_path():
    """Gets the path to the configuration file."""
    return Path.home() / ".config" / APP_NAME / "config.toml"


def default_config():
    """Returns a fresh copy of the default configuration document."""
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config(path=None):
    """
    Loads the configuration document from the TOML file.

    A missing file is replaced by the default document. An unreadable or
    corrupt file yields the defaults; loading never fails.
    """
    path = Path(path) if path else get_config_path()
    if not path.exists():
        # Create a default config if one doesn't exist
        error = save_config(default_config(), path)
        if error:
            logger.warning(f"Could not write default config to {path}: {error}")
        return default_config()

    try:
        with open(path, "r") as f:
            data = toml.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read config {path}, using defaults: {e}")
        return default_config()

    merged = default_config()
    settings = data.get("settings")
    if isinstance(settings, dict):
        merged["settings"].update(settings)
    configs = data.get("configs")
    if isinstance(configs, list):
        merged["configs"] = configs

    logger.debug(f"Loaded {len(merged['configs'])} network configs from {path}")
    return merged


def save_config(data, path=None):
    """
    Saves the configuration document to the TOML file.

    Returns:
        None on success, or a short error message on failure.
    """
    path = Path(path) if path else get_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            toml.dump(data, f, encoder=ConfigEncoder())
    except (OSError, TypeError, ValueError) as e:
        return str(e)
    return None


if __name__ == "__main__":
    import json

    print(json.dumps(load_config(), indent=4))

"""
Utility functions for NetSwitcher.

This module provides common utility functions used throughout the application.
"""

from .commands import run_command, run_action
from .native import get_router_ip_native

__all__ = [
    "run_command",
    "run_action",
    "get_router_ip_native",
]

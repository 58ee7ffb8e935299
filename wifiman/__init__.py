"""
wifiman - platform-independent wireless network discovery and connection.

Usage:
    from wifiman import WiFiManager

    with WiFiManager() as manager:
        networks = manager.scan_networks()
        manager.connect_to_network("MyNetwork", "password123")
"""

__version__ = "0.1.0"

from .core.errors import (
    EnumerationFailed,
    PlatformUnsupported,
    ProviderUnavailable,
    UseAfterClose,
    WirelessError,
)
from .domain.models import ConnectionRequest, ManagerState, PlatformKind, WirelessNetwork
from .manager import WiFiManager

__all__ = [
    "__version__",
    "ConnectionRequest",
    "EnumerationFailed",
    "ManagerState",
    "PlatformKind",
    "PlatformUnsupported",
    "ProviderUnavailable",
    "UseAfterClose",
    "WiFiManager",
    "WirelessError",
    "WirelessNetwork",
]

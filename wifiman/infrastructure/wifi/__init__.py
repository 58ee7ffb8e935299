"""WiFi infrastructure - per-platform wireless providers and provider selection."""

from .linux import LinuxProvider
from .provider import MockProvider, UnsupportedProvider, WirelessProvider
from .selector import create_provider, detect_platform
from .windows import WindowsProvider

__all__ = [
    # Providers
    "WirelessProvider",
    "WindowsProvider",
    "LinuxProvider",
    "UnsupportedProvider",
    "MockProvider",
    # Selection
    "create_provider",
    "detect_platform",
]

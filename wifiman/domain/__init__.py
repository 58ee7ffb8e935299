"""wifiman Domain Layer - Core value types and enums."""

from .models import ConnectionRequest, ManagerState, PlatformKind, WirelessNetwork

__all__ = [
    "ConnectionRequest",
    "ManagerState",
    "PlatformKind",
    "WirelessNetwork",
]

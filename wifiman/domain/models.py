"""wifiman Domain Models - Pydantic models for scan results and connection requests."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Capability bit 0 of the backend capability field marks an access-controlled network.
SECURE_CAPABILITY_BIT = 0x1


class PlatformKind(str, Enum):
    """Operating systems a provider can be bound to."""

    WINDOWS = "windows"
    LINUX = "linux"
    UNSUPPORTED = "unsupported"


class ManagerState(str, Enum):
    """Lifecycle of a WiFiManager instance."""

    UNINITIALIZED = "uninitialized"
    OPEN = "open"
    CLOSED = "closed"


class WirelessNetwork(BaseModel):
    """One discovered access point."""

    model_config = ConfigDict(frozen=True)

    ssid: str = ""  # may be empty, not unique across results
    signal_strength: int = Field(...)  # dBm as reported by the backend
    is_secure: bool = False

    @classmethod
    def from_bss(cls, ssid: bytes, rssi: int, capabilities: int) -> WirelessNetwork:
        """Build a network from raw BSS fields (SSID bytes, RSSI, capability bitmask)."""
        return cls(
            ssid=bytes(ssid).decode("utf-8", errors="replace"),
            signal_strength=int(rssi),
            is_secure=(int(capabilities) & SECURE_CAPABILITY_BIT) != 0,
        )

    def describe(self) -> str:
        secure = "Yes" if self.is_secure else "No"
        return f"SSID: {self.ssid}, Strength: {self.signal_strength} dBm, Secure: {secure}"


class ConnectionRequest(BaseModel):
    """Ephemeral input to a connection attempt. An empty password means an open network."""

    model_config = ConfigDict(frozen=True)

    ssid: str
    password: str = ""

    @property
    def is_open(self) -> bool:
        return not self.password

    def __repr__(self) -> str:
        # never leak credentials into logs
        return f"ConnectionRequest(ssid={self.ssid!r}, password={'***' if self.password else ''!r})"

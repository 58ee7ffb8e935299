"""
WiFiManager - single entry point for scanning and connecting.

Selects a provider for the running platform once, at construction, and
owns it until close. Construction never raises for native-subsystem
problems: a provider that fails to open leaves the manager degraded, and
every later scan/connect reports ProviderUnavailable through ``last_error``
with an empty list or ``False``.

Usage:
    with WiFiManager() as manager:
        for network in manager.scan_networks():
            print(network.describe())
        manager.connect_to_network("Office", "secret123")
"""

from __future__ import annotations

import logging
import threading

from .config import WifiConfig
from .core.errors import EnumerationFailed, ProviderUnavailable, UseAfterClose, WirelessError
from .domain.models import ConnectionRequest, ManagerState, WirelessNetwork
from .infrastructure.wifi.provider import WirelessProvider
from .infrastructure.wifi.selector import create_provider

logger = logging.getLogger(__name__)


class WiFiManager:
    """Facade over one WirelessProvider. Scan results are passed through unmodified."""

    def __init__(
        self,
        provider: WirelessProvider | None = None,
        config: WifiConfig | None = None,
    ) -> None:
        self._state = ManagerState.UNINITIALIZED
        self._lock = threading.RLock()
        self._open_error: WirelessError | None = None
        self._last_error: WirelessError | None = None
        self._stats = {
            "scans_total": 0,
            "last_scan_networks": 0,
            "scan_errors": 0,
            "connect_attempts": 0,
            "connect_failures": 0,
        }
        self._provider = provider if provider is not None else create_provider(config)

        try:
            self._provider.open()
        except (WirelessError, OSError) as e:
            logger.error("Wireless provider %s unavailable: %s", self._provider.name, e)
            if not isinstance(e, ProviderUnavailable):
                e = ProviderUnavailable(str(e))
            self._open_error = self._last_error = e
        self._state = ManagerState.OPEN
        logger.info("WiFi manager ready (provider=%s, degraded=%s)", self._provider.name, self.is_degraded)

    @property
    def state(self) -> ManagerState:
        return self._state

    @property
    def provider_name(self) -> str:
        return self._provider.name

    @property
    def is_degraded(self) -> bool:
        return self._open_error is not None

    @property
    def last_error(self) -> WirelessError | None:
        """Condition reported by the most recent operation, if any."""
        return self._last_error

    @property
    def stats(self) -> dict:
        return dict(self._stats)

    def _check_open(self, operation: str) -> None:
        if self._state == ManagerState.CLOSED:
            raise UseAfterClose(f"{operation} called on a closed WiFiManager")

    def scan_networks(self) -> list[WirelessNetwork]:
        """Return visible networks in backend order; empty on any reported condition."""
        with self._lock:
            self._check_open("scan_networks")
            self._stats["scans_total"] += 1

            if self._open_error is not None:
                self._last_error = self._open_error
                self._stats["scan_errors"] += 1
                return []

            try:
                networks = self._provider.scan()
            except (WirelessError, OSError) as e:
                logger.warning("Scan failed: %s", e)
                self._last_error = e if isinstance(e, WirelessError) else EnumerationFailed(str(e))
                self._stats["scan_errors"] += 1
                return []

            self._last_error = None
            self._stats["last_scan_networks"] = len(networks)
            return networks

    def connect_to_network(self, ssid: str, password: str = "") -> bool:
        """
        Forward a connection attempt to the provider.

        True means the attempt was initiated, not that the link is up. The SSID
        is forwarded verbatim, empty or not.
        """
        with self._lock:
            self._check_open("connect_to_network")
            self._stats["connect_attempts"] += 1
            request = ConnectionRequest(ssid=ssid, password=password)

            if self._open_error is not None:
                self._last_error = self._open_error
                self._stats["connect_failures"] += 1
                return False

            try:
                initiated = bool(self._provider.connect(request))
            except (WirelessError, OSError) as e:
                logger.warning("Connect to %s failed: %s", ssid, e)
                self._last_error = e if isinstance(e, WirelessError) else ProviderUnavailable(str(e))
                self._stats["connect_failures"] += 1
                return False

            self._last_error = None
            if not initiated:
                self._stats["connect_failures"] += 1
            return initiated

    def close(self) -> None:
        """Release the provider. The first call closes it; later calls do nothing."""
        with self._lock:
            if self._state == ManagerState.CLOSED:
                return
            self._state = ManagerState.CLOSED
            try:
                self._provider.close()
            except (WirelessError, OSError) as e:
                logger.warning("Provider close failed: %s", e)
            logger.debug("WiFi manager closed")

    def __enter__(self) -> WiFiManager:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        # Objects whose __init__ failed never got a provider
        if getattr(self, "_provider", None) is not None and self._state != ManagerState.CLOSED:
            self.close()

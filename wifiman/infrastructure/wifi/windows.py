"""
Windows provider backed by the Native Wi-Fi API.

Scanning flattens the interface list x per-interface BSS list into one
sequence, in interface order then entry order. A BSS list failure on one
interface is absorbed (that interface contributes nothing); a failure to
enumerate interfaces at all is surfaced as EnumerationFailed.
"""

from __future__ import annotations

import logging
import subprocess

from ...core.errors import EnumerationFailed, ProviderUnavailable, WirelessError
from ...domain.models import ConnectionRequest, WirelessNetwork
from .provider import WirelessProvider
from .wlanapi import WlanApi

logger = logging.getLogger(__name__)


class WindowsProvider(WirelessProvider):
    """Wireless provider holding a wlanapi client handle for its lifetime."""

    name = "windows"

    def __init__(
        self,
        api: WlanApi | None = None,
        client_version: int = 2,
        netsh_path: str = "netsh",
        launcher=subprocess.Popen,
    ) -> None:
        super().__init__()
        self.api = api or WlanApi()
        self.client_version = client_version
        self.netsh_path = netsh_path
        self._launcher = launcher
        self._handle: int | None = None

    def _acquire(self) -> None:
        try:
            self._handle = self.api.open_handle(self.client_version)
        except ProviderUnavailable:
            raise
        except WirelessError as e:
            raise ProviderUnavailable(str(e)) from e

    def _release(self) -> None:
        handle, self._handle = self._handle, None
        if handle:
            self.api.close_handle(handle)

    def scan(self) -> list[WirelessNetwork]:
        self._require_open()
        try:
            interfaces = self.api.enum_interfaces(self._handle)
        except WirelessError as e:
            logger.error("Failed to enumerate interfaces: %s", e)
            if isinstance(e, EnumerationFailed):
                raise
            raise EnumerationFailed(str(e)) from e

        networks: list[WirelessNetwork] = []
        for iface in interfaces:
            try:
                entries = self.api.get_bss_list(self._handle, iface.guid)
            except WirelessError as e:
                logger.warning("BSS list unavailable for %s: %s", iface.description or iface.guid, e)
                continue
            networks.extend(
                WirelessNetwork.from_bss(entry.ssid, entry.rssi, entry.capabilities)
                for entry in entries
            )

        logger.debug("Scan complete: %d networks on %d interface(s)", len(networks), len(interfaces))
        return networks

    def connect(self, request: ConnectionRequest) -> bool:
        self._require_open()
        logger.info("Connecting to %s on Windows...", request.ssid)
        # netsh joins through a stored profile named after the SSID
        logger.debug("credential %s", "not supplied" if request.is_open else "supplied")
        try:
            proc = self._launcher(
                [self.netsh_path, "wlan", "connect", f"name={request.ssid}"],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.error("Connect launch failed: %s", e)
            return False
        self._track_child(proc)
        return True

"""
Linux provider.

Two backends:

- ``placeholder``: stands in for a kernel wireless-extension query. It reports
  one fixed network so callers that expect a non-empty result on success can
  be exercised, and it accepts every connection attempt.
- ``nmcli``: scans and connects through NetworkManager's CLI. Connection is
  fire-and-forget: the nmcli process is spawned and not waited on. It is
  reaped later by the provider. A passphrase is written to the process's
  stdin for ``--ask`` rather than passed on the command line.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from ...core.errors import EnumerationFailed, ProviderUnavailable
from ...domain.models import ConnectionRequest, WirelessNetwork
from .provider import WirelessProvider

logger = logging.getLogger(__name__)

PLACEHOLDER_NETWORK = WirelessNetwork(ssid="LinuxWiFiDummy", signal_strength=-60, is_secure=True)


def _decode(raw) -> str:
    """Decode nmcli output; SSIDs are arbitrary bytes, so undecodable ones are replaced."""
    if not raw:
        return ""
    if isinstance(raw, str):
        return raw
    return raw.decode("utf-8", errors="replace")


def split_terse(line: str) -> list[str]:
    """Split one line of ``nmcli -t`` output on unescaped colons."""
    fields: list[str] = []
    current: list[str] = []
    chars = iter(line)
    for ch in chars:
        if ch == "\\":
            current.append(next(chars, ""))
        elif ch == ":":
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    fields.append("".join(current))
    return fields


def quality_to_dbm(quality: int) -> int:
    """Convert NetworkManager's 0-100 signal quality to an approximate dBm value."""
    quality = max(0, min(100, quality))
    return quality // 2 - 100


def parse_nmcli_scan(output: str) -> list[WirelessNetwork]:
    """Parse ``nmcli -t -f SSID,SIGNAL,SECURITY dev wifi list`` output, keeping row order."""
    networks: list[WirelessNetwork] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = split_terse(line)
        if len(parts) < 3:
            logger.debug("Skipping malformed nmcli row: %r", line)
            continue
        ssid, signal, security = parts[0], parts[1].strip(), parts[2].strip()
        try:
            quality = int(signal)
        except ValueError:
            quality = 0
        networks.append(
            WirelessNetwork(
                ssid=ssid,
                signal_strength=quality_to_dbm(quality),
                is_secure=bool(security) and security != "--",
            )
        )
    return networks


class LinuxProvider(WirelessProvider):
    """Wireless provider for Linux hosts."""

    name = "linux"

    def __init__(
        self,
        backend: str = "placeholder",
        nmcli_path: str = "nmcli",
        interface: str | None = None,
        scan_timeout: float = 15.0,
        runner=subprocess.run,
        launcher=subprocess.Popen,
    ) -> None:
        super().__init__()
        self.backend = backend
        self.nmcli_path = nmcli_path
        self.interface = interface
        self.scan_timeout = scan_timeout
        self._runner = runner
        self._launcher = launcher

    def _acquire(self) -> None:
        if self.backend == "nmcli" and shutil.which(self.nmcli_path) is None:
            raise ProviderUnavailable(f"{self.nmcli_path} not found - install NetworkManager")

    def scan(self) -> list[WirelessNetwork]:
        self._require_open()
        if self.backend != "nmcli":
            return [PLACEHOLDER_NETWORK]

        cmd = [self.nmcli_path, "-t", "-f", "SSID,SIGNAL,SECURITY", "dev", "wifi", "list"]
        if self.interface:
            cmd += ["ifname", self.interface]
        try:
            result = self._runner(cmd, capture_output=True, timeout=self.scan_timeout)
        except subprocess.TimeoutExpired as e:
            logger.warning("Scan timeout after %.1fs", self.scan_timeout)
            raise EnumerationFailed("nmcli scan timed out") from e
        except OSError as e:
            raise EnumerationFailed(f"nmcli scan failed: {e}") from e

        if result.returncode != 0:
            error_msg = _decode(result.stderr).strip()
            logger.warning("Scan failed: %s", error_msg)
            raise EnumerationFailed(error_msg or f"nmcli exited with code {result.returncode}")

        networks = parse_nmcli_scan(_decode(result.stdout))
        logger.debug("Scan complete: %d networks", len(networks))
        return networks

    def connect(self, request: ConnectionRequest) -> bool:
        self._require_open()
        logger.info("Connecting to %s on Linux...", request.ssid)
        if self.backend != "nmcli":
            return True

        # the passphrase goes to nmcli's --ask prompt on stdin, never onto argv
        cmd = [self.nmcli_path]
        if not request.is_open:
            cmd.append("--ask")
        cmd += ["dev", "wifi", "connect", request.ssid]
        if self.interface:
            cmd += ["ifname", self.interface]
        stdin = subprocess.DEVNULL if request.is_open else subprocess.PIPE
        try:
            proc = self._launcher(cmd, stdin=stdin, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as e:
            logger.error("Connect launch failed: %s", e)
            return False
        self._track_child(proc)

        if not request.is_open and proc is not None:
            try:
                proc.stdin.write(request.password.encode("utf-8") + b"\n")
                proc.stdin.close()
            except OSError as e:
                logger.error("Could not hand passphrase to nmcli: %s", e)
                return False
        return True

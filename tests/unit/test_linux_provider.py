"""
Linux Provider Unit Tests
=========================

Placeholder backend plus the nmcli backend with subprocess calls faked.
"""

import subprocess

import pytest

from wifiman.core.errors import EnumerationFailed, ProviderUnavailable
from wifiman.domain.models import ConnectionRequest, WirelessNetwork
from wifiman.infrastructure.wifi import linux
from wifiman.infrastructure.wifi.linux import (
    PLACEHOLDER_NETWORK,
    LinuxProvider,
    parse_nmcli_scan,
    quality_to_dbm,
    split_terse,
)


def _completed(stdout=b"", returncode=0, stderr=b""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class FakeStdin:
    def __init__(self, broken=False):
        self.written = b""
        self.closed = False
        self.broken = broken

    def write(self, data):
        if self.broken:
            raise BrokenPipeError("nmcli exited")
        self.written += data

    def close(self):
        self.closed = True


class FakeProcess:
    """Stands in for subprocess.Popen; ``poll`` reports None until ``finish``."""

    def __init__(self, stdin=None):
        self.stdin = stdin
        self.returncode = None
        self.poll_calls = 0

    def finish(self, code=0):
        self.returncode = code

    def poll(self):
        self.poll_calls += 1
        return self.returncode


@pytest.fixture
def nmcli_on_path(monkeypatch):
    monkeypatch.setattr(linux.shutil, "which", lambda name: f"/usr/bin/{name}")


# ============================================================================
# Placeholder backend
# ============================================================================


def test_placeholder_scan_returns_single_network():
    provider = LinuxProvider()
    provider.open()
    assert provider.scan() == [
        WirelessNetwork(ssid="LinuxWiFiDummy", signal_strength=-60, is_secure=True)
    ]
    assert provider.scan() == [PLACEHOLDER_NETWORK]


def test_placeholder_connect_initiates():
    provider = LinuxProvider()
    provider.open()
    assert provider.connect(ConnectionRequest(ssid="")) is True
    assert provider.connect(ConnectionRequest(ssid="Office", password="secret123")) is True


# ============================================================================
# nmcli parsing
# ============================================================================


def test_split_terse_handles_escapes():
    assert split_terse(r"My\:Net:80:WPA2") == ["My:Net", "80", "WPA2"]
    assert split_terse(r"back\\slash:10:") == ["back\\slash", "10", ""]


@pytest.mark.parametrize(("quality", "dbm"), [(100, -50), (0, -100), (80, -60), (150, -50), (-5, -100)])
def test_quality_to_dbm(quality, dbm):
    assert quality_to_dbm(quality) == dbm


def test_parse_keeps_order_and_security():
    output = "Zeta:30:--\nAlpha:90:WPA2\n:50:\nbroken-row\n"
    networks = parse_nmcli_scan(output)
    assert [n.ssid for n in networks] == ["Zeta", "Alpha", ""]
    assert [n.is_secure for n in networks] == [False, True, False]
    assert networks[1].signal_strength == -55


# ============================================================================
# nmcli backend
# ============================================================================


def test_nmcli_missing_is_unavailable(monkeypatch):
    monkeypatch.setattr(linux.shutil, "which", lambda name: None)
    provider = LinuxProvider(backend="nmcli")
    with pytest.raises(ProviderUnavailable):
        provider.open()


def test_nmcli_scan(nmcli_on_path):
    calls = []

    def runner(cmd, **kwargs):
        calls.append((cmd, kwargs))
        return _completed(b"Home:80:WPA2\nCafe:40:\n")

    provider = LinuxProvider(backend="nmcli", interface="wlan1", scan_timeout=5.0, runner=runner)
    provider.open()
    networks = provider.scan()
    assert [n.ssid for n in networks] == ["Home", "Cafe"]
    cmd, kwargs = calls[0]
    assert cmd[:3] == ["nmcli", "-t", "-f"]
    assert cmd[-2:] == ["ifname", "wlan1"]
    assert kwargs["timeout"] == 5.0
    assert "text" not in kwargs


def test_nmcli_scan_nonzero_exit(nmcli_on_path):
    provider = LinuxProvider(backend="nmcli", runner=lambda cmd, **kw: _completed(returncode=8, stderr=b"radio off"))
    provider.open()
    with pytest.raises(EnumerationFailed, match="radio off"):
        provider.scan()


def test_nmcli_scan_timeout(nmcli_on_path):
    def runner(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    provider = LinuxProvider(backend="nmcli", runner=runner)
    provider.open()
    with pytest.raises(EnumerationFailed):
        provider.scan()


def test_nmcli_scan_undecodable_ssid(nmcli_on_path):
    output = b"Home:80:WPA2\n\xff\xfeCafe:40:--\n"
    provider = LinuxProvider(backend="nmcli", runner=lambda cmd, **kw: _completed(output))
    provider.open()

    networks = provider.scan()
    assert [n.ssid for n in networks] == ["Home", "\ufffd\ufffdCafe"]
    assert [n.is_secure for n in networks] == [True, False]


def test_nmcli_connect_is_fire_and_forget(nmcli_on_path):
    launched = []

    def launcher(cmd, **kwargs):
        launched.append((cmd, kwargs["stdin"]))
        return FakeProcess(FakeStdin() if kwargs["stdin"] == subprocess.PIPE else None)

    provider = LinuxProvider(backend="nmcli", launcher=launcher)
    provider.open()

    assert provider.connect(ConnectionRequest(ssid="Cafe")) is True
    assert launched == [(["nmcli", "dev", "wifi", "connect", "Cafe"], subprocess.DEVNULL)]


def test_nmcli_connect_passphrase_stays_off_argv(nmcli_on_path):
    launched = []
    stdin = FakeStdin()

    def launcher(cmd, **kwargs):
        launched.append(cmd)
        assert kwargs["stdin"] == subprocess.PIPE
        return FakeProcess(stdin)

    provider = LinuxProvider(backend="nmcli", interface="wlan0", launcher=launcher)
    provider.open()

    assert provider.connect(ConnectionRequest(ssid="Office", password="secret123")) is True
    assert launched == [["nmcli", "--ask", "dev", "wifi", "connect", "Office", "ifname", "wlan0"]]
    assert "secret123" not in launched[0]
    assert stdin.written == b"secret123\n"
    assert stdin.closed


def test_nmcli_connect_passphrase_write_failure(nmcli_on_path):
    provider = LinuxProvider(
        backend="nmcli",
        launcher=lambda cmd, **kw: FakeProcess(FakeStdin(broken=True)),
    )
    provider.open()
    assert provider.connect(ConnectionRequest(ssid="Office", password="secret123")) is False


def test_nmcli_connect_spawn_failure(nmcli_on_path):
    def launcher(cmd, **kwargs):
        raise PermissionError("denied")

    provider = LinuxProvider(backend="nmcli", launcher=launcher)
    provider.open()
    assert provider.connect(ConnectionRequest(ssid="Office")) is False


# ============================================================================
# Connect helper reaping
# ============================================================================


def test_finished_helpers_reaped_on_next_connect(nmcli_on_path):
    processes = []

    def launcher(cmd, **kwargs):
        processes.append(FakeProcess())
        return processes[-1]

    provider = LinuxProvider(backend="nmcli", launcher=launcher)
    provider.open()

    provider.connect(ConnectionRequest(ssid="Cafe"))
    processes[0].finish()
    provider.connect(ConnectionRequest(ssid="Home"))

    assert processes[0].poll_calls == 1
    assert provider._children == [processes[1]]


def test_helpers_polled_on_close(nmcli_on_path):
    processes = []

    def launcher(cmd, **kwargs):
        processes.append(FakeProcess())
        return processes[-1]

    provider = LinuxProvider(backend="nmcli", launcher=launcher)
    provider.open()
    provider.connect(ConnectionRequest(ssid="Cafe"))
    processes[0].finish(1)

    provider.close()

    assert processes[0].poll_calls >= 1
    assert provider._children == []

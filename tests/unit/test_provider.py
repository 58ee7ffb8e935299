"""
Provider Base Unit Tests
========================

Lifecycle contract shared by all providers, plus the unsupported and mock variants.
"""

import pytest

from wifiman.core.errors import PlatformUnsupported, ProviderUnavailable
from wifiman.domain.models import ConnectionRequest
from wifiman.infrastructure.wifi.provider import MockProvider, UnsupportedProvider


# ============================================================================
# Lifecycle
# ============================================================================


def test_open_is_idempotent():
    provider = MockProvider()
    provider.open()
    provider.open()
    assert provider.is_open is True
    assert provider.open_calls == 2


def test_close_releases_once():
    provider = MockProvider()
    provider.open()
    provider.close()
    provider.close()
    assert provider.is_open is False
    assert provider.release_calls == 1


def test_close_without_open_releases_nothing():
    provider = MockProvider()
    provider.close()
    assert provider.release_calls == 0


def test_reopen_after_close_refused():
    provider = MockProvider()
    provider.open()
    provider.close()
    with pytest.raises(ProviderUnavailable):
        provider.open()


def test_scan_requires_open():
    with pytest.raises(ProviderUnavailable):
        MockProvider().scan()


# ============================================================================
# MockProvider
# ============================================================================


def test_mock_failed_open():
    provider = MockProvider(fail_open=True)
    with pytest.raises(ProviderUnavailable):
        provider.open()
    assert provider.is_open is False


def test_mock_scan_returns_copy(home_network):
    provider = MockProvider(networks=[home_network])
    provider.open()
    result = provider.scan()
    result.clear()
    assert provider.scan() == [home_network]


def test_mock_records_requests():
    provider = MockProvider(accept_connect=False)
    provider.open()
    assert provider.connect(ConnectionRequest(ssid="Office", password="pw")) is False
    assert provider.requests == [ConnectionRequest(ssid="Office", password="pw")]


# ============================================================================
# UnsupportedProvider
# ============================================================================


def test_unsupported_open_close_are_noops():
    provider = UnsupportedProvider("Plan9")
    provider.open()
    assert provider.is_open is True
    provider.close()


def test_unsupported_scan_and_connect_report():
    provider = UnsupportedProvider("Plan9")
    provider.open()
    with pytest.raises(PlatformUnsupported, match="Plan9"):
        provider.scan()
    with pytest.raises(PlatformUnsupported):
        provider.connect(ConnectionRequest(ssid="Home"))

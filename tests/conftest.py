import pytest

from wifiman.domain.models import WirelessNetwork
from wifiman.infrastructure.wifi.provider import MockProvider


@pytest.fixture
def home_network() -> WirelessNetwork:
    return WirelessNetwork(ssid="Home", signal_strength=-40, is_secure=True)


@pytest.fixture
def mock_provider(home_network) -> MockProvider:
    return MockProvider(networks=[home_network])

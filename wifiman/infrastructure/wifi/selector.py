"""Platform detection and provider construction."""

from __future__ import annotations

import logging
import platform

from ...config import ProviderEnum, WifiConfig
from ...domain.models import PlatformKind
from .linux import LinuxProvider
from .provider import MockProvider, UnsupportedProvider, WirelessProvider
from .windows import WindowsProvider

logger = logging.getLogger(__name__)


def detect_platform(system: str | None = None) -> PlatformKind:
    """Map ``platform.system()`` (or an explicit name) to a PlatformKind."""
    system = platform.system() if system is None else system
    if system == "Windows":
        return PlatformKind.WINDOWS
    if system == "Linux":
        return PlatformKind.LINUX
    return PlatformKind.UNSUPPORTED


def create_provider(config: WifiConfig | None = None, system: str | None = None) -> WirelessProvider:
    """Build the provider named by config, resolving ``auto`` against the running platform."""
    config = config or WifiConfig()
    choice = config.provider

    if choice == ProviderEnum.MOCK:
        return MockProvider(
            networks=config.mock.networks,
            accept_connect=config.mock.accept_connect,
            fail_open=config.mock.fail_open,
        )
    if choice == ProviderEnum.UNSUPPORTED:
        return UnsupportedProvider(system or platform.system())

    if choice == ProviderEnum.AUTO:
        kind = detect_platform(system)
    else:
        kind = PlatformKind(choice.value)
    logger.debug("Selected %s provider", kind.value)

    if kind == PlatformKind.WINDOWS:
        return WindowsProvider(
            client_version=config.windows.client_version,
            netsh_path=config.windows.netsh_path,
        )
    if kind == PlatformKind.LINUX:
        return LinuxProvider(
            backend=config.linux.backend.value,
            nmcli_path=config.linux.nmcli_path,
            interface=config.linux.interface,
            scan_timeout=config.linux.scan_timeout,
        )
    return UnsupportedProvider(system or platform.system())

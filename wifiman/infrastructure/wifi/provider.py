"""
Wireless Provider - Platform Abstraction Layer
==============================================

One capability, one implementation per operating system. Each provider owns
whatever native resource its platform requires (a session handle, a tool on
PATH, nothing at all) between ``open()`` and ``close()``.

Contract:
- ``open()`` acquires the native resource; calling it again while open is a no-op.
  Raises ProviderUnavailable when the subsystem cannot be reached.
- ``scan()`` returns a finite snapshot in backend enumeration order.
- ``connect()`` returns True once an attempt is *initiated*; link-up is not verified.
- ``close()`` releases the native resource at most once.

All calls are synchronous and block until the native subsystem returns.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ...core.errors import PlatformUnsupported, ProviderUnavailable
from ...domain.models import ConnectionRequest, WirelessNetwork

logger = logging.getLogger(__name__)


class WirelessProvider(ABC):
    """Base class for per-platform network discovery and connection."""

    name = "base"

    def __init__(self) -> None:
        self._open = False
        self._closed = False
        self._children: list = []  # spawned connect helpers not yet reaped

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        """Acquire the native resource. Idempotent while open."""
        if self._open:
            return
        if self._closed:
            raise ProviderUnavailable(f"{self.name} provider already closed")
        self._acquire()
        self._open = True
        logger.debug("%s provider opened", self.name)

    def close(self) -> None:
        """Release the native resource. Safe to call repeatedly; releases once."""
        if self._closed:
            return
        self._closed = True
        if not self._open:
            return
        self._open = False
        try:
            self._release()
        finally:
            self._reap_children()
            logger.debug("%s provider closed", self.name)

    def _require_open(self) -> None:
        if not self._open:
            raise ProviderUnavailable(f"{self.name} provider is not open")

    def _acquire(self) -> None:
        """Acquire native resources. Subclasses override when they hold any."""

    def _release(self) -> None:
        """Release what ``_acquire`` obtained."""

    def _track_child(self, proc) -> None:
        """Remember a spawned helper process so it can be reaped later."""
        self._reap_children()
        if proc is not None:
            self._children.append(proc)

    def _reap_children(self) -> None:
        """Collect exit status of finished helpers; running ones are left to finish."""
        running = [proc for proc in self._children if proc.poll() is None]
        if running:
            logger.debug("%d connect helper(s) still running", len(running))
        self._children = running

    @abstractmethod
    def scan(self) -> list[WirelessNetwork]:
        ...

    @abstractmethod
    def connect(self, request: ConnectionRequest) -> bool:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} open={self._open}>"


class UnsupportedProvider(WirelessProvider):
    """Fallback for operating systems without a provider."""

    name = "unsupported"

    def __init__(self, system: str = "") -> None:
        super().__init__()
        self.system = system

    def scan(self) -> list[WirelessNetwork]:
        logger.error("Platform not supported: %s", self.system or "unknown")
        raise PlatformUnsupported(f"no wireless provider for platform {self.system or 'unknown'}")

    def connect(self, request: ConnectionRequest) -> bool:
        logger.error("Platform not supported: %s", self.system or "unknown")
        raise PlatformUnsupported(f"no wireless provider for platform {self.system or 'unknown'}")


class MockProvider(WirelessProvider):
    """
    In-process provider for testing and demos.

    Returns a fixed network list and accepts or rejects every connection
    attempt. Counts lifecycle calls so release can be asserted exactly-once.
    """

    name = "mock"

    def __init__(
        self,
        networks: list[WirelessNetwork] | None = None,
        accept_connect: bool = True,
        fail_open: bool = False,
    ) -> None:
        super().__init__()
        self.networks = list(networks or [])
        self.accept_connect = accept_connect
        self.fail_open = fail_open
        self.requests: list[ConnectionRequest] = []
        self.open_calls = 0
        self.close_calls = 0
        self.release_calls = 0

    def open(self) -> None:
        self.open_calls += 1
        super().open()

    def close(self) -> None:
        self.close_calls += 1
        super().close()

    def _acquire(self) -> None:
        if self.fail_open:
            raise ProviderUnavailable("mock wireless subsystem unavailable")

    def _release(self) -> None:
        self.release_calls += 1

    def scan(self) -> list[WirelessNetwork]:
        self._require_open()
        return list(self.networks)

    def connect(self, request: ConnectionRequest) -> bool:
        self._require_open()
        self.requests.append(request)
        return self.accept_connect

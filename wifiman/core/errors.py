"""
Wireless error taxonomy.

Only ``UseAfterClose`` is ever raised to callers of ``WiFiManager``; every
other condition is reported through ``WiFiManager.last_error`` together with
an empty scan or a ``False`` connect result.
"""

from __future__ import annotations


class WirelessError(Exception):
    """Base class for all wireless abstraction errors."""


class ProviderUnavailable(WirelessError):
    """Native wireless subsystem could not be opened (service down, no radio, denied)."""


class PlatformUnsupported(WirelessError):
    """No provider exists for the running operating system."""


class EnumerationFailed(WirelessError):
    """Interface or network listing failed."""


class UseAfterClose(WirelessError, RuntimeError):
    """An operation was invoked on a closed WiFiManager."""


class WlanApiError(EnumerationFailed):
    """A Native Wi-Fi API call returned a non-zero Win32 error code."""

    def __init__(self, function: str, code: int) -> None:
        super().__init__(f"{function} failed with error code {code}")
        self.function = function
        self.code = code

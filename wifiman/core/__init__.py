"""wifiman core - error taxonomy shared by providers and the manager facade."""

from .errors import (
    EnumerationFailed,
    PlatformUnsupported,
    ProviderUnavailable,
    UseAfterClose,
    WirelessError,
    WlanApiError,
)

__all__ = [
    "EnumerationFailed",
    "PlatformUnsupported",
    "ProviderUnavailable",
    "UseAfterClose",
    "WirelessError",
    "WlanApiError",
]

"""
Thin ctypes binding for the Native Wi-Fi API (wlanapi.dll).

Only the calls needed for a session are bound: open/close a client handle,
enumerate interfaces, and fetch an interface's BSS list. List calls copy
what they need into plain Python objects and always hand native memory
back to WlanFreeMemory before returning.

The DLL is loaded on first use, so importing this module on a non-Windows
host is safe; using it there raises ProviderUnavailable.
"""

from __future__ import annotations

import ctypes
import logging
from dataclasses import dataclass

from ...core.errors import ProviderUnavailable, WlanApiError

logger = logging.getLogger(__name__)

ERROR_SUCCESS = 0
DOT11_SSID_MAX_LENGTH = 32
DOT11_RATE_SET_MAX_LENGTH = 126
WLAN_MAX_NAME_LENGTH = 256
DOT11_BSS_TYPE_ANY = 3

DWORD = ctypes.c_uint32
HANDLE = ctypes.c_void_p


class GUID(ctypes.Structure):
    _fields_ = (
        ("Data1", ctypes.c_uint32),
        ("Data2", ctypes.c_uint16),
        ("Data3", ctypes.c_uint16),
        ("Data4", ctypes.c_ubyte * 8),
    )

    def __str__(self) -> str:
        tail = bytes(self.Data4)
        return f"{self.Data1:08x}-{self.Data2:04x}-{self.Data3:04x}-{tail[:2].hex()}-{tail[2:].hex()}"


class DOT11_SSID(ctypes.Structure):
    _fields_ = (
        ("uSSIDLength", ctypes.c_uint32),
        ("ucSSID", ctypes.c_ubyte * DOT11_SSID_MAX_LENGTH),
    )

    def to_bytes(self) -> bytes:
        length = min(int(self.uSSIDLength), DOT11_SSID_MAX_LENGTH)
        return bytes(self.ucSSID)[:length]


class WLAN_RATE_SET(ctypes.Structure):
    _fields_ = (
        ("uRateSetLength", ctypes.c_uint32),
        ("usRateSet", ctypes.c_uint16 * DOT11_RATE_SET_MAX_LENGTH),
    )


class WLAN_BSS_ENTRY(ctypes.Structure):
    _fields_ = (
        ("dot11Ssid", DOT11_SSID),
        ("uPhyId", ctypes.c_uint32),
        ("dot11Bssid", ctypes.c_ubyte * 6),
        ("dot11BssType", ctypes.c_int),
        ("dot11BssPhyType", ctypes.c_int),
        ("lRssi", ctypes.c_int32),
        ("uLinkQuality", ctypes.c_uint32),
        ("bInRegDomain", ctypes.c_ubyte),
        ("usBeaconPeriod", ctypes.c_uint16),
        ("ullTimestamp", ctypes.c_uint64),
        ("ullHostTimestamp", ctypes.c_uint64),
        ("usCapabilityInformation", ctypes.c_uint16),
        ("ulChCenterFrequency", ctypes.c_uint32),
        ("wlanRateSet", WLAN_RATE_SET),
        ("ulIeOffset", ctypes.c_uint32),
        ("ulIeSize", ctypes.c_uint32),
    )


class WLAN_BSS_LIST(ctypes.Structure):
    _fields_ = (
        ("dwTotalSize", DWORD),
        ("dwNumberOfItems", DWORD),
        ("wlanBssEntries", WLAN_BSS_ENTRY * 1),
    )

    @property
    def items(self) -> ctypes.Array:
        tnew = WLAN_BSS_ENTRY * self.dwNumberOfItems
        return tnew.from_address(ctypes.addressof(self.wlanBssEntries))


class WLAN_INTERFACE_INFO(ctypes.Structure):
    _fields_ = (
        ("InterfaceGuid", GUID),
        ("strInterfaceDescription", ctypes.c_wchar * WLAN_MAX_NAME_LENGTH),
        ("isState", ctypes.c_int),
    )


class WLAN_INTERFACE_INFO_LIST(ctypes.Structure):
    _fields_ = (
        ("dwNumberOfItems", DWORD),
        ("dwIndex", DWORD),
        ("InterfaceInfo", WLAN_INTERFACE_INFO * 1),
    )

    @property
    def items(self) -> ctypes.Array:
        tnew = WLAN_INTERFACE_INFO * self.dwNumberOfItems
        return tnew.from_address(ctypes.addressof(self.InterfaceInfo))


@dataclass
class WlanInterface:
    """A wireless interface as reported by WlanEnumInterfaces."""

    guid: GUID
    description: str


@dataclass
class BssEntry:
    """The subset of a WLAN_BSS_ENTRY the providers consume."""

    ssid: bytes
    rssi: int
    capabilities: int


class WlanApi:
    """Session-level calls into wlanapi.dll."""

    def __init__(self, library: object | None = None) -> None:
        self._lib = library

    def _load(self):
        if self._lib is not None:
            return self._lib
        try:
            lib = ctypes.WinDLL("wlanapi")
        except (AttributeError, OSError) as e:
            raise ProviderUnavailable(f"wlanapi.dll not available: {e}") from e

        lib.WlanOpenHandle.argtypes = [DWORD, ctypes.c_void_p, ctypes.POINTER(DWORD), ctypes.POINTER(HANDLE)]
        lib.WlanOpenHandle.restype = DWORD
        lib.WlanCloseHandle.argtypes = [HANDLE, ctypes.c_void_p]
        lib.WlanCloseHandle.restype = DWORD
        lib.WlanEnumInterfaces.argtypes = [
            HANDLE,
            ctypes.c_void_p,
            ctypes.POINTER(ctypes.POINTER(WLAN_INTERFACE_INFO_LIST)),
        ]
        lib.WlanEnumInterfaces.restype = DWORD
        lib.WlanGetNetworkBssList.argtypes = [
            HANDLE,
            ctypes.POINTER(GUID),
            ctypes.POINTER(DOT11_SSID),
            ctypes.c_int,
            ctypes.c_int,
            ctypes.c_void_p,
            ctypes.POINTER(ctypes.POINTER(WLAN_BSS_LIST)),
        ]
        lib.WlanGetNetworkBssList.restype = DWORD
        lib.WlanFreeMemory.argtypes = [ctypes.c_void_p]
        lib.WlanFreeMemory.restype = None
        self._lib = lib
        return lib

    def open_handle(self, client_version: int = 2) -> int:
        lib = self._load()
        negotiated = DWORD()
        handle = HANDLE()
        result = lib.WlanOpenHandle(client_version, None, ctypes.byref(negotiated), ctypes.byref(handle))
        if result != ERROR_SUCCESS:
            raise ProviderUnavailable(f"WlanOpenHandle failed with error code {result}")
        logger.debug("wlanapi session opened (negotiated version %d)", negotiated.value)
        return handle.value

    def close_handle(self, handle: int) -> None:
        result = self._load().WlanCloseHandle(handle, None)
        if result != ERROR_SUCCESS:
            raise WlanApiError("WlanCloseHandle", result)

    def enum_interfaces(self, handle: int) -> list[WlanInterface]:
        lib = self._load()
        ifaces = ctypes.POINTER(WLAN_INTERFACE_INFO_LIST)()
        result = lib.WlanEnumInterfaces(handle, None, ctypes.byref(ifaces))
        if result != ERROR_SUCCESS:
            raise WlanApiError("WlanEnumInterfaces", result)
        try:
            return [
                WlanInterface(
                    guid=GUID.from_buffer_copy(info.InterfaceGuid),
                    description=info.strInterfaceDescription,
                )
                for info in ifaces.contents.items
            ]
        finally:
            lib.WlanFreeMemory(ifaces)

    def get_bss_list(self, handle: int, guid: GUID) -> list[BssEntry]:
        lib = self._load()
        bss_list = ctypes.POINTER(WLAN_BSS_LIST)()
        result = lib.WlanGetNetworkBssList(
            handle,
            ctypes.byref(guid),
            None,
            DOT11_BSS_TYPE_ANY,
            False,
            None,
            ctypes.byref(bss_list),
        )
        if result != ERROR_SUCCESS:
            raise WlanApiError("WlanGetNetworkBssList", result)
        try:
            return [
                BssEntry(
                    ssid=entry.dot11Ssid.to_bytes(),
                    rssi=int(entry.lRssi),
                    capabilities=int(entry.usCapabilityInformation),
                )
                for entry in bss_list.contents.items
            ]
        finally:
            lib.WlanFreeMemory(bss_list)

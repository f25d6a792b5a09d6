"""Data models for the tethering controller."""

from __future__ import annotations

from enum import Enum, Flag
from typing import List


class UnknownTetheringTypeError(ValueError):
    """Raised when a start/stop request names something other than a TetheringType."""


class TetheringType(Enum):
    """Transport selector passed to the platform connectivity service."""

    WIFI = 0
    USB = 1
    BLUETOOTH = 2

    @property
    def state_flag(self) -> 'TetheringState':
        return _TYPE_TO_FLAG[self]

    @classmethod
    def coerce(cls, choice: object) -> 'TetheringType':
        """Return ``choice`` as a TetheringType or raise UnknownTetheringTypeError."""
        if isinstance(choice, cls):
            return choice
        raise UnknownTetheringTypeError(f'Unknown tethering type: {choice!r}')


class TetheringState(Flag):
    """Set of tethering transports that are currently active."""

    OFF = 0
    WIFI = 1
    USB = 1 << 1
    BLUETOOTH = 1 << 2

    @property
    def is_off(self) -> bool:
        return self == TetheringState.OFF

    @property
    def is_wifi_on(self) -> bool:
        return bool(self & TetheringState.WIFI)

    @property
    def is_usb_on(self) -> bool:
        return bool(self & TetheringState.USB)

    @property
    def is_bluetooth_on(self) -> bool:
        return bool(self & TetheringState.BLUETOOTH)

    def active_types(self) -> List[TetheringType]:
        """Return the active transports in selector order."""
        return [kind for kind in TetheringType if self & kind.state_flag]


_TYPE_TO_FLAG = {
    TetheringType.WIFI: TetheringState.WIFI,
    TetheringType.USB: TetheringState.USB,
    TetheringType.BLUETOOTH: TetheringState.BLUETOOTH,
}


def is_wifi_tethering(state: TetheringState) -> bool:
    return state.is_wifi_on


def is_usb_tethering(state: TetheringState) -> bool:
    return state.is_usb_on


def is_bluetooth_tethering(state: TetheringState) -> bool:
    return state.is_bluetooth_on


class WifiApState(Enum):
    """Soft AP sub-states reported by the Wi-Fi service."""

    DISABLING = 10
    DISABLED = 11
    ENABLING = 12
    ENABLED = 13
    FAILED = 14

    @property
    def is_stable(self) -> bool:
        return self in (WifiApState.DISABLED, WifiApState.ENABLED, WifiApState.FAILED)


class BluetoothAdapterState(Enum):
    """Power states reported by the Bluetooth adapter."""

    ERROR = -1
    OFF = 10
    TURNING_ON = 11
    ON = 12
    TURNING_OFF = 13

    @property
    def is_stable(self) -> bool:
        return self in (BluetoothAdapterState.ON, BluetoothAdapterState.OFF, BluetoothAdapterState.ERROR)

    @property
    def is_transitioning(self) -> bool:
        return not self.is_stable

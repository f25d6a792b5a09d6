"""Tethering switch subsystem."""

from .data_saver import DataSaverBackend
from .enabler import StartTetheringCallback, TetherEnabler
from .events import PlatformEvents
from .models import (
    BluetoothAdapterState,
    TetheringState,
    TetheringType,
    UnknownTetheringTypeError,
    WifiApState,
    is_bluetooth_tethering,
    is_usb_tethering,
    is_wifi_tethering,
)

__all__ = [
    'BluetoothAdapterState',
    'DataSaverBackend',
    'PlatformEvents',
    'StartTetheringCallback',
    'TetherEnabler',
    'TetheringState',
    'TetheringType',
    'UnknownTetheringTypeError',
    'WifiApState',
    'is_bluetooth_tethering',
    'is_usb_tethering',
    'is_wifi_tethering',
]

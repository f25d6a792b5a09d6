"""Signal hub carrying platform tethering broadcasts to interested controllers."""

from __future__ import annotations

from typing import Iterable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from utils import common

from .models import BluetoothAdapterState, WifiApState


logger = common.get_logger('events')


class PlatformEvents(QObject):
    """Host-side bridge that re-emits connectivity broadcasts as Qt signals.

    Payloads may be ``None`` when the originating broadcast did not carry the
    corresponding extra; receivers decide how to interpret a missing value.
    """

    # Optional[List[str]] of interfaces currently tethered.
    tether_state_changed = pyqtSignal(object)
    # Optional[WifiApState]
    wifi_ap_state_changed = pyqtSignal(object)
    # Optional[BluetoothAdapterState]
    bluetooth_state_changed = pyqtSignal(object)

    def post_tether_state_changed(self, active: Optional[Iterable[str]] = None) -> None:
        payload = list(active) if active is not None else None
        logger.debug('Tether state changed broadcast: active=%s', payload)
        self.tether_state_changed.emit(payload)

    def post_wifi_ap_state_changed(self, state: Optional[WifiApState]) -> None:
        logger.debug('Wi-Fi AP state broadcast: %s', state)
        self.wifi_ap_state_changed.emit(state)

    def post_bluetooth_state_changed(self, state: Optional[BluetoothAdapterState]) -> None:
        logger.debug('Bluetooth adapter state broadcast: %s', state)
        self.bluetooth_state_changed.emit(state)

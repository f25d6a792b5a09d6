"""Tethering switch controller.

``TetherEnabler`` keeps a single on/off switch in sync with the combined
Wi-Fi hotspot, USB and Bluetooth PAN tethering state, forwards switch
changes to the platform as start/stop requests, and fans every recomputed
state out to registered listeners.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from PyQt6.QtCore import QObject, pyqtSignal

from config.config_manager import ConfigManager, TetheringSettings
from utils import common

from .interfaces import (
    BluetoothAdapter,
    ConnectivityManager,
    DataSaverPolicy,
    OnTetherStateUpdateListener,
    SwitchController,
    UserManager,
    WifiManager,
)
from .events import PlatformEvents
from .models import (
    BluetoothAdapterState,
    TetheringState,
    TetheringType,
    WifiApState,
)


logger = common.get_logger('enabler')


class StartTetheringCallback:
    """Completion callback for platform start requests.

    The callback only refreshes its enabler while attached; once detached,
    late completions from the platform are dropped.
    """

    def __init__(self, enabler: Optional['TetherEnabler']) -> None:
        self._enabler = enabler

    @property
    def is_attached(self) -> bool:
        return self._enabler is not None

    def detach(self) -> None:
        self._enabler = None

    def on_tethering_started(self) -> None:
        self._update()

    def on_tethering_failed(self) -> None:
        logger.warning('Platform reported tethering start failure')
        self._update()

    def _update(self) -> None:
        enabler = self._enabler
        if enabler is not None:
            enabler.update_state(None)


class TetherEnabler(QObject):
    """Manages the tethering switch on/off state.

    Offers helpers to turn the individual tethering transports on and off and
    keeps the switch enabled state in line with data saver and the user's
    admin capability. All methods are expected to run on the Qt main thread.
    """

    tether_state_updated = pyqtSignal(object)

    def __init__(
        self,
        switch_controller: SwitchController,
        connectivity_manager: ConnectivityManager,
        wifi_manager: WifiManager,
        bluetooth_adapter: BluetoothAdapter,
        user_manager: UserManager,
        data_saver: DataSaverPolicy,
        platform_events: PlatformEvents,
        settings: Optional[TetheringSettings] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._switch = switch_controller
        self._connectivity = connectivity_manager
        self._wifi = wifi_manager
        self._bluetooth = bluetooth_adapter
        self._user_manager = user_manager
        self._data_saver = data_saver
        self._events = platform_events
        self._settings = settings or TetheringSettings()

        self._listeners: List[OnTetherStateUpdateListener] = []
        self._data_saver_enabled = data_saver.is_data_saver_enabled()
        self._started = False
        self._start_callback = StartTetheringCallback(None)

        self.bluetooth_tethering_stopped_by_user = False
        self.bluetooth_enable_for_tether = False

    @classmethod
    def from_config(cls, config_manager: ConfigManager, *args, **kwargs) -> 'TetherEnabler':
        """Build an enabler from persisted tethering and logging settings.

        An explicit ``settings`` argument takes precedence over the stored one.
        """
        config = config_manager.load_config()
        common.configure_logging(config.logging.log_level)
        kwargs.setdefault('settings', config.tethering)
        return cls(*args, **kwargs)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def start_callback(self) -> StartTetheringCallback:
        return self._start_callback

    def start(self) -> None:
        if self._started:
            logger.debug('start() ignored, already started')
            return
        self._started = True

        self._data_saver_enabled = self._data_saver.is_data_saver_enabled()
        self._data_saver.data_saver_changed.connect(self.on_data_saver_changed)
        self._switch.set_listener(self)
        self._switch.start_listening()

        self._events.tether_state_changed.connect(self._on_tether_state_changed)
        self._events.wifi_ap_state_changed.connect(self._on_wifi_ap_state_changed)
        self._events.bluetooth_state_changed.connect(self._on_bluetooth_state_changed)

        self._start_callback = StartTetheringCallback(self)
        logger.info('Tether enabler started')
        self.update_state(None)

    def stop(self) -> None:
        if not self._started:
            return
        self._started = False

        self.bluetooth_tethering_stopped_by_user = False
        self._data_saver.data_saver_changed.disconnect(self.on_data_saver_changed)
        self._switch.stop_listening()

        self._events.tether_state_changed.disconnect(self._on_tether_state_changed)
        self._events.wifi_ap_state_changed.disconnect(self._on_wifi_ap_state_changed)
        self._events.bluetooth_state_changed.disconnect(self._on_bluetooth_state_changed)

        self._start_callback.detach()
        logger.info('Tether enabler stopped')

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_listener(self, listener: Optional[OnTetherStateUpdateListener]) -> None:
        if listener is not None and listener not in self._listeners:
            listener.on_tether_state_updated(self.get_tethering_state(None))
            self._listeners.append(listener)

    def remove_listener(self, listener: Optional[OnTetherStateUpdateListener]) -> None:
        if listener is not None and listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def get_tethering_state(self, tethered: Optional[Sequence[str]] = None) -> TetheringState:
        if tethered is None:
            tethered = self._connectivity.get_tethered_ifaces()

        state = TetheringState.OFF
        if self._wifi.is_wifi_ap_enabled():
            state |= TetheringState.WIFI

        # Only check bluetooth tethering state if not stopped by user already.
        if not self.bluetooth_tethering_stopped_by_user:
            if (self._bluetooth.get_state() == BluetoothAdapterState.ON
                    and self._bluetooth.is_pan_tethering_on()):
                state |= TetheringState.BLUETOOTH

        usb_regexs = self._connectivity.get_tetherable_usb_regexs()
        for iface in tethered:
            for regex in usb_regexs:
                if re.fullmatch(regex, iface):
                    return state | TetheringState.USB

        return state

    def update_state(self, tethered: Optional[Sequence[str]] = None) -> TetheringState:
        """Recompute the state, sync the switch and notify every listener.

        Listeners are notified on every call, whether or not the state changed.
        """
        state = self.get_tethering_state(tethered)
        self._log_verbose('update_state: %s', state)
        self._set_switch_checked_internal(not state.is_off)
        self.set_switch_enabled(True)
        for listener in list(self._listeners):
            if listener in self._listeners:
                listener.on_tether_state_updated(state)
        self.tether_state_updated.emit(state)
        return state

    def set_switch_enabled(self, enabled: bool) -> None:
        self._switch.set_enabled(
            enabled and not self._data_saver_enabled and self._user_manager.is_admin_user())

    def _set_switch_checked_internal(self, checked: bool) -> None:
        with self._switch.paused_listening():
            self._switch.set_checked(checked)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------
    def on_switch_toggled(self, is_checked: bool) -> bool:
        if is_checked:
            self.start_tethering(TetheringType.WIFI)
        else:
            self.stop_tethering(TetheringType.USB)
            self.stop_tethering(TetheringType.WIFI)
            self.stop_tethering(TetheringType.BLUETOOTH)
        return True

    def start_tethering(self, choice: TetheringType) -> None:
        choice = TetheringType.coerce(choice)
        state = self.get_tethering_state(None)
        if choice in (TetheringType.WIFI, TetheringType.USB) and state & choice.state_flag:
            return

        if choice == TetheringType.BLUETOOTH:
            self.bluetooth_tethering_stopped_by_user = False
            if state.is_bluetooth_on:
                return
            if self._bluetooth.get_state() == BluetoothAdapterState.OFF:
                self._log_verbose('Turn on bluetooth first.')
                self.bluetooth_enable_for_tether = True
                self._bluetooth.enable()
                return

        self.set_switch_enabled(False)
        logger.info('Requesting %s tethering start', choice.name)
        self._connectivity.start_tethering(
            choice, self._start_callback, self._settings.show_provisioning_ui)

    def stop_tethering(self, choice: TetheringType) -> None:
        choice = TetheringType.coerce(choice)
        state = self.get_tethering_state(None)
        if not state & choice.state_flag:
            return

        self.set_switch_enabled(False)
        logger.info('Requesting %s tethering stop', choice.name)
        self._connectivity.stop_tethering(choice)
        if choice == TetheringType.BLUETOOTH:
            # Stopping bluetooth tethering emits no tether state broadcast,
            # so remember the user action and refresh right away.
            self.bluetooth_tethering_stopped_by_user = True
            self.update_state(None)

    def on_data_saver_changed(self, is_data_saving: bool) -> None:
        self._data_saver_enabled = bool(is_data_saving)
        self.set_switch_enabled(True)

    # ------------------------------------------------------------------
    # Platform events
    # ------------------------------------------------------------------
    def handle_wifi_ap_state_changed(self, state: Optional[object]) -> bool:
        """Return whether the Wi-Fi AP state is terminal and warrants a refresh."""
        if state is None:
            state = WifiApState.FAILED
        try:
            ap_state = WifiApState(state)
        except ValueError:
            logger.debug('Ignoring unknown Wi-Fi AP state %r', state)
            return False

        if ap_state == WifiApState.FAILED:
            logger.error('Wifi AP is failed!')
        if not ap_state.is_stable:
            logger.debug('Ignoring transitional Wi-Fi AP state %s', ap_state.name)
            return False
        return True

    def handle_bluetooth_state_changed(self, state: Optional[object]) -> bool:
        """Return whether the adapter state is terminal; resumes a deferred Bluetooth start on ON."""
        if state is None:
            state = BluetoothAdapterState.ERROR
        try:
            adapter_state = BluetoothAdapterState(state)
        except ValueError:
            logger.debug('Ignoring unknown Bluetooth adapter state %r', state)
            return False

        if not adapter_state.is_stable:
            logger.debug('Ignoring transitional Bluetooth adapter state %s', adapter_state.name)
            return False

        if adapter_state == BluetoothAdapterState.ON and self.bluetooth_enable_for_tether:
            self.start_tethering(TetheringType.BLUETOOTH)
        self.bluetooth_enable_for_tether = False
        return True

    def _on_tether_state_changed(self, active: Optional[Sequence[str]]) -> None:
        with common.trace_id_scope(common.generate_trace_id()):
            self.update_state(list(active) if active is not None else None)

    def _on_wifi_ap_state_changed(self, state: Optional[WifiApState]) -> None:
        with common.trace_id_scope(common.generate_trace_id()):
            if self.handle_wifi_ap_state_changed(state):
                self.update_state(None)

    def _on_bluetooth_state_changed(self, state: Optional[BluetoothAdapterState]) -> None:
        with common.trace_id_scope(common.generate_trace_id()):
            if self.handle_bluetooth_state_changed(state):
                self.update_state(None)

    def _log_verbose(self, message: str, *args: object) -> None:
        level = logging.INFO if self._settings.debug_logging else logging.DEBUG
        logger.log(level, message, *args)

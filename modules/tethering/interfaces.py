"""Collaborator interfaces consumed by the tethering controller.

The host environment provides concrete implementations of these protocols:
connectivity, Wi-Fi and Bluetooth services plus the current user's
capabilities. They are injected into :class:`TetherEnabler` instead of being
looked up globally, which keeps the controller testable with plain mocks.
"""

from __future__ import annotations

from typing import ContextManager, Optional, Protocol, Sequence

from .models import BluetoothAdapterState, TetheringState, TetheringType


class OnStartTetheringCallback(Protocol):
    """Completion callback handed to :meth:`ConnectivityManager.start_tethering`."""

    def on_tethering_started(self) -> None: ...

    def on_tethering_failed(self) -> None: ...


class ConnectivityManager(Protocol):
    def get_tethered_ifaces(self) -> Sequence[str]: ...

    def get_tetherable_usb_regexs(self) -> Sequence[str]: ...

    def start_tethering(
        self,
        tethering_type: TetheringType,
        callback: OnStartTetheringCallback,
        show_provisioning_ui: bool = True,
    ) -> None: ...

    def stop_tethering(self, tethering_type: TetheringType) -> None: ...


class WifiManager(Protocol):
    def is_wifi_ap_enabled(self) -> bool: ...


class BluetoothAdapter(Protocol):
    def get_state(self) -> BluetoothAdapterState: ...

    def is_pan_tethering_on(self) -> bool:
        """Return whether the PAN profile reports tethering on (False when no PAN proxy is bound)."""
        ...

    def enable(self) -> bool: ...


class UserManager(Protocol):
    def is_admin_user(self) -> bool: ...


class DataSaverPolicy(Protocol):
    """Data saver source; ``data_saver_changed`` is a Qt signal carrying a bool."""

    data_saver_changed: object

    def is_data_saver_enabled(self) -> bool: ...


class SwitchController(Protocol):
    """Toggle widget binding driven by the controller."""

    def set_listener(self, listener: Optional['OnSwitchChangeListener']) -> None: ...

    def start_listening(self) -> None: ...

    def stop_listening(self) -> None: ...

    def set_checked(self, checked: bool) -> None: ...

    def set_enabled(self, enabled: bool) -> None: ...

    def paused_listening(self) -> ContextManager[None]: ...


class OnSwitchChangeListener(Protocol):
    def on_switch_toggled(self, is_checked: bool) -> bool: ...


class OnTetherStateUpdateListener(Protocol):
    def on_tether_state_updated(self, state: TetheringState) -> None: ...

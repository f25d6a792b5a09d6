"""Switch widget bindings used by the tethering controller."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from PyQt6.QtWidgets import QAbstractButton

from utils import common

from modules.tethering.interfaces import OnSwitchChangeListener


logger = common.get_logger('switch')


class SwitchWidgetController:
    """Common listener bookkeeping for a two-state toggle.

    Subclasses only need to implement the widget accessors; user toggles are
    forwarded through :meth:`dispatch_toggled`, which drops them while
    listening is paused.
    """

    def __init__(self) -> None:
        self._listener: Optional[OnSwitchChangeListener] = None
        self._listening = False

    def set_listener(self, listener: Optional[OnSwitchChangeListener]) -> None:
        self._listener = listener

    def start_listening(self) -> None:
        self._listening = True

    def stop_listening(self) -> None:
        self._listening = False

    @property
    def is_listening(self) -> bool:
        return self._listening

    @contextmanager
    def paused_listening(self) -> Iterator[None]:
        """Suspend toggle forwarding for the duration of the block."""
        was_listening = self._listening
        self.stop_listening()
        try:
            yield
        finally:
            if was_listening:
                self.start_listening()

    def dispatch_toggled(self, checked: bool) -> bool:
        """Forward a user toggle to the listener; returns False when it was rejected."""
        if not self._listening or self._listener is None:
            return True
        accepted = self._listener.on_switch_toggled(checked)
        return accepted is not False

    # ------------------------------------------------------------------
    # Widget accessors
    # ------------------------------------------------------------------
    def set_checked(self, checked: bool) -> None:
        raise NotImplementedError

    def is_checked(self) -> bool:
        raise NotImplementedError

    def set_enabled(self, enabled: bool) -> None:
        raise NotImplementedError

    def is_enabled(self) -> bool:
        raise NotImplementedError


class ButtonSwitchController(SwitchWidgetController):
    """Binds a checkable Qt button (QCheckBox, QPushButton, ...) as the switch."""

    def __init__(self, button: QAbstractButton) -> None:
        super().__init__()
        self._button = button
        self._button.setCheckable(True)
        self._button.toggled.connect(self._on_button_toggled)

    @property
    def button(self) -> QAbstractButton:
        return self._button

    def set_checked(self, checked: bool) -> None:
        self._button.setChecked(bool(checked))

    def is_checked(self) -> bool:
        return self._button.isChecked()

    def set_enabled(self, enabled: bool) -> None:
        self._button.setEnabled(bool(enabled))

    def is_enabled(self) -> bool:
        return self._button.isEnabled()

    def _on_button_toggled(self, checked: bool) -> None:
        if self.dispatch_toggled(checked):
            return
        logger.debug('Switch change to %s rejected, reverting', checked)
        with self.paused_listening():
            self._button.setChecked(not checked)

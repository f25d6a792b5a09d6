"""Data saver policy source."""

from __future__ import annotations

from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from utils import common


logger = common.get_logger('data_saver')


class DataSaverBackend(QObject):
    """Tracks the data saver (restrict background) policy and announces changes."""

    data_saver_changed = pyqtSignal(bool)

    def __init__(
        self,
        enabled: bool = False,
        policy_writer: Optional[Callable[[bool], None]] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = bool(enabled)
        self._policy_writer = policy_writer

    def is_data_saver_enabled(self) -> bool:
        return self._enabled

    def set_data_saver_enabled(self, enabled: bool) -> None:
        """Update the policy, writing it through to the host when a writer is set."""
        enabled = bool(enabled)
        if self._policy_writer is not None:
            self._policy_writer(enabled)
        self.on_restrict_background_changed(enabled)

    def on_restrict_background_changed(self, enabled: bool) -> None:
        """Record a policy value reported by the host; emits only on an actual change."""
        enabled = bool(enabled)
        if enabled == self._enabled:
            return
        self._enabled = enabled
        logger.info('Data saver %s', 'enabled' if enabled else 'disabled')
        self.data_saver_changed.emit(enabled)

#!/usr/bin/env python3
"""Unit tests for the tethering models and the data saver / event sources."""

import os
import sys
import unittest
from unittest.mock import Mock

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from PyQt6.QtWidgets import QApplication

from modules.tethering.data_saver import DataSaverBackend
from modules.tethering.events import PlatformEvents
from modules.tethering.models import (
    BluetoothAdapterState,
    TetheringState,
    TetheringType,
    UnknownTetheringTypeError,
    WifiApState,
    is_bluetooth_tethering,
    is_usb_tethering,
    is_wifi_tethering,
)


class TetheringStateTests(unittest.TestCase):
    def test_flag_values_are_independent_bits(self):
        self.assertEqual(TetheringState.WIFI.value, 1)
        self.assertEqual(TetheringState.USB.value, 2)
        self.assertEqual(TetheringState.BLUETOOTH.value, 4)
        self.assertEqual(TetheringState.OFF.value, 0)

    def test_accessors(self):
        state = TetheringState.WIFI | TetheringState.BLUETOOTH

        self.assertTrue(state.is_wifi_on)
        self.assertFalse(state.is_usb_on)
        self.assertTrue(state.is_bluetooth_on)
        self.assertFalse(state.is_off)
        self.assertTrue(TetheringState.OFF.is_off)

    def test_module_helpers_mirror_accessors(self):
        self.assertTrue(is_wifi_tethering(TetheringState.WIFI))
        self.assertTrue(is_usb_tethering(TetheringState.USB | TetheringState.WIFI))
        self.assertFalse(is_bluetooth_tethering(TetheringState.USB))

    def test_active_types_in_selector_order(self):
        state = TetheringState.BLUETOOTH | TetheringState.WIFI

        self.assertEqual(state.active_types(), [TetheringType.WIFI, TetheringType.BLUETOOTH])
        self.assertEqual(TetheringState.OFF.active_types(), [])


class TetheringTypeTests(unittest.TestCase):
    def test_state_flag_mapping(self):
        self.assertIs(TetheringType.WIFI.state_flag, TetheringState.WIFI)
        self.assertIs(TetheringType.USB.state_flag, TetheringState.USB)
        self.assertIs(TetheringType.BLUETOOTH.state_flag, TetheringState.BLUETOOTH)

    def test_coerce_rejects_non_members(self):
        self.assertIs(TetheringType.coerce(TetheringType.USB), TetheringType.USB)
        with self.assertRaises(UnknownTetheringTypeError):
            TetheringType.coerce(1)
        self.assertTrue(issubclass(UnknownTetheringTypeError, ValueError))


class StableStateTests(unittest.TestCase):
    def test_wifi_ap_stable_states(self):
        stable = {state for state in WifiApState if state.is_stable}
        self.assertEqual(stable, {WifiApState.ENABLED, WifiApState.DISABLED, WifiApState.FAILED})

    def test_bluetooth_stable_states(self):
        stable = {state for state in BluetoothAdapterState if state.is_stable}
        self.assertEqual(
            stable,
            {BluetoothAdapterState.ON, BluetoothAdapterState.OFF, BluetoothAdapterState.ERROR},
        )
        self.assertTrue(BluetoothAdapterState.TURNING_ON.is_transitioning)


class DataSaverBackendTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._app = QApplication.instance() or QApplication([])

    def test_emits_only_on_change(self):
        backend = DataSaverBackend()
        received = []
        backend.data_saver_changed.connect(received.append)

        backend.set_data_saver_enabled(False)
        backend.set_data_saver_enabled(True)
        backend.on_restrict_background_changed(True)

        self.assertEqual(received, [True])
        self.assertTrue(backend.is_data_saver_enabled())

    def test_policy_writer_receives_requested_value(self):
        writer = Mock()
        backend = DataSaverBackend(enabled=True, policy_writer=writer)

        backend.set_data_saver_enabled(False)

        writer.assert_called_once_with(False)
        self.assertFalse(backend.is_data_saver_enabled())


class PlatformEventsTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._app = QApplication.instance() or QApplication([])

    def test_post_helpers_emit_payloads(self):
        events = PlatformEvents()
        received = []
        events.tether_state_changed.connect(lambda active: received.append(('tether', active)))
        events.wifi_ap_state_changed.connect(lambda state: received.append(('wifi', state)))
        events.bluetooth_state_changed.connect(lambda state: received.append(('bt', state)))

        events.post_tether_state_changed(iter(['usb0']))
        events.post_tether_state_changed()
        events.post_wifi_ap_state_changed(WifiApState.ENABLING)
        events.post_bluetooth_state_changed(None)

        self.assertEqual(received, [
            ('tether', ['usb0']),
            ('tether', None),
            ('wifi', WifiApState.ENABLING),
            ('bt', None),
        ])


if __name__ == '__main__':
    unittest.main()

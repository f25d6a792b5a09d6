"""Unit tests for ConfigManager."""

import os
import sys
import unittest
import tempfile
import json
import shutil
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.config_manager import ConfigManager, AppConfig, TetheringSettings, LoggingSettings


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager."""

    def setUp(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "test_config.json"
        self.config_manager = ConfigManager(str(self.config_path))

    def tearDown(self):
        """Clean up test environment."""
        if Path(self.temp_dir).exists():
            shutil.rmtree(self.temp_dir)

    def test_create_default_config(self):
        """Test default configuration creation."""
        config = self.config_manager.load_config()

        self.assertIsInstance(config, AppConfig)
        self.assertIsInstance(config.tethering, TetheringSettings)
        self.assertIsInstance(config.logging, LoggingSettings)

        self.assertTrue(config.tethering.show_provisioning_ui)
        self.assertFalse(config.tethering.debug_logging)
        self.assertEqual(config.logging.log_level, 'INFO')

    def test_backup_path_sits_next_to_custom_config(self):
        self.assertEqual(self.config_manager.backup_path.parent, self.config_path.parent)

    def test_save_and_load_config(self):
        """Test configuration saving and loading."""
        config = self.config_manager.load_config()
        config.tethering.show_provisioning_ui = False
        config.logging.log_level = 'DEBUG'

        self.config_manager.save_config(config)

        new_manager = ConfigManager(str(self.config_path))
        loaded_config = new_manager.load_config()

        self.assertFalse(loaded_config.tethering.show_provisioning_ui)
        self.assertEqual(loaded_config.logging.log_level, 'DEBUG')

    def test_config_validation(self):
        """Test configuration validation."""
        invalid_config = {
            "tethering": {
                "show_provisioning_ui": "yes",  # Invalid type
                "unknown_key": 1,
            },
            "logging": {
                "log_level": "LOUD"  # Invalid level
            }
        }

        with open(self.config_path, 'w') as f:
            json.dump(invalid_config, f)

        config = self.config_manager.load_config()
        self.assertTrue(config.tethering.show_provisioning_ui)
        self.assertEqual(config.logging.log_level, 'INFO')

    def test_log_level_is_normalised(self):
        with open(self.config_path, 'w') as f:
            json.dump({"logging": {"log_level": "warning"}}, f)

        config = self.config_manager.load_config()
        self.assertEqual(config.logging.log_level, 'WARNING')

    def test_corrupted_config_falls_back_to_backup(self):
        self.config_manager.update_tethering_settings(debug_logging=True)
        # Second save copies the first file to the backup location.
        self.config_manager.update_logging_settings(log_level='ERROR')
        self.config_path.write_text('{ not json', encoding='utf-8')

        recovered = ConfigManager(str(self.config_path)).load_config()

        self.assertTrue(recovered.tethering.debug_logging)

    def test_update_settings(self):
        """Test settings update methods."""
        self.config_manager.update_tethering_settings(debug_logging=True, bogus=True)
        self.config_manager.update_logging_settings(log_level='ERROR')

        config = self.config_manager.load_config()
        self.assertTrue(config.tethering.debug_logging)
        self.assertFalse(hasattr(config.tethering, 'bogus'))
        self.assertEqual(config.logging.log_level, 'ERROR')

    def test_reset_to_defaults(self):
        self.config_manager.update_tethering_settings(show_provisioning_ui=False)

        self.config_manager.reset_to_defaults()

        reloaded = ConfigManager(str(self.config_path)).load_config()
        self.assertTrue(reloaded.tethering.show_provisioning_ui)


if __name__ == '__main__':
    unittest.main()

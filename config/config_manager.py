"""Configuration management module for application settings."""

import json
import logging
import shutil
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict
from pathlib import Path

from utils import common

logger = common.get_logger('config')


@dataclass
class TetheringSettings:
    """Tethering controller behaviour."""
    show_provisioning_ui: bool = True
    debug_logging: bool = False


@dataclass
class LoggingSettings:
    """Logging configuration."""
    log_level: str = 'INFO'


@dataclass
class AppConfig:
    """Main application configuration."""
    tethering: TetheringSettings
    logging: LoggingSettings
    version: str = "1.0.0"


class ConfigManager:
    """Manages application configuration persistence and validation."""

    DEFAULT_CONFIG_PATH = '~/.tether_enabler_config.json'
    BACKUP_CONFIG_PATH = '~/.tether_enabler_config.backup.json'

    def __init__(self, config_path: Optional[str] = None, backup_path: Optional[str] = None):
        self.config_path = Path(config_path or self.DEFAULT_CONFIG_PATH).expanduser()
        if backup_path is None and config_path is not None:
            backup_path = str(self.config_path.with_suffix('.backup.json'))
        self.backup_path = Path(backup_path or self.BACKUP_CONFIG_PATH).expanduser()
        self._config: Optional[AppConfig] = None
        self._ensure_config_dir()

    def _ensure_config_dir(self):
        """Ensure configuration directory exists."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

    def _create_default_config(self) -> AppConfig:
        """Create default configuration."""
        return AppConfig(
            tethering=TetheringSettings(),
            logging=LoggingSettings(),
        )

    def _validate_config(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and clean configuration dictionary."""
        default_config = asdict(self._create_default_config())

        # Merge with defaults for missing keys
        def merge_dict(default: Dict, user: Dict) -> Dict:
            result = default.copy()
            for key, value in user.items():
                if key in result:
                    if isinstance(value, dict) and isinstance(result[key], dict):
                        result[key] = merge_dict(result[key], value)
                    else:
                        result[key] = value
            return result

        validated = merge_dict(default_config, config_dict)

        tethering_settings = validated.get('tethering', {})
        for key in ('show_provisioning_ui', 'debug_logging'):
            if not isinstance(tethering_settings.get(key), bool):
                tethering_settings[key] = default_config['tethering'][key]
                logger.warning('Tethering setting %s invalid, reset to default', key)

        logging_settings = validated.get('logging', {})
        level = logging_settings.get('log_level')
        if not isinstance(level, str) or not isinstance(logging.getLevelName(level.upper()), int):
            logging_settings['log_level'] = 'INFO'
            logger.warning('Log level invalid, reset to INFO')
        else:
            logging_settings['log_level'] = level.upper()

        return validated

    def _build_config(self, validated_dict: Dict[str, Any]) -> AppConfig:
        return AppConfig(
            tethering=TetheringSettings(**validated_dict['tethering']),
            logging=LoggingSettings(**validated_dict['logging']),
            version=validated_dict.get('version', '1.0.0'),
        )

    def load_config(self) -> AppConfig:
        """Load configuration from file."""
        if self._config is not None:
            return self._config

        try:
            if self.config_path.exists():
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    config_dict = json.load(f)

                self._config = self._build_config(self._validate_config(config_dict))
                logger.info(f'Configuration loaded from {self.config_path}')
            else:
                self._config = self._create_default_config()
                logger.info('Created default configuration')

        except Exception as e:
            logger.error(f'Failed to load config: {e}')
            # Try backup if available
            if self.backup_path.exists():
                try:
                    logger.info('Attempting to load from backup')
                    with open(self.backup_path, 'r', encoding='utf-8') as f:
                        config_dict = json.load(f)
                    self._config = self._build_config(self._validate_config(config_dict))
                    logger.info('Configuration loaded from backup')
                except Exception as backup_error:
                    logger.error(f'Backup config also failed: {backup_error}')
                    self._config = self._create_default_config()
            else:
                self._config = self._create_default_config()

        return self._config

    def save_config(self, config: Optional[AppConfig] = None):
        """Save configuration to file."""
        if config is None:
            config = self._config

        if config is None:
            logger.warning('No configuration to save')
            return

        try:
            # Create backup of existing config
            if self.config_path.exists():
                try:
                    shutil.copy2(self.config_path, self.backup_path)
                except Exception as e:
                    logger.warning(f'Failed to create config backup: {e}')

            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(asdict(config), f, indent=4, ensure_ascii=False)

            self._config = config
            logger.info(f'Configuration saved to {self.config_path}')

        except Exception as e:
            logger.error(f'Failed to save config: {e}')
            raise

    def get_tethering_settings(self) -> TetheringSettings:
        """Get tethering settings."""
        return self.load_config().tethering

    def get_logging_settings(self) -> LoggingSettings:
        """Get logging settings."""
        return self.load_config().logging

    def update_tethering_settings(self, **kwargs):
        """Update tethering settings."""
        config = self.load_config()
        for key, value in kwargs.items():
            if hasattr(config.tethering, key):
                setattr(config.tethering, key, value)
        self.save_config(config)

    def update_logging_settings(self, **kwargs):
        """Update logging settings."""
        config = self.load_config()
        for key, value in kwargs.items():
            if hasattr(config.logging, key):
                setattr(config.logging, key, value)
        self.save_config(config)

    def reset_to_defaults(self):
        """Reset configuration to defaults."""
        self._config = self._create_default_config()
        self.save_config()
        logger.info('Configuration reset to defaults')

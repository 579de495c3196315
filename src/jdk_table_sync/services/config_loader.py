"""
Configuration Loader Service

Loads sync loop configuration from jdk_table_sync.json in the project root.
Environment variables always take precedence over config file values.

Config file location (in order of precedence):
1. JDK_SYNC_PROJECT_ROOT/jdk_table_sync.json (if JDK_SYNC_PROJECT_ROOT is set)
2. CWD/jdk_table_sync.json

Supported settings in jdk_table_sync.json:
{
    "poll_interval_seconds": 5,          // -> JDK_SYNC_POLL_INTERVAL
    "heartbeat_interval": 120,           // -> JDK_SYNC_HEARTBEAT_INTERVAL (wake-ups)
    "settings_dir": ".idea",             // -> JDK_SYNC_SETTINGS_DIR
    "table_file_stem": "jdk.table",      // -> JDK_SYNC_TABLE_STEM
    "project_dir_token": "$PROJECT_DIR$",// -> JDK_SYNC_PROJECT_DIR_TOKEN
    "notifications_enabled": true,       // -> JDK_SYNC_NOTIFICATIONS
    "registry_file": "jdks.json",        // -> JDK_SYNC_REGISTRY_FILE
    "log_dir": ".jdk_table_sync",        // -> JDK_SYNC_LOG_DIR
    "debug_log": "1"                     // -> JDK_SYNC_DEBUG_LOG ("" disables file log)
}
"""

import os
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional

from ..logging_config import configure_logger_for_sync_trace

logger = configure_logger_for_sync_trace(__name__)

CONFIG_FILE_NAME = "jdk_table_sync.json"

DEFAULT_POLL_INTERVAL_SECONDS = 5.0
DEFAULT_HEARTBEAT_INTERVAL = 120  # wake-ups; 120 x 5s = every 10 minutes
DEFAULT_SETTINGS_DIR = ".idea"
DEFAULT_TABLE_FILE_STEM = "jdk.table"
DEFAULT_PROJECT_DIR_TOKEN = "$PROJECT_DIR$"


@dataclass(frozen=True)
class SyncConfig:
    """
    Typed view of the loop settings.

    ::: This is-in-layer Service-Layer.
    ::: This is a value-object.
    """
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    heartbeat_interval: int = DEFAULT_HEARTBEAT_INTERVAL
    settings_dir: str = DEFAULT_SETTINGS_DIR
    table_file_stem: str = DEFAULT_TABLE_FILE_STEM
    project_dir_token: str = DEFAULT_PROJECT_DIR_TOKEN
    notifications_enabled: bool = True
    registry_file: Optional[str] = None


class ConfigLoader:
    """
    Loads configuration from jdk_table_sync.json file.

    ::: This is-in-layer Service-Layer.
    ::: This is a loader.
    ::: This is-in-process Main-Process.
    ::: This is stateless.

    Priority: Environment variables > jdk_table_sync.json > defaults
    """

    # Mapping from jdk_table_sync.json keys to environment variable names
    CONFIG_KEY_TO_ENV = {
        "poll_interval_seconds": "JDK_SYNC_POLL_INTERVAL",
        "heartbeat_interval": "JDK_SYNC_HEARTBEAT_INTERVAL",
        "settings_dir": "JDK_SYNC_SETTINGS_DIR",
        "table_file_stem": "JDK_SYNC_TABLE_STEM",
        "project_dir_token": "JDK_SYNC_PROJECT_DIR_TOKEN",
        "notifications_enabled": "JDK_SYNC_NOTIFICATIONS",
        "registry_file": "JDK_SYNC_REGISTRY_FILE",
        "log_dir": "JDK_SYNC_LOG_DIR",
        "debug_log": "JDK_SYNC_DEBUG_LOG",
    }

    SYNC_DEFAULTS = {
        "poll_interval_seconds": DEFAULT_POLL_INTERVAL_SECONDS,
        "heartbeat_interval": DEFAULT_HEARTBEAT_INTERVAL,
        "settings_dir": DEFAULT_SETTINGS_DIR,
        "table_file_stem": DEFAULT_TABLE_FILE_STEM,
        "project_dir_token": DEFAULT_PROJECT_DIR_TOKEN,
        "notifications_enabled": True,
        "registry_file": None,
    }

    def __init__(self):
        self._config: Dict[str, Any] = {}
        self._config_path: Optional[Path] = None
        self._loaded = False

    def load(self, project_root: Optional[Path] = None) -> bool:
        """
        Load configuration from jdk_table_sync.json.

        Args:
            project_root: Project root directory. If None, uses JDK_SYNC_PROJECT_ROOT or CWD.

        Returns:
            True if config file was found and loaded, False otherwise.
        """
        if self._loaded:
            return self._config_path is not None

        if project_root is None:
            env_root = os.getenv("JDK_SYNC_PROJECT_ROOT")
            project_root = Path(env_root) if env_root else Path.cwd()

        config_path = Path(project_root) / CONFIG_FILE_NAME
        if config_path.exists():
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    self._config = json.load(f)
                self._config_path = config_path
                logger.info(f"[Config] Loaded config from: {config_path}")
                self._apply_config()
            except json.JSONDecodeError as e:
                logger.warning(f"[Config] Invalid JSON in {config_path}: {e}")
            except OSError as e:
                logger.warning(f"[Config] Error loading {config_path}: {e}")

        self._loaded = True
        return self._config_path is not None

    def _apply_config(self) -> None:
        """
        Apply config values as environment variables (only if not already set).
        This allows env vars to override config file values.
        """
        for config_key, env_var in self.CONFIG_KEY_TO_ENV.items():
            if config_key not in self._config or os.getenv(env_var) is not None:
                continue
            value = self._config[config_key]
            if value is None:
                continue
            # bool before int: bool is an int subclass
            if isinstance(value, bool):
                value = "true" if value else "false"
            elif isinstance(value, (int, float)):
                value = str(value)
            elif isinstance(value, list):
                value = ",".join(str(v) for v in value)
            elif not isinstance(value, str):
                continue

            os.environ[env_var] = value
            logger.debug(f"[Config]    {env_var}={value} (from {CONFIG_FILE_NAME})")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value."""
        return self._config.get(key, default)

    def _resolve(self, key: str) -> Any:
        """Env var, then config file, then default; converted to the default's type."""
        default_value = self.SYNC_DEFAULTS[key]
        value = os.getenv(self.CONFIG_KEY_TO_ENV[key])
        if value is None:
            value = self._config.get(key)
        if value is None:
            return default_value

        if isinstance(default_value, bool):
            if isinstance(value, str):
                return value.strip().lower() in ('true', '1', 'yes', 'on')
            return bool(value)
        if isinstance(default_value, (int, float)):
            try:
                if isinstance(value, bool):
                    raise TypeError("boolean is not a number")
                return type(default_value)(value)
            except (TypeError, ValueError):
                logger.warning(
                    f"[Config] Ignoring invalid {key}={value!r}, using {default_value}"
                )
                return default_value
        return str(value) if value != "" else default_value

    def get_sync_config(self) -> SyncConfig:
        """
        Get the loop configuration with defaults applied.

        Returns:
            SyncConfig with every setting resolved.
        """
        values = {key: self._resolve(key) for key in self.SYNC_DEFAULTS}

        if values["poll_interval_seconds"] <= 0:
            logger.warning("[Config] poll_interval_seconds must be positive, using default")
            values["poll_interval_seconds"] = DEFAULT_POLL_INTERVAL_SECONDS
        if values["heartbeat_interval"] <= 0:
            logger.warning("[Config] heartbeat_interval must be positive, using default")
            values["heartbeat_interval"] = DEFAULT_HEARTBEAT_INTERVAL

        return SyncConfig(
            poll_interval_seconds=float(values["poll_interval_seconds"]),
            heartbeat_interval=int(values["heartbeat_interval"]),
            settings_dir=str(values["settings_dir"]),
            table_file_stem=str(values["table_file_stem"]),
            project_dir_token=str(values["project_dir_token"]),
            notifications_enabled=bool(values["notifications_enabled"]),
            registry_file=values["registry_file"] or None,
        )

    @property
    def config_path(self) -> Optional[Path]:
        """Path to the loaded config file, or None if not loaded."""
        return self._config_path

    @property
    def config(self) -> Dict[str, Any]:
        """The loaded configuration dictionary."""
        return self._config.copy()


# Global singleton instance
_config_loader: Optional[ConfigLoader] = None


def get_config_loader() -> ConfigLoader:
    """Get the global config loader instance."""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def load_config(project_root: Optional[Path] = None) -> bool:
    """
    Load configuration from jdk_table_sync.json.

    This should be called early in CLI startup, before other services
    read environment variables.

    Args:
        project_root: Project root directory. If None, auto-detects.

    Returns:
        True if config was loaded, False otherwise.
    """
    return get_config_loader().load(project_root)

"""
Configuration Module for the Invoice Ledger.

Settings live in settings.yaml next to this module. The file used can be
changed with the INVOICE_LEDGER_CONFIG environment variable or with an
explicit path (the CLI's --config flag), in that order of priority:

    1. explicit path
    2. INVOICE_LEDGER_CONFIG
    3. config/settings.yaml
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_ENV_VAR = "INVOICE_LEDGER_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "settings.yaml"

SORT_DIRECTIONS = ("asc", "desc")


class ConfigurationManager:
    """
    Process-wide access to the ledger settings.

    Values are read with dot notation. Relative entries under `paths` are
    resolved against the project root when the file is loaded.

    Example:
        >>> config = ConfigurationManager()
        >>> config.get("extraction.model_name")
        'gemini-2.5-flash'
        >>> config.section("views")["invoices"]["sort_direction"]
        'desc'
    """

    _instance: Optional['ConfigurationManager'] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[str] = None) -> None:
        if self._initialized:
            return

        self.config_path = Path(config_path or os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """
        Read, validate and path-resolve the settings file.

        Raises:
            FileNotFoundError: If the settings file doesn't exist.
            ValueError: If a section holds an unusable value.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError(f"Configuration root must be a mapping: {self.config_path}")

        self._validate(config)
        self._config = config
        self._resolve_paths()

    @staticmethod
    def _validate(config: Dict[str, Any]) -> None:
        for table, view in (config.get('views') or {}).items():
            direction = (view or {}).get('sort_direction', 'asc')
            if direction not in SORT_DIRECTIONS:
                raise ValueError(f"views.{table}.sort_direction must be asc or desc, got {direction!r}")

        decimals = (config.get('output') or {}).get('money_decimals', 2)
        if not isinstance(decimals, int) or decimals < 0:
            raise ValueError(f"output.money_decimals must be a non-negative integer, got {decimals!r}")

    def _resolve_paths(self) -> None:
        project_root = Path(__file__).parent.parent

        paths = self._config.get('paths') or {}
        for key, value in paths.items():
            if value and not Path(value).is_absolute():
                paths[key] = str(project_root / value)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Example:
            >>> config.get("ingestion.id_prefixes.invoice")
            'inv'
            >>> config.get("nonexistent.key", "default_value")
            'default_value'
        """
        value = self._config

        try:
            for part in key.split('.'):
                value = value[part]
            return value
        except (KeyError, TypeError):
            return default

    def section(self, name: str) -> Dict[str, Any]:
        """Return a copy of one top-level section, empty if absent."""
        return dict(self._config.get(name) or {})

    def reload(self) -> None:
        self._load_config()

    @classmethod
    def reset(cls) -> None:
        """Drop the instance so the next access reloads, e.g. from another path."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """Shortcut for ConfigurationManager().get(key, default)."""
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config', 'CONFIG_ENV_VAR']

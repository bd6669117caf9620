"""
Configuration management for biblint.

Loads an optional biblint.yaml with validation, environment overrides and
type checking. Every key has a default, so no file is needed.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when configuration is invalid."""
    pass


DEFAULT_CONFIG_PATH = "./biblint.yaml"

DEFAULTS: Dict[str, Any] = {
    'clean': {
        'sort_by': 'year',
        'reverse': True,
        'blessed': [],
        'remove_dups_by_title': False,
    },
    'audit_log': {
        'enabled': False,
        'file': './biblint-audit.log',
        'level': 'INFO',
    },
    'logging': {
        'level': 'WARNING',
    },
}

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay `override` onto a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class BiblintConfig:
    """
    Configuration manager with strict validation.

    Enforces:
    - Known sections are mappings
    - Type validation of every known key
    - Valid logging levels
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Load and validate configuration.

        Args:
            config_path: Path to a YAML file. Defaults to $BIBLINT_CONFIG_PATH,
                then ./biblint.yaml if it exists, then built-in defaults

        Raises:
            ConfigError: If config invalid or an explicitly named file is missing
        """
        explicit = config_path is not None
        if config_path is None:
            load_dotenv()
            env_path = os.getenv("BIBLINT_CONFIG_PATH")
            explicit = env_path is not None
            config_path = env_path or DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        user_data: Dict[str, Any] = {}

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    user_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML: {e}")
            if not isinstance(user_data, dict):
                raise ConfigError(f"Config root must be a mapping: {self.config_path}")
        elif explicit:
            raise ConfigError(f"Config file not found: {self.config_path}")

        self.data = _merge(DEFAULTS, user_data)

        # Validate structure
        self._validate()

    def _validate(self):
        """Validate configuration structure and values."""
        for section in DEFAULTS:
            if not isinstance(self.data.get(section), dict):
                raise ConfigError(f"Config section '{section}' must be a mapping")

        clean_cfg = self.data['clean']
        if not isinstance(clean_cfg.get('sort_by'), str):
            raise ConfigError("clean.sort_by must be a string")
        if not isinstance(clean_cfg.get('reverse'), bool):
            raise ConfigError("clean.reverse must be true or false")
        if not isinstance(clean_cfg.get('remove_dups_by_title'), bool):
            raise ConfigError("clean.remove_dups_by_title must be true or false")
        blessed = clean_cfg.get('blessed')
        if not isinstance(blessed, list) or not all(isinstance(b, str) for b in blessed):
            raise ConfigError("clean.blessed must be a list of field names")

        for section in ('audit_log', 'logging'):
            level = str(self.data[section].get('level', '')).upper()
            if level not in LOG_LEVELS:
                raise ConfigError(f"Invalid {section}.level: {self.data[section].get('level')}")
            self.data[section]['level'] = level

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get config value by dot-notation path.

        Args:
            key: Key path (e.g., 'clean.sort_by', 'audit_log.file')
            default: Default value if not found

        Returns:
            Configuration value
        """
        value = self.data
        for k in key.split('.'):
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value

    def get_clean_config(self) -> Dict[str, Any]:
        """Get clean pipeline configuration section."""
        return self.data.get('clean', {})

    def get_audit_config(self) -> Dict[str, Any]:
        """Get audit logging configuration section."""
        return self.data.get('audit_log', {})

    def get_blessed_fields(self) -> List[str]:
        """Extra field names that survive field pruning."""
        return [b.strip().lower() for b in self.get_clean_config().get('blessed', [])]

    def get_log_level(self) -> str:
        return self.get('logging.level', 'WARNING')


# Global config instance (lazy-loaded)
_config_instance: Optional[BiblintConfig] = None


def load_config(config_path: Optional[str] = None) -> BiblintConfig:
    """
    Load or retrieve cached configuration.

    Args:
        config_path: Optional override path

    Returns:
        BiblintConfig instance
    """
    global _config_instance
    if _config_instance is None or config_path is not None:
        _config_instance = BiblintConfig(config_path)
    return _config_instance


def get_config() -> BiblintConfig:
    """Get currently loaded config (must be initialized)."""
    global _config_instance
    if _config_instance is None:
        raise RuntimeError("Config not loaded. Call load_config() first.")
    return _config_instance


def reset_config():
    """Forget the cached configuration."""
    global _config_instance
    _config_instance = None

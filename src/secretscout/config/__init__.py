"""Configuration loading, schema, and defaults."""

from secretscout.config.loader import ConfigError, load_config, validate
from secretscout.config.schema import ScanConfig, ScoutConfig

__all__ = [
    "ConfigError",
    "ScanConfig",
    "ScoutConfig",
    "load_config",
    "validate",
]

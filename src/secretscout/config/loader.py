"""Load and merge configuration from .secretscout.toml, CLI flags, and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from secretscout.config.schema import (
    MAX_CONFIDENCE,
    MIN_CONFIDENCE,
    OUTPUT_FORMATS,
    SCAN_TYPES,
    IgnoreConfig,
    OutputConfig,
    ScanConfig,
    ScoutConfig,
    SignaturesConfig,
)

CONFIG_FILENAME = ".secretscout.toml"
ENV_PREFIX = "SECRETSCOUT_"


class ConfigError(Exception):
    """Raised when config is malformed, unreadable, or holds invalid values."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _env_int(name: str) -> Optional[int]:
    val = os.environ.get(ENV_PREFIX + name)
    if val is None or not val.strip():
        return None
    try:
        return int(val)
    except ValueError as exc:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {val!r}") from exc


def _env_list(name: str) -> list[str]:
    val = os.environ.get(ENV_PREFIX + name, "")
    return [item.strip() for item in val.split(",") if item.strip()]


def _merge_env_overrides(cfg: ScoutConfig) -> None:
    """Apply SECRETSCOUT_* environment variable overrides."""
    if (threads := _env_int("THREADS")) is not None:
        cfg.scan.threads = threads
    if (level := _env_int("CONFIDENCE_LEVEL")) is not None:
        cfg.scan.confidence_level = level
    if val := os.environ.get(ENV_PREFIX + "SIGNATURES_FILE"):
        cfg.signatures.file = val
    if val := os.environ.get(ENV_PREFIX + "FORMAT"):
        cfg.output.format = val  # type: ignore[assignment]
    if os.environ.get(ENV_PREFIX + "HIDE_SECRETS", "").lower() in ("1", "true", "yes"):
        cfg.scan.hide_secrets = True
    cfg.ignore.paths.extend(_env_list("IGNORE_PATHS"))
    cfg.ignore.extensions.extend(_env_list("IGNORE_EXTENSIONS"))


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def validate(cfg: ScoutConfig) -> ScoutConfig:
    """Reject values that would make a scan meaningless. Returns *cfg*."""
    scan = cfg.scan
    for name in ("threads", "confidence_level", "max_file_size_mb", "commit_depth"):
        value = getattr(scan, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{name} must be an integer, got {value!r}")
    if scan.threads == 0 or scan.threads < -1:
        raise ConfigError(f"threads must be -1 (all CPUs) or a positive number, got {scan.threads}")
    if not MIN_CONFIDENCE <= scan.confidence_level <= MAX_CONFIDENCE:
        raise ConfigError(
            f"confidence_level must be between {MIN_CONFIDENCE} and {MAX_CONFIDENCE}, "
            f"got {scan.confidence_level}"
        )
    if scan.max_file_size_mb < 0:
        raise ConfigError(f"max_file_size_mb must not be negative, got {scan.max_file_size_mb}")
    if scan.scan_type not in SCAN_TYPES:
        raise ConfigError(f"Unknown scan type: {scan.scan_type}")
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Unknown output format: {cfg.output.format}")
    return cfg


def load_config(
    root: Path,
    config_override: Optional[str] = None,
) -> ScoutConfig:
    """Load, validate, and return a ScoutConfig."""
    config_path = find_config_file(root, config_override)

    if config_path is None:
        cfg = ScoutConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = ScoutConfig(
                version=str(raw.get("version", "1.0")),
                scan=_build_section(raw, ScanConfig, "scan"),
                ignore=_build_section(raw, IgnoreConfig, "ignore"),
                signatures=_build_section(raw, SignaturesConfig, "signatures"),
                output=_build_section(raw, OutputConfig, "output"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc

    _merge_env_overrides(cfg)
    return validate(cfg)

"""
Configuration module for envscan.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section, {})
    value = section_defaults.get(key, fallback)
    # Lists are copied so instances never share mutable defaults
    return list(value) if isinstance(value, list) else value


@dataclass
class ScanOptions:
    """Options controlling which files are scanned and how."""

    include_patterns: list[str] = field(
        default_factory=lambda: _get_default(
            "scan", "include_patterns", ["*.py", "*.js", "*.ts", "*.go", "*.rs"]
        )
    )
    exclude_patterns: list[str] = field(
        default_factory=lambda: _get_default(
            "scan", "exclude_patterns", ["target", "node_modules", ".git", "dist", "build"]
        )
    )
    max_depth: int = field(default_factory=lambda: _get_default("scan", "max_depth", 10))
    parallel: bool = field(default_factory=lambda: _get_default("scan", "parallel", True))
    max_workers: int = field(default_factory=lambda: _get_default("scan", "max_workers", 4))
    max_file_size: int = field(
        default_factory=lambda: _get_default("scan", "max_file_size", 10 * 1024 * 1024)
    )
    detect_secrets: bool = field(
        default_factory=lambda: _get_default("scan", "detect_secrets", True)
    )

    def __post_init__(self) -> None:
        # Values from config files arrive untyped ("5", "false")
        for name in ("include_patterns", "exclude_patterns"):
            setattr(self, name, _coerce_list(name, getattr(self, name)))
        for name in ("max_depth", "max_workers", "max_file_size"):
            setattr(self, name, _coerce_int(name, getattr(self, name)))
        for name in ("parallel", "detect_secrets"):
            setattr(self, name, _coerce_bool(name, getattr(self, name)))


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "WARNING"))
    format: str = field(
        default_factory=lambda: _get_default("logging", "format", "%(message)s")
    )


@dataclass
class EnvScanConfig:
    """Main configuration class for envscan."""

    scan: ScanOptions = field(default_factory=ScanOptions)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "EnvScanConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            EnvScanConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported or a value is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif path.suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "EnvScanConfig":
        """Create EnvScanConfig from a dictionary."""
        config = cls()
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a mapping of sections")

        for section, section_cls in (("scan", ScanOptions), ("logging", LoggingConfig)):
            if section not in data:
                continue
            values = data[section] or {}
            if not isinstance(values, dict):
                raise ValueError(f"Section '{section}' must be a mapping")
            try:
                setattr(config, section, section_cls(**values))
            except TypeError as e:
                raise ValueError(f"Invalid '{section}' section: {e}") from e

        return config

    def apply_env_overrides(self) -> "EnvScanConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: ENVSCAN_<SECTION>_<KEY>
        Examples:
            - ENVSCAN_SCAN_MAX_DEPTH
            - ENVSCAN_SCAN_PARALLEL
            - ENVSCAN_SCAN_EXCLUDE_PATTERNS (comma-separated)
            - ENVSCAN_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            # Scan options
            "ENVSCAN_SCAN_INCLUDE_PATTERNS": ("scan", "include_patterns", _parse_list),
            "ENVSCAN_SCAN_EXCLUDE_PATTERNS": ("scan", "exclude_patterns", _parse_list),
            "ENVSCAN_SCAN_MAX_DEPTH": ("scan", "max_depth", int),
            "ENVSCAN_SCAN_PARALLEL": ("scan", "parallel", _parse_bool),
            "ENVSCAN_SCAN_MAX_WORKERS": ("scan", "max_workers", int),
            "ENVSCAN_SCAN_MAX_FILE_SIZE": ("scan", "max_file_size", int),
            "ENVSCAN_SCAN_DETECT_SECRETS": ("scan", "detect_secrets", _parse_bool),
            # Logging config
            "ENVSCAN_LOGGING_LEVEL": ("logging", "level", str),
            "ENVSCAN_LOGGING_FORMAT": ("logging", "format", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                section_obj = getattr(self, section)
                setattr(section_obj, key, converter(value))

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Args:
            path: Path to save the configuration (.yaml, .yml, or .json)

        Raises:
            ValueError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.lower() in ("true", "1", "yes", "on")


def _parse_list(value: str) -> list[str]:
    """Parse a comma-separated string to a list, dropping empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValueError(f"{name} must be an integer, got {value!r}")


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _coerce_list(name: str, value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return _parse_list(value)
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ValueError(f"{name} must be a list of strings, got {value!r}")


def load_config(
    config_path: Optional[Path | str] = None, apply_env: bool = True
) -> EnvScanConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        EnvScanConfig instance
    """
    if config_path:
        config = EnvScanConfig.from_file(config_path)
    else:
        config = EnvScanConfig()

    if apply_env:
        config.apply_env_overrides()

    return config

"""Configuration management for pkgrepo.

Handles loading and validation of YAML configuration files that control
the fixed fields of the generated repository documents.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml


DEFAULT_POOL_PREFIX = "pool/stable"


@dataclass
class AptConfig:
    """Fixed fields of the APT Release document."""

    origin: str = ". stable"
    label: str = ". stable"
    suite: str = "stable"
    codename: str = "stable"
    component: str = "main"
    architecture: str = "amd64"
    description: str = ""


@dataclass
class RpmConfig:
    """Settings for the RPM metadata documents."""

    zstd_level: int = 3  # zstd's own default level


@dataclass
class FetchConfig:
    """Settings for downloading package data."""

    timeout: float = 60.0
    max_concurrency: int = 4


@dataclass
class ExtractorConfig:
    """Settings for the external control-data tools."""

    timeout: int = 30


@dataclass
class LoggingConfig:
    """Logging section."""

    level: str = "INFO"
    log_dir: str = "/var/log/pkgrepo"
    file_logging: bool = False
    console_logging: bool = True


@dataclass
class IndexConfig:
    """Top-level configuration for pkgrepo."""

    apt: AptConfig = field(default_factory=AptConfig)
    rpm: RpmConfig = field(default_factory=RpmConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    extractor: ExtractorConfig = field(default_factory=ExtractorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    pool_prefix: str = DEFAULT_POOL_PREFIX


def parse_apt_config(apt_dict: Dict[str, Any]) -> AptConfig:
    """Parse the ``apt`` section.

    Args:
        apt_dict: APT configuration dictionary

    Returns:
        AptConfig instance
    """
    defaults = AptConfig()
    return AptConfig(
        origin=str(apt_dict.get("origin", defaults.origin)),
        label=str(apt_dict.get("label", defaults.label)),
        suite=str(apt_dict.get("suite", defaults.suite)),
        codename=str(apt_dict.get("codename", defaults.codename)),
        component=str(apt_dict.get("component", defaults.component)),
        architecture=str(apt_dict.get("architecture", defaults.architecture)),
        description=str(apt_dict.get("description", defaults.description)),
    )


def parse_rpm_config(rpm_dict: Dict[str, Any]) -> RpmConfig:
    """Parse the ``rpm`` section.

    Args:
        rpm_dict: RPM configuration dictionary

    Returns:
        RpmConfig instance
    """
    return RpmConfig(zstd_level=int(rpm_dict.get("zstd_level", 3)))


def parse_fetch_config(fetch_dict: Dict[str, Any]) -> FetchConfig:
    """Parse the ``fetch`` section.

    Args:
        fetch_dict: Fetch configuration dictionary

    Returns:
        FetchConfig instance

    Raises:
        ValueError: If max_concurrency is not positive
    """
    max_concurrency = int(fetch_dict.get("max_concurrency", 4))
    if max_concurrency < 1:
        raise ValueError(f"fetch.max_concurrency must be positive, got {max_concurrency}")
    return FetchConfig(
        timeout=float(fetch_dict.get("timeout", 60.0)),
        max_concurrency=max_concurrency,
    )


def parse_logging_config(logging_dict: Dict[str, Any]) -> LoggingConfig:
    """Parse the ``logging`` section.

    Args:
        logging_dict: Logging configuration dictionary

    Returns:
        LoggingConfig instance
    """
    return LoggingConfig(
        level=logging_dict.get("level", "INFO"),
        log_dir=logging_dict.get("log_dir", "/var/log/pkgrepo"),
        file_logging=logging_dict.get("file_logging", False),
        console_logging=logging_dict.get("console_logging", True),
    )


def parse_config(config_dict: Dict[str, Any]) -> IndexConfig:
    """Parse the full configuration dictionary.

    Args:
        config_dict: Full configuration dictionary

    Returns:
        IndexConfig instance
    """
    extractor_dict = config_dict.get("extractor") or {}
    return IndexConfig(
        apt=parse_apt_config(config_dict.get("apt") or {}),
        rpm=parse_rpm_config(config_dict.get("rpm") or {}),
        fetch=parse_fetch_config(config_dict.get("fetch") or {}),
        extractor=ExtractorConfig(timeout=int(extractor_dict.get("timeout", 30))),
        logging=parse_logging_config(config_dict.get("logging") or {}),
        pool_prefix=str(config_dict.get("pool_prefix", DEFAULT_POOL_PREFIX)).strip("/"),
    )


def load_config(config_path: str = "/etc/pkgrepo/config.yaml") -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
        TypeError: If the document root is not a mapping
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise TypeError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    return _expand_env_vars(config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj


def load_typed_config(config_path: str = "/etc/pkgrepo/config.yaml") -> IndexConfig:
    """Load and parse configuration into typed dataclass.

    Args:
        config_path: Path to configuration file

    Returns:
        IndexConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    return parse_config(load_config(config_path))

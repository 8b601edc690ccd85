"""Configuration loading and validation."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from fleetwatch.config.schema import FleetwatchConfig

DEFAULT_CONFIG_PATH = Path("/etc/fleetwatch/fleetwatch.yaml")

# Environment variable -> (section, field)
ENV_OVERRIDES = {
    "FLEET_URL": ("registry", "fleet_url"),
    "ETCD_URL": ("registry", "etcd_url"),
    "ETCD_NAMESPACE": ("registry", "namespace"),
    "REGISTRY_TIMEOUT": ("registry", "timeout"),
    "BLACKLIST_REGEXP": ("unit_states", "blacklist"),
    "BALANCER_BLACKLIST_REGEXP": ("balancer", "blacklist"),
    "OVERLOAD_COEFFICIENT": ("balancer", "overload_coefficient"),
    "FLEET_CLUSTER_SIZE_WARNING_THRESHOLD": ("cluster_size", "warning"),
    "FLEET_CLUSTER_SIZE_ERROR_THRESHOLD": ("cluster_size", "error"),
}


class ConfigError(Exception):
    """Configuration loading or validation error."""


def apply_env_overrides(
    config_data: dict[str, Any], environ: Optional[Mapping[str, str]] = None
) -> dict[str, Any]:
    """Overlay non-empty environment variables onto raw config data.

    Args:
        config_data: Parsed YAML data (not modified)
        environ: Environment to read, defaults to ``os.environ``

    Returns:
        New config data with overrides applied
    """
    if environ is None:
        environ = os.environ

    merged = {section: dict(values or {}) for section, values in config_data.items()}
    for var, (section, field) in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            merged.setdefault(section, {})[field] = value
    return merged


def load_config(
    path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None
) -> FleetwatchConfig:
    """Load and validate fleetwatch configuration.

    Args:
        path: Path to config file. If None, tries default location.
              If file doesn't exist, defaults are used.
        environ: Environment used for overrides, defaults to ``os.environ``

    Returns:
        Validated configuration object

    Raises:
        ConfigError: If the file or an environment override is invalid
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    config_data: Any = {}
    if path.exists():
        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

    # Handle empty file
    if config_data is None:
        config_data = {}
    if not isinstance(config_data, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping")

    try:
        return FleetwatchConfig(**apply_env_overrides(config_data, environ))
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e
    except (AttributeError, TypeError, ValueError) as e:
        raise ConfigError(f"Configuration in {path} is malformed: {e}") from e


def save_config(config: FleetwatchConfig, path: Optional[Union[str, Path]] = None) -> None:
    """Save configuration to YAML file.

    Args:
        config: Configuration object to save
        path: Destination path (string or Path object). If None, uses default location.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    elif isinstance(path, str):
        path = Path(path)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)

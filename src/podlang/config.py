"""podlang Configuration

Configuration loading with environment variable support and sensible defaults.

Environment Variables:
    PODLANG_CONFIG_PATH: Path to config file (default: ~/.podlang/config.yaml)
    PODLANG_HEURISTICS_PATH: Override heuristics file path from config
    PODLANG_LOG_LEVEL: Override logging level from config

Configuration Schema:
    heuristics:
        path: str - Path to heuristics.json (relative paths resolve against CWD)
    cluster:
        kubectl: str - kubectl executable (default: "kubectl")
        kubeconfig: str - kubeconfig file (default: kubectl's own default)
        context: str - kubeconfig context to use
        namespace: str - Namespace to list pods in (default: all namespaces)
        timeout: int - Seconds to wait for kubectl (default: 30)
    docker:
        base_url: str - Docker daemon URL (default: from environment)
    logging:
        level: str - Logging level (default: "WARNING")
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "heuristics": {
        "path": "heuristics.json",
    },
    "cluster": {
        "kubectl": "kubectl",
        "kubeconfig": None,
        "context": None,
        "namespace": None,  # All namespaces
        "timeout": 30,
    },
    "docker": {
        "base_url": None,  # docker.from_env()
    },
    "logging": {
        "level": "WARNING",
    },
}

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_default_config_path() -> Path:
    """Get the path to the per-user config file."""
    return Path.home() / ".podlang" / "config.yaml"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override dict into base dict.

    Args:
        base: Base dictionary (defaults)
        override: Override dictionary (user config)

    Returns:
        Merged dictionary with override values taking precedence
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"top level must be a mapping, got {type(data).__name__}")
    return data


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file with environment variable overrides.

    Configuration Loading Order (later overrides earlier):
    1. Default values (DEFAULT_CONFIG)
    2. Config file (config_path parameter, PODLANG_CONFIG_PATH, or
       ~/.podlang/config.yaml)
    3. Environment variable overrides (PODLANG_HEURISTICS_PATH, PODLANG_LOG_LEVEL)

    Args:
        config_path: Explicit config file path (overrides PODLANG_CONFIG_PATH)

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigurationError: If an explicitly named config file is invalid
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    file_path = config_path or os.environ.get("PODLANG_CONFIG_PATH")

    if file_path:
        # Explicit config path - must be valid if it exists
        resolved_path = Path(file_path).expanduser()
        if resolved_path.exists():
            try:
                config = _deep_merge(config, _read_yaml(resolved_path))
                logger.info(f"Loaded configuration from: {resolved_path}")
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in config file: {e}")
            except IOError as e:
                raise ConfigurationError(f"Cannot read config file: {e}")
        else:
            logger.warning(f"Config file not found (using defaults): {file_path}")
    else:
        default_config_path = get_default_config_path()
        if default_config_path.exists():
            try:
                config = _deep_merge(config, _read_yaml(default_config_path))
                logger.info(f"Loaded configuration from: {default_config_path}")
            except yaml.YAMLError as e:
                logger.warning(f"Invalid YAML in default config (ignoring): {e}")
            except IOError as e:
                logger.warning(f"Cannot read default config (ignoring): {e}")
        else:
            logger.debug("No config file found, using defaults")

    # Apply environment variable overrides
    heuristics_override = os.environ.get("PODLANG_HEURISTICS_PATH")
    if heuristics_override:
        config.setdefault("heuristics", {})["path"] = heuristics_override
        logger.info(f"Heuristics path override from env: {heuristics_override}")

    log_level_override = os.environ.get("PODLANG_LOG_LEVEL")
    if log_level_override:
        config.setdefault("logging", {})["level"] = log_level_override

    return config


def get_heuristics_path(config: Dict[str, Any]) -> Path:
    """
    Get heuristics file path from config.

    Args:
        config: Configuration dictionary from load_config()

    Returns:
        Absolute path to heuristics.json
    """
    path_str = config.get("heuristics", {}).get("path") or DEFAULT_CONFIG["heuristics"]["path"]
    path = Path(path_str).expanduser()
    if path.is_absolute():
        return path
    return (Path.cwd() / path).resolve()


def get_cluster_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Extract kubectl settings, filling in defaults for missing keys."""
    return {**DEFAULT_CONFIG["cluster"], **config.get("cluster", {})}


def get_docker_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Extract Docker client settings, filling in defaults for missing keys."""
    return {**DEFAULT_CONFIG["docker"], **config.get("docker", {})}


def configure_logging(level: str = "WARNING") -> None:
    """
    Configure root logging for a CLI invocation.

    Args:
        level: Logging level name (e.g. "DEBUG", "INFO")
    """
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        logger.warning(f"Unknown log level {level!r}, using WARNING")
        numeric_level = logging.WARNING
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, force=True)

"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a YAML
configuration file (by default ~/.gazelle/config.yaml). Nested YAML mappings
are flattened into dotted keys, so

    indexers:
      ops:
        url: https://orpheus.network

is read with ``get_config("indexers.ops.url")`` and can be overridden by the
environment variable ``GAZELLE_INDEXERS_OPS_URL``.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from gazelle_api.infrastructure.api.factory import GazelleClientOptions

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".gazelle"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "GAZELLE_"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flattens nested mappings into dotted keys."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten(value, f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Values set with ``set_config_for_testing``
    2. Environment Variables
    3. .env file
    4. YAML configuration file

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).

    Raises:
        ValueError: If the YAML file exists but cannot be parsed.
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    config_file = config_file or DEFAULT_CONFIG_FILE

    # 1. YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML config {config_file}: {e}") from e
        if isinstance(yaml_config, dict):
            _config.update(flatten(yaml_config))
            logger.info(f"Loaded configuration from YAML: {config_file}")
        elif yaml_config is not None:
            logger.warning(f"YAML config file {config_file} did not contain a mapping.")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False so real environment variables win
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    # 3. Environment Variables are read on each get_config call
    _loaded = True


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load reads the sources again."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _env_key(key: str) -> str:
    return ENV_PREFIX + key.upper().replace('.', '_')


def _convert(value: str) -> Any:
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """Get a configuration value by dotted key.

    Priority:
    1. Test configuration
    2. Environment variable (``GAZELLE_`` + key upper-cased, dots as underscores)
    3. YAML config
    4. Default value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = _env_key(key)
    if env_key in os.environ:
        return _convert(os.environ[env_key])

    if key in _config:
        return _config[key]

    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


def get_indexer_options(name: str) -> GazelleClientOptions:
    """Builds client options for the indexer configured under ``indexers.<name>``.

    Raises:
        ValueError: If the indexer's url or key is not configured.
    """
    prefix = f"indexers.{name}"
    url = get_config(f"{prefix}.url")
    key = get_config(f"{prefix}.key")
    if not url:
        raise ValueError(f"No url configured for indexer '{name}' (set {prefix}.url or {_env_key(prefix + '.url')})")
    if not key:
        raise ValueError(f"No API key configured for indexer '{name}' (set {prefix}.key or {_env_key(prefix + '.key')})")
    requests = get_config(f"{prefix}.requests")
    window = get_config(f"{prefix}.window")
    options = GazelleClientOptions(
        name=name,
        key=str(key),
        url=str(url),
        requests_allowed_per_duration=None if requests is None else int(requests),
        request_limit_duration=None if window is None else float(window),
    )
    user_agent = get_config(f"{prefix}.user_agent")
    if user_agent:
        options.user_agent = str(user_agent)
    timeout = get_config(f"{prefix}.timeout")
    if timeout:
        options.timeout = float(timeout)
    return options


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """Set configuration values for testing purposes.

    These values override every other source until ``clear_test_config``.
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration keys: {sorted(config_dict)}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")

"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a YAML
configuration file (~/.iamcli/config.yaml). Builds the immutable retry and
timeout configurations handed to the API client at startup.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from iamcli.infrastructure.monitoring.diagnostic_logger import LogLevel
from iamcli.infrastructure.resilience.backoff import DEFAULT_RETRY_CONFIG, RetryConfig
from iamcli.infrastructure.resilience.timeout_governor import DEFAULT_TIMEOUT_CONFIG, TimeoutConfig

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".iamcli"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}  # For testing purposes
_loaded = False


def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False so real environment variables take precedence
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    # 3. Environment variables (highest priority) are read in get_config
    _loaded = True
    logger.debug("Configuration loading process completed.")


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flattens nested YAML mappings into dotted keys ('retry.max_retries')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def _env_key(key: str) -> str:
    return key.upper().replace('.', '_')


def _coerce(value: str) -> Any:
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
    """Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (dots become underscores: 'retry.max_retries' -> RETRY_MAX_RETRIES)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = _env_key(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

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


# --- Convenience Functions ---

def get_base_url() -> Optional[str]:
    """IAM API endpoint. Checks ENV IAM_BASE_URL first, then yaml iam.base_url."""
    url = get_config('IAM_BASE_URL') or get_config('iam.base_url')
    return str(url) if url else None


def get_api_token() -> Optional[str]:
    """Bearer credential. Checks ENV IAM_API_TOKEN first, then yaml iam.api_token."""
    token = get_config('IAM_API_TOKEN') or get_config('iam.api_token')
    return str(token) if token else None


def get_http_log_level() -> LogLevel:
    """Diagnostic HTTP log level: none, error, info or debug."""
    return LogLevel.parse(get_config('http.log_level'), default=LogLevel.INFO)


def get_retry_config() -> RetryConfig:
    """Builds the process-wide retry policy from settings."""
    try:
        return RetryConfig(
            max_retries=int(get_config('retry.max_retries', DEFAULT_RETRY_CONFIG.max_retries)),
            initial_interval=float(get_config('retry.initial_interval', DEFAULT_RETRY_CONFIG.initial_interval)),
            max_interval=float(get_config('retry.max_interval', DEFAULT_RETRY_CONFIG.max_interval)),
            multiplier=float(get_config('retry.multiplier', DEFAULT_RETRY_CONFIG.multiplier)),
            max_elapsed_time=float(get_config('retry.max_elapsed_time', DEFAULT_RETRY_CONFIG.max_elapsed_time)),
        )
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid retry configuration ({e}), using defaults")
        return DEFAULT_RETRY_CONFIG


def get_timeout_config() -> TimeoutConfig:
    """Builds the process-wide per-category timeouts from settings."""
    try:
        return TimeoutConfig(**{
            name: float(get_config(f'timeout.{name}', getattr(DEFAULT_TIMEOUT_CONFIG, name)))
            for name in ('default', 'create', 'read', 'update', 'delete', 'list')
        })
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid timeout configuration ({e}), using defaults")
        return DEFAULT_TIMEOUT_CONFIG


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """Set configuration values for testing purposes.

    These values override any existing configuration.
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")

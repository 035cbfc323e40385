"""
Configuration management for the render proxy.

This module provides a singleton `ConfigurationManager` class that loads
settings from YAML files and then applies the environment variable
overrides the proxy has always honoured (SERVER_PORT, ALLOWED_DOMAINS, ...).

Key Features:
- Loads settings from YAML files based on the APP_ENV environment variable.
- Defaults to the 'development' environment if APP_ENV is not set.
- Applies typed environment overrides on top of the YAML values.
- Supports dot notation for accessing nested keys (e.g., "renderer.max_wait_ms").
"""
import os
import yaml
from typing import Any, Callable, Dict, List, Optional, Tuple

from render_proxy.core.exceptions import ConfigurationError

# Directory holding development.yaml, production.yaml, ...
CONFIG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "config")

DEFAULT_ENV = "development"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    """Base class for all configuration-loading errors."""
    pass

class ConfigFileNotFoundError(ConfigError):
    """Raised when the configuration file for an environment cannot be found."""
    pass

class InvalidYamlError(ConfigError):
    """Raised when a configuration file contains invalid YAML or is not a mapping."""
    pass


def parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def parse_csv(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


# env var -> (dotted config key, converter)
ENV_OVERRIDES: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "SERVER_DEBUG": ("renderer.debug", parse_bool),
    "MAX_WAIT": ("renderer.max_wait_ms", int),
    "DELAY_EXECUTION": ("renderer.wait_for_ms", int),
    "ALLOW_CSS": ("renderer.load_css", parse_bool),
    "BROWSER_TYPE": ("renderer.browser_type", str),
    "SERVER_HOST": ("server.host", str),
    "SERVER_PORT": ("server.port", int),
    "ALLOWED_DOMAINS": ("server.allowed_domains", parse_csv),
}


class ConfigurationManager:
    """
    Manages loading and accessing configuration settings.

    Implemented as a singleton: the first instantiation loads the
    configuration, later instantiations return the same object.
    """
    CONFIG_DIR: str = CONFIG_DIR

    _instance: Optional['ConfigurationManager'] = None
    _config: Dict[str, Any] = {}
    _current_env: str = ""

    def __new__(cls) -> 'ConfigurationManager':
        if cls._instance is None:
            cls._instance = super(ConfigurationManager, cls).__new__(cls)
            cls._instance.load_config()
        return cls._instance

    def load_config(self, env: Optional[str] = None) -> None:
        """
        Loads configuration for an environment and applies environment overrides.

        The environment is chosen from, in order: the `env` argument, the
        `APP_ENV` environment variable, `DEFAULT_ENV`.

        Args:
            env (Optional[str]): Environment name (e.g. "production").

        Raises:
            ConfigFileNotFoundError: If the YAML file for the environment is missing.
            InvalidYamlError: If the YAML file is malformed or not a mapping.
            ConfigurationError: If an environment override has an unusable value.
        """
        self._current_env = env or os.getenv("APP_ENV", DEFAULT_ENV)
        config_file_path = os.path.join(self.CONFIG_DIR, f"{self._current_env}.yaml")

        try:
            with open(config_file_path, "r") as f:
                loaded = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigFileNotFoundError(
                f"Configuration file not found for environment '{self._current_env}' at '{config_file_path}'."
            )
        except yaml.YAMLError as e:
            raise InvalidYamlError(
                f"Error parsing YAML in configuration file '{config_file_path}': {e}"
            )
        if not isinstance(loaded, dict):
            raise InvalidYamlError(
                f"Configuration file '{config_file_path}' does not contain a valid YAML dictionary."
            )
        self._config = loaded
        self._apply_env_overrides()

    def _apply_env_overrides(self) -> None:
        for env_var, (key, convert) in ENV_OVERRIDES.items():
            raw = os.getenv(env_var)
            if raw is None:
                continue
            try:
                value = convert(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {env_var}: {e}")
            self.set(key, value)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Retrieves a configuration value using dot notation.

        Args:
            key (str): The configuration key, e.g. "server.port".
            default (Optional[Any]): Returned when the key is not found.

        Returns:
            Any: The configuration value if found, otherwise the default.
        """
        value = self._config
        try:
            for k_part in key.split("."):
                if isinstance(value, dict):
                    value = value[k_part]
                else:
                    return default
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Sets a value using dot notation, creating intermediate sections as needed."""
        parts = key.split(".")
        node = self._config
        for k_part in parts[:-1]:
            child = node.get(k_part)
            if not isinstance(child, dict):
                child = {}
                node[k_part] = child
            node = child
        node[parts[-1]] = value

    @property
    def current_environment(self) -> str:
        """Name of the currently loaded environment."""
        return self._current_env


# Global instance, loaded on first import.
config_manager = ConfigurationManager()

def get_config(key: str, default: Optional[Any] = None) -> Any:
    """Convenience accessor for the global `config_manager`."""
    return config_manager.get(key, default)

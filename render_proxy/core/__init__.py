from .config import get_config, config_manager, ConfigurationManager, ConfigError, ConfigFileNotFoundError, InvalidYamlError
from .exceptions import (
    RenderProxyError,
    ConfigurationError,
    UrlDeniedError,
    InvalidUrlError,
    DomainNotAllowedError,
    ComponentError,
    RendererError,
    RenderTimeoutError,
    RenderFailureError,
)
from .logger import setup_logging, get_logger

# settings and manager depend on render_proxy.components; import them from
# their modules (render_proxy.core.settings, render_proxy.core.manager).

__all__ = [
    # Config
    "get_config",
    "config_manager",
    "ConfigurationManager",
    "ConfigError",
    "ConfigFileNotFoundError",
    "InvalidYamlError",
    # Logger
    "setup_logging",
    "get_logger",
    # Exceptions
    "RenderProxyError",
    "ConfigurationError",
    "UrlDeniedError",
    "InvalidUrlError",
    "DomainNotAllowedError",
    "ComponentError",
    "RendererError",
    "RenderTimeoutError",
    "RenderFailureError",
]

"""
Immutable runtime settings for the render proxy.

`ProxySettings` is built once at startup from the `ConfigurationManager` and
handed by reference to the request path. It holds the allowlist and the
intercept rules, the only state shared between concurrent requests.
"""
from typing import FrozenSet, Tuple, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from render_proxy.components.renderer.interceptor import DEFAULT_INTERCEPT_RULES, InterceptRule
from render_proxy.core.config import parse_csv
from render_proxy.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from render_proxy.core.config import ConfigurationManager

DEFAULT_MAX_WAIT_MS = 20000
DEFAULT_WAIT_FOR_MS = 3000


class ProxySettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    debug: bool = False
    max_wait_ms: int = Field(DEFAULT_MAX_WAIT_MS, gt=0)
    wait_for_ms: int = Field(DEFAULT_WAIT_FOR_MS, ge=0)
    load_css: bool = False
    browser_type: str = "chromium"

    host: str = "0.0.0.0"
    port: int = Field(80, ge=1, le=65535)
    allowed_domains: FrozenSet[str] = frozenset()
    allowed_schemes: Tuple[str, ...] = ("http", "https")

    intercept_rules: Tuple[InterceptRule, ...] = DEFAULT_INTERCEPT_RULES

    @field_validator("allowed_domains", mode="before")
    @classmethod
    def _normalize_domains(cls, value):
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = parse_csv(value)
        return frozenset(str(d).strip().lower() for d in value if d and str(d).strip())

    @field_validator("allowed_schemes", mode="before")
    @classmethod
    def _normalize_schemes(cls, value):
        if isinstance(value, str):
            value = parse_csv(value)
        return tuple(str(s).strip().lower() for s in value if str(s).strip())

    @classmethod
    def from_config(cls, config: 'ConfigurationManager') -> 'ProxySettings':
        """
        Builds settings from a configuration manager.

        Raises:
            ConfigurationError: If any configured value fails validation.
        """
        values = {
            "debug": config.get("renderer.debug", False),
            "max_wait_ms": config.get("renderer.max_wait_ms", DEFAULT_MAX_WAIT_MS),
            "wait_for_ms": config.get("renderer.wait_for_ms", DEFAULT_WAIT_FOR_MS),
            "load_css": config.get("renderer.load_css", False),
            "browser_type": config.get("renderer.browser_type", "chromium"),
            "host": config.get("server.host", "0.0.0.0"),
            "port": config.get("server.port", 80),
            "allowed_domains": config.get("server.allowed_domains", []),
            "allowed_schemes": config.get("server.allowed_schemes", ["http", "https"]),
        }
        rules = config.get("interceptor.rules")
        if rules is not None:
            values["intercept_rules"] = rules
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid proxy settings: {e}")

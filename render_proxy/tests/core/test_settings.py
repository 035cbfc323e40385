import pytest
from pydantic import ValidationError

from render_proxy.components.renderer.interceptor import DEFAULT_INTERCEPT_RULES, InterceptRule
from render_proxy.core.exceptions import ConfigurationError
from render_proxy.core.settings import ProxySettings


class MockConfigurationManager:
    def __init__(self, settings=None):
        self.settings = settings if settings is not None else {}

    def get(self, key, default=None):
        try:
            value = self.settings
            for k_part in key.split('.'):
                value = value[k_part]
            return value
        except (KeyError, TypeError):
            return default


def test_defaults():
    settings = ProxySettings()
    assert settings.max_wait_ms == 20000
    assert settings.wait_for_ms == 3000
    assert settings.load_css is False
    assert settings.debug is False
    assert settings.allowed_domains == frozenset()
    assert settings.intercept_rules == DEFAULT_INTERCEPT_RULES


def test_from_empty_config_uses_defaults():
    settings = ProxySettings.from_config(MockConfigurationManager())
    assert settings.port == 80
    assert settings.browser_type == "chromium"
    assert settings.allowed_schemes == ("http", "https")
    assert len(settings.intercept_rules) == 2


def test_from_config_reads_every_section():
    config = MockConfigurationManager({
        "server": {"host": "127.0.0.1", "port": 8081, "allowed_domains": ["Example.com", " docs.example.com "]},
        "renderer": {"debug": True, "max_wait_ms": 5000, "wait_for_ms": 100, "load_css": True, "browser_type": "webkit"},
        "interceptor": {"rules": [{"match_url": "https://cdn.tracker.test/t.js", "body": "/* noop */"}]},
    })
    settings = ProxySettings.from_config(config)

    assert settings.host == "127.0.0.1"
    assert settings.port == 8081
    assert settings.allowed_domains == frozenset({"example.com", "docs.example.com"})
    assert settings.debug is True
    assert settings.max_wait_ms == 5000
    assert settings.wait_for_ms == 100
    assert settings.load_css is True
    assert settings.browser_type == "webkit"
    assert settings.intercept_rules == (
        InterceptRule(match_url="https://cdn.tracker.test/t.js", body="/* noop */"),
    )


def test_allowed_domains_accept_comma_string():
    settings = ProxySettings(allowed_domains="a.com, B.com,,")
    assert settings.allowed_domains == frozenset({"a.com", "b.com"})


def test_settings_are_immutable():
    settings = ProxySettings(allowed_domains=["example.com"])
    with pytest.raises(ValidationError):
        settings.allowed_domains = frozenset({"evil.com"})
    assert isinstance(settings.allowed_domains, frozenset)


def test_invalid_config_raises_configuration_error():
    config = MockConfigurationManager({"renderer": {"max_wait_ms": -1}})
    with pytest.raises(ConfigurationError) as excinfo:
        ProxySettings.from_config(config)
    assert "Invalid proxy settings" in str(excinfo.value)


def test_zero_max_wait_is_rejected():
    with pytest.raises(ValidationError):
        ProxySettings(max_wait_ms=0)
    config = MockConfigurationManager({"renderer": {"max_wait_ms": 0}})
    with pytest.raises(ConfigurationError):
        ProxySettings.from_config(config)


def test_zero_wait_for_is_allowed():
    assert ProxySettings(wait_for_ms=0).wait_for_ms == 0


def test_invalid_intercept_rule_raises_configuration_error():
    config = MockConfigurationManager({"interceptor": {"rules": [{"status_code": 200}]}})
    with pytest.raises(ConfigurationError):
        ProxySettings.from_config(config)

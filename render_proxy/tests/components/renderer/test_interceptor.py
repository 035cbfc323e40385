import pytest
from unittest.mock import AsyncMock, MagicMock

from pydantic import ValidationError

from render_proxy.components.renderer.interceptor import (
    DEFAULT_INTERCEPT_RULES,
    InterceptRule,
    ResourceInterceptor,
)

GA_URL = "http://www.google-analytics.com/analytics.js"


def make_route(url, resource_type="script"):
    route = MagicMock()
    route.request.url = url
    route.request.resource_type = resource_type
    route.fulfill = AsyncMock()
    route.abort = AsyncMock()
    route.continue_ = AsyncMock()
    return route


def test_default_rules_cover_google_analytics():
    urls = [rule.match_url for rule in DEFAULT_INTERCEPT_RULES]
    assert GA_URL in urls
    assert "https://www.google-analytics.com/analytics.js" in urls
    for rule in DEFAULT_INTERCEPT_RULES:
        assert rule.status_code == 200
        assert rule.body == ""
        assert rule.headers == {"Content-Type": "application/javascript"}


def test_rules_are_frozen():
    rule = InterceptRule(match_url=GA_URL)
    with pytest.raises(ValidationError):
        rule.body = "evil()"


def test_rule_requires_match_url():
    with pytest.raises(ValidationError):
        InterceptRule(match_url="")


@pytest.mark.asyncio
async def test_install_registers_catch_all_route():
    interceptor = ResourceInterceptor(DEFAULT_INTERCEPT_RULES)
    context = MagicMock()
    context.route = AsyncMock()

    await interceptor.install(context)

    context.route.assert_awaited_once_with("**/*", interceptor.handle)


@pytest.mark.asyncio
async def test_matching_request_gets_synthetic_response():
    interceptor = ResourceInterceptor(DEFAULT_INTERCEPT_RULES)
    route = make_route(GA_URL)

    await interceptor.handle(route)

    route.fulfill.assert_awaited_once_with(
        status=200, headers={"Content-Type": "application/javascript"}, body=""
    )
    route.continue_.assert_not_called()
    route.abort.assert_not_called()
    assert interceptor.fulfilled_count == 1


@pytest.mark.asyncio
async def test_match_is_exact():
    interceptor = ResourceInterceptor(DEFAULT_INTERCEPT_RULES)
    route = make_route(GA_URL + "?v=2")

    await interceptor.handle(route)

    route.fulfill.assert_not_called()
    route.continue_.assert_awaited_once()
    assert interceptor.fulfilled_count == 0


@pytest.mark.asyncio
async def test_other_requests_pass_through():
    interceptor = ResourceInterceptor(DEFAULT_INTERCEPT_RULES, block_stylesheets=False)
    route = make_route("http://example.com/app.js")

    await interceptor.handle(route)

    route.continue_.assert_awaited_once()


@pytest.mark.asyncio
async def test_stylesheets_aborted_when_css_disabled():
    interceptor = ResourceInterceptor(DEFAULT_INTERCEPT_RULES, block_stylesheets=True)
    route = make_route("http://example.com/site.css", resource_type="stylesheet")

    await interceptor.handle(route)

    route.abort.assert_awaited_once()
    route.continue_.assert_not_called()


@pytest.mark.asyncio
async def test_stylesheets_loaded_when_css_enabled():
    interceptor = ResourceInterceptor(DEFAULT_INTERCEPT_RULES, block_stylesheets=False)
    route = make_route("http://example.com/site.css", resource_type="stylesheet")

    await interceptor.handle(route)

    route.continue_.assert_awaited_once()
    route.abort.assert_not_called()


@pytest.mark.asyncio
async def test_first_rule_wins_for_duplicate_urls():
    rules = [
        InterceptRule(match_url="http://t.test/a.js", body="first"),
        InterceptRule(match_url="http://t.test/a.js", body="second"),
    ]
    interceptor = ResourceInterceptor(rules)
    route = make_route("http://t.test/a.js")

    await interceptor.handle(route)

    assert route.fulfill.await_args.kwargs["body"] == "first"

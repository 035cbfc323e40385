"""
Synthetic responses for known third-party sub-resources.

The `ResourceInterceptor` installs one catch-all route on a Playwright browser
context. Requests whose URL exactly matches an `InterceptRule` are answered
with the rule's canned response and never reach the network; everything else
is passed through (stylesheets are aborted when CSS loading is off).
"""
from typing import Dict, Iterable, Tuple, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from render_proxy.core.logger import get_logger

if TYPE_CHECKING:
    from playwright.async_api import BrowserContext, Route

logger = get_logger(__name__)


class InterceptRule(BaseModel):
    """A canned response served in place of a real fetch of `match_url`."""
    model_config = ConfigDict(frozen=True)

    match_url: str = Field(..., min_length=1)
    status_code: int = Field(200, ge=100, le=599)
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""


_EMPTY_SCRIPT = {"Content-Type": "application/javascript"}

DEFAULT_INTERCEPT_RULES: Tuple[InterceptRule, ...] = (
    InterceptRule(match_url="http://www.google-analytics.com/analytics.js", headers=_EMPTY_SCRIPT),
    InterceptRule(match_url="https://www.google-analytics.com/analytics.js", headers=_EMPTY_SCRIPT),
)


class ResourceInterceptor:
    """
    Routes every request of one browser context through a fixed rule table.

    One interceptor is created per render session; the rule objects themselves
    are shared read-only across sessions.

    Attributes:
        rules (Tuple[InterceptRule, ...]): Rules in registration order.
        block_stylesheets (bool): Abort stylesheet requests instead of fetching them.
        fulfilled_count (int): Number of requests answered synthetically so far.
    """
    ROUTE_PATTERN = "**/*"

    def __init__(self, rules: Iterable[InterceptRule], block_stylesheets: bool = True):
        self.rules = tuple(rules)
        self.block_stylesheets = block_stylesheets
        self.fulfilled_count = 0
        # First rule wins when two share a URL.
        self._by_url: Dict[str, InterceptRule] = {}
        for rule in self.rules:
            self._by_url.setdefault(rule.match_url, rule)

    def match(self, url: str):
        """Returns the rule registered for exactly `url`, or None."""
        return self._by_url.get(url)

    async def install(self, context: 'BrowserContext') -> None:
        """Registers the handler on `context`. Must run before the first navigation."""
        await context.route(self.ROUTE_PATTERN, self.handle)
        logger.debug(f"Installed {len(self.rules)} intercept rule(s); block_stylesheets={self.block_stylesheets}.")

    async def handle(self, route: 'Route') -> None:
        request = route.request
        rule = self.match(request.url)
        if rule is not None:
            self.fulfilled_count += 1
            logger.debug(f"Serving synthetic {rule.status_code} for {request.url}")
            await route.fulfill(status=rule.status_code, headers=dict(rule.headers), body=rule.body)
            return
        if self.block_stylesheets and request.resource_type == "stylesheet":
            await route.abort()
            return
        await route.continue_()

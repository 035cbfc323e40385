from render_proxy.components.gate.url_gate import UrlGate
from render_proxy.components.renderer.interceptor import ResourceInterceptor
from render_proxy.components.renderer.render_session import RenderSession
from render_proxy.components.sanitizer.script_sanitizer import sanitize
from render_proxy.core.exceptions import UrlDeniedError
from render_proxy.core.logger import get_logger
from render_proxy.core.settings import ProxySettings

logger = get_logger(__name__)


class RenderManager:
    """
    Handles one render request end to end: gate, isolated render, sanitize.

    A single manager serves all requests. It only holds the immutable settings
    and the URL gate built from them; every call to `render()` gets its own
    `RenderSession` and browser.
    """
    def __init__(self, settings: ProxySettings):
        self.settings = settings
        self.url_gate = UrlGate(settings.allowed_domains, settings.allowed_schemes)
        if not settings.allowed_domains:
            logger.warning("Allowed domain list is empty; every render request will be denied.")
        logger.info(
            f"RenderManager ready: {len(settings.allowed_domains)} allowed domain(s), "
            f"{len(settings.intercept_rules)} intercept rule(s)."
        )

    def new_session(self) -> RenderSession:
        interceptor = ResourceInterceptor(self.settings.intercept_rules, block_stylesheets=not self.settings.load_css)
        return RenderSession(self.settings, interceptor)

    async def render(self, raw_url: str) -> str:
        """
        Renders `raw_url` and returns sanitized HTML.

        Failures are not retried.

        Raises:
            InvalidUrlError, DomainNotAllowedError: The URL was refused by the gate.
            RenderTimeoutError: The page did not settle in time.
            RenderFailureError: The page could not be rendered.
        """
        try:
            authorized = self.url_gate.authorize(raw_url)
        except UrlDeniedError as e:
            logger.info(f"Denied render request ({e.reason}): {e.message}")
            raise

        async with self.new_session() as session:
            html = await session.visit(authorized.url)
        return sanitize(html)

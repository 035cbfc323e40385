"""
One isolated browser rendering of one page.

This module provides `RenderSession`, an asynchronous context manager that
owns a dedicated Playwright driver, browser process and browser context for a
single request. The session visits one URL, waits for the page to settle, and
returns the serialized DOM. Every exit path releases the browser.
"""
import asyncio
import enum
from typing import Optional, TYPE_CHECKING

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from render_proxy.components.gate.url_gate import strip_query_suffix
from render_proxy.components.renderer.interceptor import ResourceInterceptor
from render_proxy.core.exceptions import RenderFailureError, RendererError, RenderTimeoutError
from render_proxy.core.logger import get_logger

if TYPE_CHECKING:
    from render_proxy.core.settings import ProxySettings

logger = get_logger(__name__)


class SessionState(str, enum.Enum):
    CREATED = "created"
    VISITING = "visiting"
    SETTLED = "settled"
    TIMED_OUT = "timed_out"
    VISIT_FAILED = "visit_failed"


TERMINAL_STATES = frozenset({SessionState.SETTLED, SessionState.TIMED_OUT, SessionState.VISIT_FAILED})


class RenderSession:
    """
    Asynchronous context manager around a single-use browser.

    Sessions are never pooled or reused: each one launches its own browser
    process and context, so cookies, caches and JavaScript globals cannot leak
    between requests.

    Attributes:
        browser_type (str): The browser to launch ('chromium', 'firefox' or 'webkit').
        max_wait_ms (int): Hard ceiling for the whole visit.
        wait_for_ms (int): Quiet period after network idle before serializing.
        state (SessionState): Current lifecycle state.
        interceptor (ResourceInterceptor): Routes installed on the context.
    """
    SUPPORTED_BROWSERS = ('chromium', 'firefox', 'webkit')

    def __init__(self, settings: 'ProxySettings', interceptor: Optional[ResourceInterceptor] = None):
        """
        Args:
            settings (ProxySettings): Renderer settings (timeouts, CSS, debug, browser).
            interceptor (Optional[ResourceInterceptor]): Interceptor to install. When None,
                one is built from `settings.intercept_rules`.

        Raises:
            RendererError: If `settings.browser_type` is not a supported browser.
        """
        self.browser_type = settings.browser_type
        if self.browser_type not in self.SUPPORTED_BROWSERS:
            logger.error(f"Unsupported browser type configured: {self.browser_type}")
            raise RendererError(
                f"Unsupported browser type: {self.browser_type}. Must be 'chromium', 'firefox', or 'webkit'."
            )
        self.debug = settings.debug
        self.max_wait_ms = settings.max_wait_ms
        self.wait_for_ms = settings.wait_for_ms
        self.interceptor = interceptor or ResourceInterceptor(
            settings.intercept_rules, block_stylesheets=not settings.load_css
        )

        self.state = SessionState.CREATED
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None

    @property
    def released(self) -> bool:
        return self.playwright is None and self.browser is None and self.context is None

    async def __aenter__(self) -> 'RenderSession':
        """
        Starts Playwright, launches the browser and prepares a fresh context.

        Raises:
            RenderFailureError: If the engine cannot be started. Anything that
                did start is released first.
        """
        logger.debug(f"Starting {self.browser_type} for a new render session.")
        try:
            self.playwright = await async_playwright().start()
            launcher = getattr(self.playwright, self.browser_type)
            self.browser = await launcher.launch(headless=True)
            self.context = await self.browser.new_context(java_script_enabled=True)
            await self.interceptor.install(self.context)
        except Exception as e:
            logger.error(f"Failed to start rendering engine {self.browser_type}: {e}", exc_info=True)
            self.state = SessionState.VISIT_FAILED
            await self.close()
            raise RenderFailureError(f"Failed to start rendering engine {self.browser_type}", e)
        except BaseException:
            # Cancelled mid-startup; __aexit__ will not run.
            logger.warning(f"Startup of {self.browser_type} was cancelled; releasing the engine.")
            self.state = SessionState.VISIT_FAILED
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Releases the context, browser and driver. Safe to call more than once."""
        context, browser, playwright = self.context, self.browser, self.playwright
        self.context = None
        self.browser = None
        self.playwright = None
        if context:
            try:
                await context.close()
            except Exception as e:
                logger.warning(f"Error closing browser context: {e}")
        if browser:
            try:
                await browser.close()
                logger.debug("Browser closed.")
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
        if playwright:
            try:
                await playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")

    async def visit(self, url: str) -> str:
        """
        Renders `url` and returns the serialized document.

        The URL is truncated at its first '?' or '%3F' before navigation. The
        session is single-use: whatever the outcome, the engine is released
        before this method returns or raises.

        Args:
            url (str): An authorized URL.

        Returns:
            str: The HTML serialization of the settled page.

        Raises:
            RenderTimeoutError: The page did not settle within `max_wait_ms`.
            RenderFailureError: Navigation failed, the response was an error or
                not HTML, or the engine failed.
            RendererError: The session was not entered or was already used.
        """
        if self.state is not SessionState.CREATED:
            raise RendererError(f"Render session cannot visit from state '{self.state.value}'.")
        if not self.context:
            raise RendererError("Render session is not started. Use 'async with RenderSession(...)'.")

        target = strip_query_suffix(url)
        self.state = SessionState.VISITING
        logger.info(f"Rendering {target} (max_wait={self.max_wait_ms}ms, wait_for={self.wait_for_ms}ms)")
        try:
            html = await asyncio.wait_for(self._navigate_and_settle(target), timeout=self.max_wait_ms / 1000)
        except (asyncio.TimeoutError, PlaywrightTimeoutError) as e:
            self.state = SessionState.TIMED_OUT
            logger.warning(f"Render of {target} timed out after {self.max_wait_ms}ms.")
            raise RenderTimeoutError(f"Page did not settle within {self.max_wait_ms}ms") from e
        except RenderFailureError:
            self.state = SessionState.VISIT_FAILED
            raise
        except Exception as e:
            self.state = SessionState.VISIT_FAILED
            logger.error(f"Render of {target} failed: {e}", exc_info=True)
            raise RenderFailureError(f"Failed to render '{target}'", e) from e
        finally:
            await self.close()

        self.state = SessionState.SETTLED
        logger.info(f"Rendered {target} ({len(html)} chars, {self.interceptor.fulfilled_count} intercepted).")
        return html

    async def _navigate_and_settle(self, url: str) -> str:
        page: Page = await self.context.new_page()
        page.set_default_timeout(self.max_wait_ms)
        if self.debug:
            page.on("console", lambda msg: logger.debug(f"[page console] {msg.type}: {msg.text}"))
            page.on("pageerror", lambda err: logger.debug(f"[page error] {err}"))

        response = await page.goto(url, wait_until="load")
        if response is None:
            raise RenderFailureError(f"No response received for '{url}'")
        if response.status >= 400:
            raise RenderFailureError(f"'{url}' answered with HTTP {response.status}")
        content_type = await response.header_value("content-type")
        if content_type and "html" not in content_type.lower():
            raise RenderFailureError(f"'{url}' is not an HTML document ({content_type})")

        await page.wait_for_load_state("networkidle")
        if self.wait_for_ms:
            await page.wait_for_timeout(self.wait_for_ms)
        return await page.content()

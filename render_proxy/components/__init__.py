"""
Components sub-package for the render proxy.

Each component covers one stage of a render: the URL gate authorizes the
target, the renderer executes the page in an isolated browser, and the
sanitizer strips script elements from the result.
"""
from .gate.url_gate import AuthorizedUrl, UrlGate
from .renderer.interceptor import InterceptRule, ResourceInterceptor
from .renderer.render_session import RenderSession, SessionState
from .sanitizer.script_sanitizer import sanitize

__all__ = [
    "AuthorizedUrl",
    "UrlGate",
    "InterceptRule",
    "ResourceInterceptor",
    "RenderSession",
    "SessionState",
    "sanitize",
]

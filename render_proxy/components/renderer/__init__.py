"""
Renderer component for the render proxy.

This sub-package drives a headless browser to fully execute a page,
including its scripts, and hands back the serialized DOM.
"""
from .interceptor import DEFAULT_INTERCEPT_RULES, InterceptRule, ResourceInterceptor
from .render_session import RenderSession, SessionState

__all__ = [
    "DEFAULT_INTERCEPT_RULES",
    "InterceptRule",
    "ResourceInterceptor",
    "RenderSession",
    "SessionState",
]

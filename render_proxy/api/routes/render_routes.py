"""
Render route for the render proxy.

`GET /render?url=...` returns the sanitized, fully rendered HTML of an
allowlisted page. Denials and render errors are raised as typed exceptions
and turned into JSON responses by the handlers registered in `api/main.py`.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from render_proxy.api.models import HealthResponse
from render_proxy.core.exceptions import InvalidUrlError
from render_proxy.core.logger import get_logger
from render_proxy.core.manager import RenderManager

logger = get_logger(__name__)

router = APIRouter()


def get_render_manager(request: Request) -> RenderManager:
    """Returns the process-wide manager stored on the application state."""
    return request.app.state.render_manager


@router.get(
    "/render",
    response_class=HTMLResponse,
    summary="Render a page server-side",
    description="Fetches an allowlisted URL in an isolated headless browser, runs its scripts, "
                "and returns the resulting HTML with script elements removed. "
                "Anything after the first '?' or '%3F' in the target URL is discarded.",
    responses={
        403: {"description": "The url is missing, malformed, or not on the allowlist."},
        502: {"description": "The page could not be rendered."},
        504: {"description": "The page did not settle in time."},
    },
)
async def render_page(
    url: Optional[str] = Query(None, description="Absolute, percent-encoded URL of the page to render."),
    manager: RenderManager = Depends(get_render_manager),
):
    if url is None:
        raise InvalidUrlError("The 'url' query parameter is missing.")
    html = await manager.render(url)
    return HTMLResponse(content=html, status_code=200)


@router.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health():
    return HealthResponse()

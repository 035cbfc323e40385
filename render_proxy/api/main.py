"""
Main application file for the render proxy API.

This file sets up logging, builds the immutable proxy settings and the render
manager, registers the exception handlers that translate the error taxonomy
into HTTP responses, and includes the render router.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from render_proxy import __version__
from render_proxy.api.models import INVALID_URL_MESSAGE, ErrorResponse
from render_proxy.api.routes import render_routes
from render_proxy.core.config import config_manager
from render_proxy.core.exceptions import (
    RenderFailureError,
    RendererError,
    RenderProxyError,
    RenderTimeoutError,
    UrlDeniedError,
)
from render_proxy.core.logger import get_logger, setup_logging
from render_proxy.core.manager import RenderManager
from render_proxy.core.settings import ProxySettings

# --- Logging Setup ---
setup_logging(config_manager)
logger = get_logger(__name__)

# --- Settings (read once, never mutated) ---
settings = ProxySettings.from_config(config_manager)

ERROR_HEADER = "X-Render-Error"

app = FastAPI(
    title="Render Proxy",
    description="Renders allowlisted pages in an isolated headless browser and returns "
                "the resulting HTML with script elements removed.",
    version=__version__,
)
app.state.settings = settings
app.state.render_manager = RenderManager(settings)


# --- Exception Handlers ---

@app.exception_handler(UrlDeniedError)
async def url_denied_exception_handler(request: Request, exc: UrlDeniedError):
    """
    Caller errors (InvalidUrl, DomainNotAllowed) share one fixed body; the
    specific reason is only exposed in the X-Render-Error header.
    """
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content=ErrorResponse(message=INVALID_URL_MESSAGE).to_content(),
        headers={ERROR_HEADER: exc.reason},
    )


@app.exception_handler(RenderTimeoutError)
async def render_timeout_exception_handler(request: Request, exc: RenderTimeoutError):
    logger.warning(f"{exc.kind} for request {request.method} {request.url}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        content=ErrorResponse(error=exc.kind, message="The page did not finish rendering in time.").to_content(),
        headers={ERROR_HEADER: exc.kind},
    )


@app.exception_handler(RendererError)
async def render_failure_exception_handler(request: Request, exc: RendererError):
    """Engine diagnostics stay in the log; the caller only learns the failure kind."""
    logger.error(f"{exc.kind} for request {request.method} {request.url}: {exc.message}")
    kind = RenderFailureError.kind
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=ErrorResponse(error=kind, message="The page could not be rendered.").to_content(),
        headers={ERROR_HEADER: kind},
    )


@app.exception_handler(RenderProxyError)
async def render_proxy_exception_handler(request: Request, exc: RenderProxyError):
    logger.error(
        f"RenderProxyError caught: {exc.__class__.__name__} - {exc.message} "
        f"for request: {request.method} {request.url}",
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(message="An application error occurred.").to_content(),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Validation details are logged, never echoed to the caller."""
    logger.warning(f"RequestValidationError for: {request.method} {request.url}. Errors: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(message="Request validation failed.").to_content(),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.critical(
        f"Generic unhandled exception caught: {exc.__class__.__name__} - {exc} "
        f"for request: {request.method} {request.url}",
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(message="An unexpected server error occurred.").to_content(),
    )


# --- Routers ---
app.include_router(render_routes.router, tags=["Rendering"])


def run() -> None:
    """Console entry point: serves the app with uvicorn on the configured host and port."""
    import uvicorn

    logger.info(f"Render proxy listening on {settings.host}:{settings.port}")
    # No Server header.
    uvicorn.run(app, host=settings.host, port=settings.port, server_header=False)


if __name__ == "__main__":
    run()

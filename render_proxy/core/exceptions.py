"""
Custom exception classes for the render proxy.
"""
from typing import Optional


class RenderProxyError(Exception):
    """
    Base class for all custom exceptions in the render proxy.

    Attributes:
        message (str): A human-readable description of the error.
    """
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"


# --- Configuration Related Exceptions ---
class ConfigurationError(RenderProxyError):
    """
    Raised when configuration values are present but unusable, e.g. an
    environment override that cannot be coerced to the expected type.
    """
    def __init__(self, message: str):
        super().__init__(message)


# --- URL Gate Exceptions ---
class UrlDeniedError(RenderProxyError):
    """
    Raised by the URL gate when a requested URL may not be rendered.
    These are caller errors and map to HTTP 403.

    Attributes:
        reason (str): Machine-readable denial reason.
        url (Optional[str]): The rejected input, kept for server-side logs only.
    """
    reason = "Denied"

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class InvalidUrlError(UrlDeniedError):
    """The input is not a well-formed absolute URL with a usable scheme."""
    reason = "InvalidUrl"


class DomainNotAllowedError(UrlDeniedError):
    """The URL's hostname is not in the allowlist (or the allowlist is empty)."""
    reason = "DomainNotAllowed"


# --- Component Related Exceptions ---
class ComponentError(RenderProxyError):
    """
    A general base class for errors originating from within a specific component.

    Attributes:
        component_name (str): Name of the component where the error originated.
    """
    def __init__(self, component_name: str, message: str):
        full_message = f"Error in component '{component_name}': {message}"
        super().__init__(full_message)
        self.component_name = component_name


class RendererError(ComponentError):
    """Raised for errors specific to the Renderer component (setup, navigation, serialization)."""
    kind = "RenderError"

    def __init__(self, message: str):
        super().__init__(component_name="Renderer", message=message)


class RenderTimeoutError(RendererError):
    """The page did not settle within the session's max wait."""
    kind = "RenderTimeout"


class RenderFailureError(RendererError):
    """
    Navigation or engine failure (DNS, refused connection, error status,
    non-HTML response, browser crash).

    Attributes:
        original_exception (Optional[Exception]): The underlying engine exception, if any.
    """
    kind = "RenderFailure"

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        self.original_exception = original_exception
        if original_exception:
            message += f" (Original exception: {original_exception})"
        super().__init__(message)

"""
API sub-package for the render proxy.

Contains the FastAPI application (`api.main`), the response models and the
route modules. Import them from their own modules.
"""

__all__ = []

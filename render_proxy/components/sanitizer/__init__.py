"""
Sanitizer component: strips executable markup from rendered documents.
"""
from .script_sanitizer import sanitize

__all__ = [
    "sanitize",
]

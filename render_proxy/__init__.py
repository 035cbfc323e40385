"""
render_proxy: server-side rendering proxy.

Fetches an allowlisted page in an isolated headless browser, lets its scripts
run, and returns the resulting HTML with script elements removed.
"""

__version__ = "0.1.0"

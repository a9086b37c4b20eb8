"""
Web Capture API
===============

An HTTP service that renders web pages in a headless browser and stores the
result as WebP screenshots on local disk.

This package provides:
- FastAPI endpoint for capture requests
- Request validation and filename resolution
- Browser automation with Playwright
- Image encoding with Pillow
"""

__version__ = "1.0.0"
__author__ = "Web Capture Team"

"""
FastAPI REST Endpoints
======================

HTTP access to screenshot capture.

Endpoints:
- POST /api/capture: Render a URL and store it as a WebP screenshot
- OPTIONS *: CORS preflight
"""

"""
Rendering Module
===============

Browser automation for screenshot capture.

Components:
- browser: Playwright lifecycle and isolated browser contexts
- capture: Navigation, screenshot and WebP encoding
"""

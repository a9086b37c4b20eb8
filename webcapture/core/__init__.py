"""
Core Logic
==========

Request validation, filename resolution and browser-driven rendering.

Components:
- errors: Validation and capture error taxonomy
- validation: Raw request to capture options
- filenames: Output filename derivation
- rendering: Playwright browser management and screenshot capture
"""

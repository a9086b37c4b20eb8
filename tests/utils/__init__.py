"""
Test Utilities
==============

Helpers for building image fixtures and Playwright mocks.
"""

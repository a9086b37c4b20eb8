"""
Test Suite
==========

Test suite matching the webcapture/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: HTTP contract tests through the FastAPI application
"""

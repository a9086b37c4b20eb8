"""
Data Models
===========

Pydantic models for capture options, results and API responses.
"""

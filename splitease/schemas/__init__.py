"""
Schemas Package

This package contains Pydantic models for API requests and responses.
"""

from .api import ApiResponse

__all__ = ["ApiResponse"]

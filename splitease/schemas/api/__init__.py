"""
API Schemas Package

This package contains Pydantic models for API requests and responses.
"""

from splitease.schemas.api.common import ApiResponse

__all__ = ["ApiResponse"]

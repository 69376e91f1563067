"""
API Models Package

Pydantic request and response models for the node checker REST API.

Usage:
    from node_checker.models import CheckRequest

    request = CheckRequest(urls="https://a.example, https://b.example")
"""

from .api_models import (
    CheckRequest,
    CheckResultModel,
    NodeReportModel,
    ErrorResponse,
    HealthResponse
)

__all__ = [
    'CheckRequest',
    'CheckResultModel',
    'NodeReportModel',
    'ErrorResponse',
    'HealthResponse'
]

"""
API Models

This module defines Pydantic models for API request and response validation.
"""

import re
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ErrorResponse(BaseModel):
    """
    Response model for API errors.

    Attributes:
        error: Error message
        code: Error code (string identifier)
        details: Additional error details
    """
    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")
    details: Optional[dict] = Field(default=None, description="Additional error details")


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")
    timestamp: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Response timestamp",
    )


class CheckRequest(BaseModel):
    """
    Request model for checking nodes.

    Attributes:
        urls: Node URLs, either a list or one string separated by commas or whitespace
    """
    urls: List[str] = Field(..., description="Node URLs to check")

    @field_validator('urls', mode='before')
    @classmethod
    def split_urls(cls, v):
        """Accept a single separated string as well as a list."""
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, list):
            raise ValueError("urls must be a string or a list of strings")
        urls = []
        for item in v:
            if not isinstance(item, str):
                raise ValueError("urls must be a string or a list of strings")
            urls.extend(u for u in re.split(r"[,\s]+", item) if u)
        if not urls:
            raise ValueError("urls cannot be empty")
        return urls


class CheckResultModel(BaseModel):
    """Outcome of a single check."""
    name: str = Field(..., description="Check name")
    result: str = Field(..., description="Success description or error message")
    passed: bool = Field(..., description="Whether the check succeeded")
    required: bool = Field(default=False, description="Whether the check is required for suitability")


class NodeReportModel(BaseModel):
    """Results of checking one node."""
    url: str = Field(..., description="Normalized node URL")
    type: str = Field(..., description="Detected node type: beacon, execution or colibri")
    suitable: bool = Field(..., description="Whether all required checks passed")
    results: List[CheckResultModel] = Field(default_factory=list, description="Ordered check results")

    model_config = {
        "json_schema_extra": {
            "example": {
                "url": "https://lodestar-mainnet.chainsafe.io",
                "type": "beacon",
                "suitable": True,
                "results": [
                    {"name": "version", "result": "Lodestar/v1.20.0", "passed": True, "required": True},
                    {"name": "light_client_update as json", "result": "ok (21 periods)", "passed": True, "required": True},
                    {"name": "colibri suitable", "result": "ok", "passed": True, "required": False},
                ],
            }
        }
    }

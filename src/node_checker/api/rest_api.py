"""
REST API for Node Checker

This module provides a FastAPI-based REST API that checks Ethereum nodes
and reports whether they are suitable as backends for colibri light clients.
"""

import logging
import traceback
from typing import List

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__, config
from ..checks.beacon import is_local_file
from ..detect import NodeDetectionError
from ..main import check_node
from ..models.api_models import CheckRequest, ErrorResponse, HealthResponse, NodeReportModel
from .http import NodeAPIError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Node Checker API",
    description="""
    Check Ethereum beacon, execution and colibri prover nodes.

    Each URL is probed to detect its node type, then the matching check suite
    runs. Beacon nodes have their light client updates verified against the
    attested state roots for the current and past sync committee periods.

    ## Usage
    POST a list of URLs to `/check`. Every node gets one result per check and
    a final `colibri suitable` verdict.
    """,
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc: RequestValidationError):
    """Handle malformed request bodies."""
    logger.error(f"Invalid request: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error="Invalid request, expected {\"urls\": [...]}",
            code="VALIDATION_ERROR",
            details={"errors": [str(e.get("msg")) for e in exc.errors()]},
        ).model_dump()
    )


@app.exception_handler(ValueError)
async def value_error_handler(request, exc: ValueError):
    """Handle validation errors."""
    logger.error(f"Validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=str(exc),
            code="VALIDATION_ERROR",
            details={"error_type": "ValueError"}
        ).model_dump()
    )


@app.exception_handler(NodeDetectionError)
async def detection_error_handler(request, exc: NodeDetectionError):
    """Handle URLs that are not a known node type."""
    logger.error(f"Node detection error: {exc}")
    return JSONResponse(
        status_code=502,
        content=ErrorResponse(
            error=str(exc),
            code="NODE_DETECTION_ERROR",
            details={"error_type": "NodeDetectionError"}
        ).model_dump()
    )


@app.exception_handler(NodeAPIError)
async def node_api_exception_handler(request, exc: NodeAPIError):
    """Handle node transport errors."""
    logger.error(f"Node API error: {exc}")
    return JSONResponse(
        status_code=502,
        content=ErrorResponse(
            error=str(exc),
            code="NODE_API_ERROR",
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unexpected error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code="INTERNAL_ERROR",
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.get("/", response_model=dict)
async def root():
    """API root endpoint with basic information."""
    return {
        "name": "Node Checker API",
        "version": __version__,
        "description": "Check Ethereum nodes for colibri light client support",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@app.post("/check", response_model=List[NodeReportModel])
def check_nodes(request: CheckRequest):
    """
    Check every URL and return one report per node.

    Only http(s) URLs are accepted; the server never reads local files.
    """
    for url in request.urls:
        if is_local_file(url):
            raise ValueError(f"Only http(s) URLs can be checked: {url}")

    reports = []
    for url in request.urls:
        report = check_node(url)
        logger.info(f"{report.url} ({report.type}) suitable: {report.suitable}")
        reports.append(NodeReportModel(**report.to_dict()))
    return reports


def run_server(host: str = "0.0.0.0", port: int = None, dev: bool = False):
    """
    Run the API server.

    Args:
        host: Host to bind to
        port: Port to bind to, defaults to PORT
        dev: Enable development mode with auto-reload
    """
    port = port or config.PORT
    logger.info(f"Starting Node Checker API server on {host}:{port}")
    uvicorn.run(
        "node_checker.api.rest_api:app",
        host=host,
        port=port,
        reload=dev,
        log_level="info"
    )


if __name__ == "__main__":
    run_server(dev=True)

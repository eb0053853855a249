"""
HTTP middleware - CORS headers on every response and the last-resort 500 handler.
"""

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "GET, POST, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


def cors_headers(allowed_origins: List[str], request_origin: Optional[str]) -> Dict[str, str]:
    """
    Build the CORS headers for a response.

    With a wildcard origin every response gets ``*``. With an explicit list the
    request's Origin is echoed back only when it is listed.
    """
    headers = {
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }
    if "*" in allowed_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    else:
        headers["Vary"] = "Origin"
        if request_origin and request_origin in allowed_origins:
            headers["Access-Control-Allow-Origin"] = request_origin
    return headers


def install_cors(app: FastAPI, allowed_origins: List[str]) -> None:
    """Answer preflights with 204 and decorate every other response with CORS headers."""

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        headers = cors_headers(allowed_origins, request.headers.get("origin"))

        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            response = JSONResponse(status_code=500, content={"error": "Internal server error"})

        response.headers.update(headers)
        return response

"""
Middleware configuration for the FastAPI application.

CORS plus the translation of request-level Listing Hub exceptions into
the `{success, message, error}` 400 body the frontend expects.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from listing_hub.core.exceptions import ListingHubException

logger = logging.getLogger(__name__)


def apply_cors(app: FastAPI) -> None:
    """Apply CORS middleware with permissive defaults."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def error_body(message: str, error: str) -> dict:
    return {"success": False, "message": message, "error": error}


async def listing_hub_exception_handler(request: Request, exc: ListingHubException) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=400,
        content=error_body(str(exc), type(exc).__name__),
    )


def apply_exception_handlers(app: FastAPI) -> None:
    """Render request-level failures as a single 400 response."""
    app.add_exception_handler(ListingHubException, listing_hub_exception_handler)

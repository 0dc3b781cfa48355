"""
FastAPI server — holders, traders and interval lookups over Solscan.

Exposes GET /api/holders, /api/traders, /api/interval and /health. Every
error body is {"error": message}; the status comes from the error kind
(400 validation, 500 upstream/configuration).
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from holderscope import __version__
from holderscope.api_server.middleware import register_middleware
from holderscope.api_server.routes import router
from holderscope.core.exceptions import HolderscopeError
from holderscope.holderscope_logging import get_logger

logger = get_logger(__name__)

UNKNOWN_ERROR = "An unknown error occurred."


app = FastAPI(
    title="Holderscope API",
    description="Token holders, top traders and active wallets aggregated from Solscan.",
    version=__version__,
)

register_middleware(app)
app.include_router(router, prefix="/api")


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness check: API is up."""
    return {"status": "ok"}


@app.exception_handler(HolderscopeError)
def holderscope_error_handler(request: Request, exc: HolderscopeError) -> JSONResponse:
    """Render typed errors as {"error": message} with the kind's status code."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "request_failed",
        path=request.url.path,
        error_kind=exc.kind.value,
        status_code=exc.status_code,
        error=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Keep FastAPI's own validation failures in the same 400 {"error": ...} shape."""
    errors: list[Any] = list(exc.errors())
    message = "; ".join(str(e.get("msg", "invalid request")) for e in errors) or "Invalid request."
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything untyped is a 500 with a generic message; details go to the log."""
    logger.exception("request_unhandled_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": UNKNOWN_ERROR})

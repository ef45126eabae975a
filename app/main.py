# app/main.py - FastAPI app entry point

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from app.auth.admin import AdminRedirectError
from app.config import get_settings
from app.routers import admin, admin_auth, debug, health, payments


def configure_logging() -> None:
    settings = get_settings()
    level = logging.DEBUG if settings.debug_diagnostics else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


configure_logging()

app = FastAPI(
    title="saltaire-guide-api",
    description="Admin moderation console and payment-intent endpoints for the Saltaire Guide",
    version="0.1.0",
)


@app.exception_handler(HTTPException)
async def http_exception_handler(_: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(AdminRedirectError)
async def admin_redirect_handler(_: Request, exc: AdminRedirectError):
    return RedirectResponse(exc.location, status_code=303)


# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(admin_auth.router, prefix="/admin", tags=["admin-auth"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])
app.include_router(payments.router, prefix="/api", tags=["payments"])
app.include_router(debug.router, prefix="/api/debug", tags=["debug"])

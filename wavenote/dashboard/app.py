#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
WaveNote - FastAPI Application
Personal to-do list web application
"""

import argparse
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from wavenote.config import DashboardSettings, get_settings
from wavenote.dashboard import views
from wavenote.dashboard.api import auth, dialog, tasks
from wavenote.services import ServiceManager
from wavenote.shared.schemas import HealthCheck
from wavenote.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[DashboardSettings] = None) -> FastAPI:
    """Application factory"""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"🚀 Starting {settings.APP_NAME}...")
        if settings.secret_key_generated:
            logger.warning("⚠️ SECRET_KEY is not set, a random key is used: sessions will not survive a restart")
        app.state.started_at = time.time()

        services = ServiceManager(settings)
        services.initialize_services()
        app.state.services = services

        logger.info(f"🌐 Listening on {settings.get_full_url()}")
        yield

        logger.info("🛑 Stopping WaveNote...")
        app.state.services = None

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.services = None
    app.state.started_at = time.time()

    # ===== MIDDLEWARE =====

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY,
        session_cookie=settings.SESSION_COOKIE,
        same_site="lax",
        https_only=settings.is_production
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log every request with its status and duration"""
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            process_time = time.time() - start_time
            logger.exception(f"❌ {request.method} {request.url.path} failed ({process_time:.3f}s)")
            return JSONResponse(status_code=500, content={"detail": "Internal server error"})

        process_time = time.time() - start_time
        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")
        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        return response

    # ===== ROUTERS =====

    app.include_router(views.router)
    app.include_router(auth.router)
    app.include_router(tasks.router)
    app.include_router(dialog.router)

    # ===== SERVICE ROUTES =====

    @app.get("/health", response_model=HealthCheck)
    async def health_check(request: Request):
        services = request.app.state.services
        if services is None or not services.initialized:
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "service": "wavenote", "timestamp": time.time()}
            )
        return HealthCheck(
            status="healthy",
            service="wavenote",
            version=settings.VERSION,
            timestamp=time.time(),
            services=services.get_services_info()
        )

    @app.get("/ping")
    async def ping():
        return {"message": "pong", "timestamp": time.time(), "service": "wavenote"}

    # ===== ERROR HANDLERS =====

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "status_code": exc.status_code}
        )

    return app


def run_dashboard(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False) -> None:
    """Start the web server"""
    settings = get_settings()
    setup_logging(settings)

    host = host or settings.DASHBOARD_HOST
    port = port or settings.DASHBOARD_PORT

    logger.info(f"🌐 Starting WaveNote on http://{host}:{port}")
    logger.info(f"📂 Data directory: {settings.DATA_DIR}")

    uvicorn.run(
        "wavenote.dashboard.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="debug" if settings.DEBUG else "info",
        server_header=False
    )


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the WaveNote web application")
    parser.add_argument("--host", default=settings.DASHBOARD_HOST, help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.DASHBOARD_PORT, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    run_dashboard(host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()

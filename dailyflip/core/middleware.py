import time
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from loguru import logger

from dailyflip.core import config


class TimingMiddleware:
    """Logs how long each HTTP request took."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        start_time = time.time()
        await self.app(scope, receive, send)
        duration = time.time() - start_time
        logger.debug(f"{scope['method']} {scope['path']} took {duration:.4f}s")


def setup_middleware(app: FastAPI) -> None:
    """Register all middleware on the application."""

    @app.middleware("http")
    async def proxy_fix(request, call_next):
        # Honour X-Forwarded-Proto from the reverse proxy
        proto = request.headers.get("x-forwarded-proto")
        if proto:
            request.scope["scheme"] = proto
        return await call_next(request)

    app.add_middleware(TimingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

from fastapi import FastAPI

from dailyflip.api.routers import api_router
from dailyflip.api.routers import health
from dailyflip.core.logging import setup_logging
from dailyflip.core.middleware import setup_middleware

setup_logging()

app = FastAPI(
    title="DailyFlip API",
    version="0.1.0",
)

setup_middleware(app)

app.include_router(health.router)
app.include_router(api_router, prefix="/api")

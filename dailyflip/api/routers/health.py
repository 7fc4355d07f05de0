from fastapi import APIRouter
from loguru import logger


router = APIRouter(prefix="", tags=["health"])


@router.get("/")
async def root():
    """Confirms the API is up."""
    logger.info("Root path accessed")
    return {"message": "Welcome to the DailyFlip API"}


@router.get("/health")
async def health_check():
    return {"status": "healthy"}

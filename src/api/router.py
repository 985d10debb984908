"""API router aggregation."""

from fastapi import APIRouter

from src.api.health import router as health_router
from src.api.search import search_router

api_router = APIRouter()
api_router.include_router(health_router)
# One-shot search and search session endpoints
api_router.include_router(search_router)

from fastapi import APIRouter

from docbase.api.routes import (
    demos,
    health,
)

api_router = APIRouter()

api_router.include_router(demos.router, tags=["demos"])
api_router.include_router(health.router, tags=["health"])

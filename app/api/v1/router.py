"""
Main API v1 router
Combines all handlers
"""
from fastapi import APIRouter

from app.api.v1.handlers import scan_handler, health_handler

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(scan_handler.router)
api_router.include_router(health_handler.router)

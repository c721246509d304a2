"""
API routers for the application.
"""

from fastapi import APIRouter
from app.routers import login, repairs

api_router = APIRouter()

# Include routers
api_router.include_router(login.router)  # Accounts & sessions
api_router.include_router(repairs.router)  # Repair log

__all__ = ["api_router", "login", "repairs"]

"""
API Routes Package

Contains all route modules for the dashboard API.
"""

from .dashboard import router as dashboard_router
from .admin import router as admin_router

__all__ = [
    "dashboard_router",
    "admin_router",
]

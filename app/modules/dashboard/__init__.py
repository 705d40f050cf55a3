"""
Módulo de Dashboard - KPIs de supervisión calculados sobre las fichas
"""

from .router import router as dashboard_router
from .service import DashboardService

__all__ = [
    "dashboard_router",
    "DashboardService"
]

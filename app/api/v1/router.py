# app/api/v1/router.py
from fastapi import APIRouter
from app.api.v1.auth import router as auth_router

from app.modules.affiliations import affiliations_router
from app.modules.dashboard import dashboard_router
from app.modules.catalog import catalog_router
from app.modules.users import users_router
from app.config.settings import settings


# Router principal de la API (montado en /api)
api_router = APIRouter()

# ==================== AUTENTICACIÓN ====================

api_router.include_router(auth_router, tags=["authentication"])

# ==================== MÓDULOS ====================

api_router.include_router(affiliations_router)
api_router.include_router(dashboard_router)
api_router.include_router(catalog_router)
api_router.include_router(users_router)

# ==================== ENDPOINTS RAÍZ ====================

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": f"{settings.app_name}",
        "version": settings.version,
        "status": "active",
        "available_endpoints": {
            "authentication": "/api/login",
            "affiliations": "/api/affiliations",
            "dashboard": "/api/dashboard",
            "catalog": "/api/planes, /api/empresas",
            "users": "/api/users"
        }
    }

@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version
    }

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from app.config.settings import settings
from app.config.database import Database
from app.core.errors import setup_exception_handlers
from app.core.middleware import setup_middleware
from app.api.v1.router import api_router

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Fichas API Starting...")
    logger.info(f"📍 Version: {settings.version}")
    logger.info(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")
    logger.info(f"⏰ Token Expire: {settings.access_token_expire_minutes} minutes")

    if getattr(app.state, "db", None) is None:
        app.state.db = Database(settings.database_url, echo=settings.debug)
    if settings.auto_create_tables:
        app.state.db.create_all()

    yield

    # Shutdown
    logger.info("🛑 Fichas API Shutting down...")
    app.state.db.dispose()

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Construir la aplicación. `database` permite inyectar otra base (tests);
    si no se pasa, se crea en el arranque a partir de settings.database_url.
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Gestión de fichas de afiliación, revisión y tablero de ventas",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )
    app.state.db = database

    # Setup middleware
    setup_middleware(app)
    setup_exception_handlers(app)

    # Include routers
    app.include_router(api_router, prefix="/api")

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "message": "🚀 Fichas API",
            "version": settings.version,
            "status": "running",
            "docs": "/docs" if settings.debug else "Disabled in production",
            "api": "/api"
        }

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

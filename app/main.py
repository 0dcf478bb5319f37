import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.config.settings import settings
from app.config.database import Base, engine
from app.core.exceptions import register_exception_handlers
from app.core.middleware import setup_middleware
from app.api.router import api_router
from app.shared.database import models  # noqa: F401  registra las tablas en Base.metadata

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

def init_db():
    """Crear tablas que no existan (open_sales, closed_sales, inventory, services)"""
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database initialized successfully")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 POS Stock API Starting...")
    logger.info(f"📍 Version: {settings.version}")
    logger.info(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")
    if settings.auto_create_tables:
        init_db()

    yield

    # Shutdown
    logger.info("🛑 POS Stock API Shutting down...")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Backend de punto de venta: inventario, servicios y ventas abiertas/cerradas",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)
register_exception_handlers(app)

# Include routers
app.include_router(api_router)

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "🚀 POS Stock API",
        "version": settings.version,
        "status": "running",
        "docs": "/docs" if settings.debug else "Disabled in production",
        "api": "/api"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

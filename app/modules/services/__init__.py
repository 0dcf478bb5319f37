# app/modules/services/__init__.py
"""
Módulo de Servicios - catálogo de servicios vendibles (sin stock)
"""

from .router import router as services_router
from .service import ServiceCatalogService
from .repository import ServiceRepository

__all__ = [
    "services_router",
    "ServiceCatalogService",
    "ServiceRepository"
]

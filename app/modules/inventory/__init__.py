# app/modules/inventory/__init__.py
"""
Módulo de Inventario

- Almacén de items por nombre (lectura, delta de stock, upsert)
- CRUD de inventario expuesto en /api/inventory

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso a datos (usado también por la reconciliación de ventas)
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as inventory_router
from .service import InventoryService
from .repository import InventoryRepository

__all__ = [
    "inventory_router",
    "InventoryService",
    "InventoryRepository"
]

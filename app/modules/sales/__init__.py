# app/modules/sales/__init__.py
"""
Módulo de Ventas - Ciclo de vida de ventas y reconciliación de stock

- Crear venta abierta (descuenta stock)
- Editar venta abierta (repone líneas anteriores, descuenta nuevas)
- Pagar (abierta -> cerrada) y revertir (cerrada -> abierta)
- Eliminar venta abierta (repone stock) o cerrada (sin reposición)
- Consultas por rango de fechas

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Ciclo de vida (transacciones y bloqueos)
- reconciliation.py: Cálculo, validación y aplicación de deltas de stock
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as sales_router
from .service import SalesService
from .repository import SalesRepository
from .reconciliation import StockReconciler

__all__ = [
    "sales_router",
    "SalesService",
    "SalesRepository",
    "StockReconciler"
]

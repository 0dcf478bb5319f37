# app/api/router.py
from fastapi import APIRouter

# ✅ IMPORTAR MÓDULOS
from app.modules.services import services_router
from app.modules.inventory import inventory_router
from app.modules.sales import sales_router


# Router principal: todas las rutas bajo /api
api_router = APIRouter(prefix="/api")

# ==================== CATÁLOGO ====================

api_router.include_router(services_router)
api_router.include_router(inventory_router)

# ==================== VENTAS ====================

# /open-sales, /pay-sale, /revert-sale, /closed-sales
api_router.include_router(sales_router)


# ==================== SALUD ====================

@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

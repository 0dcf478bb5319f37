"""
Excepciones de dominio del POS y su mapeo a respuestas HTTP.

Taxonomía:
- InvalidInputError        -> 400 (campos faltantes o mal formados)
- NotFoundError            -> 404 (id / factura desconocida)
- InsufficientStockError   -> 400 (cantidad solicitada supera el stock)
- UnknownCatalogItemError  -> 400 (línea referencia un item inexistente)
- Cualquier otro error     -> 500 genérico; el detalle solo va al log
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

class POSError(Exception):
    """Base de todos los errores de dominio"""

    status_code: int = 500
    code: str = "POS_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "code": self.code}

class InvalidInputError(POSError):
    status_code = 400
    code = "INVALID_INPUT"

class NotFoundError(POSError):
    status_code = 404
    code = "NOT_FOUND"

class InsufficientStockError(POSError):
    """Stock insuficiente para una deducción"""

    status_code = 400
    code = "INSUFFICIENT_STOCK"

    def __init__(self, item_name: str, requested: int, available: int):
        self.item_name = item_name
        self.requested = requested
        self.available = available
        super().__init__(f"Not enough stock for {item_name}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "item_name": self.item_name,
            "requested": self.requested,
            "available": self.available
        })
        return data

class UnknownCatalogItemError(POSError):
    """Línea de tipo item cuyo nombre no existe en inventario"""

    status_code = 400
    code = "UNKNOWN_CATALOG_ITEM"

    def __init__(self, item_name: str):
        self.item_name = item_name
        super().__init__(f"Item {item_name} not found in inventory")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["item_name"] = self.item_name
        return data

# ==================== HANDLERS ====================

def internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"❌ Error no controlado en {request.method} {request.url.path}: {exc}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={"message": "Internal Server Error", "code": "INTERNAL_ERROR"}
    )

def register_exception_handlers(app: FastAPI):
    """Registrar handlers de errores de dominio, validación y base de datos"""

    @app.exception_handler(POSError)
    async def _pos_error(request: Request, exc: POSError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request", "code": InvalidInputError.code, "errors": errors}
        )

    @app.exception_handler(SQLAlchemyError)
    async def _database_error(request: Request, exc: SQLAlchemyError):
        return internal_error_response(request, exc)

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        return internal_error_response(request, exc)

# app/modules/inventory/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal

class InventoryBaseModel(BaseModel):
    """Base para respuestas de inventario (Pydantic v2)"""
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class InventoryItemUpsert(BaseModel):
    """Alta o reabastecimiento por nombre (POST /inventory)"""
    item_name: str = Field(..., min_length=1, max_length=255, description="Nombre único del item")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Precio actual")
    stock: Optional[int] = Field(None, ge=0, description="Stock a sumar (inicial si el item es nuevo)")
    item_classification: Optional[str] = Field(None, max_length=100, description="Clasificación")

class InventoryItemUpdate(BaseModel):
    """Actualización parcial (PUT /inventory/{id}); stock es valor absoluto"""
    item_name: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    item_classification: Optional[str] = Field(None, max_length=100)

# ==================== RESPONSE SCHEMAS ====================

class InventoryItemResponse(InventoryBaseModel):
    id: int
    item_name: str
    price: Decimal
    stock: int
    item_classification: Optional[str]
    created_at: Optional[datetime]

class MessageResponse(BaseModel):
    message: str

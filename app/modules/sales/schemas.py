import copy
from pydantic import BaseModel, Field, ConfigDict, TypeAdapter, ValidationError
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from datetime import datetime
from decimal import Decimal

from app.core.exceptions import InvalidInputError

# ==================== CLASE BASE PARA RESPUESTAS (Pydantic v2) ====================

class SalesBaseModel(BaseModel):
    """
    Clase base para todos los esquemas de respuesta,
    con configuración de Pydantic v2.
    """
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== LÍNEAS DE VENTA ====================

class ItemLine(BaseModel):
    """Línea de item de inventario: descuenta stock"""
    model_config = ConfigDict(extra="allow")

    type: Literal["item"]
    item_name: str = Field(..., min_length=1, description="Nombre del item en inventario")
    qty: int = Field(..., gt=0, description="Cantidad")
    price: Optional[Decimal] = Field(None, ge=0, description="Precio unitario al momento de la venta")

class ServiceLine(BaseModel):
    """Línea de servicio: nunca toca inventario"""
    model_config = ConfigDict(extra="allow")

    type: Literal["service"]
    service_name: str = Field(..., min_length=1, description="Nombre del servicio")
    qty: Optional[int] = Field(None, gt=0, description="Cantidad (opcional)")
    price: Optional[Decimal] = Field(None, ge=0, description="Precio al momento de la venta")

LineItem = Annotated[Union[ItemLine, ServiceLine], Field(discriminator="type")]

_line_items_adapter = TypeAdapter(List[LineItem])

def parse_line_items(raw_items: Any) -> List[Union[ItemLine, ServiceLine]]:
    """
    Validar una lista de líneas (dicts) contra la unión etiquetada.
    Un `type` desconocido se rechaza explícitamente.
    """
    if raw_items is None:
        raise InvalidInputError("Items are required")

    try:
        return _line_items_adapter.validate_python(list(raw_items))
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise InvalidInputError(f"Invalid line item at {location}: {first.get('msg')}")

def snapshot_line_items(raw_items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Copia de las líneas tal como llegaron para guardarlas como JSON.

    Se guarda lo enviado por el cliente (claves extra, nulos, precios como
    texto), no el modelo validado.
    """
    return copy.deepcopy(list(raw_items))

# ==================== REQUEST SCHEMAS ====================

class OpenSaleCreateRequest(BaseModel):
    invoice_number: str = Field(..., min_length=1, max_length=255, description="Número de factura único")
    items: List[Dict[str, Any]] = Field(..., min_length=1, description="Líneas de la venta (item | service)")

class OpenSaleUpdateRequest(BaseModel):
    items: List[Dict[str, Any]] = Field(..., description="Nuevas líneas (reemplazo completo, puede ser vacío)")

class PaySaleRequest(BaseModel):
    paid_using: Optional[str] = Field(None, max_length=50, description="Método de pago")

# ==================== RESPONSE SCHEMAS ====================

class SaleRecordResponse(SalesBaseModel):
    id: int
    invoice_number: str
    items: List[Dict[str, Any]]
    created_at: datetime
    paid_at: Optional[datetime]
    paid_using: Optional[str]

class PaySaleResponse(SalesBaseModel):
    message: str
    paid_at: datetime
    paid_using: str
    closed_sale_id: int

class RevertSaleResponse(SalesBaseModel):
    message: str
    open_sale_id: int

class MessageResponse(BaseModel):
    message: str

# app/modules/services/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, List, Optional
from datetime import datetime
from decimal import Decimal

class ServiceBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

class ServiceCreate(BaseModel):
    service_name: str = Field(..., min_length=1, max_length=255, description="Nombre único del servicio")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Precio")
    freebies: Optional[List[Any]] = Field(None, description="Obsequios incluidos con el servicio")

class ServiceUpdate(BaseModel):
    service_name: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    freebies: Optional[List[Any]] = None

class ServiceResponse(ServiceBaseModel):
    id: int
    service_name: str
    price: Decimal
    freebies: List[Any]
    created_at: Optional[datetime]

class MessageResponse(BaseModel):
    message: str

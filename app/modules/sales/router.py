# app/modules/sales/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional, List
from datetime import datetime

from app.config.database import get_db
from .service import SalesService
from .schemas import (
    OpenSaleCreateRequest, OpenSaleUpdateRequest, PaySaleRequest,
    SaleRecordResponse, PaySaleResponse, RevertSaleResponse, MessageResponse
)

router = APIRouter(tags=["Sales"])

# ==================== VENTAS ABIERTAS ====================

@router.get("/open-sales", response_model=List[SaleRecordResponse])
def list_open_sales(
    lowdate: Optional[datetime] = Query(None, description="Creadas desde"),
    highdate: Optional[datetime] = Query(None, description="Creadas hasta"),
    db: Session = Depends(get_db)
):
    """Ventas abiertas, más recientes primero"""
    service = SalesService(db)
    return service.list_open_sales(lowdate, highdate)

@router.post("/open-sales", response_model=SaleRecordResponse, status_code=status.HTTP_201_CREATED)
def create_open_sale(sale_data: OpenSaleCreateRequest, db: Session = Depends(get_db)):
    """
    Crear venta abierta

    - Descuenta stock de cada línea `item` (validando todo antes de tocar nada)
    - Las líneas `service` no afectan inventario
    - 400 si falta stock o un item no existe en inventario
    """
    service = SalesService(db)
    return service.create_open_sale(sale_data.invoice_number, sale_data.items)

@router.put("/open-sales/{sale_id}", response_model=SaleRecordResponse)
def update_open_sale(
    sale_id: int,
    sale_data: OpenSaleUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Reemplazar líneas de una venta abierta

    Repone las líneas anteriores y descuenta las nuevas; si el stock no
    alcanza, la venta y el inventario quedan como estaban.
    """
    service = SalesService(db)
    return service.update_open_sale(sale_id, sale_data.items)

@router.delete("/open-sales/{sale_id}", response_model=MessageResponse)
def delete_open_sale(sale_id: int, db: Session = Depends(get_db)):
    """Eliminar venta abierta reponiendo su stock"""
    service = SalesService(db)
    service.delete_open_sale(sale_id)
    return {"message": "Sale deleted successfully"}

# ==================== PAGO / REVERSIÓN ====================

@router.post("/pay-sale/{sale_id}", response_model=PaySaleResponse)
def pay_sale(
    sale_id: int,
    pay_data: Optional[PaySaleRequest] = None,
    db: Session = Depends(get_db)
):
    """Mover venta a cerradas. Sin efecto en inventario"""
    service = SalesService(db)
    return service.pay_sale(sale_id, pay_data.paid_using if pay_data else None)

@router.post("/revert-sale/{sale_id}", response_model=RevertSaleResponse)
def revert_sale(sale_id: int, db: Session = Depends(get_db)):
    """Devolver venta cerrada a abiertas. Sin efecto en inventario"""
    service = SalesService(db)
    reopened = service.revert_sale(sale_id)
    return {"message": "Sale reverted to open.", "open_sale_id": reopened.id}

# ==================== VENTAS CERRADAS ====================

@router.get("/closed-sales", response_model=List[SaleRecordResponse])
def list_closed_sales(
    lowdate: Optional[datetime] = Query(None, description="Pagadas desde"),
    highdate: Optional[datetime] = Query(None, description="Pagadas hasta"),
    db: Session = Depends(get_db)
):
    """Ventas cerradas, pagadas más recientemente primero"""
    service = SalesService(db)
    return service.list_closed_sales(lowdate, highdate)

@router.delete("/closed-sales/{sale_id}", response_model=MessageResponse)
def delete_closed_sale(sale_id: int, db: Session = Depends(get_db)):
    """Eliminar venta cerrada (no repone stock)"""
    service = SalesService(db)
    service.delete_closed_sale(sale_id)
    return {"message": "Closed sale deleted successfully"}

# app/modules/inventory/router.py
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from .service import InventoryService
from .schemas import (
    InventoryItemUpsert, InventoryItemUpdate,
    InventoryItemResponse, MessageResponse
)

router = APIRouter(prefix="/inventory", tags=["Inventory"])

@router.get("", response_model=List[InventoryItemResponse])
def list_inventory(db: Session = Depends(get_db)):
    """Listar inventario ordenado por nombre"""
    service = InventoryService(db)
    return service.list_items()

@router.post("", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
def upsert_inventory_item(
    item_data: InventoryItemUpsert,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Agregar item al inventario o reabastecerlo

    - Si el nombre ya existe: suma `stock` al actual, sobrescribe `price`
      y solo cambia `item_classification` si viene informada (200)
    - Si no existe: lo crea con `stock` como stock inicial (201)
    """
    service = InventoryService(db)
    item, created = service.upsert_item(item_data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return item

@router.put("/{item_id}", response_model=InventoryItemResponse)
def update_inventory_item(
    item_id: int,
    item_data: InventoryItemUpdate,
    db: Session = Depends(get_db)
):
    """Actualización parcial de un item"""
    service = InventoryService(db)
    return service.update_item(item_id, item_data)

@router.delete("/{item_id}", response_model=MessageResponse)
def delete_inventory_item(item_id: int, db: Session = Depends(get_db)):
    service = InventoryService(db)
    service.delete_item(item_id)
    return {"message": "Item deleted successfully"}

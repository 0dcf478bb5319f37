# app/modules/services/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from .service import ServiceCatalogService
from .schemas import ServiceCreate, ServiceUpdate, ServiceResponse, MessageResponse

router = APIRouter(prefix="/services", tags=["Services"])

@router.get("", response_model=List[ServiceResponse])
def list_services(db: Session = Depends(get_db)):
    """Listar servicios ordenados por nombre"""
    service = ServiceCatalogService(db)
    return service.list_services()

@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(service_data: ServiceCreate, db: Session = Depends(get_db)):
    service = ServiceCatalogService(db)
    return service.create_service(service_data)

@router.put("/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: int,
    service_data: ServiceUpdate,
    db: Session = Depends(get_db)
):
    """Actualización parcial de un servicio"""
    service = ServiceCatalogService(db)
    return service.update_service(service_id, service_data)

@router.delete("/{service_id}", response_model=MessageResponse)
def delete_service(service_id: int, db: Session = Depends(get_db)):
    service = ServiceCatalogService(db)
    service.delete_service(service_id)
    return {"message": "Service deleted successfully"}

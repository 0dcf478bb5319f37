# app/modules/services/service.py
import logging
from typing import List
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.shared.database.models import Service
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)

class ServiceCatalogService:
    """CRUD de servicios vendibles. Los servicios nunca tocan stock"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = ServiceRepository(db)

    def list_services(self) -> List[Service]:
        return self.repository.get_all()

    def create_service(self, data: ServiceCreate) -> Service:
        try:
            service = self.repository.create({
                "service_name": data.service_name,
                "price": data.price,
                "freebies": data.freebies or []
            })
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"✅ Servicio '{service.service_name}' creado")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate) -> Service:
        service = self.repository.get_by_id(service_id)
        if not service:
            raise NotFoundError("Service not found")

        try:
            return self.repository.update(service, data.model_dump(exclude_none=True))
        except Exception:
            self.db.rollback()
            raise

    def delete_service(self, service_id: int):
        service = self.repository.get_by_id(service_id)
        if not service:
            raise NotFoundError("Service not found")

        try:
            self.repository.delete(service)
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Servicio {service_id} eliminado")

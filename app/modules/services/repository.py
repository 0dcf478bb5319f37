# app/modules/services/repository.py
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import asc

from app.shared.database.models import Service

class ServiceRepository:
    """Acceso a datos del catálogo de servicios"""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[Service]:
        return self.db.query(Service).order_by(asc(Service.service_name)).all()

    def get_by_id(self, service_id: int) -> Optional[Service]:
        return self.db.query(Service).filter(Service.id == service_id).first()

    def create(self, service_data: dict) -> Service:
        service = Service(**service_data)
        self.db.add(service)
        self.db.commit()
        self.db.refresh(service)
        return service

    def update(self, service: Service, fields: dict) -> Service:
        for field, value in fields.items():
            setattr(service, field, value)
        self.db.commit()
        self.db.refresh(service)
        return service

    def delete(self, service: Service):
        self.db.delete(service)
        self.db.commit()

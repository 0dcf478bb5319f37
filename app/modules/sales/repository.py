# app/modules/sales/repository.py
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

from app.core.locking import lock_for_update
from app.shared.database.models import OpenSale, ClosedSale

class SalesRepository:
    """
    Repositorio de ventas abiertas y cerradas.

    Igual que el inventario, hace flush y deja el commit al servicio.
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== VENTAS ABIERTAS ====================

    def get_open_sale(self, sale_id: int, for_update: bool = False) -> Optional[OpenSale]:
        query = self.db.query(OpenSale).filter(OpenSale.id == sale_id)
        if for_update:
            query = lock_for_update(query)
        return query.first()

    def list_open_sales(
        self,
        lowdate: Optional[datetime] = None,
        highdate: Optional[datetime] = None
    ) -> List[OpenSale]:
        """Ventas abiertas filtradas por fecha de creación, más recientes primero"""
        query = self.db.query(OpenSale)
        if lowdate:
            query = query.filter(OpenSale.created_at >= lowdate)
        if highdate:
            query = query.filter(OpenSale.created_at <= highdate)
        return query.order_by(desc(OpenSale.created_at), desc(OpenSale.id)).all()

    def create_open_sale(
        self,
        invoice_number: str,
        items: List[Dict[str, Any]],
        created_at: datetime
    ) -> OpenSale:
        sale = OpenSale(
            invoice_number=invoice_number,
            items=items,
            created_at=created_at,
            paid_at=None,
            paid_using=None
        )
        self.db.add(sale)
        self.db.flush()
        return sale

    def update_open_sale_items(self, sale: OpenSale, items: List[Dict[str, Any]]) -> OpenSale:
        """Reemplazar la lista de líneas completa (nunca se mezcla)"""
        sale.items = items
        self.db.flush()
        return sale

    # ==================== VENTAS CERRADAS ====================

    def get_closed_sale(self, sale_id: int, for_update: bool = False) -> Optional[ClosedSale]:
        query = self.db.query(ClosedSale).filter(ClosedSale.id == sale_id)
        if for_update:
            query = lock_for_update(query)
        return query.first()

    def list_closed_sales(
        self,
        lowdate: Optional[datetime] = None,
        highdate: Optional[datetime] = None
    ) -> List[ClosedSale]:
        """Ventas cerradas filtradas por fecha de pago, más recientes primero"""
        query = self.db.query(ClosedSale)
        if lowdate:
            query = query.filter(ClosedSale.paid_at >= lowdate)
        if highdate:
            query = query.filter(ClosedSale.paid_at <= highdate)
        return query.order_by(desc(ClosedSale.paid_at), desc(ClosedSale.id)).all()

    def create_closed_sale(
        self,
        invoice_number: str,
        items: List[Dict[str, Any]],
        created_at: datetime,
        paid_at: datetime,
        paid_using: str
    ) -> ClosedSale:
        sale = ClosedSale(
            invoice_number=invoice_number,
            items=items,
            created_at=created_at,
            paid_at=paid_at,
            paid_using=paid_using
        )
        self.db.add(sale)
        self.db.flush()
        return sale

    # ==================== COMUNES ====================

    def invoice_exists(self, invoice_number: str) -> bool:
        """La factura existe en cualquiera de las dos tablas"""
        for model in (OpenSale, ClosedSale):
            found = self.db.query(model.id).filter(model.invoice_number == invoice_number).first()
            if found:
                return True
        return False

    def delete(self, sale):
        self.db.delete(sale)
        self.db.flush()

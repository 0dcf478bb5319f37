# app/modules/inventory/service.py
import logging
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.core.locking import KeyedLockRegistry, item_keys, stock_locks
from app.shared.database.models import InventoryItem
from .repository import InventoryRepository
from .schemas import InventoryItemUpsert, InventoryItemUpdate

logger = logging.getLogger(__name__)

class InventoryService:
    """
    Servicio de inventario: listado, alta/reabastecimiento por nombre,
    edición y borrado de items
    """

    def __init__(self, db: Session, locks: Optional[KeyedLockRegistry] = None):
        self.db = db
        self.locks = locks or stock_locks
        self.repository = InventoryRepository(db)

    def list_items(self) -> List[InventoryItem]:
        return self.repository.get_all()

    def upsert_item(self, data: InventoryItemUpsert) -> Tuple[InventoryItem, bool]:
        """Crear el item o sumar stock y sobrescribir precio si ya existe"""
        with self.locks.hold(item_keys([data.item_name])):
            try:
                item, created = self.repository.upsert(
                    item_name=data.item_name,
                    price=data.price,
                    stock_increment=data.stock,
                    classification=data.item_classification
                )
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(item)
        if created:
            logger.info(f"✅ Item '{item.item_name}' creado con stock {item.stock}")
        else:
            logger.info(f"Item '{item.item_name}' reabastecido (+{data.stock or 0}), stock {item.stock}")
        return item, created

    def update_item(self, item_id: int, data: InventoryItemUpdate) -> InventoryItem:
        """Actualización parcial; solo se aplican los campos informados"""
        item = self.repository.get_by_id(item_id)
        if not item:
            raise NotFoundError("Item not found")

        fields = data.model_dump(exclude_none=True)
        keys = {item.item_name}
        if "item_name" in fields:
            keys.add(fields["item_name"])

        with self.locks.hold(item_keys(keys)):
            try:
                item = self.repository.lock_by_names([item.item_name]).get(item.item_name, item)
                self.repository.update(item, fields)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(item)
        logger.info(f"Item {item_id} actualizado: {sorted(fields)}")
        return item

    def delete_item(self, item_id: int):
        item = self.repository.get_by_id(item_id)
        if not item:
            raise NotFoundError("Item not found")

        with self.locks.hold(item_keys([item.item_name])):
            try:
                self.repository.delete(item)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        logger.info(f"Item {item_id} eliminado del inventario")

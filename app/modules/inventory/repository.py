# app/modules/inventory/repository.py
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import asc

from app.core.exceptions import InsufficientStockError, NotFoundError
from app.core.locking import lock_for_update
from app.shared.database.models import InventoryItem

class InventoryRepository:
    """
    Almacén de inventario: una fila por item_name.

    Los métodos hacen flush pero no commit; la transacción pertenece al
    servicio que los llama.
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== LECTURA ====================

    def get_all(self) -> List[InventoryItem]:
        return self.db.query(InventoryItem).order_by(asc(InventoryItem.item_name)).all()

    def get_by_id(self, item_id: int) -> Optional[InventoryItem]:
        return self.db.query(InventoryItem).filter(InventoryItem.id == item_id).first()

    def get_by_name(self, item_name: str) -> Optional[InventoryItem]:
        """Buscar item por nombre exacto (sensible a mayúsculas)"""
        return self.db.query(InventoryItem).filter(InventoryItem.item_name == item_name).first()

    def lock_by_names(self, item_names: Iterable[str]) -> Dict[str, InventoryItem]:
        """Cargar y bloquear filas por nombre, en orden, con datos frescos"""
        names = sorted(set(item_names))
        if not names:
            return {}

        query = self.db.query(InventoryItem)\
            .filter(InventoryItem.item_name.in_(names))\
            .order_by(asc(InventoryItem.item_name))

        return {item.item_name: item for item in lock_for_update(query).all()}

    # ==================== STOCK ====================

    def apply_delta(
        self,
        item_name: str,
        delta: int,
        item: Optional[InventoryItem] = None
    ) -> int:
        """
        Sumar delta al stock de un item y devolver el stock resultante.

        Falla con NotFoundError si el item no existe y con
        InsufficientStockError si el stock quedaría negativo.
        """
        if item is None:
            item = self.get_by_name(item_name)
        if item is None:
            raise NotFoundError(f"Item {item_name} not found in inventory")

        new_stock = item.stock + delta
        if new_stock < 0:
            raise InsufficientStockError(item_name, requested=-delta, available=item.stock)

        item.stock = new_stock
        self.db.flush()
        return new_stock

    def upsert(
        self,
        item_name: str,
        price: Decimal,
        stock_increment: Optional[int] = None,
        classification: Optional[str] = None
    ) -> Tuple[InventoryItem, bool]:
        """
        Crear o reabastecer por nombre.

        Existente: precio sobrescrito, stock += incremento, clasificación
        solo si viene informada. Nuevo: stock inicial = incremento (0 por defecto).
        Devuelve (item, created).
        """
        increment = stock_increment or 0
        item = self.lock_by_names([item_name]).get(item_name)

        if item is not None:
            if item.stock + increment < 0:
                raise InsufficientStockError(item_name, requested=-increment, available=item.stock)
            item.stock = item.stock + increment
            item.price = price
            if classification is not None:
                item.item_classification = classification
            self.db.flush()
            return item, False

        item = InventoryItem(
            item_name=item_name,
            price=price,
            stock=increment,
            item_classification=classification
        )
        self.db.add(item)
        self.db.flush()
        return item, True

    # ==================== CRUD ====================

    def update(self, item: InventoryItem, fields: dict) -> InventoryItem:
        for field, value in fields.items():
            setattr(item, field, value)
        self.db.flush()
        return item

    def delete(self, item: InventoryItem):
        self.db.delete(item)
        self.db.flush()

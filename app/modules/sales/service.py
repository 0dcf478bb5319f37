# app/modules/sales/service.py
import copy
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidInputError, NotFoundError
from app.core.locking import KeyedLockRegistry, item_keys, stock_locks
from app.modules.inventory.repository import InventoryRepository
from app.shared.database.models import OpenSale, ClosedSale
from .reconciliation import StockReconciler
from .repository import SalesRepository
from .schemas import parse_line_items, snapshot_line_items

logger = logging.getLogger(__name__)

def open_sale_key(sale_id: int) -> str:
    return f"open-sale:{sale_id}"

def closed_sale_key(sale_id: int) -> str:
    return f"closed-sale:{sale_id}"

class SalesService:
    """
    Ciclo de vida de una venta: crear, editar, pagar, revertir y eliminar.

    Cada operación que afecta stock corre en una sola transacción y dentro
    de una sección crítica por venta y por items afectados: o se aplican
    todos los deltas y el cambio de la venta, o nada.
    """

    def __init__(self, db: Session, locks: Optional[KeyedLockRegistry] = None):
        self.db = db
        self.locks = locks or stock_locks
        self.repository = SalesRepository(db)
        self.inventory = InventoryRepository(db)
        self.reconciler = StockReconciler(self.inventory)

    @contextmanager
    def _transaction(self):
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # ==================== CONSULTAS ====================

    def list_open_sales(
        self,
        lowdate: Optional[datetime] = None,
        highdate: Optional[datetime] = None
    ) -> List[OpenSale]:
        return self.repository.list_open_sales(lowdate, highdate)

    def list_closed_sales(
        self,
        lowdate: Optional[datetime] = None,
        highdate: Optional[datetime] = None
    ) -> List[ClosedSale]:
        return self.repository.list_closed_sales(lowdate, highdate)

    # ==================== CREAR ====================

    def create_open_sale(self, invoice_number: Optional[str], items: Optional[List[Any]]) -> OpenSale:
        """
        Crear venta abierta descontando stock de sus líneas `item`.

        Falla con InvalidInputError si faltan factura o líneas, o si la
        factura ya existe; con InsufficientStockError / UnknownCatalogItemError
        si el stock no alcanza (sin insertar nada).
        """
        if not invoice_number or not items:
            raise InvalidInputError("Invoice number and items are required")

        lines = parse_line_items(items)
        plan = self.reconciler.plan([], lines)

        keys = [f"invoice:{invoice_number}"] + item_keys(plan.item_names)
        with self.locks.hold(keys):
            with self._transaction():
                if self.repository.invoice_exists(invoice_number):
                    raise InvalidInputError(f"Invoice {invoice_number} already exists")

                self.reconciler.apply(plan)
                sale = self.repository.create_open_sale(
                    invoice_number=invoice_number,
                    items=snapshot_line_items(items),
                    created_at=datetime.now()
                )

        logger.info(f"✅ Venta abierta {sale.invoice_number} creada (id {sale.id}), deltas {plan.net_deltas()}")
        return sale

    # ==================== EDITAR ====================

    def update_open_sale(self, sale_id: int, items: Optional[List[Any]]) -> OpenSale:
        """
        Reemplazar las líneas de una venta abierta.

        Repone las líneas anteriores y descuenta las nuevas en un solo
        paso validado; si falla, ni el inventario ni la venta cambian.
        Una lista vacía repone todo y deja la venta sin líneas.
        """
        if items is None:
            raise InvalidInputError("Items are required")
        lines = parse_line_items(items)

        with self.locks.hold([open_sale_key(sale_id)]):
            sale = self.repository.get_open_sale(sale_id, for_update=True)
            if not sale:
                raise NotFoundError("Sale not found")

            old_lines = parse_line_items(sale.items)
            plan = self.reconciler.plan(old_lines, lines)

            with self.locks.hold(item_keys(plan.item_names)):
                with self._transaction():
                    self.reconciler.apply(plan)
                    self.repository.update_open_sale_items(sale, snapshot_line_items(items))

        logger.info(f"Venta abierta {sale.invoice_number} editada, deltas {plan.net_deltas()}")
        return sale

    # ==================== ELIMINAR ====================

    def delete_open_sale(self, sale_id: int):
        """Eliminar venta abierta reponiendo el stock de sus líneas `item`"""
        with self.locks.hold([open_sale_key(sale_id)]):
            sale = self.repository.get_open_sale(sale_id, for_update=True)
            if not sale:
                raise NotFoundError("Sale not found")

            plan = self.reconciler.plan(parse_line_items(sale.items), [])
            invoice_number = sale.invoice_number

            with self.locks.hold(item_keys(plan.item_names)):
                with self._transaction():
                    self.reconciler.apply(plan)
                    self.repository.delete(sale)

        logger.info(f"Venta abierta {invoice_number} eliminada, stock repuesto {plan.restocks}")

    def delete_closed_sale(self, sale_id: int):
        """
        Eliminar venta cerrada SIN reponer stock.

        NOTA: asimetría intencional con delete_open_sale; lo pagado se
        considera consumido. Ver DESIGN.md.
        """
        with self.locks.hold([closed_sale_key(sale_id)]):
            sale = self.repository.get_closed_sale(sale_id, for_update=True)
            if not sale:
                raise NotFoundError("Sale not found")

            invoice_number = sale.invoice_number
            with self._transaction():
                self.repository.delete(sale)

        logger.info(f"Venta cerrada {invoice_number} eliminada (sin reposición de stock)")

    # ==================== PAGAR / REVERTIR ====================

    def pay_sale(self, sale_id: int, paid_using: Optional[str]) -> Dict[str, Any]:
        """Mover venta abierta a cerradas sellando paid_at y paid_using"""
        if not paid_using or not paid_using.strip():
            raise InvalidInputError("Payment method is required")

        with self.locks.hold([open_sale_key(sale_id)]):
            sale = self.repository.get_open_sale(sale_id, for_update=True)
            if not sale:
                raise NotFoundError("Sale not found")

            paid_at = datetime.now()
            with self._transaction():
                closed = self.repository.create_closed_sale(
                    invoice_number=sale.invoice_number,
                    items=copy.deepcopy(sale.items),
                    created_at=sale.created_at,
                    paid_at=paid_at,
                    paid_using=paid_using
                )
                self.repository.delete(sale)

        logger.info(f"💰 Venta {closed.invoice_number} pagada con {paid_using} (cerrada id {closed.id})")
        return {
            "message": "Sale moved to closed",
            "paid_at": paid_at,
            "paid_using": paid_using,
            "closed_sale_id": closed.id
        }

    def revert_sale(self, sale_id: int) -> OpenSale:
        """Devolver venta cerrada a abiertas limpiando datos de pago"""
        with self.locks.hold([closed_sale_key(sale_id)]):
            sale = self.repository.get_closed_sale(sale_id, for_update=True)
            if not sale:
                raise NotFoundError("Sale not found")

            with self._transaction():
                reopened = self.repository.create_open_sale(
                    invoice_number=sale.invoice_number,
                    items=copy.deepcopy(sale.items),
                    created_at=sale.created_at
                )
                self.repository.delete(sale)

        logger.info(f"↩️ Venta {reopened.invoice_number} revertida a abierta (id {reopened.id})")
        return reopened

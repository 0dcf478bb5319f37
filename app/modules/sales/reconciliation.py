# app/modules/sales/reconciliation.py
"""
Reconciliación de stock entre una lista de líneas anterior y una nueva.

Pasos:
1. Reponer (+qty) cada línea `item` de la lista anterior
2. Descontar (-qty) cada línea `item` de la lista nueva
3. Validar, en orden por nombre, que cada item descontado exista y que
   stock actual + reposición >= descuento. Si algo falla no se toca nada
4. Aplicar todas las reposiciones y luego todos los descuentos

Las líneas `service` se ignoran por completo. Un mismo item repetido en
una lista se suma.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Union

from app.core.exceptions import InsufficientStockError, UnknownCatalogItemError
from app.modules.inventory.repository import InventoryRepository
from .schemas import ItemLine, ServiceLine

logger = logging.getLogger(__name__)

SaleLine = Union[ItemLine, ServiceLine]

def item_quantities(lines: Iterable[SaleLine]) -> Dict[str, int]:
    """Cantidad total por item_name considerando solo líneas de tipo item"""
    totals: Counter = Counter()
    for line in lines:
        if isinstance(line, ItemLine):
            totals[line.item_name] += line.qty
    return dict(totals)

@dataclass
class StockPlan:
    """Deltas calculados para una transición de líneas"""
    restocks: Dict[str, int] = field(default_factory=dict)
    deductions: Dict[str, int] = field(default_factory=dict)

    @property
    def item_names(self) -> List[str]:
        return sorted(set(self.restocks) | set(self.deductions))

    def net_deltas(self) -> Dict[str, int]:
        return {
            name: self.restocks.get(name, 0) - self.deductions.get(name, 0)
            for name in self.item_names
        }

    def is_empty(self) -> bool:
        return not self.restocks and not self.deductions

class StockReconciler:
    """Motor de reconciliación sobre el almacén de inventario"""

    def __init__(self, inventory: InventoryRepository):
        self.inventory = inventory

    @staticmethod
    def plan(old_lines: Iterable[SaleLine], new_lines: Iterable[SaleLine]) -> StockPlan:
        """Calcular reposiciones y descuentos sin tocar la base de datos"""
        return StockPlan(
            restocks=item_quantities(old_lines),
            deductions=item_quantities(new_lines)
        )

    def apply(self, plan: StockPlan) -> Dict[str, int]:
        """
        Validar y aplicar el plan dentro de la transacción actual.

        El llamador debe tener las claves de plan.item_names bloqueadas.
        Devuelve el stock final por item afectado.
        """
        if plan.is_empty():
            return {}

        rows = self.inventory.lock_by_names(plan.item_names)

        # Validación: nada se modifica hasta que todo el plan es viable
        for name in sorted(plan.deductions):
            required = plan.deductions[name]
            row = rows.get(name)
            if row is None:
                logger.warning(f"Reconciliación rechazada: '{name}' no existe en inventario")
                raise UnknownCatalogItemError(name)

            available = row.stock + plan.restocks.get(name, 0)
            if available < required:
                logger.warning(
                    f"Reconciliación rechazada: stock insuficiente para '{name}' "
                    f"(requerido {required}, disponible {available})"
                )
                raise InsufficientStockError(name, requested=required, available=available)

        # Aplicación: primero reposiciones, luego descuentos
        for name in sorted(plan.restocks):
            row = rows.get(name)
            if row is None:
                logger.warning(f"Reposición omitida: '{name}' ya no existe en inventario")
                continue
            self.inventory.apply_delta(name, plan.restocks[name], item=row)

        for name in sorted(plan.deductions):
            self.inventory.apply_delta(name, -plan.deductions[name], item=rows[name])

        final_stock = {name: rows[name].stock for name in plan.item_names if name in rows}
        logger.debug(f"Deltas aplicados {plan.net_deltas()} -> stock {final_stock}")
        return final_stock

    def reconcile(self, old_lines: Iterable[SaleLine], new_lines: Iterable[SaleLine]) -> Dict[str, int]:
        """plan + apply en un solo paso"""
        return self.apply(self.plan(old_lines, new_lines))

from sqlalchemy import Column, Integer, String, DateTime, Numeric, JSON, CheckConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from app.config.database import Base

# JSONB en PostgreSQL, JSON genérico en SQLite (tests / desarrollo local)
JSONType = JSON().with_variant(JSONB(), "postgresql")

class TimestampMixin:
    """Mixin para timestamp de creación"""
    created_at = Column(DateTime, server_default=func.current_timestamp())

# ===== CATÁLOGO =====

class InventoryItem(Base, TimestampMixin):
    """Item de inventario con stock. Identidad por item_name"""
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, index=True)
    item_name = Column(String(255), unique=True, nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    item_classification = Column(String(100))

    __table_args__ = (
        CheckConstraint('stock >= 0', name='inventory_stock_non_negative'),
    )

class Service(Base, TimestampMixin):
    """Servicio vendible (sin stock)"""
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    service_name = Column(String(255), unique=True, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    freebies = Column(JSONType, nullable=False, default=list)

# ===== VENTAS =====

class SaleRecordMixin:
    """
    Columnas comunes de open_sales y closed_sales.

    items guarda la lista de líneas tal como se validó al entrar
    (snapshot de precios incluido), identificando items por nombre.
    """
    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(255), unique=True, nullable=False)
    items = Column(JSONType, nullable=False)

class OpenSale(Base, SaleRecordMixin):
    """Venta abierta: stock ya descontado, pendiente de pago"""
    __tablename__ = "open_sales"

    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    paid_at = Column(DateTime, nullable=True)
    paid_using = Column(String(50), nullable=True)

class ClosedSale(Base, SaleRecordMixin):
    """Venta pagada"""
    __tablename__ = "closed_sales"

    created_at = Column(DateTime, nullable=False)
    paid_at = Column(DateTime, nullable=False)
    paid_using = Column(String(50), nullable=False)

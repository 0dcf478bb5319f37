from datetime import datetime, timedelta

import pytest

from app.core.exceptions import (
    InsufficientStockError, InvalidInputError, NotFoundError, UnknownCatalogItemError
)
from app.modules.sales.service import SalesService
from app.shared.database.models import ClosedSale, OpenSale


def widget(qty, price=10.0):
    return {"type": "item", "item_name": "Widget", "qty": qty, "price": price}


def install(price=25.0):
    return {"type": "service", "service_name": "Install", "price": price}


@pytest.fixture
def sales(db_session, locks):
    return SalesService(db_session, locks=locks)


def test_create_rejected_when_stock_is_short(sales, db_session, add_inventory, stock_of):
    add_inventory("Widget", 3)

    with pytest.raises(InsufficientStockError):
        sales.create_open_sale("INV-1", [widget(5)])

    assert stock_of("Widget") == 3
    assert db_session.query(OpenSale).count() == 0


def test_create_then_edit_adjusts_by_difference(sales, add_inventory, stock_of):
    add_inventory("Widget", 10)

    sale = sales.create_open_sale("INV-1", [widget(5)])
    assert stock_of("Widget") == 5

    sales.update_open_sale(sale.id, [widget(8)])
    assert stock_of("Widget") == 2


def test_edit_rejected_keeps_sale_and_stock(sales, db_session, add_inventory, stock_of):
    add_inventory("Widget", 10)
    sale = sales.create_open_sale("INV-1", [widget(5)])

    with pytest.raises(InsufficientStockError):
        sales.update_open_sale(sale.id, [widget(16)])

    assert stock_of("Widget") == 5
    assert db_session.get(OpenSale, sale.id).items == [widget(5)]


def test_edit_can_swap_items(sales, add_inventory, stock_of):
    add_inventory("Widget", 4)
    add_inventory("Gadget", 4)
    sale = sales.create_open_sale("INV-1", [widget(3)])

    sales.update_open_sale(sale.id, [{"type": "item", "item_name": "Gadget", "qty": 2}, install()])

    assert stock_of("Widget") == 4
    assert stock_of("Gadget") == 2


def test_create_stores_line_snapshot(sales, add_inventory):
    add_inventory("Widget", 10, price="10.00")

    sale = sales.create_open_sale("INV-1", [widget(2, price=7.5), install()])

    assert sale.items == [widget(2, price=7.5), install()]
    assert sale.paid_at is None
    assert sale.paid_using is None
    assert sale.created_at is not None


def test_create_with_unknown_item_is_rejected(sales, add_inventory, stock_of):
    add_inventory("Widget", 10)

    with pytest.raises(UnknownCatalogItemError):
        sales.create_open_sale("INV-1", [widget(1), {"type": "item", "item_name": "Ghost", "qty": 1}])

    assert stock_of("Widget") == 10


def test_create_requires_invoice_and_items(sales):
    with pytest.raises(InvalidInputError):
        sales.create_open_sale("", [widget(1)])
    with pytest.raises(InvalidInputError):
        sales.create_open_sale("INV-1", [])


def test_create_rejects_unknown_line_type(sales):
    with pytest.raises(InvalidInputError):
        sales.create_open_sale("INV-1", [{"type": "bundle", "name": "x"}])


def test_duplicate_invoice_is_rejected(sales, add_inventory, stock_of):
    add_inventory("Widget", 10)
    sales.create_open_sale("INV-1", [widget(1)])

    with pytest.raises(InvalidInputError):
        sales.create_open_sale("INV-1", [widget(1)])

    assert stock_of("Widget") == 9


def test_invoice_of_closed_sale_cannot_be_reused(sales, add_inventory):
    add_inventory("Widget", 10)
    sale = sales.create_open_sale("INV-1", [widget(1)])
    sales.pay_sale(sale.id, "cash")

    with pytest.raises(InvalidInputError):
        sales.create_open_sale("INV-1", [widget(1)])


def test_delete_open_sale_restocks(sales, db_session, add_inventory, stock_of):
    add_inventory("Widget", 10)
    sale = sales.create_open_sale("INV-1", [widget(3), install()])
    assert stock_of("Widget") == 7

    sales.delete_open_sale(sale.id)

    assert stock_of("Widget") == 10
    assert db_session.query(OpenSale).count() == 0


def test_pay_moves_sale_without_touching_stock(sales, db_session, add_inventory, stock_of):
    add_inventory("Widget", 10)
    sale = sales.create_open_sale("INV-1", [widget(4)])
    created_at = sale.created_at

    result = sales.pay_sale(sale.id, "card")

    assert result["message"] == "Sale moved to closed"
    assert result["paid_using"] == "card"
    closed = db_session.get(ClosedSale, result["closed_sale_id"])
    assert closed.invoice_number == "INV-1"
    assert closed.items == [widget(4)]
    assert closed.created_at == created_at
    assert closed.paid_at == result["paid_at"]
    assert db_session.query(OpenSale).count() == 0
    assert stock_of("Widget") == 6


def test_pay_then_revert_round_trip(sales, db_session, add_inventory, stock_of):
    add_inventory("Widget", 10)
    sale = sales.create_open_sale("INV-1", [widget(4), install()])
    created_at = sale.created_at

    result = sales.pay_sale(sale.id, "cash")
    reopened = sales.revert_sale(result["closed_sale_id"])

    assert reopened.invoice_number == "INV-1"
    assert reopened.items == [widget(4), install()]
    assert reopened.created_at == created_at
    assert reopened.paid_at is None
    assert reopened.paid_using is None
    assert db_session.query(ClosedSale).count() == 0
    assert stock_of("Widget") == 6


def test_pay_requires_payment_method(sales, add_inventory):
    add_inventory("Widget", 10)
    sale = sales.create_open_sale("INV-1", [widget(1)])

    with pytest.raises(InvalidInputError):
        sales.pay_sale(sale.id, None)
    with pytest.raises(InvalidInputError):
        sales.pay_sale(sale.id, "   ")


def test_delete_closed_sale_does_not_restock(sales, db_session, add_inventory, stock_of):
    add_inventory("Widget", 10)
    sale = sales.create_open_sale("INV-1", [widget(4)])
    result = sales.pay_sale(sale.id, "cash")

    sales.delete_closed_sale(result["closed_sale_id"])

    assert stock_of("Widget") == 6
    assert db_session.query(ClosedSale).count() == 0


def test_unknown_ids_raise_not_found(sales):
    with pytest.raises(NotFoundError):
        sales.update_open_sale(42, [install()])
    with pytest.raises(NotFoundError):
        sales.delete_open_sale(42)
    with pytest.raises(NotFoundError):
        sales.pay_sale(42, "cash")
    with pytest.raises(NotFoundError):
        sales.revert_sale(42)
    with pytest.raises(NotFoundError):
        sales.delete_closed_sale(42)


def test_service_only_sale_never_reads_inventory(sales, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("inventory should not be touched")

    monkeypatch.setattr(sales.inventory, "lock_by_names", fail)

    sale = sales.create_open_sale("SRV-1", [install()])
    sales.update_open_sale(sale.id, [install(30.0)])
    result = sales.pay_sale(sale.id, "cash")
    reopened = sales.revert_sale(result["closed_sale_id"])
    sales.delete_open_sale(reopened.id)


def test_locks_are_released_after_failures(sales, locks, add_inventory):
    add_inventory("Widget", 1)

    with pytest.raises(InsufficientStockError):
        sales.create_open_sale("INV-1", [widget(2)])

    assert locks.active_keys() == []


def test_list_open_sales_filters_by_created_at(sales, db_session):
    now = datetime.now()
    old = sales.create_open_sale("OLD", [install()])
    recent = sales.create_open_sale("NEW", [install()])
    old.created_at = now - timedelta(days=10)
    recent.created_at = now - timedelta(days=1)
    db_session.commit()

    assert [s.invoice_number for s in sales.list_open_sales()] == ["NEW", "OLD"]
    assert [s.invoice_number for s in sales.list_open_sales(lowdate=now - timedelta(days=5))] == ["NEW"]
    assert [s.invoice_number for s in sales.list_open_sales(highdate=now - timedelta(days=5))] == ["OLD"]
    assert sales.list_open_sales(lowdate=now) == []


def test_list_closed_sales_filters_by_paid_at(sales, db_session):
    now = datetime.now()
    first = sales.pay_sale(sales.create_open_sale("A", [install()]).id, "cash")
    second = sales.pay_sale(sales.create_open_sale("B", [install()]).id, "card")
    db_session.get(ClosedSale, first["closed_sale_id"]).paid_at = now - timedelta(days=3)
    db_session.get(ClosedSale, second["closed_sale_id"]).paid_at = now - timedelta(hours=1)
    db_session.commit()

    assert [s.invoice_number for s in sales.list_closed_sales()] == ["B", "A"]
    assert [s.invoice_number for s in sales.list_closed_sales(lowdate=now - timedelta(days=1))] == ["B"]
    assert [
        s.invoice_number
        for s in sales.list_closed_sales(now - timedelta(days=4), now - timedelta(days=2))
    ] == ["A"]


def test_edit_to_empty_list_restocks_and_clears_lines(sales, db_session, add_inventory, stock_of):
    add_inventory("Widget", 10)
    sale = sales.create_open_sale("INV-1", [widget(3), install()])

    sales.update_open_sale(sale.id, [])

    assert stock_of("Widget") == 10
    assert db_session.get(OpenSale, sale.id).items == []


def test_stored_lines_keep_client_values(sales, add_inventory):
    add_inventory("Widget", 10)
    lines = [{"type": "item", "item_name": "Widget", "qty": 1, "price": "12.50", "note": None}]

    sale = sales.create_open_sale("INV-1", lines)
    lines[0]["qty"] = 99

    assert sale.items == [{"type": "item", "item_name": "Widget", "qty": 1, "price": "12.50", "note": None}]


def test_mixed_sequence_conserves_stock(sales, db_session, add_inventory, stock_of):
    add_inventory("Widget", 20)
    add_inventory("Gadget", 10)

    first = sales.create_open_sale("A", [widget(4), {"type": "item", "item_name": "Gadget", "qty": 2}])
    second = sales.create_open_sale("B", [widget(3), install()])
    third = sales.create_open_sale("C", [{"type": "item", "item_name": "Gadget", "qty": 5}])
    sales.update_open_sale(first.id, [widget(1), widget(2), {"type": "item", "item_name": "Gadget", "qty": 4}])
    with pytest.raises(InsufficientStockError):
        sales.update_open_sale(third.id, [{"type": "item", "item_name": "Gadget", "qty": 7}])
    sales.delete_open_sale(second.id)
    sales.create_open_sale("D", [widget(6)])
    paid = sales.pay_sale(third.id, "cash")
    sales.revert_sale(paid["closed_sale_id"])

    active = {"Widget": 0, "Gadget": 0}
    for sale in db_session.query(OpenSale).all():
        for line in sale.items:
            if line["type"] == "item":
                active[line["item_name"]] += line["qty"]

    assert active == {"Widget": 9, "Gadget": 9}
    assert stock_of("Widget") == 20 - active["Widget"]
    assert stock_of("Gadget") == 10 - active["Gadget"]

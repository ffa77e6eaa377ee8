from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from core import errors
from core.services import grocery
from notifications.models import Notification
from sales.models import GroceryReturn, GrocerySale
from stock.models import GroceryBatch

pytestmark = pytest.mark.django_db


def _batch(item, branch, qty, expiry, added=date(2024, 1, 1)):
    return GroceryBatch.objects.create(item=item, branch=branch, quantity=qty, remaining=qty,
                                       expiry_date=expiry, added_date=added)


def test_add_grocery_stock_creates_batch(branch_x, milk):
    batch = grocery.add_grocery_stock({
        "itemCode": milk.code,
        "branch": "BranchX",
        "quantity": "12,5",
        "expiryDate": "2030-01-01",
        "date": "2029-12-01",
    })
    assert batch.quantity == Decimal("12.500")
    assert batch.remaining == batch.quantity
    assert batch.batch_id.startswith("B")
    assert batch.added_date == date(2029, 12, 1)


def test_add_grocery_stock_triggers_expiry_scan(branch_x, milk):
    soon = timezone.localdate() + timedelta(days=1)
    grocery.add_grocery_stock({
        "itemCode": milk.code, "branch": "BranchX", "quantity": 3, "expiryDate": soon.isoformat(),
    })
    notif = Notification.objects.get(type=Notification.TYPE_EXPIRY)
    assert notif.message.endswith(f"Expiry date: {soon.isoformat()}")
    assert "in 1 day at BranchX" in notif.message


def test_add_grocery_stock_survives_scan_failure(branch_x, milk, monkeypatch):
    def boom(today):
        raise RuntimeError("db down")

    monkeypatch.setattr("core.services.expiry._scan", boom)
    batch = grocery.add_grocery_stock({
        "itemCode": milk.code, "branch": "BranchX", "quantity": 1, "expiryDate": "2030-01-01",
    })
    assert GroceryBatch.objects.filter(pk=batch.pk).exists()


def test_sale_consumes_fifo_and_defaults_total(branch_x, milk):
    first = _batch(milk, branch_x, 2, date(2030, 1, 5))
    second = _batch(milk, branch_x, 5, date(2030, 1, 9))

    sale = grocery.record_grocery_sale({
        "itemCode": milk.code, "branch": "BranchX", "date": "2024-01-02", "soldQty": 3,
    })

    first.refresh_from_db()
    second.refresh_from_db()
    assert first.remaining == 0
    assert second.remaining == 4
    assert sale.total_cash == Decimal("7.50")
    assert sale.item_name == "Milk"


def test_fifo_tie_breaks_on_added_date(branch_x, milk):
    newer = _batch(milk, branch_x, 2, date(2030, 1, 5), added=date(2024, 1, 3))
    older = _batch(milk, branch_x, 2, date(2030, 1, 5), added=date(2024, 1, 1))

    grocery.record_grocery_sale({"itemCode": milk.code, "branch": "BranchX", "date": "2024-01-04", "soldQty": 1})

    older.refresh_from_db()
    newer.refresh_from_db()
    assert older.remaining == 1
    assert newer.remaining == 2


def test_sale_beyond_stock_fails_cleanly(branch_x, milk):
    batch = _batch(milk, branch_x, 2, date(2030, 1, 5))
    with pytest.raises(errors.InsufficientStockError):
        grocery.record_grocery_sale({"itemCode": milk.code, "branch": "BranchX", "date": "2024-01-02", "soldQty": 3})
    batch.refresh_from_db()
    assert batch.remaining == 2
    assert not GrocerySale.objects.exists()


def test_return_and_complete(branch_x, milk):
    _batch(milk, branch_x, 4, date(2030, 1, 5))
    ret = grocery.record_grocery_return({
        "itemCode": milk.code, "branch": "BranchX", "date": "2024-01-02",
        "returnedQty": 1, "completed": False,
    })
    assert ret.reason == "waste"
    assert ret.completed is False
    assert grocery.available_quantity(milk, branch_x) == Decimal("3")

    grocery.complete_grocery_return(ret.id)
    assert GroceryReturn.objects.get(pk=ret.id).completed is True

    with pytest.raises(errors.NotFoundError):
        grocery.complete_grocery_return(9999)


def test_update_remaining_records_difference_as_sale(branch_x, milk):
    _batch(milk, branch_x, 4, date(2030, 1, 5))
    _batch(milk, branch_x, 6, date(2030, 1, 7))

    sales = grocery.update_grocery_remaining({
        "branch": "BranchX",
        "date": "2024-01-03",
        "updates": [{"itemCode": milk.code, "newRemaining": 7}],
    })

    assert len(sales) == 1
    assert sales[0].sold_qty == Decimal("3")
    assert sales[0].total_cash == Decimal("7.50")
    assert grocery.available_quantity(milk, branch_x) == Decimal("7")


def test_update_remaining_cannot_increase_stock(branch_x, milk):
    _batch(milk, branch_x, 4, date(2030, 1, 5))
    with pytest.raises(errors.ValidationError):
        grocery.update_grocery_remaining({
            "branch": "BranchX", "updates": [{"itemCode": milk.code, "newRemaining": 5}],
        })


def test_list_sales_by_date_range(branch_x, milk):
    _batch(milk, branch_x, 10, date(2030, 1, 5))
    for d in ("2024-01-01", "2024-01-02", "2024-01-05"):
        grocery.record_grocery_sale({"itemCode": milk.code, "branch": "BranchX", "date": d, "soldQty": 1})

    rows = grocery.list_grocery_sales({"dateFrom": "2024-01-02", "dateTo": "2024-01-04"})
    assert [r["date"] for r in rows] == ["2024-01-02"]

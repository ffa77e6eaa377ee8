import pytest

from core import errors
from core.services import ledger
from notifications.models import Activity
from stock.models import FinishedBatch, StockEntry

pytestmark = pytest.mark.django_db


def _entry(day, branch, item):
    return StockEntry.objects.get(date=day, branch=branch, item=item)


def test_add_stock_upserts_and_accumulates(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    ledger.add_stock(day, "BranchX", bread.code, 5)

    entry = _entry(day, branch_x, bread)
    assert entry.added == 15
    assert entry.available == 15
    assert StockEntry.objects.count() == 1


def test_add_stock_rejects_non_positive_quantity(day, branch_x, bread):
    with pytest.raises(errors.ValidationError):
        ledger.add_stock(day, "BranchX", bread.code, 0)
    assert not StockEntry.objects.exists()


def test_add_stock_rejects_non_normal_item(day, branch_x, milk):
    with pytest.raises(errors.ValidationError):
        ledger.add_stock(day, "BranchX", milk.code, 3)


def test_add_stock_unknown_branch_and_item(day, branch_x, bread):
    with pytest.raises(errors.NotFoundError):
        ledger.add_stock(day, "Nowhere", bread.code, 1)
    with pytest.raises(errors.NotFoundError):
        ledger.add_stock(day, "BranchX", "ITEMNOPE", 1)


def test_add_stock_items_skips_zero_rows(day, branch_x, bread, croissant):
    entries = ledger.add_stock_items(day, "BranchX", [
        {"itemCode": bread.code, "quantity": 4},
        {"itemCode": croissant.code, "quantity": 0},
    ])
    assert len(entries) == 1
    assert not StockEntry.objects.filter(item=croissant).exists()


def test_add_stock_items_is_all_or_nothing(day, branch_x, bread):
    with pytest.raises(errors.NotFoundError):
        ledger.add_stock_items(day, "BranchX", [
            {"itemCode": bread.code, "quantity": 4},
            {"itemCode": "ITEMMISSING", "quantity": 1},
        ])
    assert not StockEntry.objects.exists()


def test_return_within_available(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    entry = ledger.return_stock(day, "BranchX", bread.code, 2)

    assert entry.returned == 2
    assert entry.available == 8
    assert entry.sold == 8


def test_return_more_than_available_fails(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 3)
    with pytest.raises(errors.InsufficientStockError) as exc:
        ledger.return_stock(day, "BranchX", bread.code, 4)
    assert exc.value.message == f"Cannot return 4. Only 3 available for item {bread.code}"
    assert _entry(day, branch_x, bread).returned == 0


def test_return_without_stock_row_fails(day, branch_x, bread):
    with pytest.raises(errors.InsufficientStockError):
        ledger.return_stock(day, "BranchX", bread.code, 1)


def test_finished_batch_blocks_add_and_return(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 5)
    ledger.finish_batch(day, "BranchX")

    with pytest.raises(errors.BatchFinishedError):
        ledger.add_stock(day, "BranchX", bread.code, 1)
    with pytest.raises(errors.ConflictError):
        ledger.return_stock(day, "BranchX", bread.code, 1)
    assert _entry(day, branch_x, bread).added == 5


def test_finish_batch_is_idempotent(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    ledger.return_stock(day, "BranchX", bread.code, 2)

    assert ledger.finish_batch(day, "BranchX") is True
    first = _entry(day, branch_x, bread)
    assert ledger.finish_batch(day, "BranchX") is False
    second = _entry(day, branch_x, bread)

    assert FinishedBatch.objects.filter(date=day, branch=branch_x).count() == 1
    assert (first.added, first.returned, first.sold) == (second.added, second.returned, second.sold)
    assert second.sold == 8


def test_available_never_negative(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 2)
    entry = _entry(day, branch_x, bread)
    entry.transferred = 5
    assert entry.available == 0


def test_list_stock_reports_finished_flag(day, branch_x, bread, croissant):
    ledger.add_stock(day, "BranchX", bread.code, 3)
    ledger.add_stock(day, "BranchX", croissant.code, 1)

    rows, finished = ledger.list_stock(day, "BranchX")
    assert finished is False
    assert [r["itemName"] for r in rows] == ["Bread", "Croissant"]
    assert rows[0]["available"] == 3

    ledger.finish_batch(day, "BranchX")
    _, finished = ledger.list_stock(day, "BranchX")
    assert finished is True


def test_add_and_return_are_logged(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    ledger.return_stock(day, "BranchX", bread.code, 2)

    added = Activity.objects.get(type="stock_added")
    assert added.message == "10 Bread added to BranchX"
    assert added.branch == "BranchX"
    assert added.real_date == day
    assert added.metadata == {"itemCode": bread.code, "quantity": 10, "date": day.isoformat()}

    returned = Activity.objects.get(type="return")
    assert returned.message == "2 Bread returned at BranchX"
    assert returned.metadata["quantity"] == 2


def test_failed_return_leaves_no_activity(day, branch_x, bread):
    with pytest.raises(errors.InsufficientStockError):
        ledger.return_stock(day, "BranchX", bread.code, 1)
    assert not Activity.objects.exists()


def test_finish_batch_logs_revenue_once(day, branch_x, bread, croissant):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    ledger.return_stock(day, "BranchX", bread.code, 2)
    ledger.add_stock(day, "BranchX", croissant.code, 1)

    ledger.finish_batch(day, "BranchX")
    ledger.finish_batch(day, "BranchX")

    act = Activity.objects.get(type="batch_finished_sale")
    assert act.message == "Batch finished at BranchX: Total Revenue Rs 850.00"
    assert act.metadata == {"date": day.isoformat(), "branch": "BranchX", "totalRevenue": 850.0}
    assert act.real_date == day


def test_finish_batch_without_sales_logs_nothing(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 2)
    ledger.return_stock(day, "BranchX", bread.code, 2)
    ledger.finish_batch(day, "BranchX")
    assert not Activity.objects.filter(type="batch_finished_sale").exists()

from datetime import date
from decimal import Decimal

import pytest
from django.db import transaction

from cash.models import CashEntry
from core import errors
from core.services import cash, grocery, ledger, machines
from sales.models import GroceryReturn
from stock.models import GroceryBatch

pytestmark = pytest.mark.django_db


def _entry(day, **extra):
    return {"branch": "BranchX", "date": day.isoformat(), "actualCash": 800, **extra}


def test_expected_from_finished_normal_stock(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    ledger.return_stock(day, "BranchX", bread.code, 2)
    ledger.finish_batch(day, "BranchX")

    assert cash.compute_expected("BranchX", day) == Decimal("800.00")


def test_unfinished_normal_stock_contributes_nothing(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    assert cash.compute_expected(branch_x, day) == Decimal("0")


def test_expected_adds_grocery_and_machine_sales(day, branch_x, milk, coffee_machine):
    GroceryBatch.objects.create(item=milk, branch=branch_x, quantity=10, remaining=10,
                                expiry_date=date(2030, 1, 1), added_date=day)
    grocery.record_grocery_sale({"itemCode": milk.code, "branch": "BranchX", "date": day.isoformat(),
                                 "soldQty": 2, "totalCash": "5.25"})
    batch = machines.start_machine_batch({"machineCode": coffee_machine.code, "branch": "BranchX",
                                          "startValue": 100, "date": day.isoformat()})
    machines.finish_machine_batch(batch.id, {"endValue": 110})

    assert cash.compute_expected("BranchX", day) == Decimal("35.25")


def test_create_entry_classifies_difference(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    ledger.return_stock(day, "BranchX", bread.code, 2)
    ledger.finish_batch(day, "BranchX")

    entry = cash.create_cash_entry(_entry(day, actualCash=700, cardPayment="90.5", operatorId="U001"))

    assert entry.expected == Decimal("800.00")
    assert entry.actual == Decimal("790.50")
    assert entry.difference == Decimal("-9.50")
    assert entry.status == CashEntry.Status.SHORTAGE
    assert entry.operator_id == "U001"


@pytest.mark.parametrize("actual,status", [(800, "Match"), (850, "Overage"), (10, "Shortage")])
def test_status_classification(day, branch_x, bread, actual, status):
    ledger.add_stock(day, "BranchX", bread.code, 8)
    ledger.finish_batch(day, "BranchX")
    assert cash.create_cash_entry(_entry(day, actualCash=actual)).status == status


def test_second_entry_for_same_day_is_rejected(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 8)
    ledger.finish_batch(day, "BranchX")
    cash.create_cash_entry(_entry(day))

    with pytest.raises(errors.ConflictError):
        cash.create_cash_entry(_entry(day, actualCash=1))
    with pytest.raises(errors.DuplicateEntryError):
        cash.create_cash_entry(_entry(day, actualCash=0, cardPayment=0))
    assert CashEntry.objects.count() == 1


def test_no_activity_means_no_sales(day, branch_x):
    assert cash.compute_expected("BranchX", day) == Decimal("0")
    with pytest.raises(errors.NoSalesRecordedError):
        cash.create_cash_entry(_entry(day))


def test_unfinished_batch_blocks_entry(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 8)
    with pytest.raises(errors.PreconditionFailedError):
        cash.create_cash_entry(_entry(day))


def test_active_machine_blocks_entry(day, branch_x, bread, coffee_machine):
    ledger.add_stock(day, "BranchX", bread.code, 8)
    ledger.finish_batch(day, "BranchX")
    machines.start_machine_batch({"machineCode": coffee_machine.code, "branch": "BranchX",
                                  "startValue": 0, "date": day.isoformat()})
    with pytest.raises(errors.PreconditionFailedError):
        cash.create_cash_entry(_entry(day))


def test_pending_grocery_return_blocks_entry(day, branch_x, bread):
    ledger.add_stock(day, "BranchX", bread.code, 8)
    ledger.finish_batch(day, "BranchX")
    GroceryReturn.objects.create(item_code="ITEMX", branch=branch_x, date=day,
                                 returned_qty=1, completed=False)
    with pytest.raises(errors.PreconditionFailedError):
        cash.create_cash_entry(_entry(day))


def test_missing_fields(day, branch_x):
    with pytest.raises(errors.ValidationError):
        cash.create_cash_entry({"branch": "BranchX", "date": day.isoformat()})


@pytest.mark.django_db(transaction=True)
def test_expected_is_computed_inside_the_entry_transaction(day, branch_x, bread, monkeypatch):
    ledger.add_stock(day, "BranchX", bread.code, 8)
    ledger.finish_batch(day, "BranchX")

    seen = {}
    compute = cash.compute_expected

    def spy(branch, date, lock=False):
        seen["atomic"] = transaction.get_connection().in_atomic_block
        seen["lock"] = lock
        return compute(branch, date, lock=lock)

    monkeypatch.setattr(cash, "compute_expected", spy)
    entry = cash.create_cash_entry(_entry(day))

    assert seen == {"atomic": True, "lock": True}
    assert entry.expected == Decimal("800.00")
    # fuera de una transacción el cálculo no bloquea nada
    assert transaction.get_connection().in_atomic_block is False


@pytest.mark.django_db(transaction=True)
def test_failed_entry_rolls_back(day, branch_x, bread, monkeypatch):
    ledger.add_stock(day, "BranchX", bread.code, 8)
    ledger.finish_batch(day, "BranchX")

    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(CashEntry, "classify", boom)
    with pytest.raises(RuntimeError):
        cash.create_cash_entry(_entry(day))
    assert not CashEntry.objects.exists()

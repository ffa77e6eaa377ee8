from datetime import date
from decimal import Decimal

import pytest

from core import errors
from core.models import ItemType
from core.services import ledger, transfers
from notifications.models import Activity
from stock.models import GroceryBatch, StockEntry, TransferRecord

pytestmark = pytest.mark.django_db


def _payload(day, items, item_type=ItemType.NORMAL, sender="BranchX", receiver="BranchY"):
    return {
        "date": day.isoformat(),
        "senderBranch": sender,
        "receiverBranch": receiver,
        "itemType": item_type,
        "items": items,
        "processedBy": "ana",
    }


def test_normal_transfer_moves_stock(day, branch_x, branch_y, bread):
    ledger.add_stock(day, "BranchX", bread.code, 10)

    record = transfers.transfer(_payload(day, [{"itemCode": bread.code, "quantity": 4}]))

    sender = StockEntry.objects.get(date=day, branch=branch_x, item=bread)
    receiver = StockEntry.objects.get(date=day, branch=branch_y, item=bread)
    assert sender.transferred == 4
    assert sender.available == 6
    assert receiver.added == 4
    assert receiver.transferred == 0
    assert record.items == [{"itemCode": bread.code, "quantity": 4}]
    assert record.processed_by == "ana"


def test_transfer_logs_sent_and_received_activities(day, branch_x, branch_y, bread):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    transfers.transfer(_payload(day, [{"itemCode": bread.code, "quantity": 4}]))

    acts = Activity.objects.filter(type="transfer")
    assert acts.count() == 2
    sent = acts.get(branch="BranchX")
    received = acts.get(branch="BranchY")
    assert sent.metadata["direction"] == "sent"
    assert received.metadata["direction"] == "received"
    assert sent.real_date == day
    assert "4 Bread transferred from BranchX to BranchY" == sent.message


def test_transfer_is_atomic(day, branch_x, branch_y, bread, croissant):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    ledger.add_stock(day, "BranchX", croissant.code, 1)

    with pytest.raises(errors.InsufficientStockError):
        transfers.transfer(_payload(day, [
            {"itemCode": bread.code, "quantity": 4},
            {"itemCode": croissant.code, "quantity": 5},
        ]))

    assert StockEntry.objects.get(date=day, branch=branch_x, item=bread).transferred == 0
    assert not StockEntry.objects.filter(branch=branch_y).exists()
    assert not TransferRecord.objects.exists()
    assert not Activity.objects.exists()


@pytest.mark.parametrize("finished", ["BranchX", "BranchY"])
def test_finished_branch_blocks_normal_transfer(day, branch_x, branch_y, bread, finished):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    ledger.finish_batch(day, finished)

    with pytest.raises(errors.BatchFinishedError) as exc:
        transfers.transfer(_payload(day, [{"itemCode": bread.code, "quantity": 1}]))
    assert exc.value.message == f"Cannot transfer: {finished} has finished batch"


def test_transfer_validation(day, branch_x, branch_y, bread, coffee_machine):
    with pytest.raises(errors.ValidationError):
        transfers.transfer(_payload(day, [{"itemCode": bread.code, "quantity": 1}], receiver="BranchX"))
    with pytest.raises(errors.ValidationError):
        transfers.transfer(_payload(day, []))
    with pytest.raises(errors.ValidationError):
        transfers.transfer(_payload(day, [{"itemCode": bread.code, "quantity": 0}]))
    with pytest.raises(errors.ValidationError):
        transfers.transfer(_payload(day, [{"itemCode": coffee_machine.code, "quantity": 1}],
                                    item_type=ItemType.MACHINE))


def test_grocery_transfer_fifo(branch_x, branch_y, milk):
    day = date(2024, 3, 1)
    soon = GroceryBatch.objects.create(item=milk, branch=branch_x, quantity=5, remaining=5,
                                       expiry_date=date(2024, 3, 10), added_date=date(2024, 2, 1))
    later = GroceryBatch.objects.create(item=milk, branch=branch_x, quantity=10, remaining=10,
                                        expiry_date=date(2024, 3, 20), added_date=date(2024, 2, 1))

    transfers.transfer(_payload(day, [{"itemCode": milk.code, "quantity": 7}], item_type=ItemType.GROCERY))

    soon.refresh_from_db()
    later.refresh_from_db()
    assert soon.remaining == 0
    assert later.remaining == 8

    received = list(GroceryBatch.objects.filter(branch=branch_y).order_by("expiry_date"))
    assert [(b.quantity, b.expiry_date) for b in received] == [
        (Decimal("5"), date(2024, 3, 10)),
        (Decimal("2"), date(2024, 3, 20)),
    ]
    assert all(b.added_date == day and b.remaining == b.quantity for b in received)


def test_grocery_transfer_insufficient_rolls_back(day, branch_x, branch_y, milk):
    batch = GroceryBatch.objects.create(item=milk, branch=branch_x, quantity=3, remaining=3,
                                        expiry_date=date(2024, 3, 10), added_date=day)
    with pytest.raises(errors.InsufficientStockError):
        transfers.transfer(_payload(day, [{"itemCode": milk.code, "quantity": 4}], item_type=ItemType.GROCERY))

    batch.refresh_from_db()
    assert batch.remaining == 3
    assert not GroceryBatch.objects.filter(branch=branch_y).exists()


def test_list_transfers_filters_by_branch(day, branch_x, branch_y, bread):
    ledger.add_stock(day, "BranchX", bread.code, 10)
    transfers.transfer(_payload(day, [{"itemCode": bread.code, "quantity": 1}]))

    assert len(transfers.list_transfers({"branch": "BranchY"})) == 1
    assert len(transfers.list_transfers({"dateFrom": "2024-01-02"})) == 0

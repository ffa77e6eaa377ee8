"""
Transferencias internas entre sucursales.

Todo o nada: la operación completa corre en una transacción y cualquier
ítem sin stock suficiente revierte el resto.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from core import errors
from core.models import Item, ItemType
from core.services import grocery, ledger
from core.services.activities import record_activity
from core.services.catalog import get_branch, get_item
from core.utils.parsing import format_quantity, parse_date, parse_decimal, parse_int
from stock.models import GroceryBatch, TransferRecord

logger = logging.getLogger(__name__)

SUPPORTED_TYPES = (ItemType.NORMAL, ItemType.GROCERY)


def _clean_items(item_type, items):
    if not isinstance(items, list) or not items:
        raise errors.ValidationError("Invalid request data: items must be a non-empty list")

    cleaned = []
    for row in items:
        if not isinstance(row, dict) or not row.get("itemCode"):
            raise errors.ValidationError("Invalid request data: every item needs itemCode and quantity")
        if item_type == ItemType.NORMAL:
            qty = parse_int(row.get("quantity"), field="quantity")
        else:
            qty = parse_decimal(row.get("quantity"), field="quantity").quantize(grocery.QTY_PLACES)
        if qty <= 0:
            raise errors.ValidationError("quantity must be greater than zero")
        cleaned.append((row["itemCode"], qty))
    return cleaned


def _transfer_normal(date, sender, receiver, lines):
    for code, qty in lines:
        item = get_item(code, item_type=ItemType.NORMAL)

        entry = ledger.locked_entry(date, sender, item)
        available = entry.available if entry else 0
        if entry is None or qty > available:
            raise errors.InsufficientStockError(
                f"Cannot transfer {qty} {item.name}: only {available} available at {sender.name}"
            )
        entry.transferred += qty
        entry.recompute_sold()
        entry.save(update_fields=["transferred", "sold", "updated_at"])

        # en el receptor cuenta como alta (no toca su "transferred")
        ledger.add_to_entry(date, receiver, item, qty)


def _transfer_grocery(date, sender, receiver, lines):
    for code, qty in lines:
        item = get_item(code, item_type=ItemType.GROCERY)
        drawn = grocery.consume_fifo(item, sender, qty)
        GroceryBatch.objects.bulk_create([
            GroceryBatch(
                item=item,
                branch=receiver,
                quantity=take,
                remaining=take,
                expiry_date=source.expiry_date,
                added_date=date,
            )
            for source, take in drawn
        ])


@transaction.atomic
def transfer(data) -> TransferRecord:
    if not data.get("date") or not data.get("senderBranch") or not data.get("receiverBranch") \
            or not data.get("itemType") or data.get("items") is None:
        raise errors.ValidationError("Invalid request data")

    date = parse_date(data["date"])
    item_type = data["itemType"]
    if item_type not in SUPPORTED_TYPES:
        raise errors.ValidationError(f"Transfers are not supported for item type {item_type}")
    if data["senderBranch"] == data["receiverBranch"]:
        raise errors.ValidationError("Sender and receiver branches must be different")

    sender = get_branch(data["senderBranch"])
    receiver = get_branch(data["receiverBranch"])
    lines = _clean_items(item_type, data["items"])

    if item_type == ItemType.NORMAL:
        for branch in (sender, receiver):
            if ledger.is_batch_finished(date, branch):
                raise errors.BatchFinishedError(f"Cannot transfer: {branch.name} has finished batch")
        _transfer_normal(date, sender, receiver, lines)
    else:
        _transfer_grocery(date, sender, receiver, lines)

    record = TransferRecord.objects.create(
        date=date,
        sender=sender,
        receiver=receiver,
        item_type=item_type,
        items=[{"itemCode": code, "quantity": _json_qty(qty)} for code, qty in lines],
        processed_by=data.get("processedBy") or "",
    )
    _log_activities(record, lines)
    logger.info("Transferencia %s: %s -> %s (%s, %d items)", record.id, sender.name,
                receiver.name, item_type, len(lines))
    return record


def _json_qty(qty):
    if isinstance(qty, Decimal):
        return int(qty) if qty == qty.to_integral_value() else float(qty)
    return qty


def _log_activities(record, lines):
    names = dict(Item.objects.filter(code__in=[c for c, _ in lines]).values_list("code", "name"))
    now = timezone.now()
    sender, receiver = record.sender.name, record.receiver.name

    for code, qty in lines:
        item_name = names.get(code, code)
        qty_txt = format_quantity(qty)
        meta = {
            "itemCode": code,
            "itemName": item_name,
            "quantity": _json_qty(qty),
            "senderBranch": sender,
            "receiverBranch": receiver,
            "itemType": record.item_type,
            "date": record.date.isoformat(),
        }
        record_activity(
            "transfer",
            f"{qty_txt} {item_name} transferred from {sender} to {receiver}",
            sender, timestamp=now, metadata={**meta, "direction": "sent"}, real_date=record.date,
        )
        record_activity(
            "transfer",
            f"{qty_txt} {item_name} received from {sender} to {receiver}",
            receiver, timestamp=now, metadata={**meta, "direction": "received"}, real_date=record.date,
        )


def list_transfers(params):
    qs = TransferRecord.objects.select_related("sender", "receiver")
    branch = params.get("branch")
    if branch:
        qs = qs.filter(sender__name=branch) | qs.filter(receiver__name=branch)
    if params.get("dateFrom"):
        qs = qs.filter(date__gte=parse_date(params["dateFrom"], field="dateFrom"))
    if params.get("dateTo"):
        qs = qs.filter(date__lte=parse_date(params["dateTo"], field="dateTo"))
    return [t.to_dict() for t in qs.order_by("-processed_at", "-id")]

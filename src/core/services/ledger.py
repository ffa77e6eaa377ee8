"""
Libro de stock de Normal Items: altas, devoluciones y cierre del día.

Cada fila StockEntry es (date, branch, item). Mientras el día está abierto
se acumulan added/returned/transferred; al cerrar (FinishedBatch) el día
queda congelado y sold = added - returned - transferred.
"""
import logging
from decimal import Decimal

from django.db import transaction

from core import errors
from core.models import ItemType
from core.services.activities import record_activity
from core.services.catalog import get_branch, get_item
from core.utils.parsing import parse_int
from stock.models import FinishedBatch, StockEntry

logger = logging.getLogger(__name__)

CASH_PLACES = Decimal("0.01")


def is_batch_finished(date, branch) -> bool:
    return FinishedBatch.objects.filter(date=date, branch=branch).exists()


def ensure_open(date, branch):
    if is_batch_finished(date, branch):
        raise errors.BatchFinishedError(f"Batch is already finished for {branch.name} on {date}")


def locked_entry(date, branch, item, create=False):
    qs = StockEntry.objects.select_for_update().filter(date=date, branch=branch, item=item)
    entry = qs.first()
    if entry is None and create:
        entry, _ = StockEntry.objects.get_or_create(date=date, branch=branch, item=item)
    return entry


def _normal_item(code):
    return get_item(code, item_type=ItemType.NORMAL)


def _positive_qty(qty):
    qty = parse_int(qty, field="quantity")
    if qty <= 0:
        raise errors.ValidationError("quantity must be greater than zero")
    return qty


def add_to_entry(date, branch, item, qty) -> StockEntry:
    """Upsert sin chequeos de cierre (lo usa también la transferencia)."""
    entry = locked_entry(date, branch, item, create=True)
    entry.added += qty
    entry.save(update_fields=["added", "updated_at"])
    return entry


@transaction.atomic
def add_stock(date, branch, item_code, qty) -> StockEntry:
    qty = _positive_qty(qty)
    branch = get_branch(branch) if isinstance(branch, str) else branch
    ensure_open(date, branch)
    item = _normal_item(item_code)
    entry = add_to_entry(date, branch, item, qty)
    record_activity(
        "stock_added",
        f"{qty} {item.name} added to {branch.name}",
        branch.name,
        metadata={"itemCode": item.code, "quantity": qty, "date": date.isoformat()},
        real_date=date,
    )
    logger.info("Stock agregado: %s %s %s +%s", date, branch.name, item.code, qty)
    return entry


@transaction.atomic
def add_stock_items(date, branch_name, items):
    """
    Alta masiva desde el formulario. Ítems con cantidad <= 0 se ignoran;
    cualquier error revierte todo el lote.
    """
    if not isinstance(items, list):
        raise errors.ValidationError("items must be a list")
    branch = get_branch(branch_name)
    ensure_open(date, branch)

    entries = []
    for row in items:
        qty = parse_int(row.get("quantity"), field="quantity", required=False, default=0)
        if qty <= 0:
            continue
        entries.append(add_stock(date, branch, row.get("itemCode"), qty))
    return entries


@transaction.atomic
def return_stock(date, branch, item_code, qty) -> StockEntry:
    qty = _positive_qty(qty)
    branch = get_branch(branch) if isinstance(branch, str) else branch
    ensure_open(date, branch)
    item = _normal_item(item_code)

    entry = locked_entry(date, branch, item)
    available = entry.available if entry else 0
    if entry is None or qty > available:
        raise errors.InsufficientStockError(
            f"Cannot return {qty}. Only {available} available for item {item.code}"
        )

    entry.returned += qty
    entry.recompute_sold()
    entry.save(update_fields=["returned", "sold", "updated_at"])
    record_activity(
        "return",
        f"{qty} {item.name} returned at {branch.name}",
        branch.name,
        metadata={"itemCode": item.code, "quantity": qty, "date": date.isoformat()},
        real_date=date,
    )
    logger.info("Devolución: %s %s %s -%s", date, branch.name, item.code, qty)
    return entry


@transaction.atomic
def return_stock_items(date, branch_name, items):
    if not isinstance(items, list):
        raise errors.ValidationError("items must be a list")
    branch = get_branch(branch_name)
    ensure_open(date, branch)

    entries = []
    for row in items:
        qty = parse_int(row.get("quantity"), field="quantity", required=False, default=0)
        if qty <= 0:
            continue
        entries.append(return_stock(date, branch, row.get("itemCode"), qty))
    return entries


@transaction.atomic
def finish_batch(date, branch_name):
    """Idempotente: el segundo cierre no cambia nada."""
    branch = get_branch(branch_name, lock=True)
    _, created = FinishedBatch.objects.get_or_create(
        date=date, branch=branch, defaults={"item_type": ItemType.NORMAL},
    )

    entries = list(StockEntry.objects.select_for_update().select_related("item")
                   .filter(date=date, branch=branch))
    for entry in entries:
        entry.recompute_sold()
    if entries:
        StockEntry.objects.bulk_update(entries, ["sold"])

    if created:
        revenue = sum((e.available * e.item.price for e in entries), Decimal("0")).quantize(CASH_PLACES)
        # solo el primer cierre deja rastro
        if revenue > 0:
            record_activity(
                "batch_finished_sale",
                f"Batch finished at {branch.name}: Total Revenue Rs {revenue:.2f}",
                branch.name,
                metadata={"date": date.isoformat(), "branch": branch.name, "totalRevenue": float(revenue)},
                real_date=date,
            )
        logger.info("Lote cerrado: %s %s (%d items, $%s)", date, branch.name, len(entries), revenue)
    return created


def list_stock(date, branch_name, item_type=None):
    branch = get_branch(branch_name)
    qs = (StockEntry.objects
          .filter(date=date, branch=branch)
          .select_related("item")
          .order_by("item__name"))
    if item_type:
        qs = qs.filter(item__item_type=item_type)
    return [e.to_dict() for e in qs], is_batch_finished(date, branch)

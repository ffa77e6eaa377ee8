"""
Lotes de Grocery Items con vencimiento, consumidos FIFO
(vence antes primero; a igual vencimiento, el ingresado antes).
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from core import errors
from core.models import ItemType
from core.services.catalog import get_branch, get_item
from core.services.expiry import scan_expiring
from core.utils.parsing import format_quantity, parse_bool, parse_date, parse_decimal
from sales.models import GroceryReturn, GrocerySale
from stock.models import GroceryBatch

logger = logging.getLogger(__name__)

QTY_PLACES = Decimal("0.001")
CASH_PLACES = Decimal("0.01")


def _positive(qty, field):
    qty = parse_decimal(qty, field=field).quantize(QTY_PLACES)
    if qty <= 0:
        raise errors.ValidationError(f"{field} must be greater than zero")
    return qty


def fifo_batches(item, branch, lock=True):
    qs = (GroceryBatch.objects
          .filter(item=item, branch=branch, remaining__gt=0)
          .order_by("expiry_date", "added_date", "id"))
    if lock:
        qs = qs.select_for_update()
    return list(qs)


def available_quantity(item, branch) -> Decimal:
    total = (GroceryBatch.objects
             .filter(item=item, branch=branch, remaining__gt=0)
             .aggregate(total=Sum("remaining"))["total"])
    return total or Decimal("0")


def consume_fifo(item, branch, qty):
    """
    Descuenta qty de los lotes de la sucursal en orden FIFO.
    Devuelve [(lote, cantidad_tomada), ...]. Debe correr dentro de una
    transacción: si no alcanza el stock se levanta el error y no queda nada
    aplicado.
    """
    pending = Decimal(qty)
    drawn = []
    for batch in fifo_batches(item, branch):
        if pending <= 0:
            break
        take = min(batch.remaining, pending)
        batch.remaining -= take
        batch.save(update_fields=["remaining"])
        drawn.append((batch, take))
        pending -= take

    if pending > 0:
        have = Decimal(qty) - pending
        raise errors.InsufficientStockError(
            f"Insufficient stock for {item.name} at {branch.name}: "
            f"requested {format_quantity(qty)}, available {format_quantity(have)}"
        )
    return drawn


# ---------------------------
# Stock
# ---------------------------

def add_grocery_stock(data) -> GroceryBatch:
    item = get_item(data.get("itemCode"), item_type=ItemType.GROCERY)
    branch = get_branch(data.get("branch"))
    quantity = _positive(data.get("quantity"), "quantity")
    expiry_date = parse_date(data.get("expiryDate"), field="expiryDate")
    stock_date = parse_date(data.get("date"), required=False) or timezone.localdate()

    batch = GroceryBatch.objects.create(
        item=item,
        branch=branch,
        quantity=quantity,
        remaining=quantity,
        expiry_date=expiry_date,
        added_date=stock_date,
    )
    logger.info("Lote grocery %s: %s %s x%s vence %s", batch.batch_id, branch.name,
                item.code, quantity, expiry_date)

    # el aviso de vencimiento no debe tumbar el alta
    result = scan_expiring()
    if "error" in result:
        logger.error("Chequeo de vencimientos tras alta falló: %s", result["error"])
    return batch


def list_grocery_stock(branch=None, item_code=None):
    qs = GroceryBatch.objects.select_related("item", "branch").order_by("-added_date", "expiry_date")
    if branch:
        qs = qs.filter(branch__name=branch)
    if item_code:
        qs = qs.filter(item__code=item_code)
    return [b.to_dict() for b in qs]


# ---------------------------
# Ventas y devoluciones
# ---------------------------

@transaction.atomic
def record_grocery_sale(data) -> GrocerySale:
    item = get_item(data.get("itemCode"), item_type=ItemType.GROCERY)
    branch = get_branch(data.get("branch"), lock=True)
    sale_date = parse_date(data.get("date"))
    sold_qty = _positive(data.get("soldQty"), "soldQty")
    total_cash = parse_decimal(data.get("totalCash"), field="totalCash", required=False)
    if total_cash is None:
        total_cash = sold_qty * item.price

    consume_fifo(item, branch, sold_qty)
    sale = GrocerySale.objects.create(
        item_code=item.code,
        item_name=data.get("itemName") or item.name,
        branch=branch,
        date=sale_date,
        sold_qty=sold_qty,
        total_cash=Decimal(total_cash).quantize(CASH_PLACES),
    )
    logger.info("Venta grocery: %s %s %s x%s", sale_date, branch.name, item.code, sold_qty)
    return sale


@transaction.atomic
def record_grocery_return(data) -> GroceryReturn:
    item = get_item(data.get("itemCode"), item_type=ItemType.GROCERY)
    branch = get_branch(data.get("branch"), lock=True)
    return_date = parse_date(data.get("date"))
    returned_qty = _positive(data.get("returnedQty"), "returnedQty")

    consume_fifo(item, branch, returned_qty)
    ret = GroceryReturn.objects.create(
        item_code=item.code,
        item_name=data.get("itemName") or item.name,
        branch=branch,
        date=return_date,
        returned_qty=returned_qty,
        reason=data.get("reason") or "waste",
        completed=parse_bool(data.get("completed"), default=True),
    )
    logger.info("Devolución grocery: %s %s %s x%s", return_date, branch.name, item.code, returned_qty)
    return ret


def complete_grocery_return(return_id) -> GroceryReturn:
    try:
        ret = GroceryReturn.objects.get(pk=return_id)
    except GroceryReturn.DoesNotExist:
        raise errors.NotFoundError("Grocery return not found")
    if not ret.completed:
        ret.completed = True
        ret.save(update_fields=["completed"])
    return ret


@transaction.atomic
def update_grocery_remaining(data):
    """
    Conteo físico: para cada {itemCode, newRemaining} la diferencia con el
    stock actual se toma como venta (FIFO, al precio del item).
    """
    branch = get_branch(data.get("branch"), lock=True)
    updates = data.get("updates")
    if not isinstance(updates, list):
        raise errors.ValidationError("Invalid request data")
    sale_date = parse_date(data.get("date"), required=False) or timezone.localdate()

    sales = []
    for upd in updates:
        item = get_item(upd.get("itemCode"), item_type=ItemType.GROCERY)
        new_remaining = parse_decimal(upd.get("newRemaining"), field="newRemaining").quantize(QTY_PLACES)
        if new_remaining < 0:
            raise errors.ValidationError("newRemaining cannot be negative")

        current = available_quantity(item, branch)
        sold_qty = current - new_remaining
        if sold_qty < 0:
            raise errors.ValidationError(
                f"New remaining ({format_quantity(new_remaining)}) cannot be greater than "
                f"current stock ({format_quantity(current)})"
            )
        if sold_qty == 0:
            continue

        consume_fifo(item, branch, sold_qty)
        sales.append(GrocerySale.objects.create(
            item_code=item.code,
            item_name=item.name,
            branch=branch,
            date=sale_date,
            sold_qty=sold_qty,
            total_cash=(sold_qty * item.price).quantize(CASH_PLACES),
        ))
    return sales


def _filter_by_dates(qs, params):
    if params.get("branch"):
        qs = qs.filter(branch__name=params["branch"])
    if params.get("date"):
        qs = qs.filter(date=parse_date(params["date"]))
    if params.get("dateFrom"):
        qs = qs.filter(date__gte=parse_date(params["dateFrom"], field="dateFrom"))
    if params.get("dateTo"):
        qs = qs.filter(date__lte=parse_date(params["dateTo"], field="dateTo"))
    return qs


def list_grocery_sales(params):
    qs = _filter_by_dates(GrocerySale.objects.select_related("branch"), params)
    return [s.to_dict() for s in qs]


def list_grocery_returns(params):
    qs = _filter_by_dates(GroceryReturn.objects.select_related("branch"), params)
    return [r.to_dict() for r in qs]

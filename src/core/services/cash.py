"""
Arqueo de caja por sucursal y día.

expected = stock Normal del lote cerrado (disponible x precio)
         + ventas grocery + ventas de máquinas.
"""
import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import Sum

from cash.models import CashEntry
from core import errors
from core.models import ItemType
from core.services.catalog import get_branch
from core.services.ledger import is_batch_finished
from core.utils.parsing import parse_date, parse_decimal
from sales.models import GroceryReturn, GrocerySale, MachineBatch, MachineSale
from stock.models import StockEntry

logger = logging.getLogger(__name__)

CASH_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def _sum(qs, field):
    return qs.aggregate(total=Sum(field))["total"] or ZERO


def compute_expected(branch, date, lock=False) -> Decimal:
    branch = get_branch(branch) if isinstance(branch, str) else branch

    normal = ZERO
    if is_batch_finished(date, branch):
        rows = (StockEntry.objects
                .filter(date=date, branch=branch, item__item_type=ItemType.NORMAL)
                .select_related("item"))
        if lock:
            rows = rows.select_for_update()
        for entry in rows:
            if entry.available > 0:
                normal += entry.available * entry.item.price

    grocery = _sum(GrocerySale.objects.filter(date=date, branch=branch), "total_cash")
    machines = _sum(MachineSale.objects.filter(date=date, branch=branch), "total_cash")
    return (normal + grocery + machines).quantize(CASH_PLACES)


def _check_preconditions(branch, date):
    normal_added = StockEntry.objects.filter(
        date=date, branch=branch, item__item_type=ItemType.NORMAL, added__gt=0,
    ).exists()
    if normal_added and not is_batch_finished(date, branch):
        raise errors.PreconditionFailedError(
            f"Finish the Normal Item batch for {branch.name} on {date} before entering cash"
        )

    if MachineBatch.objects.filter(branch=branch, date=date, status=MachineBatch.Status.ACTIVE).exists():
        raise errors.PreconditionFailedError(
            f"There are active machine batches for {branch.name} on {date}"
        )

    if GroceryReturn.objects.filter(branch=branch, date=date, completed=False).exists():
        raise errors.PreconditionFailedError(
            f"There are pending grocery returns for {branch.name} on {date}"
        )


@transaction.atomic
def create_cash_entry(data) -> CashEntry:
    """
    Todo en una transacción con la sucursal bloqueada: ventas, cierres y
    devoluciones del local esperan a que el arqueo termine, así expected
    no queda desactualizado.
    """
    if not data.get("branch") or not data.get("date") or data.get("actualCash") in (None, ""):
        raise errors.ValidationError("Branch, date and actualCash are required")

    branch = get_branch(data["branch"], lock=True)
    date = parse_date(data["date"])
    actual_cash = parse_decimal(data["actualCash"], field="actualCash").quantize(CASH_PLACES)
    card_payment = parse_decimal(data.get("cardPayment"), field="cardPayment",
                                 required=False, default=ZERO).quantize(CASH_PLACES)
    if actual_cash < 0 or card_payment < 0:
        raise errors.ValidationError("Cash amounts cannot be negative")

    duplicate = errors.DuplicateEntryError(f"Cash entry already exists for {branch.name} on {date}")
    if CashEntry.objects.filter(branch=branch, date=date).exists():
        raise duplicate

    _check_preconditions(branch, date)

    expected = compute_expected(branch, date, lock=True)
    if expected <= 0:
        raise errors.NoSalesRecordedError(
            f"No sales recorded for {branch.name} on {date}"
        )

    actual = actual_cash + card_payment
    difference = actual - expected

    try:
        with transaction.atomic():
            entry = CashEntry.objects.create(
                branch=branch,
                date=date,
                expected=expected,
                actual_cash=actual_cash,
                card_payment=card_payment,
                actual=actual,
                difference=difference,
                status=CashEntry.classify(difference),
                operator_id=str(data.get("operatorId") or ""),
                operator_name=data.get("operatorName") or "",
                notes=data.get("notes") or "",
            )
    except IntegrityError:
        # carga simultánea del mismo arqueo: la restricción única decide
        raise duplicate

    logger.info("Arqueo %s %s: esperado %s, real %s (%s)", branch.name, date, expected, actual, entry.status)
    return entry


def list_cash_entries(params):
    qs = CashEntry.objects.select_related("branch")
    if params.get("branch"):
        qs = qs.filter(branch__name=params["branch"])
    if params.get("date"):
        qs = qs.filter(date=parse_date(params["date"]))
    if params.get("dateFrom"):
        qs = qs.filter(date__gte=parse_date(params["dateFrom"], field="dateFrom"))
    if params.get("dateTo"):
        qs = qs.filter(date__lte=parse_date(params["dateTo"], field="dateTo"))
    return [e.to_dict() for e in qs]

"""
Máquinas con contador (ej: cafetera): se abre un lote con la lectura
inicial y al cerrarlo la diferencia de lecturas es la venta.
"""
import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.utils import timezone

from core import errors
from core.models import ItemType
from core.services.catalog import get_branch, get_item
from core.utils.parsing import parse_date, parse_int
from sales.models import MachineBatch, MachineSale

logger = logging.getLogger(__name__)

CASH_PLACES = Decimal("0.01")


def _meter(val, field):
    value = parse_int(val, field=field)
    if value < 0:
        raise errors.ValidationError(f"{field} cannot be negative")
    return value


def _get_batch(batch_id, active_only=False, lock=False):
    qs = MachineBatch.objects.select_related("machine", "branch")
    if lock:
        qs = qs.select_for_update()
    if active_only:
        qs = qs.filter(status=MachineBatch.Status.ACTIVE)
    try:
        return qs.get(pk=batch_id)
    except (MachineBatch.DoesNotExist, ValueError):
        raise errors.NotFoundError("Active batch not found" if active_only else "Batch not found")


def start_machine_batch(data) -> MachineBatch:
    if not data.get("machineCode") or not data.get("branch") or data.get("startValue") in (None, "") \
            or not data.get("date"):
        raise errors.ValidationError("Required fields missing")

    machine = get_item(data["machineCode"], item_type=ItemType.MACHINE)
    branch = get_branch(data["branch"])
    start_value = _meter(data["startValue"], "startValue")
    date = parse_date(data["date"])

    conflict = errors.ConflictError("Active batch already exists for this machine and branch")
    if MachineBatch.objects.filter(machine=machine, branch=branch, status=MachineBatch.Status.ACTIVE).exists():
        raise conflict

    try:
        with transaction.atomic():
            batch = MachineBatch.objects.create(
                machine=machine, branch=branch, date=date, start_value=start_value,
            )
    except IntegrityError:
        raise conflict

    logger.info("Lote máquina %s abierto: %s %s desde %s", batch.id, branch.name, machine.code, start_value)
    return batch


@transaction.atomic
def update_machine_batch(batch_id, data) -> MachineBatch:
    batch = _get_batch(batch_id, active_only=True, lock=True)

    if data.get("branch") and batch.branch.name != data["branch"]:
        raise errors.ValidationError("Batch does not belong to the specified branch")
    if data.get("machineCode") and batch.machine.code != data["machineCode"]:
        raise errors.ValidationError("Batch does not belong to the specified machine")

    fields = []
    if data.get("startValue") not in (None, ""):
        batch.start_value = _meter(data["startValue"], "startValue")
        fields.append("start_value")
    if data.get("date"):
        batch.date = parse_date(data["date"])
        fields.append("date")
    if fields:
        batch.save(update_fields=fields)
    return batch


@transaction.atomic
def finish_machine_batch(batch_id, data):
    """Cierra el lote y registra la venta. Devuelve (lote, venta)."""
    if data.get("endValue") in (None, ""):
        raise errors.ValidationError("End value is required")

    batch = _get_batch(batch_id, lock=True)
    get_branch(batch.branch.name, lock=True)
    if batch.status != MachineBatch.Status.ACTIVE:
        raise errors.ConflictError("Batch is already completed")

    end_value = _meter(data["endValue"], "endValue")
    if end_value < batch.start_value:
        raise errors.ValidationError("End value cannot be less than start value")

    machine = batch.machine
    sold_qty = end_value - batch.start_value
    total_cash = (sold_qty * machine.price).quantize(CASH_PLACES)

    batch.end_value = end_value
    batch.status = MachineBatch.Status.COMPLETED
    batch.end_time = timezone.now()
    batch.save(update_fields=["end_value", "status", "end_time"])

    sale = MachineSale.objects.create(
        batch=batch,
        machine_code=machine.code,
        machine_name=machine.name,
        branch=batch.branch,
        date=batch.date,
        start_value=batch.start_value,
        end_value=end_value,
        sold_qty=sold_qty,
        unit_price=machine.price,
        total_cash=total_cash,
    )
    logger.info("Lote máquina %s cerrado: %s vendidos, $%s", batch.id, sold_qty, total_cash)
    return batch, sale


def list_machine_batches(params):
    qs = MachineBatch.objects.select_related("machine", "branch")
    if params.get("branch"):
        qs = qs.filter(branch__name=params["branch"])
    if params.get("date"):
        qs = qs.filter(date=parse_date(params["date"]))
    if params.get("status"):
        qs = qs.filter(status=params["status"])
    if params.get("machineCode"):
        qs = qs.filter(machine__code=params["machineCode"])
    return [b.to_dict() for b in qs]


def list_machine_sales(params):
    qs = MachineSale.objects.select_related("branch")
    if params.get("branch"):
        qs = qs.filter(branch__name=params["branch"])
    if params.get("date"):
        qs = qs.filter(date=parse_date(params["date"]))
    if params.get("dateFrom"):
        qs = qs.filter(date__gte=parse_date(params["dateFrom"], field="dateFrom"))
    if params.get("dateTo"):
        qs = qs.filter(date__lte=parse_date(params["dateTo"], field="dateTo"))
    return [s.to_dict() for s in qs]

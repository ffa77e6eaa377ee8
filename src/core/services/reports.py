"""
Reportes de solo lectura sobre los libros de stock, ventas, caja y
transferencias.

Las filas de detalle tienen siempre la misma forma:
{date, branch, itemName, itemType, returned, sold, sales}
y se agrupan por ítem, sucursal o tipo con group_rows().
"""
import logging
from collections import OrderedDict
from decimal import Decimal

from core import errors
from core.models import Item, ItemType
from core.services.activities import ALL_BRANCHES
from core.utils.parsing import parse_date
from cash.models import CashEntry
from sales.models import GroceryReturn, GrocerySale, MachineSale
from stock.models import FinishedBatch, StockEntry, TransferRecord

logger = logging.getLogger(__name__)

REPORT_TYPES = ("item", "branch", "type")
GROUP_KEYS = {"item": "itemName", "branch": "branch", "type": "itemType"}


def _scope(qs, date_from, date_to, branch, date_field="date", branch_field="branch__name"):
    if date_from:
        qs = qs.filter(**{f"{date_field}__gte": date_from})
    if date_to:
        qs = qs.filter(**{f"{date_field}__lte": date_to})
    if branch and branch != ALL_BRANCHES:
        qs = qs.filter(**{branch_field: branch})
    return qs


def _dates(params):
    date_from = parse_date(params.get("dateFrom"), field="dateFrom", required=False)
    date_to = parse_date(params.get("dateTo"), field="dateTo", required=False)
    if date_from and date_to and date_from > date_to:
        raise errors.ValidationError("dateFrom cannot be after dateTo")
    return date_from, date_to


def _item_names(codes):
    return dict(Item.objects.filter(code__in=set(codes)).values_list("code", "name"))


def _normal_rows(report_type, date_from, date_to, branch, item_filter, item_type_filter):
    finished = set(_scope(FinishedBatch.objects, date_from, date_to, branch)
                   .values_list("date", "branch_id"))
    if not finished:
        return []

    qs = (_scope(StockEntry.objects, date_from, date_to, branch)
          .filter(item__item_type=ItemType.NORMAL)
          .select_related("item", "branch")
          .order_by("date", "branch__name", "item__name"))
    if item_type_filter:
        qs = qs.filter(item__item_type=item_type_filter)

    rows = []
    for entry in qs:
        if (entry.date, entry.branch_id) not in finished:
            continue
        if item_filter and entry.item.name != item_filter:
            continue
        sold = entry.available
        if report_type == "item" and sold <= 0:
            continue
        rows.append({
            "date": entry.date.isoformat(),
            "branch": entry.branch.name,
            "itemName": entry.item.name,
            "itemType": entry.item.item_type,
            "returned": entry.returned,
            "sold": sold,
            "sales": float(sold * entry.item.price),
        })
    return rows


def _grocery_rows(report_type, date_from, date_to, branch, item_filter, item_type_filter):
    if item_type_filter and item_type_filter != ItemType.GROCERY:
        return []
    sales = list(_scope(GrocerySale.objects.select_related("branch"), date_from, date_to, branch)
                 .order_by("date", "id"))
    names = _item_names(s.item_code for s in sales)

    rows = []
    for sale in sales:
        # el ítem puede haberse borrado: snapshot, y si no hay, el código
        name = names.get(sale.item_code) or sale.item_name or sale.item_code
        if item_filter and name != item_filter:
            continue
        if report_type == "item" and sale.sold_qty <= 0:
            continue
        rows.append({
            "date": sale.date.isoformat(),
            "branch": sale.branch.name,
            "itemName": f"{name} (Grocery)",
            "itemType": ItemType.GROCERY.value,
            "returned": 0,
            "sold": float(sale.sold_qty),
            "sales": float(sale.total_cash),
        })
    return rows


def _machine_rows(report_type, date_from, date_to, branch, item_filter, item_type_filter):
    if item_type_filter and item_type_filter != ItemType.MACHINE:
        return []
    sales = list(_scope(MachineSale.objects.select_related("branch"), date_from, date_to, branch)
                 .order_by("date", "id"))
    names = _item_names(s.machine_code for s in sales)

    rows = []
    for sale in sales:
        name = names.get(sale.machine_code) or sale.machine_name or sale.machine_code
        if item_filter and name != item_filter:
            continue
        if report_type == "item" and sale.sold_qty <= 0:
            continue
        rows.append({
            "date": sale.date.isoformat(),
            "branch": sale.branch.name,
            "itemName": f"{name} (Machine)",
            "itemType": ItemType.MACHINE.value,
            "returned": 0,
            "sold": sale.sold_qty,
            "sales": float(sale.total_cash),
        })
    return rows


def generate_report(params):
    report_type = params.get("type")
    if report_type not in REPORT_TYPES:
        raise errors.ValidationError(f"Unknown report type: {report_type!r}")

    date_from, date_to = _dates(params)
    args = (
        report_type,
        date_from,
        date_to,
        params.get("branch"),
        params.get("itemFilter") or None,
        params.get("itemTypeFilter") or None,
    )

    rows = _normal_rows(*args) + _grocery_rows(*args) + _machine_rows(*args)
    logger.info("Reporte %s %s..%s: %d filas", report_type, date_from, date_to, len(rows))
    return rows


def group_rows(rows, key):
    """Agrupa por itemName / branch / itemType, ordenado por ventas desc."""
    field = GROUP_KEYS.get(key, key)
    groups = OrderedDict()
    for row in rows:
        g = groups.setdefault(row[field], {field: row[field], "returned": 0, "sold": 0, "sales": 0.0})
        g["returned"] += row["returned"]
        g["sold"] += row["sold"]
        g["sales"] += row["sales"]
    return sorted(groups.values(), key=lambda g: g["sales"], reverse=True)


def cash_report(params):
    date_from, date_to = _dates(params)
    qs = (_scope(CashEntry.objects.select_related("branch"), date_from, date_to, params.get("branch"))
          .order_by("date", "branch__name"))
    entries = list(qs)
    # sumas en Decimal, float solo al serializar
    totals = {
        field: float(sum((getattr(e, field) for e in entries), Decimal("0")))
        for field in ("expected", "actual", "difference")
    }
    return {"entries": [e.to_dict() for e in entries], "totals": totals}


def transfer_report(params):
    """Una fila por línea transferida."""
    date_from, date_to = _dates(params)
    qs = _scope(TransferRecord.objects.select_related("sender", "receiver"),
                date_from, date_to, None).order_by("date", "id")
    branch = params.get("branch")
    if branch and branch != ALL_BRANCHES:
        qs = qs.filter(sender__name=branch) | qs.filter(receiver__name=branch)

    records = list(qs)
    names = _item_names(line["itemCode"] for t in records for line in t.items)
    rows = []
    for t in records:
        for line in t.items:
            rows.append({
                "date": t.date.isoformat(),
                "senderBranch": t.sender.name,
                "receiverBranch": t.receiver.name,
                "itemType": t.item_type,
                "itemCode": line["itemCode"],
                "itemName": names.get(line["itemCode"], line["itemCode"]),
                "quantity": line["quantity"],
                "processedBy": t.processed_by or None,
            })
    return rows


def returns_report(params):
    date_from, date_to = _dates(params)
    branch = params.get("branch")

    rows = []
    normal = (_scope(StockEntry.objects, date_from, date_to, branch)
              .filter(returned__gt=0)
              .select_related("item", "branch")
              .order_by("date", "branch__name", "item__name"))
    for entry in normal:
        rows.append({
            "date": entry.date.isoformat(),
            "branch": entry.branch.name,
            "itemName": entry.item.name,
            "itemType": entry.item.item_type,
            "returned": entry.returned,
            "reason": "return",
            "completed": True,
        })

    grocery = list(_scope(GroceryReturn.objects.select_related("branch"), date_from, date_to, branch)
                   .order_by("date", "id"))
    names = _item_names(r.item_code for r in grocery)
    for ret in grocery:
        rows.append({
            "date": ret.date.isoformat(),
            "branch": ret.branch.name,
            "itemName": names.get(ret.item_code) or ret.item_name or ret.item_code,
            "itemType": ItemType.GROCERY.value,
            "returned": float(ret.returned_qty),
            "reason": ret.reason,
            "completed": ret.completed,
        })
    return rows

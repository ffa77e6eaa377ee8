from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.services import grocery, ledger, transfers
from core.services.catalog import get_branch
from core.utils.http import ok
from core.utils.parsing import parse_date, read_json


def _items_payload(data):
    """Acepta {items: [...]} o un único {itemCode, quantity}."""
    if "items" in data:
        return data["items"]
    return [{"itemCode": data.get("itemCode"), "quantity": data.get("quantity")}]


# ---------------------------
# Stock de Normal Items
# ---------------------------

@require_GET
def stocks(request):
    date = parse_date(request.GET.get("date"))
    rows, is_finished = ledger.list_stock(date, request.GET.get("branch"), request.GET.get("itemType") or None)
    return ok(stocks=rows, isFinished=is_finished)


@csrf_exempt
@require_POST
def add_stock(request):
    data = read_json(request)
    date = parse_date(data.get("date"))
    entries = ledger.add_stock_items(date, data.get("branch"), _items_payload(data))
    return ok("Stock added successfully", stocks=[e.to_dict() for e in entries])


@csrf_exempt
@require_POST
def return_stock(request):
    data = read_json(request)
    date = parse_date(data.get("date"))
    entries = ledger.return_stock_items(date, data.get("branch"), _items_payload(data))
    return ok("Return recorded successfully", stocks=[e.to_dict() for e in entries])


@csrf_exempt
@require_POST
def finish_batch(request):
    data = read_json(request)
    date = parse_date(data.get("date"))
    created = ledger.finish_batch(date, data.get("branch"))
    message = "Batch finished successfully" if created else "Batch was already finished"
    return ok(message, isFinished=True)


@require_GET
def batch_status(request):
    date = parse_date(request.GET.get("date"))
    branch = get_branch(request.GET.get("branch"))
    return ok(isFinished=ledger.is_batch_finished(date, branch))


# ---------------------------
# Lotes grocery
# ---------------------------

@csrf_exempt
@require_http_methods(["GET", "POST"])
def grocery_stocks(request):
    if request.method == "POST":
        batch = grocery.add_grocery_stock(read_json(request))
        return ok("Grocery stock added successfully", status=201, stock=batch.to_dict())
    rows = grocery.list_grocery_stock(request.GET.get("branch"), request.GET.get("itemCode"))
    return ok(stocks=rows)


@csrf_exempt
@require_POST
def grocery_remaining(request):
    sales = grocery.update_grocery_remaining(read_json(request))
    return ok("Stock updated successfully", sales=[s.to_dict() for s in sales])


# ---------------------------
# Transferencias
# ---------------------------

@csrf_exempt
@require_http_methods(["GET", "POST"])
def transfer_list(request):
    if request.method == "POST":
        record = transfers.transfer(read_json(request))
        return ok("Transfer completed successfully", status=201, transfer=record.to_dict())
    return ok(transfers=transfers.list_transfers(request.GET))

from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.services import grocery, machines
from core.utils.http import ok
from core.utils.parsing import read_json


# ---------------------------
# Ventas y devoluciones grocery
# ---------------------------

@csrf_exempt
@require_http_methods(["GET", "POST"])
def grocery_sales(request):
    if request.method == "POST":
        sale = grocery.record_grocery_sale(read_json(request))
        return ok("Sale recorded successfully", status=201, sale=sale.to_dict())
    return ok(sales=grocery.list_grocery_sales(request.GET))


@csrf_exempt
@require_http_methods(["GET", "POST"])
def grocery_returns(request):
    if request.method == "POST":
        ret = grocery.record_grocery_return(read_json(request))
        return ok("Return recorded successfully", status=201, **{"return": ret.to_dict()})
    return ok(returns=grocery.list_grocery_returns(request.GET))


@csrf_exempt
@require_POST
def complete_grocery_return(request, return_id):
    ret = grocery.complete_grocery_return(return_id)
    return ok("Return completed", **{"return": ret.to_dict()})


# ---------------------------
# Máquinas
# ---------------------------

@csrf_exempt
@require_http_methods(["GET", "POST"])
def machine_batches(request):
    if request.method == "POST":
        batch = machines.start_machine_batch(read_json(request))
        return ok("Batch started successfully", status=201, batchId=batch.id, batch=batch.to_dict())
    return ok(batches=machines.list_machine_batches(request.GET))


@csrf_exempt
@require_http_methods(["PUT"])
def machine_batch_detail(request, batch_id):
    batch = machines.update_machine_batch(batch_id, read_json(request))
    return ok("Batch updated successfully", batch=batch.to_dict())


@csrf_exempt
@require_POST
def finish_machine_batch(request, batch_id):
    batch, sale = machines.finish_machine_batch(batch_id, read_json(request))
    return ok(
        "Batch completed successfully",
        soldQty=sale.sold_qty,
        totalCash=float(sale.total_cash),
        batch=batch.to_dict(),
    )


@require_GET
def machine_sales(request):
    return ok(sales=machines.list_machine_sales(request.GET))

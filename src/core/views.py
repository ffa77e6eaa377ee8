from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_POST

from core.models import Branch, Item
from core.services import catalog, maintenance
from core.utils.http import ok
from core.utils.parsing import read_json


# ---------------------------
# Sucursales
# ---------------------------

@csrf_exempt
@require_http_methods(["GET", "POST"])
def branches(request):
    if request.method == "POST":
        branch = catalog.create_branch(read_json(request))
        return ok("Branch created successfully", status=201, branch=branch.to_dict())
    return ok(branches=[b.to_dict() for b in Branch.objects.order_by("name")])


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
def branch_detail(request, name):
    if request.method == "PUT":
        branch = catalog.update_branch(name, read_json(request))
        return ok("Branch updated successfully", branch=branch.to_dict())
    if request.method == "DELETE":
        catalog.delete_branch(name)
        return ok("Branch deleted successfully")
    return ok(branch=catalog.get_branch(name).to_dict())


# ---------------------------
# Items
# ---------------------------

@csrf_exempt
@require_http_methods(["GET", "POST"])
def items(request):
    if request.method == "POST":
        item = catalog.create_item(read_json(request))
        return ok("Item created successfully", status=201, item=item.to_dict())

    qs = Item.objects.all()
    if request.GET.get("itemType"):
        qs = qs.filter(item_type=request.GET["itemType"])
    return ok(items=[i.to_dict() for i in qs.order_by("item_type", "name")])


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
def item_detail(request, code):
    if request.method == "PUT":
        item = catalog.update_item(code, read_json(request))
        return ok("Item updated successfully", item=item.to_dict())
    if request.method == "DELETE":
        catalog.delete_item(code)
        return ok("Item deleted successfully")
    return ok(item=catalog.get_item(code).to_dict())


# ---------------------------
# Sistema
# ---------------------------

@csrf_exempt
@require_POST
def clear_transactions(request):
    summary = maintenance.clear_transactions()
    return ok(
        "All transaction data cleared successfully. Users, branches, and items are preserved.",
        deleted=summary,
    )

from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from core.services import cash
from core.utils.http import ok
from core.utils.parsing import parse_date, read_json


@csrf_exempt
@require_http_methods(["GET", "POST"])
def cash_entries(request):
    if request.method == "POST":
        entry = cash.create_cash_entry(read_json(request))
        return ok("Cash entry saved successfully", status=201, entry=entry.to_dict())
    return ok(entries=cash.list_cash_entries(request.GET))


@require_GET
def expected_cash(request):
    date = parse_date(request.GET.get("date"))
    expected = cash.compute_expected(request.GET.get("branch") or "", date)
    return ok(expected=float(expected))

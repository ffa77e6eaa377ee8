import logging

from django.http import HttpResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from core import errors
from core.services import export, reports
from core.utils.http import ok
from core.utils.parsing import read_json

logger = logging.getLogger(__name__)


def _sales_rows(params):
    rows = reports.generate_report(params)
    return rows, reports.group_rows(rows, params["type"])


@csrf_exempt
@require_POST
def generate_report(request):
    """
    Body: {type: item|branch|type, dateFrom, dateTo, branch, itemFilter, itemTypeFilter}

    data    -> filas de detalle
    grouped -> mismas filas agrupadas según el tipo de reporte
    """
    params = read_json(request)
    rows, grouped = _sales_rows(params)
    return ok(data=rows, grouped=grouped)


@csrf_exempt
@require_POST
def cash_report(request):
    return ok(data=reports.cash_report(read_json(request)))


@csrf_exempt
@require_POST
def transfer_report(request):
    return ok(data=reports.transfer_report(read_json(request)))


@csrf_exempt
@require_POST
def returns_report(request):
    return ok(data=reports.returns_report(read_json(request)))


@csrf_exempt
@require_POST
def export_report(request):
    """
    Body: {report: sales|cash|transfers|returns, format: xlsx|csv, grouped?: bool, ...filtros}
    Devuelve el archivo como adjunto.
    """
    params = read_json(request)
    report = params.get("report") or "sales"
    fmt = (params.get("format") or "xlsx").lower()
    if fmt not in export.FORMATS:
        raise errors.ValidationError(f"Unsupported export format: {fmt!r}")

    if report == "sales":
        rows, grouped = _sales_rows(params)
        if params.get("grouped"):
            rows = grouped
    elif report == "cash":
        rows = reports.cash_report(params)["entries"]
    elif report == "transfers":
        rows = reports.transfer_report(params)
    elif report == "returns":
        rows = reports.returns_report(params)
    else:
        raise errors.ValidationError(f"Unknown report: {report!r}")

    content = export.export_rows(rows, fmt, sheet_name=report.capitalize())
    filename = f"{report}_report_{timezone.localdate():%Y%m%d}.{fmt}"
    logger.info("Export %s (%s): %d filas", report, fmt, len(rows))

    resp = HttpResponse(content, content_type=export.FORMATS[fmt])
    resp["Content-Disposition"] = f'attachment; filename="{filename}"'
    return resp

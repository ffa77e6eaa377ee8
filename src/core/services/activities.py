import logging

from django.utils import timezone

from core.utils.parsing import parse_date, parse_int
from notifications.models import Activity

logger = logging.getLogger(__name__)

ALL_BRANCHES = "All Branches"


def record_activity(type, message, branch, timestamp=None, metadata=None, real_date=None):
    """
    real_date es la fecha de negocio del movimiento (ej: la fecha de la
    transferencia), que puede diferir del momento en que se cargó.
    """
    timestamp = timestamp or timezone.now()
    return Activity.objects.create(
        type=type,
        message=message,
        branch=branch,
        timestamp=timestamp,
        metadata=metadata,
        real_date=real_date or timezone.localdate(timestamp),
    )


def list_activities(params):
    limit = parse_int(params.get("limit"), field="limit", required=False, default=100)
    qs = Activity.objects.all()

    branch = params.get("branch")
    if branch and branch != ALL_BRANCHES:
        qs = qs.filter(branch=branch)
    if params.get("dateFrom"):
        qs = qs.filter(real_date__gte=parse_date(params["dateFrom"], field="dateFrom"))
    if params.get("dateTo"):
        qs = qs.filter(real_date__lte=parse_date(params["dateTo"], field="dateTo"))

    return [a.to_dict() for a in qs.order_by("-real_date", "-timestamp", "-id")[:max(1, limit)]]

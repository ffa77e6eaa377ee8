import json
import logging

from django.db import IntegrityError, transaction
from django.db.models import Q

from core import errors
from core.services.catalog import get_branch
from core.utils.parsing import parse_date, parse_decimal
from notifications.models import Notification

logger = logging.getLogger(__name__)


def _branch_list(val):
    """assignedBranches llega como JSON en la querystring."""
    if val in (None, ""):
        return []
    if isinstance(val, list):
        return val
    try:
        names = json.loads(val)
    except (TypeError, ValueError):
        raise errors.ValidationError("assignedBranches must be a JSON array")
    if not isinstance(names, list):
        raise errors.ValidationError("assignedBranches must be a JSON array")
    return names


def list_notifications(params):
    qs = Notification.objects.select_related("branch")

    if params.get("branch"):
        qs = qs.filter(branch__name=params["branch"])
    elif params.get("userRole") and params["userRole"] != "admin":
        # sin rol admin: sus sucursales más los avisos generales
        names = _branch_list(params.get("assignedBranches"))
        qs = qs.filter(Q(branch__name__in=names) | Q(branch__isnull=True))

    if params.get("type"):
        qs = qs.filter(type=params["type"])
    return [n.to_dict() for n in qs]


def create_notification(data) -> Notification:
    if not data.get("type") or not data.get("message"):
        raise errors.ValidationError("type and message are required")

    branch = get_branch(data["branch"]) if data.get("branch") else None
    try:
        with transaction.atomic():
            notif = Notification.objects.create(
                type=data["type"],
                message=data["message"],
                branch=branch,
                item_code=data.get("itemCode") or "",
                item_name=data.get("itemName") or "",
                batch_id=data.get("batchId") or "",
                quantity=parse_decimal(data.get("quantity"), field="quantity", required=False),
                expiry_date=parse_date(data.get("expiryDate"), field="expiryDate", required=False),
                date_added=parse_date(data.get("dateAdded"), field="dateAdded", required=False),
            )
    except IntegrityError:
        raise errors.DuplicateEntryError("Notification already exists")
    logger.info("Aviso creado: [%s] %s", notif.type, notif.message)
    return notif


def mark_read(notification_id, user_id) -> Notification:
    if not user_id:
        raise errors.ValidationError("userId is required")
    try:
        notif = Notification.objects.get(pk=notification_id)
    except (Notification.DoesNotExist, ValueError):
        raise errors.NotFoundError("Notification not found")
    notif.mark_read(user_id)
    return notif

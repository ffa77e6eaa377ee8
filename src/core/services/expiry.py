"""
Avisos de vencimiento de lotes grocery.

Corre desatendido (cron / management command / alta de stock), así que
nunca levanta: ante error devuelve un resumen con "error".
"""
import logging
import re
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.models import ItemType
from core.utils.parsing import format_quantity
from notifications.models import Notification
from stock.models import GroceryBatch

logger = logging.getLogger(__name__)

BATCH_FRAGMENT_RE = re.compile(r"\s*\(Batch:\s*[^)]+\)\s*", re.IGNORECASE)


def _horizon_days():
    return int(getattr(settings, "EXPIRY_HORIZON_DAYS", 2))


def expiry_phrase(days: int) -> str:
    if days == 0:
        return "today"
    return f"in {days} day{'s' if days != 1 else ''}"


def build_message(batch, days: int) -> str:
    return (
        f"{format_quantity(batch.remaining)} {batch.item.name} will expire {expiry_phrase(days)} "
        f"at {batch.branch.name}. Expiry date: {batch.expiry_date.isoformat()}"
    )


def _already_notified(batch) -> bool:
    return Notification.objects.filter(
        type=Notification.TYPE_EXPIRY,
        item_code=batch.item.code,
        branch=batch.branch,
        batch_id=batch.batch_id,
        expiry_date=batch.expiry_date,
    ).exists()


def _scan(today):
    horizon = _horizon_days()
    limit = today + timedelta(days=horizon)

    candidates = list(
        GroceryBatch.objects
        .filter(
            expiry_date__gte=today,
            expiry_date__lte=limit,
            remaining__gt=0,
            item__item_type=ItemType.GROCERY,
            item__notify_expiry=True,
        )
        .select_related("item", "branch")
        .order_by("expiry_date", "id")
    )
    logger.info("[expiry] %s: %d lotes vencen antes de %s", today, len(candidates), limit)

    created = 0
    for batch in candidates:
        days = (batch.expiry_date - today).days
        if days < 0 or days > horizon:
            continue
        if _already_notified(batch):
            continue

        try:
            with transaction.atomic():
                Notification.objects.create(
                    type=Notification.TYPE_EXPIRY,
                    message=build_message(batch, days),
                    branch=batch.branch,
                    item_code=batch.item.code,
                    item_name=batch.item.name,
                    batch_id=batch.batch_id,
                    quantity=batch.remaining,
                    expiry_date=batch.expiry_date,
                    date_added=batch.added_date,
                )
        except IntegrityError:
            # otro escaneo concurrente ya lo creó
            continue
        created += 1
        logger.info("[expiry] aviso creado: %s %s vence en %d días", batch.branch.name, batch.item.name, days)

    return {
        "checked": len(candidates),
        "created": created,
        "message": f"Checked {len(candidates)} items, created {created} notifications",
    }


def scan_expiring(today=None):
    today = today or timezone.localdate()
    try:
        return _scan(today)
    except Exception as e:
        logger.exception("[expiry] error en el escaneo")
        return {"checked": 0, "created": 0, "error": str(e)}


def cleanup_notification_messages():
    """Quita fragmentos "(Batch: ...)" de mensajes viejos."""
    updated = 0
    for notif in Notification.objects.filter(message__icontains="(Batch:"):
        cleaned = " ".join(BATCH_FRAGMENT_RE.sub(" ", notif.message).split())
        if cleaned != notif.message:
            notif.message = cleaned
            notif.save(update_fields=["message"])
            updated += 1
    logger.info("[expiry] mensajes limpiados: %d", updated)
    return updated

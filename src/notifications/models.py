from django.db import models
from django.db.models import Q

from core.models import Branch


class Notification(models.Model):
    TYPE_EXPIRY = "expiry"
    TYPE_EXPIRED = "expired"

    type = models.CharField(max_length=30, db_index=True)
    message = models.TextField()
    branch = models.ForeignKey(Branch, on_delete=models.CASCADE, null=True, blank=True,
                               related_name="notifications")
    item_code = models.CharField(max_length=20, blank=True, default="")
    item_name = models.CharField(max_length=150, blank=True, default="")
    batch_id = models.CharField(max_length=20, blank=True, default="")
    quantity = models.DecimalField(max_digits=18, decimal_places=3, null=True, blank=True)
    expiry_date = models.DateField(null=True, blank=True)
    date_added = models.DateField(null=True, blank=True)
    read_by = models.JSONField(default=list, blank=True)  # ids de usuario
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            # un aviso de vencimiento por lote/fecha, aunque el escaneo corra muchas veces
            models.UniqueConstraint(
                fields=["type", "item_code", "branch", "batch_id", "expiry_date"],
                condition=Q(type="expiry"),
                name="notification_expiry_dedup",
            ),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"[{self.type}] {self.message[:60]}"

    def mark_read(self, user_id):
        user_id = str(user_id)
        if user_id not in self.read_by:
            self.read_by = [*self.read_by, user_id]
            self.save(update_fields=["read_by"])

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "message": self.message,
            "branch": self.branch.name if self.branch_id else None,
            "itemCode": self.item_code or None,
            "itemName": self.item_name or None,
            "batchId": self.batch_id or None,
            "quantity": float(self.quantity) if self.quantity is not None else None,
            "expiryDate": self.expiry_date.isoformat() if self.expiry_date else None,
            "dateAdded": self.date_added.isoformat() if self.date_added else None,
            "readBy": list(self.read_by or []),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class Activity(models.Model):
    """Bitácora de movimientos (dashboard / auditoría)."""

    type = models.CharField(max_length=30, db_index=True)
    message = models.TextField()
    branch = models.CharField(max_length=150, db_index=True)
    timestamp = models.DateTimeField(db_index=True)
    real_date = models.DateField(null=True, blank=True)  # fecha de negocio del movimiento
    metadata = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-timestamp", "-id"]
        verbose_name_plural = "activities"

    def __str__(self):
        return f"{self.timestamp:%Y-%m-%d %H:%M} | {self.branch} | {self.message[:60]}"

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "message": self.message,
            "branch": self.branch,
            "timestamp": self.timestamp.isoformat(),
            "date": self.real_date.isoformat() if self.real_date else self.timestamp.date().isoformat(),
            "metadata": self.metadata,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

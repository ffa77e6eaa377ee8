import secrets
import string

from django.db import models

from core.models import Branch, Item, ItemType


class StockEntry(models.Model):
    """Movimientos del día de un Normal Item en una sucursal."""

    date = models.DateField()
    branch = models.ForeignKey(Branch, on_delete=models.PROTECT, related_name="stock_entries")
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name="stock_entries")
    added = models.PositiveIntegerField(default=0)
    returned = models.PositiveIntegerField(default=0)
    transferred = models.PositiveIntegerField(default=0)
    sold = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["date", "branch", "item"], name="stock_entry_unique_key"),
        ]
        indexes = [
            models.Index(fields=["date", "branch"], name="stock_entry_date_branch_idx"),
            models.Index(fields=["item", "date"], name="stock_entry_item_date_idx"),
        ]
        ordering = ["date", "branch__name", "item__name"]

    def __str__(self):
        return f"{self.date} | {self.branch} | {self.item.code} | +{self.added} -{self.returned} ->{self.transferred}"

    @property
    def net(self):
        return self.added - self.returned - self.transferred

    @property
    def available(self):
        return max(0, self.net)

    def recompute_sold(self):
        self.sold = self.available

    def to_dict(self):
        item = self.item
        return {
            "itemCode": item.code,
            "itemName": item.name,
            "category": item.category,
            "price": float(item.price),
            "itemType": item.item_type,
            "added": self.added,
            "returned": self.returned,
            "transferred": self.transferred,
            "sold": self.sold,
            "available": self.available,
        }


class FinishedBatch(models.Model):
    """Cierre del día: congela los StockEntry de (date, branch)."""

    date = models.DateField()
    branch = models.ForeignKey(Branch, on_delete=models.PROTECT, related_name="finished_batches")
    item_type = models.CharField(max_length=20, choices=ItemType.choices, default=ItemType.NORMAL)
    finished_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["date", "branch"], name="finished_batch_unique_key"),
        ]
        ordering = ["-date", "branch__name"]

    def __str__(self):
        return f"{self.date} | {self.branch} (finished)"


def generate_batch_code():
    alphabet = string.ascii_lowercase + string.digits
    return "B" + "".join(secrets.choice(alphabet) for _ in range(14))


class GroceryBatch(models.Model):
    batch_id = models.CharField(max_length=20, unique=True, default=generate_batch_code)
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name="grocery_batches")
    branch = models.ForeignKey(Branch, on_delete=models.PROTECT, related_name="grocery_batches")
    quantity = models.DecimalField(max_digits=18, decimal_places=3)
    remaining = models.DecimalField(max_digits=18, decimal_places=3)
    expiry_date = models.DateField()
    added_date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=models.Q(remaining__gte=0), name="grocery_remaining_non_negative"),
            models.CheckConstraint(condition=models.Q(remaining__lte=models.F("quantity")),
                                   name="grocery_remaining_le_quantity"),
        ]
        indexes = [
            models.Index(fields=["item", "branch", "expiry_date", "added_date"], name="grocery_batch_fifo_idx"),  # orden FIFO
            models.Index(fields=["expiry_date"], name="grocery_batch_expiry_idx"),
        ]
        ordering = ["expiry_date", "added_date", "id"]

    def __str__(self):
        return f"{self.batch_id} | {self.item.code} | {self.branch} | {self.remaining}/{self.quantity} exp {self.expiry_date}"

    def to_dict(self):
        return {
            "id": self.id,
            "batchId": self.batch_id,
            "itemCode": self.item.code,
            "itemName": self.item.name,
            "branch": self.branch.name,
            "quantity": float(self.quantity),
            "remaining": float(self.remaining),
            "expiryDate": self.expiry_date.isoformat(),
            "addedDate": self.added_date.isoformat(),
        }


class TransferRecord(models.Model):
    date = models.DateField()
    sender = models.ForeignKey(Branch, on_delete=models.PROTECT, related_name="transfers_sent")
    receiver = models.ForeignKey(Branch, on_delete=models.PROTECT, related_name="transfers_received")
    item_type = models.CharField(max_length=20, choices=ItemType.choices)
    items = models.JSONField(default=list)  # [{"itemCode": ..., "quantity": ...}]
    processed_by = models.CharField(max_length=150, blank=True, default="")
    processed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=~models.Q(sender=models.F("receiver")),
                                   name="transfer_sender_ne_receiver"),
        ]
        indexes = [
            models.Index(fields=["date"], name="transfer_date_idx"),
        ]
        ordering = ["-processed_at", "-id"]

    def __str__(self):
        return f"{self.date} | {self.sender} -> {self.receiver} | {self.item_type}"

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "senderBranch": self.sender.name,
            "receiverBranch": self.receiver.name,
            "itemType": self.item_type,
            "items": self.items,
            "processedBy": self.processed_by or None,
            "processedAt": self.processed_at.isoformat() if self.processed_at else None,
        }

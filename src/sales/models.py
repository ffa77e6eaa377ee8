from django.db import models

from core.models import Branch, Item


class GrocerySale(models.Model):
    # item_code / item_name son snapshot: el reporte sigue funcionando si el Item desaparece
    item_code = models.CharField(max_length=20)
    item_name = models.CharField(max_length=150, blank=True, default="")
    branch = models.ForeignKey(Branch, on_delete=models.PROTECT, related_name="grocery_sales")
    date = models.DateField()
    sold_qty = models.DecimalField(max_digits=18, decimal_places=3)
    total_cash = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["branch", "date"], name="grocery_sale_branch_date_idx"),
            models.Index(fields=["date"], name="grocery_sale_date_idx"),
        ]
        ordering = ["-date", "-timestamp"]

    def __str__(self):
        return f"{self.date} | {self.branch} | {self.item_code} x{self.sold_qty}"

    def to_dict(self):
        return {
            "id": self.id,
            "itemCode": self.item_code,
            "itemName": self.item_name,
            "branch": self.branch.name,
            "date": self.date.isoformat(),
            "soldQty": float(self.sold_qty),
            "totalCash": float(self.total_cash),
        }


class GroceryReturn(models.Model):
    item_code = models.CharField(max_length=20)
    item_name = models.CharField(max_length=150, blank=True, default="")
    branch = models.ForeignKey(Branch, on_delete=models.PROTECT, related_name="grocery_returns")
    date = models.DateField()
    returned_qty = models.DecimalField(max_digits=18, decimal_places=3)
    reason = models.CharField(max_length=100, default="waste")
    completed = models.BooleanField(default=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["branch", "date"], name="grocery_return_branch_date_idx"),
        ]
        ordering = ["-date", "-timestamp"]

    def __str__(self):
        return f"{self.date} | {self.branch} | {self.item_code} -{self.returned_qty}"

    def to_dict(self):
        return {
            "id": self.id,
            "itemCode": self.item_code,
            "itemName": self.item_name,
            "branch": self.branch.name,
            "date": self.date.isoformat(),
            "returnedQty": float(self.returned_qty),
            "reason": self.reason,
            "completed": self.completed,
        }


class MachineBatch(models.Model):
    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        COMPLETED = "completed", "Completed"

    machine = models.ForeignKey(Item, on_delete=models.PROTECT, related_name="machine_batches")
    branch = models.ForeignKey(Branch, on_delete=models.PROTECT, related_name="machine_batches")
    date = models.DateField()
    start_value = models.PositiveIntegerField()
    end_value = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.ACTIVE)
    start_time = models.DateTimeField(auto_now_add=True)
    end_time = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            # un solo lote activo por máquina y sucursal
            models.UniqueConstraint(
                fields=["machine", "branch"],
                condition=models.Q(status="active"),
                name="machine_batch_one_active",
            ),
        ]
        indexes = [
            models.Index(fields=["branch", "date", "status"], name="machine_batch_lookup_idx"),
        ]
        ordering = ["-start_time", "-id"]

    def __str__(self):
        return f"{self.machine.code} | {self.branch} | {self.date} | {self.status}"

    def to_dict(self):
        return {
            "id": self.id,
            "machineCode": self.machine.code,
            "machineName": self.machine.name,
            "branch": self.branch.name,
            "date": self.date.isoformat(),
            "startValue": self.start_value,
            "endValue": self.end_value,
            "status": self.status,
            "startTime": self.start_time.isoformat() if self.start_time else None,
            "endTime": self.end_time.isoformat() if self.end_time else None,
        }


class MachineSale(models.Model):
    batch = models.OneToOneField(MachineBatch, on_delete=models.SET_NULL, null=True, blank=True,
                                 related_name="sale")
    machine_code = models.CharField(max_length=20)
    machine_name = models.CharField(max_length=150, blank=True, default="")
    branch = models.ForeignKey(Branch, on_delete=models.PROTECT, related_name="machine_sales")
    date = models.DateField()
    start_value = models.PositiveIntegerField()
    end_value = models.PositiveIntegerField()
    sold_qty = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=18, decimal_places=2)
    total_cash = models.DecimalField(max_digits=18, decimal_places=2)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["branch", "date"], name="machine_sale_branch_date_idx"),
            models.Index(fields=["date"], name="machine_sale_date_idx"),
        ]
        ordering = ["-date", "-timestamp"]

    def __str__(self):
        return f"{self.date} | {self.branch} | {self.machine_code} x{self.sold_qty}"

    def to_dict(self):
        return {
            "id": self.id,
            "machineCode": self.machine_code,
            "machineName": self.machine_name,
            "branch": self.branch.name,
            "date": self.date.isoformat(),
            "startValue": self.start_value,
            "endValue": self.end_value,
            "soldQty": self.sold_qty,
            "unitPrice": float(self.unit_price),
            "totalCash": float(self.total_cash),
        }

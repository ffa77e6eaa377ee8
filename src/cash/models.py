from django.db import models

from core.models import Branch


class CashEntry(models.Model):
    """Arqueo diario de una sucursal. Solo alta: no se edita ni se borra."""

    class Status(models.TextChoices):
        MATCH = "Match", "Match"
        OVERAGE = "Overage", "Overage"
        SHORTAGE = "Shortage", "Shortage"

    branch = models.ForeignKey(Branch, on_delete=models.PROTECT, related_name="cash_entries")
    date = models.DateField()
    expected = models.DecimalField(max_digits=18, decimal_places=2)
    actual_cash = models.DecimalField(max_digits=18, decimal_places=2)
    card_payment = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    actual = models.DecimalField(max_digits=18, decimal_places=2)
    difference = models.DecimalField(max_digits=18, decimal_places=2)
    status = models.CharField(max_length=10, choices=Status.choices)
    operator_id = models.CharField(max_length=50, blank=True, default="")
    operator_name = models.CharField(max_length=150, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["branch", "date"], name="cash_entry_unique_branch_date"),
        ]
        ordering = ["-date", "-timestamp"]
        verbose_name_plural = "cash entries"

    def __str__(self):
        return f"{self.date} | {self.branch} | {self.status} ({self.difference})"

    @classmethod
    def classify(cls, difference):
        if difference == 0:
            return cls.Status.MATCH
        return cls.Status.OVERAGE if difference > 0 else cls.Status.SHORTAGE

    def to_dict(self):
        return {
            "id": self.id,
            "branch": self.branch.name,
            "date": self.date.isoformat(),
            "expected": float(self.expected),
            "actualCash": float(self.actual_cash),
            "cardPayment": float(self.card_payment),
            "actual": float(self.actual),
            "difference": float(self.difference),
            "status": self.status,
            "operatorId": self.operator_id or None,
            "operatorName": self.operator_name or None,
            "notes": self.notes or None,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

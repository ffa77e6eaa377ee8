import secrets
import string

from django.db import models


class ItemType(models.TextChoices):
    NORMAL = "Normal Item", "Normal Item"
    GROCERY = "Grocery Item", "Grocery Item"
    MACHINE = "Machine", "Machine"


class Branch(models.Model):
    name = models.CharField(max_length=150, unique=True)
    address = models.CharField(max_length=255)
    manager = models.CharField(max_length=150)
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def to_dict(self):
        return {
            "name": self.name,
            "address": self.address,
            "manager": self.manager,
            "phone": self.phone or None,
            "email": self.email or None,
        }


class Item(models.Model):
    MACHINE_CATEGORY = "Machine"
    MACHINE_SUBCATEGORY = "Coffee Machine"

    code = models.CharField(max_length=20, unique=True, editable=False)  # ej: "ITEM4K2J9QZ7X"
    name = models.CharField(max_length=150)
    item_type = models.CharField(max_length=20, choices=ItemType.choices)
    category = models.CharField(max_length=100)
    subcategory = models.CharField(max_length=100, blank=True, default="")
    price = models.DecimalField(max_digits=18, decimal_places=2)
    description = models.TextField(blank=True, default="")
    sold_by_weight = models.BooleanField(default=False)
    notify_expiry = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["item_type", "name"]
        indexes = [
            models.Index(fields=["item_type", "name"], name="item_type_name_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(price__gte=0), name="item_price_non_negative"),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}"

    @staticmethod
    def generate_code():
        """Código legible: ITEM + 9 caracteres alfanuméricos en mayúscula."""
        alphabet = string.ascii_uppercase + string.digits
        while True:
            code = "ITEM" + "".join(secrets.choice(alphabet) for _ in range(9))
            if not Item.objects.filter(code=code).exists():
                return code

    @property
    def is_machine(self):
        return self.item_type == ItemType.MACHINE

    def to_dict(self):
        return {
            "code": self.code,
            "name": self.name,
            "itemType": self.item_type,
            "category": self.category,
            "subcategory": self.subcategory or None,
            "price": float(self.price),
            "description": self.description or None,
            "soldByWeight": self.sold_by_weight,
            "notifyExpiry": self.notify_expiry,
        }

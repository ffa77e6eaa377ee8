from django.contrib.auth.models import User
from django.db import models
from django.db.models import Max
from django.db.models.functions import Cast, Substr

from core.models import Branch

ALL_ACCESS_OPTIONS = [
    "Dashboard",
    "Master Creation",
    "Add Item Stock",
    "Internal Transfer",
    "Add Return Stock",
    "Cash Management",
    "Reports",
    "Expire Tracking",
    "Branch Management",
    "User Management",
]


class StaffProfile(models.Model):
    """
    Datos de negocio del usuario (rol, accesos, sucursales asignadas).
    El login y el hash de contraseña quedan en django.contrib.auth.User.
    """

    ROLE_ADMIN = "admin"
    ROLE_CUSTOM = "custom"
    ROLE_CHOICES = (
        (ROLE_ADMIN, "Admin"),
        (ROLE_CUSTOM, "Custom"),
    )
    STATUS_ACTIVE = "Active"
    STATUS_INACTIVE = "Inactive"
    STATUS_CHOICES = (
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
    )

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="staff_profile")
    code = models.CharField(max_length=10, unique=True)  # ej: "U001"
    full_name = models.CharField(max_length=150)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_CUSTOM)
    accesses = models.JSONField(default=list, blank=True)
    assigned_branches = models.ManyToManyField(Branch, blank=True, related_name="staff")
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    last_login = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.code} - {self.user.username}"

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @staticmethod
    def next_code():
        # orden numérico: "U1000" va después de "U999"
        last = (StaffProfile.objects
                .filter(code__regex=r"^U[0-9]+$")
                .aggregate(n=Max(Cast(Substr("code", 2), models.IntegerField())))["n"])
        return f"U{(last or 0) + 1:03d}"

    def effective_accesses(self):
        return list(ALL_ACCESS_OPTIONS) if self.is_admin else list(self.accesses or [])

    def effective_branches(self):
        if self.is_admin:
            return list(Branch.objects.order_by("name").values_list("name", flat=True))
        return list(self.assigned_branches.order_by("name").values_list("name", flat=True))

    def to_dict(self):
        return {
            "id": self.code,
            "username": self.user.username,
            "fullName": self.full_name,
            "role": self.role,
            "status": self.status,
            "accesses": self.effective_accesses(),
            "assignedBranches": self.effective_branches(),
            "lastLogin": self.last_login.isoformat() if self.last_login else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

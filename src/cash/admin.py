from django.contrib import admin
from .models import CashEntry

@admin.register(CashEntry)
class CashEntryAdmin(admin.ModelAdmin):
    list_display = ("date", "branch", "expected", "actual", "difference", "status", "operator_name")
    list_filter = ("status", "branch")
    readonly_fields = ("expected", "actual", "difference", "status", "timestamp")

    def has_change_permission(self, request, obj=None):
        return False  # los arqueos no se editan

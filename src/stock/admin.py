from django.contrib import admin
from .models import FinishedBatch, GroceryBatch, StockEntry, TransferRecord

@admin.register(StockEntry)
class StockEntryAdmin(admin.ModelAdmin):
    list_display = ("date", "branch", "item", "added", "returned", "transferred", "sold")
    list_filter = ("branch", "date")
    search_fields = ("item__code", "item__name")

@admin.register(FinishedBatch)
class FinishedBatchAdmin(admin.ModelAdmin):
    list_display = ("date", "branch", "item_type", "finished_at")
    list_filter = ("branch",)

@admin.register(GroceryBatch)
class GroceryBatchAdmin(admin.ModelAdmin):
    list_display = ("batch_id", "item", "branch", "quantity", "remaining", "expiry_date", "added_date")
    list_filter = ("branch", "expiry_date")
    search_fields = ("batch_id", "item__code", "item__name")

@admin.register(TransferRecord)
class TransferRecordAdmin(admin.ModelAdmin):
    list_display = ("date", "sender", "receiver", "item_type", "processed_by", "processed_at")
    list_filter = ("item_type", "sender", "receiver")
    readonly_fields = ("items", "processed_at")

    def has_change_permission(self, request, obj=None):
        return False  # historial inmutable

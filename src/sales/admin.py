from django.contrib import admin
from .models import GroceryReturn, GrocerySale, MachineBatch, MachineSale

@admin.register(GrocerySale)
class GrocerySaleAdmin(admin.ModelAdmin):
    list_display = ("date", "branch", "item_code", "item_name", "sold_qty", "total_cash")
    list_filter = ("branch", "date")
    search_fields = ("item_code", "item_name")

@admin.register(GroceryReturn)
class GroceryReturnAdmin(admin.ModelAdmin):
    list_display = ("date", "branch", "item_code", "returned_qty", "reason", "completed")
    list_filter = ("branch", "completed", "reason")

@admin.register(MachineBatch)
class MachineBatchAdmin(admin.ModelAdmin):
    list_display = ("id", "machine", "branch", "date", "start_value", "end_value", "status")
    list_filter = ("status", "branch")

@admin.register(MachineSale)
class MachineSaleAdmin(admin.ModelAdmin):
    list_display = ("date", "branch", "machine_code", "sold_qty", "unit_price", "total_cash")
    list_filter = ("branch", "date")

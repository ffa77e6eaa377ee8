from django.contrib import admin
from .models import Branch, Item

@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ("name", "manager", "phone", "email")
    search_fields = ("name", "manager")

@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "item_type", "category", "price", "notify_expiry")
    list_filter = ("item_type", "category", "notify_expiry")
    search_fields = ("code", "name", "category")
    readonly_fields = ("code",)

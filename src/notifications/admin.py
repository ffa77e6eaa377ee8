from django.contrib import admin
from .models import Activity, Notification

@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("type", "branch", "item_name", "expiry_date", "created_at")
    list_filter = ("type", "branch")
    search_fields = ("message", "item_code", "batch_id")

@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "real_date", "type", "branch", "message")
    list_filter = ("type", "branch")
    search_fields = ("message",)

from django.contrib import admin
from .models import StaffProfile

@admin.register(StaffProfile)
class StaffProfileAdmin(admin.ModelAdmin):
    list_display = ("code", "user", "full_name", "role", "status", "last_login")
    list_filter = ("role", "status")
    search_fields = ("code", "user__username", "full_name")
    filter_horizontal = ("assigned_branches",)
    readonly_fields = ("code", "last_login", "created_at")

from django.urls import path

from . import views

app_name = "notifications"

urlpatterns = [
    path("notifications/", views.notification_list, name="list"),
    path("notifications/check-expiring/", views.check_expiring, name="check_expiring"),
    path("notifications/<int:notification_id>/read/", views.mark_read, name="mark_read"),
    path("activities/", views.activity_list, name="activities"),
]

from django.urls import path

from . import views

app_name = "core"

urlpatterns = [
    path("branches/", views.branches, name="branches"),
    path("branches/<str:name>/", views.branch_detail, name="branch_detail"),
    path("items/", views.items, name="items"),
    path("items/<str:code>/", views.item_detail, name="item_detail"),
    path("system/clear/", views.clear_transactions, name="clear_transactions"),
]

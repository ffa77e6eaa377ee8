from django.urls import path

from . import views

app_name = "cash"

urlpatterns = [
    path("cash/", views.cash_entries, name="entries"),
    path("cash/expected/", views.expected_cash, name="expected"),
]

from django.urls import path

from .views import cash_report, export_report, generate_report, returns_report, transfer_report

app_name = "insights"
urlpatterns = [
    path("reports/generate/", generate_report, name="generate"),
    path("reports/cash/", cash_report, name="cash"),
    path("reports/transfers/", transfer_report, name="transfers"),
    path("reports/returns/", returns_report, name="returns"),
    path("reports/export/", export_report, name="export"),
]

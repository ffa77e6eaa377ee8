from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    path("grocery/sales/", views.grocery_sales, name="grocery_sales"),
    path("grocery/returns/", views.grocery_returns, name="grocery_returns"),
    path("grocery/returns/<int:return_id>/complete/", views.complete_grocery_return, name="grocery_return_complete"),
    path("machines/batches/", views.machine_batches, name="machine_batches"),
    path("machines/batches/<int:batch_id>/", views.machine_batch_detail, name="machine_batch_detail"),
    path("machines/batches/<int:batch_id>/finish/", views.finish_machine_batch, name="machine_batch_finish"),
    path("machines/sales/", views.machine_sales, name="machine_sales"),
]

from django.urls import path

from . import views

app_name = "stock"

urlpatterns = [
    path("stocks/", views.stocks, name="stocks"),
    path("stocks/add/", views.add_stock, name="add"),
    path("stocks/returns/", views.return_stock, name="returns"),
    path("stocks/finish/", views.finish_batch, name="finish"),
    path("stocks/status/", views.batch_status, name="status"),
    path("grocery/stocks/", views.grocery_stocks, name="grocery_stocks"),
    path("grocery/remaining/", views.grocery_remaining, name="grocery_remaining"),
    path("transfers/", views.transfer_list, name="transfers"),
]

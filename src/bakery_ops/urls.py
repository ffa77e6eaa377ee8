from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("core.urls")),
    path("api/", include("stock.urls")),
    path("api/", include("sales.urls")),
    path("api/", include("cash.urls")),
    path("api/", include("notifications.urls")),
    path("api/", include("authentication.urls")),
    path("api/", include("insights.urls")),
]

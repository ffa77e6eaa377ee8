from django.urls import path

from .views import login_view, user_detail, user_list

app_name = "authentication"

urlpatterns = [
    path("users/", user_list, name="users"),
    path("users/<str:code>/", user_detail, name="user_detail"),
    path("auth/login/", login_view, name="login"),
]

# Accounts/urls.py
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    AdminUserListView,
    AdminUserToggleRoleView,
    AvatarUploadView,
    LoginView,
    ProfileView,
    RegisterView,
)

urlpatterns = [
    path("accounts/register/", RegisterView.as_view(), name="register"),
    path("accounts/login/", LoginView.as_view(), name="login"),
    path("accounts/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("accounts/profile/", ProfileView.as_view(), name="profile"),
    path("accounts/profile/avatar/", AvatarUploadView.as_view(), name="profile-avatar"),

    path("admin/users/", AdminUserListView.as_view(), name="admin-user-list"),
    path(
        "admin/users/<int:user_id>/toggle-role/",
        AdminUserToggleRoleView.as_view(),
        name="admin-user-toggle-role"
    ),
]

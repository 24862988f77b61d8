from django.urls import path
from django.urls import re_path

from .auth_views import JWTCreateView
from .auth_views import JWTRefreshView
from .auth_views import JWTVerifyView
from .auth_views import LoginView
from .auth_views import RegisterView

# The SPA posts to `register` and `login` without a trailing slash; accept both.
urlpatterns = [
    re_path(r"^register/?$", RegisterView.as_view(), name="auth-register"),
    re_path(r"^login/?$", LoginView.as_view(), name="auth-login"),
    path("jwt/create/", JWTCreateView.as_view(), name="jwt-create"),
    path("jwt/refresh/", JWTRefreshView.as_view(), name="jwt-refresh"),
    path("jwt/verify/", JWTVerifyView.as_view(), name="jwt-verify"),
]

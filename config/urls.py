from django.conf import settings
from django.contrib import admin
from django.contrib.staticfiles.urls import staticfiles_urlpatterns
from django.urls import include
from django.urls import path
from drf_spectacular.views import SpectacularAPIView
from drf_spectacular.views import SpectacularSwaggerView

from .health import health as health_view

urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),
    path("health/", health_view, name="health"),
    # Versioned REST API; the socket relay lives outside Django, see config.asgi.
    path("api/v1/", include(("config.api_router", "api"), namespace="api_v1")),
    # Unversioned mirror for the original SPA, which calls `/api/projects` etc.
    path("api/", include(("config.api_router", "api"), namespace="api")),
    path("api/v1/schema/", SpectacularAPIView.as_view(), name="api-schema-v1"),
    path(
        "api/v1/docs/",
        SpectacularSwaggerView.as_view(url_name="api-schema-v1"),
        name="api-docs-v1",
    ),
]

if settings.DEBUG:
    # Static files for the admin when served through uvicorn
    urlpatterns += staticfiles_urlpatterns()

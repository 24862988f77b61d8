from django.conf import settings
from django.urls import include
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from synergysphere.projects.api.views import ProjectViewSet
from synergysphere.projects.api.views import TaskViewSet
from synergysphere.users.api.views import UserViewSet

from .health import health as health_view

router = DefaultRouter() if settings.DEBUG else SimpleRouter()
# The SPA calls `/api/projects` etc. without a trailing slash; accept both forms.
# The constructor only takes a boolean, so the pattern is set afterwards.
router.trailing_slash = "/?"

router.register("users", UserViewSet)
router.register("projects", ProjectViewSet, basename="project")
router.register("tasks", TaskViewSet, basename="task")


app_name = "api"
urlpatterns = [
    path("auth/", include("synergysphere.users.api.auth_urls")),
    path("health/", health_view, name="health"),
    *router.urls,
]

"""Project and task endpoints.

Realtime events are not emitted here: ``synergysphere.projects.signals``
publishes committed records, so admin and shell edits notify clients too.
"""

from __future__ import annotations

import logging

from django.db.models import Q
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework import viewsets
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from synergysphere.projects.models import Project
from synergysphere.projects.models import Task

from .filters import TaskFilter
from .serializers import ProjectSerializer
from .serializers import TaskSerializer

logger = logging.getLogger(__name__)


class PartialUpdateMixin:
    """Treat PUT like PATCH: only the fields sent are changed."""

    def update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return super().update(request, *args, **kwargs)  # type: ignore[misc]


@extend_schema_view(
    list=extend_schema(tags=["Projects"]),
    retrieve=extend_schema(tags=["Projects"]),
    create=extend_schema(tags=["Projects"]),
    update=extend_schema(tags=["Projects"]),
    partial_update=extend_schema(tags=["Projects"]),
    destroy=extend_schema(tags=["Projects"]),
)
class ProjectViewSet(PartialUpdateMixin, viewsets.ModelViewSet):
    """Projects owned by the authenticated user."""

    permission_classes = [IsAuthenticated]
    serializer_class = ProjectSerializer
    pagination_class = None

    def get_queryset(self):
        return Project.objects.filter(owner=self.request.user).prefetch_related(
            "tasks"
        )

    def perform_create(self, serializer):
        project = serializer.save(owner=self.request.user)
        logger.info("Project %s created by user %s", project.pk, self.request.user.pk)

    def destroy(self, request, *args, **kwargs):
        project = self.get_object()
        project.delete()
        return Response(
            {"message": "Project deleted successfully"},
            status=status.HTTP_200_OK,
        )


@extend_schema_view(
    list=extend_schema(tags=["Tasks"]),
    retrieve=extend_schema(tags=["Tasks"]),
    create=extend_schema(tags=["Tasks"]),
    update=extend_schema(tags=["Tasks"]),
    partial_update=extend_schema(tags=["Tasks"]),
    destroy=extend_schema(tags=["Tasks"]),
)
class TaskViewSet(PartialUpdateMixin, viewsets.ModelViewSet):
    """Tasks assigned to the user, plus every task of the projects they own."""

    permission_classes = [IsAuthenticated]
    serializer_class = TaskSerializer
    filterset_class = TaskFilter
    pagination_class = None

    def get_queryset(self):
        user = self.request.user
        return (
            Task.objects.filter(Q(assignee=user) | Q(project__owner=user))
            .select_related("project", "assignee")
            .distinct()
        )

    def _ensure_project_owned(self, project: Project) -> None:
        if project.owner_id != self.request.user.pk:
            msg = "Project not found."
            raise NotFound(msg)

    def perform_create(self, serializer):
        project = serializer.validated_data["project"]
        self._ensure_project_owned(project)
        if "assignee" in serializer.validated_data:
            task = serializer.save()
        else:
            task = serializer.save(assignee=self.request.user)
        logger.info("Task %s created in project %s", task.pk, project.pk)

    def perform_update(self, serializer):
        project = serializer.validated_data.get("project")
        if project is not None:
            self._ensure_project_owned(project)
        serializer.save()

    def destroy(self, request, *args, **kwargs):
        task = self.get_object()
        task.delete()
        return Response(
            {"message": "Task deleted successfully"},
            status=status.HTTP_200_OK,
        )

from rest_framework import serializers

from synergysphere.projects.models import Project
from synergysphere.projects.models import Task
from synergysphere.users.api.serializers import UserSummarySerializer
from synergysphere.users.models import User


class TaskSummarySerializer(serializers.ModelSerializer[Task]):
    class Meta:
        model = Task
        fields = ("id", "title", "status", "priority")
        read_only_fields = fields


class ProjectRefSerializer(serializers.ModelSerializer[Project]):
    class Meta:
        model = Project
        fields = ("id", "title")
        read_only_fields = fields


class ProjectSerializer(serializers.ModelSerializer[Project]):
    """REST (and realtime payload) representation of a project."""

    ownerId = serializers.PrimaryKeyRelatedField(source="owner", read_only=True)  # noqa: N815
    tasks = TaskSummarySerializer(many=True, read_only=True)
    taskCount = serializers.SerializerMethodField()  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

    class Meta:
        model = Project
        fields = (
            "id",
            "title",
            "description",
            "status",
            "ownerId",
            "tasks",
            "taskCount",
            "createdAt",
            "updatedAt",
        )
        read_only_fields = ("id",)

    def get_taskCount(self, obj: Project) -> int:  # noqa: N802
        # Uses the prefetch cache when the queryset provides one.
        return len(obj.tasks.all())


class TaskSerializer(serializers.ModelSerializer[Task]):
    """REST (and realtime payload) representation of a task.

    ``projectId`` and ``assigneeId`` are flat so realtime fan-out can compute
    target rooms without touching the database.
    """

    projectId = serializers.PrimaryKeyRelatedField(  # noqa: N815
        source="project",
        queryset=Project.objects.all(),
    )
    assigneeId = serializers.PrimaryKeyRelatedField(  # noqa: N815
        source="assignee",
        queryset=User.objects.all(),
        required=False,
        allow_null=True,
    )
    dueDate = serializers.DateTimeField(  # noqa: N815
        source="due_date",
        required=False,
        allow_null=True,
    )
    project = ProjectRefSerializer(read_only=True)
    assignee = UserSummarySerializer(read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

    class Meta:
        model = Task
        fields = (
            "id",
            "title",
            "description",
            "status",
            "priority",
            "dueDate",
            "projectId",
            "assigneeId",
            "project",
            "assignee",
            "createdAt",
            "updatedAt",
        )
        read_only_fields = ("id",)

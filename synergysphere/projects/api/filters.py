import django_filters

from synergysphere.projects.models import Task


class TaskFilter(django_filters.FilterSet):
    projectId = django_filters.NumberFilter(field_name="project__id")  # noqa: N815
    status = django_filters.ChoiceFilter(choices=Task.Status.choices)
    priority = django_filters.ChoiceFilter(choices=Task.Priority.choices)

    class Meta:
        model = Task
        fields = ["projectId", "status", "priority"]

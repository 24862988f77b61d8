from django.contrib import admin

from synergysphere.projects import models


@admin.register(models.Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "owner", "status", "created_at"]
    search_fields = ["title", "description"]
    list_filter = ["status", "created_at"]


@admin.register(models.Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "project", "assignee", "status", "priority"]
    search_fields = ["title", "description"]
    list_filter = ["status", "priority", "due_date"]

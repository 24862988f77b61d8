from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model

from synergysphere.projects.models import Project
from synergysphere.projects.models import Task

if TYPE_CHECKING:
    from synergysphere.users.models import User

TEST_PASSWORD = "TestPass123!"  # noqa: S105

UserModel = get_user_model()


@dataclass
class Workspace:
    owner: User
    project: Project
    task: Task


def create_user(email: str, *, name: str = "", password: str = TEST_PASSWORD) -> User:
    return UserModel.objects.create_user(
        username=email,
        email=email,
        password=password,
        name=name,
    )


def create_project(owner: User, *, title: str = "Launch", **extra) -> Project:
    return Project.objects.create(owner=owner, title=title, **extra)


def create_task(
    project: Project,
    *,
    title: str = "Write brief",
    assignee: User | None = None,
    **extra,
) -> Task:
    return Task.objects.create(
        project=project,
        title=title,
        assignee=assignee if assignee is not None else project.owner,
        **extra,
    )


def create_workspace(email: str = "lead@example.com") -> Workspace:
    owner = create_user(email, name="Lead User")
    project = create_project(owner)
    task = create_task(project)
    return Workspace(owner=owner, project=project, task=task)

import pytest
from rest_framework import status
from rest_framework.test import APIClient

from synergysphere.projects.models import Project
from synergysphere.projects.models import Task
from tests.factories import create_project
from tests.factories import create_task

pytestmark = pytest.mark.django_db


class TestProjects:
    def test_anonymous_rejected(self):
        resp = APIClient().get("/api/v1/projects/")
        assert resp.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_sets_owner(self, api_client, user):
        resp = api_client.post(
            "/api/v1/projects/",
            {"title": "Website", "description": "Relaunch", "ownerId": 999},
            format="json",
        )
        assert resp.status_code == status.HTTP_201_CREATED
        assert resp.data["ownerId"] == user.pk
        assert resp.data["status"] == "active"
        assert resp.data["tasks"] == []
        assert resp.data["taskCount"] == 0

    def test_title_required(self, api_client):
        resp = api_client.post("/api/v1/projects/", {"description": "x"}, format="json")
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert "title" in resp.data

    def test_list_only_owned_newest_first(self, api_client, user, other_user):
        older = create_project(user, title="Older")
        newer = create_project(user, title="Newer")
        create_project(other_user, title="Not mine")

        resp = api_client.get("/api/projects")

        assert resp.status_code == status.HTTP_200_OK
        assert [p["id"] for p in resp.data] == [newer.pk, older.pk]

    def test_list_includes_task_summaries(self, api_client, user):
        project = create_project(user)
        task = create_task(project, title="Brief")

        resp = api_client.get(f"/api/v1/projects/{project.pk}/")

        assert resp.data["taskCount"] == 1
        assert resp.data["tasks"] == [
            {"id": task.pk, "title": "Brief", "status": "todo", "priority": "medium"}
        ]

    def test_foreign_project_is_not_found(self, api_client, other_user):
        project = create_project(other_user)
        assert api_client.get(f"/api/v1/projects/{project.pk}/").status_code == 404
        resp = api_client.patch(
            f"/api/v1/projects/{project.pk}/", {"title": "Hijack"}, format="json"
        )
        assert resp.status_code == status.HTTP_404_NOT_FOUND
        assert api_client.delete(f"/api/v1/projects/{project.pk}/").status_code == 404
        project.refresh_from_db()
        assert project.title == "Launch"

    def test_put_is_partial(self, api_client, user):
        project = create_project(user, description="Keep me")

        resp = api_client.put(
            f"/api/v1/projects/{project.pk}/", {"status": "on_hold"}, format="json"
        )

        assert resp.status_code == status.HTTP_200_OK
        project.refresh_from_db()
        assert project.status == "on_hold"
        assert project.description == "Keep me"

    def test_invalid_status(self, api_client, user):
        project = create_project(user)
        resp = api_client.patch(
            f"/api/v1/projects/{project.pk}/", {"status": "paused"}, format="json"
        )
        assert resp.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_cascades_tasks(self, api_client, user):
        project = create_project(user)
        create_task(project)

        resp = api_client.delete(f"/api/v1/projects/{project.pk}")

        assert resp.status_code == status.HTTP_200_OK
        assert resp.data == {"message": "Project deleted successfully"}
        assert not Project.objects.filter(pk=project.pk).exists()
        assert not Task.objects.filter(project_id=project.pk).exists()


class TestTasks:
    def test_create_defaults_assignee_to_caller(self, api_client, user):
        project = create_project(user)

        resp = api_client.post(
            "/api/v1/tasks/",
            {"title": "Draft", "projectId": project.pk, "priority": "high"},
            format="json",
        )

        assert resp.status_code == status.HTTP_201_CREATED
        assert resp.data["projectId"] == project.pk
        assert resp.data["assigneeId"] == user.pk
        assert resp.data["project"] == {"id": project.pk, "title": "Launch"}
        assert resp.data["assignee"]["email"] == "owner@example.com"
        assert resp.data["status"] == "todo"

    def test_create_explicitly_unassigned(self, api_client, user):
        project = create_project(user)
        resp = api_client.post(
            "/api/v1/tasks/",
            {"title": "Later", "projectId": project.pk, "assigneeId": None},
            format="json",
        )
        assert resp.status_code == status.HTTP_201_CREATED
        assert resp.data["assigneeId"] is None
        assert resp.data["assignee"] is None

    def test_create_in_foreign_project_not_found(self, api_client, other_user):
        project = create_project(other_user)
        resp = api_client.post(
            "/api/v1/tasks/",
            {"title": "Sneaky", "projectId": project.pk},
            format="json",
        )
        assert resp.status_code == status.HTTP_404_NOT_FOUND
        assert not Task.objects.filter(title="Sneaky").exists()

    def test_create_in_missing_project_invalid(self, api_client):
        resp = api_client.post(
            "/api/v1/tasks/", {"title": "Orphan", "projectId": 424242}, format="json"
        )
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert "projectId" in resp.data

    def test_list_assigned_and_owned(self, api_client, user, other_user):
        mine = create_project(user)
        theirs = create_project(other_user)
        owned = create_task(mine, title="Owned", assignee=other_user)
        assigned = create_task(theirs, title="Assigned", assignee=user)
        create_task(theirs, title="Hidden")

        resp = api_client.get("/api/tasks")

        assert resp.status_code == status.HTTP_200_OK
        assert {t["id"] for t in resp.data} == {owned.pk, assigned.pk}

    def test_filter_by_project_and_status(self, api_client, user):
        first = create_project(user, title="First")
        second = create_project(user, title="Second")
        todo = create_task(first, title="Todo")
        create_task(first, title="Done", status="done")
        create_task(second, title="Elsewhere")

        resp = api_client.get(
            "/api/v1/tasks/", {"projectId": first.pk, "status": "todo"}
        )

        assert [t["id"] for t in resp.data] == [todo.pk]

    def test_assignee_can_update_status(self, user, other_user):
        project = create_project(other_user)
        task = create_task(project, assignee=user)
        client = APIClient()
        client.force_authenticate(user=user)

        resp = client.put(f"/api/v1/tasks/{task.pk}/", {"status": "in_progress"}, format="json")

        assert resp.status_code == status.HTTP_200_OK
        task.refresh_from_db()
        assert task.status == "in_progress"
        assert task.title == "Write brief"

    def test_move_to_foreign_project_not_found(self, api_client, user, other_user):
        task = create_task(create_project(user))
        theirs = create_project(other_user)
        resp = api_client.patch(
            f"/api/v1/tasks/{task.pk}/", {"projectId": theirs.pk}, format="json"
        )
        assert resp.status_code == status.HTTP_404_NOT_FOUND
        task.refresh_from_db()
        assert task.project.owner == user

    def test_invisible_task_not_found(self, api_client, other_user):
        task = create_task(create_project(other_user))
        assert api_client.get(f"/api/v1/tasks/{task.pk}/").status_code == 404

    def test_delete(self, api_client, user):
        task = create_task(create_project(user))
        resp = api_client.delete(f"/api/v1/tasks/{task.pk}/")
        assert resp.status_code == status.HTTP_200_OK
        assert resp.data == {"message": "Task deleted successfully"}
        assert not Task.objects.filter(pk=task.pk).exists()


class TestUrlsWithoutTrailingSlash:
    """The original SPA calls `/api/projects`, `/api/projects/<id>` etc."""

    def test_create_project(self, api_client, user):
        resp = api_client.post("/api/projects", {"title": "Launch"}, format="json")
        assert resp.status_code == status.HTTP_201_CREATED
        assert Project.objects.filter(owner=user, title="Launch").exists()

    def test_update_project(self, api_client, user):
        project = create_project(user)
        resp = api_client.put(
            f"/api/projects/{project.pk}", {"title": "Renamed"}, format="json"
        )
        assert resp.status_code == status.HTTP_200_OK
        assert resp.data["title"] == "Renamed"

    def test_versioned_detail(self, api_client, user):
        project = create_project(user)
        resp = api_client.get(f"/api/v1/projects/{project.pk}")
        assert resp.status_code == status.HTTP_200_OK

    def test_create_task(self, api_client, user):
        project = create_project(user)
        resp = api_client.post(
            "/api/tasks", {"title": "Draft", "projectId": project.pk}, format="json"
        )
        assert resp.status_code == status.HTTP_201_CREATED

    def test_me(self, api_client):
        assert api_client.get("/api/users/me").status_code == status.HTTP_200_OK

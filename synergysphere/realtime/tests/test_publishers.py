import pytest
from asgiref.sync import async_to_sync

from synergysphere.projects.models import Task
from synergysphere.realtime.events import projects as project_events
from synergysphere.realtime.events import tasks as task_events
from synergysphere.realtime.events.projects import build_project_payload
from synergysphere.realtime.events.tasks import build_task_payload
from tests.factories import create_project
from tests.factories import create_task

pytestmark = pytest.mark.django_db


@pytest.fixture
def wired_server(realtime_server, monkeypatch):
    monkeypatch.setattr(project_events, "get_realtime_server", lambda: realtime_server)
    monkeypatch.setattr(task_events, "get_realtime_server", lambda: realtime_server)
    return realtime_server


def emitted(server):
    return [(c.args[0], c.kwargs["to"], c.args[1]) for c in server.sio.emit.await_args_list]


def join(server, sid, handler, key):
    async_to_sync(server.connect)(sid, {}, None)
    async_to_sync(getattr(server, handler))(sid, key)


class TestPayloads:
    def test_project_payload_carries_owner(self, user):
        project = create_project(user, title="Website")
        payload = build_project_payload(project)
        assert payload["id"] == project.pk
        assert payload["ownerId"] == user.pk
        assert payload["title"] == "Website"

    def test_task_payload_carries_routing_fields(self, user):
        project = create_project(user)
        task = Task.objects.create(project=project, title="Unassigned")
        payload = build_task_payload(task)
        assert payload["projectId"] == project.pk
        assert "assigneeId" in payload
        assert payload["assigneeId"] is None


class TestPublishOnCommit:
    def test_project_created_reaches_owner_room(
        self, api_client, user, wired_server, django_capture_on_commit_callbacks
    ):
        join(wired_server, "owner-tab", "join_user_room", user.pk)
        join(wired_server, "stranger", "join_user_room", user.pk + 1000)

        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.post(
                "/api/v1/projects/", {"title": "Website"}, format="json"
            )

        assert response.status_code == 201
        [(event, to, payload)] = emitted(wired_server)
        assert event == "project-created"
        assert to == "owner-tab"
        assert payload["id"] == response.data["id"]
        assert payload["ownerId"] == user.pk

    def test_project_updated_reaches_project_room(
        self, api_client, user, wired_server, django_capture_on_commit_callbacks
    ):
        project = create_project(user)
        join(wired_server, "viewer", "join_project_room", project.pk)
        join(wired_server, "owner-tab", "join_user_room", user.pk)

        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.patch(
                f"/api/v1/projects/{project.pk}/", {"title": "Renamed"}, format="json"
            )

        assert response.status_code == 200
        [(event, to, payload)] = emitted(wired_server)
        assert (event, to) == ("project-updated", "viewer")
        assert payload["title"] == "Renamed"

    def test_task_created_reaches_project_and_assignee_once(
        self, api_client, user, wired_server, django_capture_on_commit_callbacks
    ):
        project = create_project(user)
        # Same connection in both target rooms.
        join(wired_server, "owner-tab", "join_user_room", user.pk)
        join(wired_server, "owner-tab", "join_project_room", project.pk)
        join(wired_server, "viewer", "join_project_room", project.pk)

        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.post(
                "/api/v1/tasks/",
                {"title": "Draft", "projectId": project.pk},
                format="json",
            )

        assert response.status_code == 201
        calls = emitted(wired_server)
        assert sorted(to for _, to, _ in calls) == ["owner-tab", "viewer"]
        assert {event for event, _, _ in calls} == {"task-created"}
        assert calls[0][2]["assigneeId"] == user.pk

    def test_task_updated_reaches_assignee_outside_project(
        self, api_client, user, other_user, wired_server, django_capture_on_commit_callbacks
    ):
        project = create_project(user)
        task = create_task(project, assignee=other_user)
        join(wired_server, "assignee-tab", "join_user_room", other_user.pk)

        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.patch(
                f"/api/v1/tasks/{task.pk}/", {"status": "done"}, format="json"
            )

        assert response.status_code == 200
        [(event, to, payload)] = emitted(wired_server)
        assert (event, to) == ("task-updated", "assignee-tab")
        assert payload["status"] == "done"

    def test_no_event_when_nobody_listens(
        self, api_client, wired_server, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.post(
                "/api/v1/projects/", {"title": "Quiet"}, format="json"
            )

        assert response.status_code == 201
        wired_server.sio.emit.assert_not_awaited()

    def test_rolled_back_write_publishes_nothing(
        self, api_client, wired_server, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            response = api_client.post("/api/v1/projects/", {}, format="json")

        assert response.status_code == 400
        assert callbacks == []

from asgiref.sync import async_to_sync

from synergysphere.client.reconciler import Reconciler
from synergysphere.client.session import RealtimeSession
from synergysphere.client.state import ClientState


class FakeSocketClient:
    def __init__(self):
        self.handlers = {}
        self.emitted = []
        self.connected = False
        self.connect_kwargs = None

    def on(self, event, handler):
        self.handlers[event] = handler

    async def connect(self, url, **kwargs):
        self.connected = True
        self.connect_kwargs = {"url": url, **kwargs}
        await self.handlers["connect"]()

    async def disconnect(self):
        self.connected = False

    async def emit(self, event, data=None):
        self.emitted.append((event, data))


class FakeAPI:
    def __init__(self):
        self.task_calls = []

    async def list_projects(self):
        return [{"id": 9}]

    async def list_tasks(self, project_id=None):
        self.task_calls.append(project_id)
        return [{"id": 1, "projectId": project_id}]


def make_session(state=None):
    client = FakeSocketClient()
    api = FakeAPI()
    reconciler = Reconciler(api, state or ClientState())
    session = RealtimeSession("http://testserver", reconciler, client=client)
    return session, client, api


class TestRealtimeSession:
    def test_connect_joins_user_room(self):
        session, client, _ = make_session()

        async_to_sync(session.connect)(42, "jwt")

        assert session.connected
        assert client.connect_kwargs["auth"] == {"token": "jwt"}
        assert client.connect_kwargs["socketio_path"] == "ws/socket.io"
        assert client.emitted == [("join-user-room", 42)]

    def test_reconnect_rejoins_current_project(self):
        session, client, _ = make_session(ClientState(current_project_id=9))

        async_to_sync(session.connect)(42)

        assert client.connect_kwargs["auth"] is None
        assert client.emitted == [("join-user-room", 42), ("join-project-room", 9)]

    def test_view_project_switches_rooms(self):
        session, client, api = make_session()

        async_to_sync(session.view_project)(9)
        async_to_sync(session.view_project)(10)

        assert client.emitted == [
            ("join-project-room", 9),
            ("leave-project-room", 9),
            ("join-project-room", 10),
        ]
        assert api.task_calls == [9, 10]
        assert session.reconciler.state.tasks == [{"id": 1, "projectId": 10}]

    def test_leave_project(self):
        session, client, _ = make_session(ClientState(current_project_id=9))

        async_to_sync(session.leave_project)()
        async_to_sync(session.leave_project)()

        assert client.emitted == [("leave-project-room", 9)]
        assert session.reconciler.state.current_project_id is None

    def test_incoming_event_reconciles(self):
        session, client, _ = make_session()

        async_to_sync(client.handlers["project-created"])({"id": 9, "ownerId": 1, "title": "X"})

        state = session.reconciler.state
        assert state.projects == [{"id": 9}]
        assert state.notifications[0].message == 'New project "X" created!'

    def test_emit_event(self):
        session, client, _ = make_session()
        payload = {"id": 1, "projectId": 9, "assigneeId": None}

        async_to_sync(session.emit_event)("task-updated", payload)

        assert client.emitted == [("task-updated", payload)]

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class APIError(Exception):
    """A failed REST call; ``status_code`` is None for transport errors."""

    def __init__(self, status_code: int | None, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"Request failed with status {response.status_code}"
    if isinstance(data, dict):
        for key in ("detail", "error", "message"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Request failed with status {response.status_code}"


class SynergySphereAPI:
    """Async client for the REST API.

    ``base_url`` is the API root, e.g. ``http://localhost:8000/api/v1``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> SynergySphereAPI:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def set_token(self, token: str | None) -> None:
        self.token = token

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = await self._client.request(
                method,
                endpoint,
                json=json,
                params=params,
                headers=headers,
            )
        except httpx.TimeoutException as exc:
            msg = f"{method} {endpoint} timed out"
            raise APIError(None, msg) from exc
        except httpx.HTTPError as exc:
            msg = f"{method} {endpoint} failed: {exc}"
            raise APIError(None, msg) from exc

        if response.is_error:
            raise APIError(response.status_code, _error_message(response))
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise APIError(response.status_code, "invalid JSON response") from exc

    # Auth endpoints
    async def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        data = await self.request(
            "POST",
            "/auth/register/",
            json={"name": name, "email": email, "password": password},
        )
        self.set_token(data["token"])
        return data

    async def login(self, email: str, password: str) -> dict[str, Any]:
        data = await self.request(
            "POST",
            "/auth/login/",
            json={"email": email, "password": password},
        )
        self.set_token(data["token"])
        return data

    # Project endpoints
    async def list_projects(self) -> list[dict[str, Any]]:
        return await self.request("GET", "/projects/")

    async def get_project(self, project_id: Any) -> dict[str, Any]:
        return await self.request("GET", f"/projects/{project_id}/")

    async def create_project(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self.request("POST", "/projects/", json=data)

    async def update_project(self, project_id: Any, data: dict[str, Any]) -> dict[str, Any]:
        return await self.request("PUT", f"/projects/{project_id}/", json=data)

    async def delete_project(self, project_id: Any) -> None:
        await self.request("DELETE", f"/projects/{project_id}/")

    # Task endpoints
    async def list_tasks(self, project_id: Any = None) -> list[dict[str, Any]]:
        params = {"projectId": project_id} if project_id is not None else None
        return await self.request("GET", "/tasks/", params=params)

    async def get_task(self, task_id: Any) -> dict[str, Any]:
        return await self.request("GET", f"/tasks/{task_id}/")

    async def create_task(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self.request("POST", "/tasks/", json=data)

    async def update_task(self, task_id: Any, data: dict[str, Any]) -> dict[str, Any]:
        return await self.request("PUT", f"/tasks/{task_id}/", json=data)

    async def delete_task(self, task_id: Any) -> None:
        await self.request("DELETE", f"/tasks/{task_id}/")

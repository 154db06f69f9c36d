"""Remote collaborators: the agent invocation endpoint and the scheduler API.

The abstract bases define the contracts the core depends on. The HTTP
implementations make a single attempt per call and let failures propagate
to the caller.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx


class AgentInvoker(ABC):
    @abstractmethod
    async def invoke(self, message: str, agent_id: str) -> Dict[str, Any]:
        """Run an agent and return its ``{success, response, error}`` envelope."""


class ScheduleService(ABC):
    @abstractmethod
    async def list_schedules(self) -> Dict[str, Any]:
        """Return ``{success, schedules}``."""

    @abstractmethod
    async def get_logs(self, schedule_id: str, limit: int = 5) -> Dict[str, Any]:
        """Return ``{success, executions}`` for the most recent runs."""

    @abstractmethod
    async def pause(self, schedule_id: str) -> Dict[str, Any]:
        """Pause a schedule."""

    @abstractmethod
    async def resume(self, schedule_id: str) -> Dict[str, Any]:
        """Resume a paused schedule."""


def _json_or_raise(resp: httpx.Response) -> Dict[str, Any]:
    """Decode a JSON object body; error statuses without one raise."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        return data
    resp.raise_for_status()
    raise ValueError(f"Expected a JSON object from {resp.request.url}")


class HttpAgentClient(AgentInvoker):
    """Calls the agent endpoint over HTTP."""

    def __init__(self, base_url: str, timeout: Optional[float] = None,
                 api_key: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_key = api_key
        self.transport = transport
        self.logger = logging.getLogger(__name__)

    def _headers(self) -> Dict[str, str]:
        return {"x-api-key": self.api_key} if self.api_key else {}

    async def invoke(self, message: str, agent_id: str) -> Dict[str, Any]:
        self.logger.info(f"Invoking agent {agent_id}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(
                    f"{self.base_url}/agent",
                    json={"message": message, "agent_id": agent_id},
                    headers=self._headers(),
                )
                return _json_or_raise(resp)
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error(f"Agent invocation failed for {agent_id}: {e}")
            raise


class HttpScheduleClient(ScheduleService):
    """Client for the remote scheduler API."""

    def __init__(self, base_url: str, timeout: Optional[float] = 30.0,
                 api_key: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_key = api_key
        self.transport = transport
        self.logger = logging.getLogger(__name__)

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        headers = {"x-api-key": self.api_key} if self.api_key else {}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.request(
                    method, f"{self.base_url}{path}", headers=headers, **kwargs
                )
                return _json_or_raise(resp)
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error(f"Scheduler {method} {path} failed: {e}")
            raise

    async def list_schedules(self) -> Dict[str, Any]:
        return await self._request("GET", "/schedules")

    async def get_logs(self, schedule_id: str, limit: int = 5) -> Dict[str, Any]:
        return await self._request(
            "GET", f"/schedules/{schedule_id}/logs", params={"limit": limit}
        )

    async def pause(self, schedule_id: str) -> Dict[str, Any]:
        self.logger.info(f"Pausing schedule {schedule_id}")
        return await self._request("POST", f"/schedules/{schedule_id}/pause")

    async def resume(self, schedule_id: str) -> Dict[str, Any]:
        self.logger.info(f"Resuming schedule {schedule_id}")
        return await self._request("POST", f"/schedules/{schedule_id}/resume")

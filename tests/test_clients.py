"""Tests for the HTTP collaborator clients using httpx's mock transport."""

import json

import httpx
import pytest

from listing_radar.clients import HttpAgentClient, HttpScheduleClient


def _transport(handler, seen):
    def _handle(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)
    return httpx.MockTransport(_handle)


class TestHttpAgentClient:
    @pytest.mark.asyncio
    async def test_posts_message_and_agent_id(self):
        seen = []
        envelope = {"success": True, "response": {"result": "{}"}}
        client = HttpAgentClient(
            "http://agent.test/api/",
            api_key="secret",
            transport=_transport(lambda r: httpx.Response(200, json=envelope), seen),
        )

        reply = await client.invoke("scan please", "agent-1")

        assert reply == envelope
        assert str(seen[0].url) == "http://agent.test/api/agent"
        assert json.loads(seen[0].content) == {"message": "scan please", "agent_id": "agent-1"}
        assert seen[0].headers["x-api-key"] == "secret"

    @pytest.mark.asyncio
    async def test_error_status_with_json_body_is_returned(self):
        body = {"success": False, "error": "quota exceeded"}
        client = HttpAgentClient(
            "http://agent.test/api",
            transport=_transport(lambda r: httpx.Response(429, json=body), []),
        )

        assert await client.invoke("m", "a") == body

    @pytest.mark.asyncio
    async def test_error_status_without_json_raises(self):
        client = HttpAgentClient(
            "http://agent.test/api",
            transport=_transport(lambda r: httpx.Response(502, text="bad gateway"), []),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await client.invoke("m", "a")

    @pytest.mark.asyncio
    async def test_non_object_body_raises(self):
        client = HttpAgentClient(
            "http://agent.test/api",
            transport=_transport(lambda r: httpx.Response(200, json=[1, 2]), []),
        )

        with pytest.raises(ValueError):
            await client.invoke("m", "a")


class TestHttpScheduleClient:
    @pytest.mark.asyncio
    async def test_routes(self):
        seen = []
        client = HttpScheduleClient(
            "http://sched.test",
            transport=_transport(lambda r: httpx.Response(200, json={"success": True}), seen),
        )

        await client.list_schedules()
        await client.get_logs("abc", limit=5)
        await client.pause("abc")
        await client.resume("abc")

        assert [(r.method, r.url.path) for r in seen] == [
            ("GET", "/schedules"),
            ("GET", "/schedules/abc/logs"),
            ("POST", "/schedules/abc/pause"),
            ("POST", "/schedules/abc/resume"),
        ]
        assert seen[1].url.params["limit"] == "5"

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        def _fail(request):
            raise httpx.ConnectError("refused", request=request)

        client = HttpScheduleClient("http://sched.test", transport=httpx.MockTransport(_fail))

        with pytest.raises(httpx.ConnectError):
            await client.list_schedules()

"""Tests for the async API client and the polling refresher."""

import asyncio
import logging

import httpx
import pytest

from tableside.client import StatePoller, TablesideClient, TablesideClientError, fingerprint


def _client(handler) -> TablesideClient:
    return TablesideClient("http://pos.test", transport=httpx.MockTransport(handler), api_prefix="/api")


class TestTablesideClient:
    @pytest.mark.asyncio
    async def test_create_order_posts_camel_case(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = request.read()
            return httpx.Response(201, json={"id": 1, "table": 5, "status": "pending"})

        async with _client(handler) as client:
            order = await client.create_order(5, [{"menuItemId": 1, "quantity": 2}])

        assert order["id"] == 1
        assert seen["path"] == "/api/orders"
        assert b'"paymentMode":"cash"' in seen["body"].replace(b" ", b"")

    @pytest.mark.asyncio
    async def test_error_body_is_raised(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(409, json={"error": "Cannot move order", "code": "InvalidTransition"})

        async with _client(handler) as client:
            with pytest.raises(TablesideClientError) as excinfo:
                await client.update_order_status(1, "paid")

        assert excinfo.value.status_code == 409
        assert excinfo.value.code == "InvalidTransition"

    @pytest.mark.asyncio
    async def test_none_params_are_dropped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert dict(request.url.params) == {"table": "3"}
            return httpx.Response(200, json=[])

        async with _client(handler) as client:
            assert await client.list_orders(table=3) == []


class TestStatePoller:
    def test_fingerprint_ignores_key_order(self):
        assert fingerprint({"a": 1, "b": [1, 2]}) == fingerprint({"b": [1, 2], "a": 1})
        assert fingerprint([{"id": 1}]) != fingerprint([{"id": 2}])

    @pytest.mark.asyncio
    async def test_only_changed_collections_are_reported(self):
        state = {"orders": [{"id": 1, "status": "pending"}], "tables": [{"id": 1, "status": "occupied"}]}

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=state[request.url.path.rsplit("/", 1)[-1]])

        received = []
        async with _client(handler) as client:
            poller = StatePoller(client, lambda name, data: received.append((name, data)), ["orders", "tables"], 1)
            assert await poller.poll_once() == ["orders", "tables"]
            assert await poller.poll_once() == []

            state["orders"] = [{"id": 1, "status": "preparing"}]
            assert await poller.poll_once() == ["orders"]

        assert received[-1] == ("orders", [{"id": 1, "status": "preparing"}])

    @pytest.mark.asyncio
    async def test_failed_fetch_is_logged_and_retried(self, caplog):
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            if calls["count"] == 1:
                raise httpx.ConnectError("connection refused")
            return httpx.Response(200, json=[])

        async def on_change(name, data):
            pass

        async with _client(handler) as client:
            poller = StatePoller(client, on_change, ["orders"], 1)
            with caplog.at_level(logging.WARNING, logger="tableside.client"):
                assert await poller.poll_once() == []
            assert "retrying next tick" in caplog.text
            assert await poller.poll_once() == ["orders"]

    @pytest.mark.asyncio
    async def test_run_until_stopped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[])

        ticks = []
        async with _client(handler) as client:
            poller = StatePoller(client, lambda name, data: ticks.append(name), ["tables"], 1)
            task = asyncio.create_task(poller.run())
            await asyncio.sleep(0.05)
            poller.stop()
            await asyncio.wait_for(task, timeout=2)

        assert ticks == ["tables"]
